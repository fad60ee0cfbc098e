"""Email channel port — verification codes to an email address."""

from abc import ABC, abstractmethod

DEFAULT_SENDER = "Gormish <no-reply@gormish.in>"


class EmailPort(ABC):
    """Abstract interface for email adapters.

    Adapters send as ``sender``. Addresses arrive lower-cased and trimmed.
    """

    sender: str = DEFAULT_SENDER

    @abstractmethod
    async def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> dict:
        """Send one email.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
