"""SMS channel port — verification codes to a phone number."""

from abc import ABC, abstractmethod

# Six-character header registered with Indian carriers
DEFAULT_SENDER_ID = "GRMISH"


class SMSPort(ABC):
    """Abstract interface for SMS adapters.

    ``to`` is always an E.164 phone number; formatting happens before the
    adapter is called.
    """

    sender_id: str = DEFAULT_SENDER_ID

    @abstractmethod
    async def send(self, to: str, body: str) -> dict:
        """Send one text message.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
