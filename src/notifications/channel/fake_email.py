"""In-memory email adapter used by tests and local runs."""

import asyncio
from uuid import uuid4

from notifications.channel.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    """Keeps delivered emails in ``sent_emails`` instead of talking to a mail server."""

    def __init__(self):
        self.sent_emails: list[dict] = []
        self.reset()

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Email delivery failed",
        delay: float = 0.0,
        raise_error: Exception | None = None,
    ):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.delay = delay
        self.raise_error = raise_error

    def fail_address(self, address: str, reason: str = "Mailbox unavailable"):
        """Make every send to ``address`` bounce with ``reason``."""
        self.bounces[address] = reason

    async def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> dict:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raise_error is not None:
            raise self.raise_error

        if to in self.bounces:
            return {"message_id": None, "status": "failed", "error": self.bounces[to]}
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append(
            {
                "message_id": message_id,
                "from": self.sender,
                "to": to,
                "subject": subject,
                "body": body,
                "html_body": html_body,
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def emails_to(self, address: str) -> list[dict]:
        return [e for e in self.sent_emails if e["to"] == address]

    def reset(self):
        self.sent_emails.clear()
        self.bounces: dict[str, str] = {}
        self.configure()
