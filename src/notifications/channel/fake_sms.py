"""In-memory SMS adapter used by tests and local runs."""

import asyncio
from uuid import uuid4

from notifications.channel.sms_port import SMSPort


class FakeSMSAdapter(SMSPort):
    """Keeps delivered texts in ``sent_messages`` instead of calling a carrier gateway."""

    def __init__(self):
        self.sent_messages: list[dict] = []
        self.reset()

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "SMS delivery failed",
        delay: float = 0.0,
        raise_error: Exception | None = None,
    ):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.delay = delay
        self.raise_error = raise_error

    def fail_number(self, number: str, reason: str = "Number is not reachable"):
        """Make every send to ``number`` fail with ``reason``."""
        self.unreachable[number] = reason

    async def send(self, to: str, body: str) -> dict:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raise_error is not None:
            raise self.raise_error

        if to in self.unreachable:
            return {"message_id": None, "status": "failed", "error": self.unreachable[to]}
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"sms-{uuid4().hex[:12]}"
        self.sent_messages.append({"message_id": message_id, "sender_id": self.sender_id, "to": to, "body": body})
        return {"message_id": message_id, "status": "sent"}

    def messages_to(self, number: str) -> list[dict]:
        return [m for m in self.sent_messages if m["to"] == number]

    def reset(self):
        self.sent_messages.clear()
        self.unreachable: dict[str, str] = {}
        self.configure()
