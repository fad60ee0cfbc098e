"""Fake mobile push adapter — records sent pushes for testing."""

import asyncio
from uuid import uuid4

from notifications.channel.mobile_push_port import MobilePushPort


class FakeMobilePushAdapter(MobilePushPort):
    """Mobile push adapter that records messages in memory for test assertions."""

    def __init__(self):
        self.sent_pushes: list[dict] = []
        self.batches: list[int] = []
        self.reset()

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Push delivery failed",
        error_code: str | None = None,
        delay: float = 0.0,
        raise_error: Exception | None = None,
        drop_receipts: int = 0,
    ):
        """Configure the fake adapter behavior for testing.

        ``drop_receipts`` truncates that many receipts from the end of every
        batch response, simulating a provider that under-reports.
        """
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.error_code = error_code
        self.delay = delay
        self.raise_error = raise_error
        self.drop_receipts = drop_receipts

    def fail_token(self, token: str, error_code: str = "DeviceNotRegistered", reason: str = "Device not registered"):
        """Make every send to ``token`` fail with the given provider code."""
        self.token_failures[token] = (error_code, reason)

    async def send_batch(self, messages: list[dict]) -> list[dict]:
        self.batches.append(len(messages))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raise_error is not None:
            raise self.raise_error

        receipts = [self._receipt_for(message) for message in messages]
        if self.drop_receipts:
            receipts = receipts[: max(len(receipts) - self.drop_receipts, 0)]
        return receipts

    def _receipt_for(self, message: dict) -> dict:
        token = message["to"]
        if token in self.token_failures:
            error_code, reason = self.token_failures[token]
            return {"message_id": None, "status": "failed", "error": reason, "error_code": error_code}

        if not self.should_succeed:
            return {
                "message_id": None,
                "status": "failed",
                "error": self.failure_reason,
                "error_code": self.error_code,
            }

        message_id = f"push-{uuid4().hex[:12]}"
        self.sent_pushes.append({"message_id": message_id, **message})
        return {"message_id": message_id, "status": "sent"}

    def pushes_to(self, token: str) -> list[dict]:
        return [p for p in self.sent_pushes if p["to"] == token]

    def reset(self):
        """Clear sent pushes and failure configuration (useful between tests)."""
        self.sent_pushes.clear()
        self.batches.clear()
        self.token_failures: dict[str, tuple[str, str]] = {}
        self.configure()
