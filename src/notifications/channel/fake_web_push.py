"""Fake web push adapter — records sent web pushes for testing."""

import asyncio
from uuid import uuid4

from notifications.channel.web_push_port import WebPushPort, build_web_push_message


class FakeWebPushAdapter(WebPushPort):
    """Web push adapter that records messages in memory for test assertions."""

    def __init__(self):
        self.sent_pushes: list[dict] = []
        self.single_sends = 0
        self.batches: list[int] = []
        self.reset()

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Web push delivery failed",
        error_code: str | None = None,
        delay: float = 0.0,
        raise_error: Exception | None = None,
    ):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.error_code = error_code
        self.delay = delay
        self.raise_error = raise_error

    def fail_token(
        self,
        token: str,
        error_code: str = "messaging/registration-token-not-registered",
        reason: str = "Requested entity was not found.",
    ):
        """Make every send to ``token`` fail with the given provider code."""
        self.token_failures[token] = (error_code, reason)

    async def send(
        self,
        token: str,
        title: str,
        body: str,
        data: dict | None = None,
        options: dict | None = None,
    ) -> dict:
        self.single_sends += 1
        await self._simulate_transport()
        return self._result_for(token, build_web_push_message(title, body, data, options))

    async def send_batch(
        self,
        tokens: list[str],
        title: str,
        body: str,
        data: dict | None = None,
        options: dict | None = None,
    ) -> dict:
        self.batches.append(len(tokens))
        await self._simulate_transport()

        message = build_web_push_message(title, body, data, options)
        responses = [self._result_for(token, message) for token in tokens]
        success_count = sum(1 for r in responses if r["status"] == "sent")
        return {
            "success_count": success_count,
            "failure_count": len(responses) - success_count,
            "responses": responses,
        }

    async def _simulate_transport(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raise_error is not None:
            raise self.raise_error

    def _result_for(self, token: str, message: dict) -> dict:
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

        message_id = f"webpush-{uuid4().hex[:12]}"
        self.sent_pushes.append({"message_id": message_id, "token": token, **message})
        return {"message_id": message_id, "status": "sent"}

    def pushes_to(self, token: str) -> list[dict]:
        return [p for p in self.sent_pushes if p["token"] == token]

    def reset(self):
        """Clear sent pushes and failure configuration (useful between tests)."""
        self.sent_pushes.clear()
        self.single_sends = 0
        self.batches.clear()
        self.token_failures: dict[str, tuple[str, str]] = {}
        self.configure()
