"""Dispatch outcomes — what happened on each channel for each recipient."""

from dataclasses import dataclass, field
from enum import Enum

from notifications.dispatch.recipient import PushChannel, Recipient


class OutcomeStatus(Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


# Local failure reasons (provider failures carry the provider's own message)
NO_TOKEN = "no_token"
INVALID_TOKEN_FORMAT = "invalid_token_format"
TIMEOUT = "timeout"
MISSING_RECEIPT = "missing_receipt"


@dataclass(frozen=True)
class ChannelOutcome:
    status: OutcomeStatus
    reason: str | None = None
    error_code: str | None = None
    message_id: str | None = None

    @classmethod
    def sent(cls, message_id: str | None = None) -> "ChannelOutcome":
        return cls(OutcomeStatus.SENT, message_id=message_id)

    @classmethod
    def skipped(cls, reason: str = NO_TOKEN) -> "ChannelOutcome":
        return cls(OutcomeStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, reason: str, error_code: str | None = None) -> "ChannelOutcome":
        return cls(OutcomeStatus.FAILED, reason=reason, error_code=error_code)

    def to_dict(self) -> dict:
        data = {"status": self.status.value}
        if self.reason:
            data["reason"] = self.reason
        if self.error_code:
            data["error_code"] = self.error_code
        if self.message_id:
            data["message_id"] = self.message_id
        return data


@dataclass(frozen=True)
class RecipientResult:
    recipient: Recipient
    mobile: ChannelOutcome
    web: ChannelOutcome

    def outcome_for(self, channel: PushChannel) -> ChannelOutcome:
        return self.mobile if channel == PushChannel.MOBILE else self.web

    @property
    def delivered(self) -> bool:
        return OutcomeStatus.SENT in (self.mobile.status, self.web.status)

    @property
    def failed(self) -> bool:
        """Had a token on some channel and no channel succeeded."""
        return not self.delivered and OutcomeStatus.FAILED in (self.mobile.status, self.web.status)


@dataclass(frozen=True)
class InvalidToken:
    recipient: Recipient
    channel: PushChannel
    token: str
    error_code: str


@dataclass
class DispatchResult:
    per_recipient: list[RecipientResult] = field(default_factory=list)
    invalid_tokens: list[InvalidToken] = field(default_factory=list)

    def __len__(self):
        return len(self.per_recipient)

    @property
    def delivered_count(self) -> int:
        return sum(1 for r in self.per_recipient if r.delivered)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.per_recipient if r.failed)

    def count(self, channel: PushChannel, status: OutcomeStatus) -> int:
        return sum(1 for r in self.per_recipient if r.outcome_for(channel).status == status)

    def to_dict(self) -> dict:
        return {
            "total": len(self.per_recipient),
            "successful": self.delivered_count,
            "failed": self.failed_count,
            "results": [
                {
                    "kind": r.recipient.kind.value,
                    "recipient_id": r.recipient.recipient_id,
                    "mobile": r.mobile.to_dict(),
                    "web": r.web.to_dict(),
                }
                for r in self.per_recipient
            ],
            "invalid_tokens": [
                {
                    "kind": t.recipient.kind.value,
                    "recipient_id": t.recipient.recipient_id,
                    "channel": t.channel.value,
                    "error_code": t.error_code,
                }
                for t in self.invalid_tokens
            ],
        }
