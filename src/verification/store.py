"""OTP storage.

The store is a keyed map from identifier to OtpRecord. Records are never
edited in place: a failed attempt writes a replacement record with a new
``record_id``. Conditional writes compare on ``record_id`` so a caller that
read a stale record cannot overwrite or delete a newer one.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import uuid4


@dataclass(frozen=True)
class OtpRecord:
    code: str
    expires_at: datetime
    attempts: int = 0
    record_id: str = field(default_factory=lambda: uuid4().hex)

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def with_failed_attempt(self) -> "OtpRecord":
        return replace(self, attempts=self.attempts + 1, record_id=uuid4().hex)


class OtpStore(ABC):
    @abstractmethod
    async def get(self, identifier: str) -> OtpRecord | None: ...

    @abstractmethod
    async def set(self, identifier: str, record: OtpRecord) -> None:
        """Store ``record``, replacing whatever was there."""
        ...

    @abstractmethod
    async def compare_and_set(self, identifier: str, expected: OtpRecord, record: OtpRecord) -> bool:
        """Replace the stored record only if it is still ``expected``."""
        ...

    @abstractmethod
    async def compare_and_delete(self, identifier: str, expected: OtpRecord) -> bool:
        """Delete the stored record only if it is still ``expected``."""
        ...


class InMemoryOtpStore(OtpStore):
    """Process-local store. Lost on restart and not shared between workers."""

    def __init__(self):
        self._records: dict[str, OtpRecord] = {}

    def __len__(self):
        return len(self._records)

    async def get(self, identifier: str) -> OtpRecord | None:
        return self._records.get(identifier)

    async def set(self, identifier: str, record: OtpRecord) -> None:
        self._records[identifier] = record

    def _matches(self, identifier: str, expected: OtpRecord) -> bool:
        current = self._records.get(identifier)
        return current is not None and current.record_id == expected.record_id

    async def compare_and_set(self, identifier: str, expected: OtpRecord, record: OtpRecord) -> bool:
        if not self._matches(identifier, expected):
            return False
        self._records[identifier] = record
        return True

    async def compare_and_delete(self, identifier: str, expected: OtpRecord) -> bool:
        if not self._matches(identifier, expected):
            return False
        del self._records[identifier]
        return True

    def clear(self):
        self._records.clear()
