"""CredentialIssuer — one-time verification codes bound to an email or phone.

A code is six digits drawn from a CSPRNG, lives for ``ttl`` (ten minutes by
default) and survives at most ``max_attempts`` wrong guesses. Issuing a new
code replaces any previous one. A correct code is consumed on use.

Every read-decide-write on an identifier happens inside a critical section
keyed by that identifier, and the final write is conditional on the record
that was read. Two concurrent verifications of the same code therefore
produce exactly one success.
"""

import asyncio
import hmac
import math
import secrets
from collections.abc import Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import structlog

from shared.config import get_settings
from verification.exceptions import (
    AttemptsExceeded,
    CodeExpired,
    CodeMismatch,
    CodeNotFound,
    DeliveryFailed,
)
from verification.identifiers import ContactIdentifier, normalize_identifier
from verification.store import InMemoryOtpStore, OtpRecord, OtpStore
from verification.transport import OtpTransport, TransportError

logger = structlog.get_logger(__name__)

CODE_MIN = 100000
CODE_SPAN = 900000


def generate_code() -> str:
    """A uniformly random code in [100000, 999999]."""
    return str(CODE_MIN + secrets.randbelow(CODE_SPAN))


@dataclass(frozen=True)
class IssuedCode:
    identifier: ContactIdentifier
    expires_at: datetime


@dataclass(frozen=True)
class VerificationResult:
    identifier: ContactIdentifier
    verified_at: datetime


class CredentialIssuer:
    def __init__(
        self,
        store: OtpStore | None = None,
        transport: OtpTransport | None = None,
        ttl_seconds: int | None = None,
        max_attempts: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        settings = get_settings()
        self.store = store if store is not None else InMemoryOtpStore()
        self._transport = transport
        self.ttl = timedelta(seconds=ttl_seconds if ttl_seconds is not None else settings.otp_ttl_seconds)
        self.max_attempts = max_attempts if max_attempts is not None else settings.otp_max_attempts
        self._clock = clock or (lambda: datetime.now(UTC))
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @property
    def transport(self) -> OtpTransport:
        if self._transport is None:
            self._transport = OtpTransport()
        return self._transport

    @property
    def ttl_minutes(self) -> int:
        """Whole minutes shown to the user, rounded up."""
        return math.ceil(self.ttl.total_seconds() / 60)

    @asynccontextmanager
    async def _critical_section(self, key: str):
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if self._lock_users[key] == 0:
                del self._lock_users[key]
                self._locks.pop(key, None)

    # -------------------------------------------------------------------
    # Issuance
    # -------------------------------------------------------------------
    async def _issue(self, identifier: ContactIdentifier) -> OtpRecord:
        record = OtpRecord(code=generate_code(), expires_at=self._clock() + self.ttl)
        async with self._critical_section(identifier.value):
            await self.store.set(identifier.value, record)
        logger.info("Verification code issued", identifier_type=identifier.type.value)
        return record

    async def issue(self, identifier: str) -> str:
        """Issue a fresh code for ``identifier`` and return it.

        Raises:
            ValidationError: if ``identifier`` is not a valid email or phone number.
        """
        record = await self._issue(normalize_identifier(identifier))
        return record.code

    async def issue_and_deliver(self, identifier: str) -> IssuedCode:
        """Issue a code and send it over email or SMS.

        If the transport fails the new code is withdrawn before
        DeliveryFailed is raised, so no undeliverable code stays live.
        """
        contact = normalize_identifier(identifier)
        record = await self._issue(contact)

        try:
            await self.transport.deliver(contact, record.code, self.ttl_minutes)
        except TransportError as exc:
            async with self._critical_section(contact.value):
                await self.store.compare_and_delete(contact.value, record)
            logger.error(
                "Verification code delivery failed",
                identifier_type=contact.type.value,
                error=str(exc),
            )
            raise DeliveryFailed(contact.value) from exc

        return IssuedCode(identifier=contact, expires_at=record.expires_at)

    # -------------------------------------------------------------------
    # Verification
    # -------------------------------------------------------------------
    async def verify(self, identifier: str, code) -> VerificationResult:
        """Check ``code`` against the live record for ``identifier``.

        Raises:
            CodeNotFound: no live code (never issued, already used or withdrawn).
            CodeExpired: the code outlived its TTL; it is discarded.
            AttemptsExceeded: too many wrong guesses; the code is discarded.
            CodeMismatch: wrong code; the attempt is counted.
        """
        contact = normalize_identifier(identifier)
        key = contact.value
        submitted = str(code).strip().encode()

        async with self._critical_section(key):
            record = await self.store.get(key)
            if record is None:
                raise CodeNotFound(key)

            now = self._clock()
            if record.is_expired(now):
                await self.store.compare_and_delete(key, record)
                raise CodeExpired(key)

            if record.attempts >= self.max_attempts:
                await self.store.compare_and_delete(key, record)
                logger.warning("Verification locked after failed attempts", identifier_type=contact.type.value)
                raise AttemptsExceeded(key)

            if not hmac.compare_digest(record.code.encode(), submitted):
                updated = record.with_failed_attempt()
                await self.store.compare_and_set(key, record, updated)
                raise CodeMismatch(key, attempts_remaining=max(self.max_attempts - updated.attempts, 0))

            if not await self.store.compare_and_delete(key, record):
                raise CodeNotFound(key)

        logger.info("Verification succeeded", identifier_type=contact.type.value)
        return VerificationResult(identifier=contact, verified_at=now)


_issuer_instance: CredentialIssuer | None = None


def get_issuer() -> CredentialIssuer:
    """Return the process-wide issuer (singleton)."""
    global _issuer_instance
    if _issuer_instance is None:
        _issuer_instance = CredentialIssuer()
    return _issuer_instance


def reset_issuer():
    """Reset the issuer singleton (useful for testing)."""
    global _issuer_instance
    _issuer_instance = None
