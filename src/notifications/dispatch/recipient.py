"""Recipients and the directory that owns their push tokens.

Customers, restaurants and delivery partners are all notified the same way:
each may hold one mobile push token and one web push token. The directory
is the storage-side capability the dispatcher reads tokens from and writes
invalidations back to.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class RecipientKind(Enum):
    CUSTOMER = "customer"
    RESTAURANT = "restaurant"
    DELIVERY_PARTNER = "delivery_partner"


class PushChannel(Enum):
    MOBILE = "mobile"
    WEB = "web"


@dataclass(frozen=True)
class Recipient:
    kind: RecipientKind
    recipient_id: str
    name: str | None = None
    mobile_token: str | None = None
    web_token: str | None = None

    def token_for(self, channel: PushChannel) -> str | None:
        if channel == PushChannel.MOBILE:
            return self.mobile_token
        return self.web_token

    @property
    def has_tokens(self) -> bool:
        return bool(self.mobile_token or self.web_token)

    @property
    def token_count(self) -> int:
        return int(bool(self.mobile_token)) + int(bool(self.web_token))


class RecipientDirectory(ABC):
    """Storage capability for reading recipients and maintaining their tokens."""

    @abstractmethod
    async def find(self, kind: RecipientKind, recipient_id: str) -> Recipient | None: ...

    @abstractmethod
    async def find_live_delivery_partners(self) -> list[Recipient]:
        """Delivery partners that are currently online and hold at least one token."""
        ...

    @abstractmethod
    async def find_customers_with_tokens(self) -> list[Recipient]: ...

    @abstractmethod
    async def update_tokens(
        self,
        kind: RecipientKind,
        recipient_id: str,
        mobile_token: str | None = None,
        web_token: str | None = None,
    ) -> Recipient:
        """Overwrite the given tokens; a ``None`` argument leaves that token unchanged."""
        ...

    @abstractmethod
    async def clear_token(
        self,
        kind: RecipientKind,
        recipient_id: str,
        channel: PushChannel,
        token: str | None = None,
    ) -> bool:
        """Clear the stored token for ``channel``.

        When ``token`` is given the stored value is cleared only if it still
        equals ``token``. Returns True when something was cleared.
        """
        ...
