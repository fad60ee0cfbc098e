"""StoredRecipientDirectory — recipient lookups and token upkeep backed by the ordering repositories.

Every call pushes the ordering domain context itself, so the directory can
be used from detached notification tasks that outlive the request that
scheduled them.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from notifications.dispatch.recipient import PushChannel, Recipient, RecipientDirectory, RecipientKind
from ordering.domain import ordering
from ordering.recipient.customer import Customer
from ordering.recipient.delivery_partner import DeliveryPartner
from ordering.recipient.push_tokens import clear_token, register_tokens
from ordering.recipient.restaurant import Restaurant
from ordering.utils.paging import iterate_all

logger = structlog.get_logger(__name__)

_AGGREGATES = {
    RecipientKind.CUSTOMER: Customer,
    RecipientKind.RESTAURANT: Restaurant,
    RecipientKind.DELIVERY_PARTNER: DeliveryPartner,
}


def to_recipient(kind: RecipientKind, record) -> Recipient:
    tokens = record.push_tokens
    return Recipient(
        kind=kind,
        recipient_id=str(record.id),
        name=record.name,
        mobile_token=tokens.mobile if tokens else None,
        web_token=tokens.web if tokens else None,
    )


class StoredRecipientDirectory(RecipientDirectory):
    def _load(self, kind: RecipientKind, recipient_id: str):
        repo = current_domain.repository_for(_AGGREGATES[kind])
        try:
            return repo, repo.get(recipient_id)
        except ObjectNotFoundError:
            return repo, None

    async def find(self, kind: RecipientKind, recipient_id: str) -> Recipient | None:
        with ordering.domain_context():
            _, record = self._load(kind, recipient_id)
            return to_recipient(kind, record) if record is not None else None

    async def find_live_delivery_partners(self) -> list[Recipient]:
        with ordering.domain_context():
            query = current_domain.repository_for(DeliveryPartner)._dao.query.filter(is_live=True)
            partners = [to_recipient(RecipientKind.DELIVERY_PARTNER, p) for p in iterate_all(query)]
        return [p for p in partners if p.has_tokens]

    async def find_customers_with_tokens(self) -> list[Recipient]:
        with ordering.domain_context():
            query = current_domain.repository_for(Customer)._dao.query
            customers = [to_recipient(RecipientKind.CUSTOMER, c) for c in iterate_all(query)]
        return [c for c in customers if c.has_tokens]

    async def update_tokens(
        self,
        kind: RecipientKind,
        recipient_id: str,
        mobile_token: str | None = None,
        web_token: str | None = None,
    ) -> Recipient:
        with ordering.domain_context():
            repo, record = self._load(kind, recipient_id)
            if record is None:
                raise ObjectNotFoundError({"_entity": [f"{kind.value} not found: {recipient_id}"]})

            register_tokens(record, mobile=mobile_token, web=web_token)
            repo.add(record)

            logger.info(
                "Push tokens registered",
                kind=kind.value,
                recipient_id=recipient_id,
                mobile=bool(mobile_token),
                web=bool(web_token),
            )
            return to_recipient(kind, record)

    async def clear_token(
        self,
        kind: RecipientKind,
        recipient_id: str,
        channel: PushChannel,
        token: str | None = None,
    ) -> bool:
        with ordering.domain_context():
            repo, record = self._load(kind, recipient_id)
            if record is None:
                return False

            if not clear_token(record, channel.value, token):
                return False

            repo.add(record)
            logger.info("Push token cleared", kind=kind.value, recipient_id=recipient_id, channel=channel.value)
            return True
