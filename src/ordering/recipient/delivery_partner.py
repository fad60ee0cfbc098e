"""DeliveryPartner — a rider who accepts ready orders and delivers them.

Only partners that are live (online in the app) are told about new orders.
"""

from protean.fields import Boolean, String, ValueObject

from ordering.domain import ordering
from ordering.recipient.push_tokens import PushTokens


@ordering.aggregate
class DeliveryPartner:
    name = String(required=True, max_length=150)
    phone = String(max_length=20)
    is_live = Boolean(default=False)
    push_tokens = ValueObject(PushTokens)
