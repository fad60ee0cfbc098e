"""Customer — the person who places orders and follows their status."""

from protean.fields import String, ValueObject

from ordering.domain import ordering
from ordering.recipient.push_tokens import PushTokens


@ordering.aggregate
class Customer:
    name = String(required=True, max_length=150)
    email = String(max_length=254)
    phone = String(max_length=20)
    push_tokens = ValueObject(PushTokens)
