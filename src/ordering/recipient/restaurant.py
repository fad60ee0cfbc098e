"""Restaurant — receives new orders on its dashboard."""

from protean.fields import String, ValueObject

from ordering.domain import ordering
from ordering.recipient.push_tokens import PushTokens


@ordering.aggregate
class Restaurant:
    name = String(required=True, max_length=200)
    push_tokens = ValueObject(PushTokens)
