"""New order available template — broadcast to live delivery partners when an order is placed."""

from notifications.dispatch.recipient import RecipientKind
from notifications.templates.types import NotificationType


class NewOrderAvailableTemplate:
    notification_type = NotificationType.NEW_ORDER_AVAILABLE.value
    recipient_kind = RecipientKind.DELIVERY_PARTNER

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "New Order Available",
            "body": "A new order has been placed. Tap to view details.",
            "data": {
                "orderId": context["order_id"],
                "type": NotificationType.NEW_ORDER.value,
            },
        }
