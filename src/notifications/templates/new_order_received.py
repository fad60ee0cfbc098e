"""New order received template — sent to the restaurant dashboard when an order is placed."""

from datetime import UTC, datetime

from notifications.dispatch.recipient import RecipientKind
from notifications.templates.types import NotificationType

DASHBOARD_WEB_OPTIONS = {
    "requireInteraction": True,
    "tag": "gormish-order-notification",
    "icon": "/logo.png",
    "badge": "/logo.png",
    "actions": [
        {"action": "view", "title": "View Order", "icon": "/logo.png"},
        {"action": "dismiss", "title": "Dismiss"},
    ],
    "link": "/#/dashboard",
}


class NewOrderReceivedTemplate:
    notification_type = NotificationType.NEW_ORDER.value
    recipient_kind = RecipientKind.RESTAURANT

    @staticmethod
    def render(context: dict) -> dict:
        customer_name = context.get("customer_name") or "Unknown Customer"
        total_amount = context.get("total_amount", 0)
        timestamp = context.get("timestamp") or datetime.now(UTC).isoformat()
        return {
            "title": "🍽️ New Order Received!",
            "body": f"Order from {customer_name} - ₹{total_amount}",
            "data": {
                "orderId": context["order_id"],
                "restaurantId": context["restaurant_id"],
                "type": NotificationType.NEW_ORDER.value,
                "customerName": customer_name,
                "totalAmount": total_amount,
                "itemCount": context.get("item_count", 0),
                "timestamp": timestamp,
            },
            "web_options": dict(DASHBOARD_WEB_OPTIONS),
        }
