"""Order status template — sent to the customer when their order changes status."""

from notifications.dispatch.recipient import RecipientKind
from notifications.templates.types import NotificationType

STATUS_MESSAGES = {
    "pending": {
        "title": "Order Confirmed!",
        "body": "Your order has been confirmed and is being processed.",
    },
    "preparing": {
        "title": "Order Being Prepared",
        "body": "The restaurant is now preparing your delicious food!",
    },
    "ready": {
        "title": "Order Ready!",
        "body": "Your order is ready and will be picked up soon.",
    },
    "dispatch": {
        "title": "Order On The Way!",
        "body": "Your order is out for delivery. It will reach you soon!",
    },
    "delivered": {
        "title": "Order Delivered!",
        "body": "Your order has been delivered. Enjoy your meal!",
    },
}


def status_message(status: str) -> dict:
    """Title and body for ``status``, with a generic fallback."""
    return STATUS_MESSAGES.get(
        status,
        {
            "title": "Order Update",
            "body": f"Your order status has been updated to {status}.",
        },
    )


class OrderStatusUpdateTemplate:
    notification_type = NotificationType.ORDER_STATUS_UPDATE.value
    recipient_kind = RecipientKind.CUSTOMER

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context["order_id"]
        status = context["status"]
        message = status_message(status)
        return {
            "title": message["title"],
            "body": message["body"],
            "data": {
                "orderId": order_id,
                "status": status,
                "type": NotificationType.ORDER_STATUS_UPDATE.value,
            },
            "web_options": {
                "click_action": f"/orders/{order_id}",
                "icon": "/pwa.png",
                "badge": "/pwa.png",
                "tag": f"order-{order_id}",
                "requireInteraction": status == "delivered",
            },
        }
