"""Dashboard test template — lets a restaurant check that its browser receives pushes."""

from datetime import UTC, datetime

from notifications.dispatch.recipient import RecipientKind
from notifications.templates.new_order_received import DASHBOARD_WEB_OPTIONS
from notifications.templates.types import NotificationType


class DashboardTestTemplate:
    notification_type = NotificationType.DASHBOARD_TEST.value
    recipient_kind = RecipientKind.RESTAURANT

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "🧪 Test Notification",
            "body": "This is a test notification from Gormish Dashboard",
            "data": {
                "type": NotificationType.DASHBOARD_TEST.value,
                "restaurantId": context["restaurant_id"],
                "timestamp": context.get("timestamp") or datetime.now(UTC).isoformat(),
            },
            "web_options": dict(DASHBOARD_WEB_OPTIONS),
        }
