"""Template registry — maps NotificationType to push template classes.

Each template knows which kind of recipient it addresses and how to render
title, body, data payload and web push options from context data.
"""

from notifications.templates.dashboard_check import DashboardTestTemplate
from notifications.templates.new_order_available import NewOrderAvailableTemplate
from notifications.templates.new_order_received import NewOrderReceivedTemplate
from notifications.templates.order_status import OrderStatusUpdateTemplate
from notifications.templates.types import NotificationType

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.ORDER_STATUS_UPDATE.value: OrderStatusUpdateTemplate,
    NotificationType.NEW_ORDER_AVAILABLE.value: NewOrderAvailableTemplate,
    NotificationType.NEW_ORDER.value: NewOrderReceivedTemplate,
    NotificationType.DASHBOARD_TEST.value: DashboardTestTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
