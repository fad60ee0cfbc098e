"""Order notifications — who hears about what as an order moves.

Placing an order tells every live delivery partner that work is available
and tells the restaurant it has a new order. Status changes are announced
to the customer. Notification work is detached: the command that raised the
event has already committed and never waits for, or fails because of, a
push send.
"""

import structlog
from protean.utils.mixins import handle

from notifications.dispatch.background import get_background
from notifications.dispatch.recipient import RecipientKind
from notifications.dispatch.request import NotificationRequest
from notifications.dispatch.service import PushNotificationService
from notifications.templates import get_template
from notifications.templates.types import NotificationType
from ordering.domain import ordering
from ordering.order.events import OrderPlaced, OrderStatusChanged
from ordering.order.order import Order, OrderStatus
from ordering.recipient.directory import StoredRecipientDirectory
from shared.config import get_settings

logger = structlog.get_logger(__name__)

# Statuses the customer is always told about
NOTIFIED_STATUSES = {
    OrderStatus.PENDING.value,
    OrderStatus.PREPARING.value,
    OrderStatus.READY.value,
    OrderStatus.DISPATCH.value,
    OrderStatus.DELIVERED.value,
}


def should_notify_customer(status: str, notify_on_rejected: bool | None = None) -> bool:
    if status in NOTIFIED_STATUSES:
        return True
    if status == OrderStatus.REJECTED.value:
        if notify_on_rejected is None:
            notify_on_rejected = get_settings().notify_customer_on_rejected
        return notify_on_rejected
    return False


class OrderNotifier:
    """Renders and sends the notifications an order event calls for."""

    def __init__(self, service: PushNotificationService | None = None):
        self.service = service if service is not None else PushNotificationService(StoredRecipientDirectory())

    async def announce_new_order(
        self,
        order_id: str,
        restaurant_id: str,
        customer_id: str,
        total_amount: float,
        item_count: int,
    ):
        partners = get_template(NotificationType.NEW_ORDER_AVAILABLE.value).render({"order_id": order_id})
        partner_result = await self.service.notify_delivery_partners(NotificationRequest.from_template(partners))

        customer = await self.service.directory.find(RecipientKind.CUSTOMER, customer_id)
        restaurant_result = await self.service.notify_with_template(
            NotificationType.NEW_ORDER.value,
            restaurant_id,
            {
                "order_id": order_id,
                "restaurant_id": restaurant_id,
                "customer_name": customer.name if customer else None,
                "total_amount": total_amount,
                "item_count": item_count,
            },
        )

        logger.info(
            "New order announced",
            order_id=order_id,
            partners_notified=partner_result.delivered_count,
            restaurant_notified=bool(restaurant_result and restaurant_result.delivered_count),
        )
        return partner_result, restaurant_result

    async def announce_status_change(self, order_id: str, customer_id: str, status: str):
        if not should_notify_customer(status):
            logger.info("Status change not announced to customer", order_id=order_id, status=status)
            return None

        return await self.service.notify_with_template(
            NotificationType.ORDER_STATUS_UPDATE.value,
            customer_id,
            {"order_id": order_id, "status": status},
        )


@ordering.event_handler(part_of=Order)
class OrderNotificationsHandler:
    """Schedules order notifications once order changes are committed."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        get_background().submit(
            OrderNotifier().announce_new_order(
                order_id=str(event.order_id),
                restaurant_id=str(event.restaurant_id),
                customer_id=str(event.customer_id),
                total_amount=event.total_amount,
                item_count=event.item_count,
            ),
            name=f"order-placed-{event.order_id}",
        )

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        get_background().submit(
            OrderNotifier().announce_status_change(
                order_id=str(event.order_id),
                customer_id=str(event.customer_id),
                status=event.new_status,
            ),
            name=f"order-status-{event.order_id}-{event.new_status}",
        )
