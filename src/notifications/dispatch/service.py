"""PushNotificationService — recipient-level push operations.

Resolves recipients through the directory, renders templates and hands the
result to the NotificationDispatcher. This is the surface used by the order
lifecycle and by the notifications API.
"""

import structlog
from protean.exceptions import ObjectNotFoundError

from notifications.dispatch.dispatcher import NotificationDispatcher
from notifications.dispatch.outcome import DispatchResult
from notifications.dispatch.recipient import PushChannel, Recipient, RecipientDirectory, RecipientKind
from notifications.dispatch.request import NotificationRequest
from notifications.templates import get_template
from notifications.templates.types import NotificationType

logger = structlog.get_logger(__name__)


class PushNotificationService:
    def __init__(self, directory: RecipientDirectory, dispatcher: NotificationDispatcher | None = None):
        self.directory = directory
        self.dispatcher = dispatcher if dispatcher is not None else NotificationDispatcher(directory=directory)

    async def _require(self, kind: RecipientKind, recipient_id: str) -> Recipient:
        recipient = await self.directory.find(kind, recipient_id)
        if recipient is None:
            raise ObjectNotFoundError({"_entity": [f"{kind.value} not found: {recipient_id}"]})
        return recipient

    # -------------------------------------------------------------------
    # Single recipient
    # -------------------------------------------------------------------
    async def notify_recipient(
        self, kind: RecipientKind, recipient_id: str, request: NotificationRequest
    ) -> DispatchResult | None:
        """Notify one recipient; returns None when there is nobody to reach."""
        recipient = await self.directory.find(kind, recipient_id)
        if recipient is None:
            logger.warning("Recipient not found, notification skipped", kind=kind.value, recipient_id=recipient_id)
            return None
        if not recipient.has_tokens:
            logger.info("Recipient has no push tokens, notification skipped", kind=kind.value, recipient_id=recipient_id)
            return None
        return await self.dispatcher.notify([recipient], request)

    async def notify_with_template(self, notification_type: str, recipient_id: str, context: dict):
        template = get_template(notification_type)
        request = NotificationRequest.from_template(template.render(context))
        return await self.notify_recipient(template.recipient_kind, recipient_id, request)

    # -------------------------------------------------------------------
    # Broadcasts
    # -------------------------------------------------------------------
    async def notify_delivery_partners(self, request: NotificationRequest) -> DispatchResult:
        """Multicast to every live delivery partner that holds a token."""
        partners = await self.directory.find_live_delivery_partners()
        if not partners:
            logger.info("No live delivery partners with push tokens")
        return await self.dispatcher.notify(partners, request)

    async def notify_customers(self, request: NotificationRequest) -> dict:
        """Broadcast to every customer with a token; returns delivery totals."""
        customers = await self.directory.find_customers_with_tokens()
        result = await self.dispatcher.notify(customers, request)
        stats = {
            "total": len(result),
            "successful": result.delivered_count,
            "failed": result.failed_count,
        }
        logger.info("Customer broadcast complete", **stats)
        return stats

    # -------------------------------------------------------------------
    # Restaurant dashboard
    # -------------------------------------------------------------------
    async def send_restaurant_test(self, restaurant_id: str) -> DispatchResult:
        restaurant = await self._require(RecipientKind.RESTAURANT, restaurant_id)
        if not restaurant.has_tokens:
            raise ObjectNotFoundError({"push_tokens": [f"No active push tokens found for restaurant: {restaurant_id}"]})

        template = get_template(NotificationType.DASHBOARD_TEST.value)
        request = NotificationRequest.from_template(template.render({"restaurant_id": restaurant_id}))
        return await self.dispatcher.notify([restaurant], request)

    async def restaurant_settings(self, restaurant_id: str) -> dict:
        restaurant = await self._require(RecipientKind.RESTAURANT, restaurant_id)
        return {
            "restaurant_id": restaurant_id,
            "notifications_enabled": restaurant.has_tokens,
            "token_count": restaurant.token_count,
            "has_mobile_token": bool(restaurant.token_for(PushChannel.MOBILE)),
            "has_web_token": bool(restaurant.token_for(PushChannel.WEB)),
        }
