"""Application tests for PushNotificationService — recipient-level push operations."""

import asyncio

import pytest
from notifications.dispatch.dispatcher import NotificationDispatcher
from notifications.dispatch.recipient import RecipientKind
from notifications.dispatch.request import NotificationRequest
from notifications.dispatch.service import PushNotificationService
from protean.exceptions import ObjectNotFoundError


@pytest.fixture()
def service(directory, mobile, web):
    return PushNotificationService(directory, NotificationDispatcher(mobile=mobile, web=web, directory=directory))


BROADCAST = NotificationRequest.build("Lunch rush", "Extra payouts between 12 and 2.")


class TestNotifyRecipient:
    def test_sends_to_recipient(self, service, directory, mobile, make_recipient):
        recipient = directory.add(make_recipient(1))

        result = asyncio.run(service.notify_recipient(RecipientKind.CUSTOMER, recipient.recipient_id, BROADCAST))

        assert result.delivered_count == 1
        assert mobile.pushes_to(recipient.mobile_token)[0]["title"] == "Lunch rush"

    def test_missing_recipient_returns_none(self, service, mobile):
        assert asyncio.run(service.notify_recipient(RecipientKind.CUSTOMER, "ghost", BROADCAST)) is None
        assert mobile.batches == []

    def test_recipient_without_tokens_returns_none(self, service, directory, make_recipient):
        recipient = directory.add(make_recipient(1, with_mobile=False, with_web=False))
        assert asyncio.run(service.notify_recipient(RecipientKind.CUSTOMER, recipient.recipient_id, BROADCAST)) is None

    def test_with_template(self, service, directory, web, make_recipient):
        recipient = directory.add(make_recipient(1))

        asyncio.run(
            service.notify_with_template(
                "order_status_update", recipient.recipient_id, {"order_id": "o-5", "status": "dispatch"}
            )
        )

        push = web.pushes_to(recipient.web_token)[0]
        assert push["notification"]["title"] == "Order On The Way!"
        assert push["data"]["orderId"] == "o-5"

    def test_template_picks_recipient_kind(self, service, directory, mobile, make_recipient):
        partner = directory.add(make_recipient(1, kind=RecipientKind.DELIVERY_PARTNER, recipient_id="shared-id"))
        directory.add(make_recipient(2, kind=RecipientKind.CUSTOMER, recipient_id="shared-id"))

        asyncio.run(service.notify_with_template("new_order_available", "shared-id", {"order_id": "o-6"}))

        assert len(mobile.sent_pushes) == 1
        assert mobile.sent_pushes[0]["to"] == partner.mobile_token


class TestBroadcasts:
    def test_delivery_partner_multicast(self, service, directory, mobile, make_recipient):
        live = [directory.add(make_recipient(n, kind=RecipientKind.DELIVERY_PARTNER)) for n in range(3)]
        offline = directory.add(make_recipient(9, kind=RecipientKind.DELIVERY_PARTNER), live=False)

        result = asyncio.run(service.notify_delivery_partners(BROADCAST))

        assert len(result) == 3
        assert {p["to"] for p in mobile.sent_pushes} == {p.mobile_token for p in live}
        assert mobile.pushes_to(offline.mobile_token) == []

    def test_no_partners(self, service):
        result = asyncio.run(service.notify_delivery_partners(BROADCAST))
        assert len(result) == 0

    def test_customer_broadcast_stats(self, service, directory, mobile, web, make_recipient):
        customers = [directory.add(make_recipient(n)) for n in range(4)]
        directory.add(make_recipient(8, with_mobile=False, with_web=False))
        mobile.fail_token(customers[0].mobile_token, error_code="MessageRateExceeded")
        web.fail_token(customers[0].web_token, error_code="messaging/internal-error")

        stats = asyncio.run(service.notify_customers(BROADCAST))

        assert stats == {"total": 4, "successful": 3, "failed": 1}


class TestRestaurantDashboard:
    def test_send_test_notification(self, service, directory, web, make_recipient):
        restaurant = directory.add(make_recipient(1, kind=RecipientKind.RESTAURANT, with_mobile=False))

        result = asyncio.run(service.send_restaurant_test(restaurant.recipient_id))

        assert result.delivered_count == 1
        push = web.pushes_to(restaurant.web_token)[0]
        assert push["notification"]["title"] == "🧪 Test Notification"
        assert push["data"]["restaurantId"] == restaurant.recipient_id

    def test_test_notification_needs_tokens(self, service, directory, make_recipient):
        restaurant = directory.add(
            make_recipient(1, kind=RecipientKind.RESTAURANT, with_mobile=False, with_web=False)
        )
        with pytest.raises(ObjectNotFoundError):
            asyncio.run(service.send_restaurant_test(restaurant.recipient_id))

    def test_unknown_restaurant(self, service):
        with pytest.raises(ObjectNotFoundError):
            asyncio.run(service.send_restaurant_test("ghost"))

    def test_settings(self, service, directory, make_recipient):
        restaurant = directory.add(make_recipient(1, kind=RecipientKind.RESTAURANT, with_mobile=False))

        settings = asyncio.run(service.restaurant_settings(restaurant.recipient_id))

        assert settings == {
            "restaurant_id": restaurant.recipient_id,
            "notifications_enabled": True,
            "token_count": 1,
            "has_mobile_token": False,
            "has_web_token": True,
        }

    def test_settings_without_tokens(self, service, directory, make_recipient):
        restaurant = directory.add(
            make_recipient(1, kind=RecipientKind.RESTAURANT, with_mobile=False, with_web=False)
        )
        settings = asyncio.run(service.restaurant_settings(restaurant.recipient_id))
        assert settings["notifications_enabled"] is False
        assert settings["token_count"] == 0


class TestDefaultDispatcher:
    def test_uses_registered_channels(self, directory, make_recipient):
        from notifications.channel import ChannelType, get_channel

        recipient = directory.add(make_recipient(1))
        service = PushNotificationService(directory)

        asyncio.run(service.notify_recipient(RecipientKind.CUSTOMER, recipient.recipient_id, BROADCAST))

        assert len(get_channel(ChannelType.MOBILE_PUSH).pushes_to(recipient.mobile_token)) == 1
        assert service.dispatcher.directory is directory
