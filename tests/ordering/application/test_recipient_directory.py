"""Application tests for StoredRecipientDirectory — lookups and token upkeep over the repositories."""

import asyncio

import pytest
from notifications.dispatch.recipient import PushChannel, RecipientKind
from ordering.recipient.customer import Customer
from ordering.recipient.delivery_partner import DeliveryPartner
from ordering.recipient.directory import StoredRecipientDirectory
from ordering.recipient.push_tokens import PushTokens
from protean import current_domain
from protean.exceptions import ObjectNotFoundError


class TestFind:
    def setup_method(self):
        self.directory = StoredRecipientDirectory()

    def test_finds_customer_with_tokens(self, customer):
        recipient = asyncio.run(self.directory.find(RecipientKind.CUSTOMER, str(customer.id)))

        assert recipient.kind == RecipientKind.CUSTOMER
        assert recipient.recipient_id == str(customer.id)
        assert recipient.name == "Asha"
        assert recipient.mobile_token == customer.push_tokens.mobile
        assert recipient.web_token == customer.push_tokens.web

    def test_missing_recipient(self):
        assert asyncio.run(self.directory.find(RecipientKind.RESTAURANT, "nope")) is None

    def test_recipient_without_tokens(self):
        customer = Customer(name="Dev")
        current_domain.repository_for(Customer).add(customer)

        recipient = asyncio.run(self.directory.find(RecipientKind.CUSTOMER, str(customer.id)))
        assert recipient.has_tokens is False


class TestBroadcastAudiences:
    def setup_method(self):
        self.directory = StoredRecipientDirectory()

    def test_only_live_partners_with_tokens(self, delivery_partner):
        repo = current_domain.repository_for(DeliveryPartner)
        repo.add(DeliveryPartner(name="Offline", is_live=False, push_tokens=PushTokens(mobile="ExpoPushToken[off]")))
        repo.add(DeliveryPartner(name="Tokenless", is_live=True))

        partners = asyncio.run(self.directory.find_live_delivery_partners())
        assert [p.recipient_id for p in partners] == [str(delivery_partner.id)]

    def test_every_live_partner_is_returned(self):
        repo = current_domain.repository_for(DeliveryPartner)
        for index in range(130):
            repo.add(
                DeliveryPartner(
                    name=f"Rider {index}",
                    is_live=True,
                    push_tokens=PushTokens(mobile=f"ExponentPushToken[rider-{index:04d}]"),
                )
            )

        partners = asyncio.run(self.directory.find_live_delivery_partners())
        assert len(partners) == 130

    def test_customers_with_tokens(self, customer):
        current_domain.repository_for(Customer).add(Customer(name="No Tokens"))

        customers = asyncio.run(self.directory.find_customers_with_tokens())
        assert [c.recipient_id for c in customers] == [str(customer.id)]


class TestTokenUpkeep:
    def setup_method(self):
        self.directory = StoredRecipientDirectory()

    def test_update_tokens(self, delivery_partner):
        recipient = asyncio.run(
            self.directory.update_tokens(RecipientKind.DELIVERY_PARTNER, str(delivery_partner.id), web_token="fcm-ravi")
        )

        assert recipient.web_token == "fcm-ravi"
        assert recipient.mobile_token == delivery_partner.push_tokens.mobile
        stored = current_domain.repository_for(DeliveryPartner).get(delivery_partner.id)
        assert stored.push_tokens.web == "fcm-ravi"

    def test_update_unknown_recipient(self):
        with pytest.raises(ObjectNotFoundError):
            asyncio.run(self.directory.update_tokens(RecipientKind.CUSTOMER, "nope", mobile_token="ExpoPushToken[x]"))

    def test_clear_matching_token(self, customer):
        cleared = asyncio.run(
            self.directory.clear_token(
                RecipientKind.CUSTOMER, str(customer.id), PushChannel.WEB, token=customer.push_tokens.web
            )
        )

        assert cleared is True
        stored = current_domain.repository_for(Customer).get(customer.id)
        assert stored.push_tokens.web is None
        assert stored.push_tokens.mobile == customer.push_tokens.mobile

    def test_reregistered_token_survives(self, customer):
        asyncio.run(
            self.directory.update_tokens(RecipientKind.CUSTOMER, str(customer.id), web_token="fcm-asha-new-device")
        )

        cleared = asyncio.run(
            self.directory.clear_token(
                RecipientKind.CUSTOMER, str(customer.id), PushChannel.WEB, token=customer.push_tokens.web
            )
        )

        assert cleared is False
        stored = current_domain.repository_for(Customer).get(customer.id)
        assert stored.push_tokens.web == "fcm-asha-new-device"

    def test_clear_for_missing_recipient(self):
        assert asyncio.run(self.directory.clear_token(RecipientKind.RESTAURANT, "nope", PushChannel.WEB)) is False
