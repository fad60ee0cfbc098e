import json

import pytest
from ordering.menu.menu_item import MenuItem
from ordering.order.placement import PlaceOrder
from ordering.recipient.customer import Customer
from ordering.recipient.delivery_partner import DeliveryPartner
from ordering.recipient.push_tokens import PushTokens
from ordering.recipient.restaurant import Restaurant
from protean import current_domain

CUSTOMER_MOBILE_TOKEN = "ExponentPushToken[customer-asha-0001]"
CUSTOMER_WEB_TOKEN = "fcm-customer-asha-0001"
RESTAURANT_WEB_TOKEN = "fcm-restaurant-spice-route"
PARTNER_MOBILE_TOKEN = "ExponentPushToken[partner-ravi-0001]"


def _add(record):
    current_domain.repository_for(type(record)).add(record)
    return record


@pytest.fixture()
def restaurant():
    return _add(Restaurant(name="Spice Route", push_tokens=PushTokens(web=RESTAURANT_WEB_TOKEN)))


@pytest.fixture()
def customer():
    return _add(
        Customer(
            name="Asha",
            email="asha@example.com",
            phone="+919876543210",
            push_tokens=PushTokens(mobile=CUSTOMER_MOBILE_TOKEN, web=CUSTOMER_WEB_TOKEN),
        )
    )


@pytest.fixture()
def delivery_partner():
    return _add(
        DeliveryPartner(
            name="Ravi",
            phone="+919812345678",
            is_live=True,
            push_tokens=PushTokens(mobile=PARTNER_MOBILE_TOKEN),
        )
    )


@pytest.fixture()
def paneer_tikka(restaurant):
    """Discounted item: 200 list price, 180 charged."""
    return _add(MenuItem(restaurant_id=restaurant.id, name="Paneer Tikka", price=200.0, discounted_price=180.0))


@pytest.fixture()
def dal_makhani(restaurant):
    return _add(MenuItem(restaurant_id=restaurant.id, name="Dal Makhani", price=150.0))


@pytest.fixture()
def place_order(restaurant, customer, paneer_tikka):
    """Place an order through the command and return the stored Order."""
    from ordering.order.order import Order

    def _place(items=None, **kwargs):
        items = items or [{"menu_item_id": str(paneer_tikka.id), "quantity": 1}]
        command = PlaceOrder(
            restaurant_id=str(restaurant.id),
            customer_id=str(customer.id),
            items=json.dumps(items),
            **kwargs,
        )
        order_id = current_domain.process(command, asynchronous=False)
        return current_domain.repository_for(Order).get(order_id)

    return _place
