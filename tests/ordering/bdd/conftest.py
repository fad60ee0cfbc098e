"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.order.events import DeliveryPartnerAssigned, OrderPlaced, OrderStatusChanged
from ordering.order.order import Order, OrderStatus
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup in Then steps
_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderStatusChanged": OrderStatusChanged,
    "DeliveryPartnerAssigned": DeliveryPartnerAssigned,
}

# Forward path used to walk an order into a given state
_KITCHEN_PATH = [OrderStatus.PREPARING, OrderStatus.READY]


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an order was placed", target_fixture="order")
def placed_order():
    order = Order.place(
        restaurant_id="rest-001",
        customer_id="cust-001",
        lines=[
            {"menu_item_id": "menu-001", "quantity": 2, "base_price": 200.0, "unit_price": 180.0},
            {"menu_item_id": "menu-002", "quantity": 1, "base_price": 150.0, "unit_price": 150.0},
        ],
    )
    order._events.clear()
    return order


@given(parsers.cfparse('the order is "{status}"'), target_fixture="order")
def order_in_status(order, status):
    target = OrderStatus(status)
    if target == OrderStatus.REJECTED:
        order.transition_to(target)
    else:
        for step in _KITCHEN_PATH:
            if OrderStatus(order.status) == target:
                break
            order.transition_to(step)
    order._events.clear()
    return order


@given("a delivery partner accepted the order", target_fixture="order")
def partner_accepted(order):
    order.assign_delivery_partner("dp-001")
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then("the order action fails with a validation error")
def order_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the error says "{message}"'))
def error_says(error, message):
    messages = [m for field_messages in error["exc"].messages.values() for m in field_messages]
    assert message in messages, f"{message!r} not in {messages}"


@then(parsers.cfparse("an {event_type} order event is raised"))
def an_order_event_raised(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in order._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in order._events]}"


@then(parsers.cfparse("a {event_type} order event is raised"))
def a_order_event_raised(order, event_type):
    an_order_event_raised(order, event_type)


@then("no order event is raised")
def no_order_event(order):
    assert order._events == []
