"""BDD tests for the order status lifecycle."""

from ordering.order.order import TransitionPolicy
from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, when

scenarios("features/order_status.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the order is moved to "{status}"'), target_fixture="order")
def _(order, error, status):
    try:
        order.transition_to(status)
    except ValidationError as exc:
        error["exc"] = exc
    return order


@when(parsers.cfparse('the order is moved to "{status}" under the strict policy'), target_fixture="order")
def _(order, error, status):
    try:
        order.transition_to(status, policy=TransitionPolicy.STRICT)
    except ValidationError as exc:
        error["exc"] = exc
    return order


@when("a delivery partner accepts the order", target_fixture="order")
def _(order, error):
    try:
        order.assign_delivery_partner("dp-001")
    except ValidationError as exc:
        error["exc"] = exc
    return order


@when("another delivery partner accepts the order", target_fixture="order")
def _(order, error):
    try:
        order.assign_delivery_partner("dp-002")
    except ValidationError as exc:
        error["exc"] = exc
    return order
