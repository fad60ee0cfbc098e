"""Order aggregate — the core of the ordering domain.

An order is placed with its line items priced once, then moves through the
kitchen and delivery lifecycle. Amounts are fixed at placement and never
recomputed.

State Machine (6 states):
    PENDING → PREPARING → READY → DISPATCH → DELIVERED
    PENDING / PREPARING / READY → REJECTED

Dispatch is guarded in every policy: the order must be READY and a delivery
partner must have accepted it. Other moves follow the configured transition
policy. ``permissive`` lets an order move to any non-dispatch status;
``strict`` allows only the forward edges drawn above.
"""

import json
from datetime import UTC, datetime
from enum import Enum
from numbers import Number

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import DeliveryPartnerAssigned, OrderPlaced, OrderStatusChanged

GST_RATE = 0.05


class InvalidTransitionError(ValidationError):
    """Raised when an order cannot move to the requested status."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    DISPATCH = "dispatch"
    DELIVERED = "delivered"
    REJECTED = "rejected"


class TransitionPolicy(Enum):
    PERMISSIVE = "permissive"
    STRICT = "strict"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_NON_DISPATCH = {status for status in OrderStatus if status != OrderStatus.DISPATCH}

_PERMISSIVE_TRANSITIONS = {
    OrderStatus.PENDING: set(_NON_DISPATCH),
    OrderStatus.PREPARING: set(_NON_DISPATCH),
    OrderStatus.READY: _NON_DISPATCH | {OrderStatus.DISPATCH},
    OrderStatus.DISPATCH: set(_NON_DISPATCH),
    OrderStatus.DELIVERED: set(_NON_DISPATCH),
    OrderStatus.REJECTED: set(_NON_DISPATCH),
}

_STRICT_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PREPARING, OrderStatus.REJECTED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.REJECTED},
    OrderStatus.READY: {OrderStatus.DISPATCH, OrderStatus.REJECTED},
    OrderStatus.DISPATCH: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.REJECTED: set(),  # Terminal
}

_TRANSITIONS = {
    TransitionPolicy.PERMISSIVE: _PERMISSIVE_TRANSITIONS,
    TransitionPolicy.STRICT: _STRICT_TRANSITIONS,
}

# A delivery partner may accept an order until it leaves the restaurant
_ACCEPTABLE_STATES = {OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.READY}


def parse_status(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError({"status": [f"Invalid status: {value}"]}) from None


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------
def addon_total(addons) -> float:
    """Sum of ``extraPrice`` over add-ons; non-numeric prices are ignored."""
    total = 0.0
    for addon in addons or []:
        extra = addon.get("extraPrice") if isinstance(addon, dict) else None
        if isinstance(extra, Number) and not isinstance(extra, bool):
            total += extra
    return total


def price_line(unit_price: float, quantity: int, addons=None) -> float:
    """Line total: unit price times quantity, plus add-ons once per line."""
    return unit_price * quantity + addon_total(addons)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class OrderPricing:
    """Financial summary of an order, locked at placement.

    ``total_amount`` is items plus GST. The delivery fee is recorded but not
    charged.
    """

    items_amount = Float(default=0.0)
    gst = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    total_amount = Float(default=0.0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line item: a menu item, how many, and what it cost at order time."""

    menu_item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    base_price = Float(required=True, min_value=0.0)
    unit_price = Float(required=True, min_value=0.0)
    addons = Text()  # JSON: list of {name, extraPrice}
    total_addon_price = Float(default=0.0)
    total_price = Float(required=True, min_value=0.0)

    @property
    def addon_list(self) -> list:
        return json.loads(self.addons) if self.addons else []


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    restaurant_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    delivery_partner_id = Identifier()
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    items = HasMany(OrderItem)
    pricing = ValueObject(OrderPricing)
    payment_type = String(max_length=50)
    customer_notes = String(max_length=1000)
    distance = Float(min_value=0.0)
    order_type = String(max_length=50)
    address = String(max_length=500)
    placed_at = DateTime()
    updated_at = DateTime()
    dp_accepted_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        restaurant_id,
        customer_id,
        lines,
        payment_type=None,
        customer_notes=None,
        distance=None,
        order_type=None,
        address=None,
    ):
        """Place a new order in PENDING status.

        Args:
            restaurant_id: The restaurant the order is placed with.
            customer_id: The customer placing the order.
            lines: List of dicts with menu_item_id, quantity, base_price,
                   unit_price and optional addons (list of dicts).
        """
        if not lines:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        now = datetime.now(UTC)

        items = []
        for line in lines:
            addons = line.get("addons") or []
            items.append(
                OrderItem(
                    menu_item_id=line["menu_item_id"],
                    quantity=line["quantity"],
                    base_price=line["base_price"],
                    unit_price=line["unit_price"],
                    addons=json.dumps(addons) if addons else None,
                    total_addon_price=addon_total(addons),
                    total_price=price_line(line["unit_price"], line["quantity"], addons),
                )
            )

        items_amount = sum(item.total_price for item in items)
        gst = items_amount * GST_RATE
        pricing = OrderPricing(
            items_amount=items_amount,
            gst=gst,
            delivery_fee=0.0,
            total_amount=items_amount + gst,
        )

        order = cls(
            restaurant_id=restaurant_id,
            customer_id=customer_id,
            status=OrderStatus.PENDING.value,
            items=items,
            pricing=pricing,
            payment_type=payment_type,
            customer_notes=customer_notes,
            distance=distance,
            order_type=order_type,
            address=address,
            placed_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                restaurant_id=str(restaurant_id),
                customer_id=str(customer_id),
                items_amount=pricing.items_amount,
                gst=pricing.gst,
                total_amount=pricing.total_amount,
                item_count=len(items),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target, policy):
        current = OrderStatus(self.status)

        if target == OrderStatus.DISPATCH:
            if current != OrderStatus.READY:
                raise InvalidTransitionError({"status": ["Order must be in ready state to dispatch"]})
            if not self.delivery_partner_id:
                raise InvalidTransitionError(
                    {"delivery_partner_id": ["Cannot dispatch: No delivery partner has accepted this order"]}
                )

        if target not in _TRANSITIONS[policy].get(current, set()):
            raise InvalidTransitionError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

    def transition_to(self, target, policy=TransitionPolicy.PERMISSIVE):
        """Move the order to ``target`` (an OrderStatus or its value)."""
        target = parse_status(target)
        policy = TransitionPolicy(policy)
        self._assert_can_transition(target, policy)

        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                restaurant_id=str(self.restaurant_id),
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )

    def assign_delivery_partner(self, delivery_partner_id):
        """Record the delivery partner who accepted the order. Happens once."""
        if self.delivery_partner_id:
            raise InvalidTransitionError(
                {"delivery_partner_id": ["Order has already been accepted by a delivery partner"]}
            )
        current = OrderStatus(self.status)
        if current not in _ACCEPTABLE_STATES:
            raise InvalidTransitionError({"status": [f"Cannot accept an order in {current.value} state"]})

        now = datetime.now(UTC)
        self.delivery_partner_id = delivery_partner_id
        self.dp_accepted_at = now
        self.updated_at = now

        self.raise_(
            DeliveryPartnerAssigned(
                order_id=str(self.id),
                delivery_partner_id=str(delivery_partner_id),
                accepted_at=now,
            )
        )

    @property
    def is_available_for_pickup(self) -> bool:
        return not self.delivery_partner_id and OrderStatus(self.status) in (
            OrderStatus.READY,
            OrderStatus.PREPARING,
        )
