"""Domain events for the Order aggregate.

Events are immutable facts raised by the aggregate and dispatched to event
handlers once the unit of work commits. The notification handler reacts to
OrderPlaced and OrderStatusChanged.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer placed a new order with a restaurant."""

    __version__ = 1

    order_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items_amount = Float(required=True)
    gst = Float(required=True)
    total_amount = Float(required=True)
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """An order moved from one status to another."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class DeliveryPartnerAssigned:
    """A delivery partner accepted the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    delivery_partner_id = Identifier(required=True)
    accepted_at = DateTime(required=True)
