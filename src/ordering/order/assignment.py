"""Delivery partner assignment — command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.recipient.delivery_partner import DeliveryPartner


@ordering.command(part_of="Order")
class AcceptOrder:
    """A delivery partner takes the order for pickup."""

    order_id = Identifier(required=True)
    delivery_partner_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class AcceptOrderHandler:
    @handle(AcceptOrder)
    def accept_order(self, command):
        # Raises ObjectNotFoundError for an unknown partner
        current_domain.repository_for(DeliveryPartner).get(command.delivery_partner_id)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.assign_delivery_partner(command.delivery_partner_id)
        repo.add(order)
