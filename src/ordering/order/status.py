"""Order status updates — command and handler.

The status read for the guard is the status the write is conditioned on,
so two concurrent updates from the same state cannot both land.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from shared.config import get_settings


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        expected_status = order.status
        order.transition_to(command.status, policy=get_settings().order_transition_policy)
        repo.save_transition(order, expected_status)
        return order.status
