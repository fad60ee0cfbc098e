"""Order placement — command and handler."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.menu.menu_item import MenuItem
from ordering.order.order import Order


@ordering.command(part_of="Order")
class PlaceOrder:
    restaurant_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {menu_item_id, quantity, item_addons}
    payment_type = String(max_length=50)
    customer_notes = String(max_length=1000)
    distance = Float(min_value=0.0)
    order_type = String(max_length=50)
    address = String(max_length=500)


def _parse_items(raw) -> list[dict]:
    items = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(items, list) or not items:
        raise ValidationError({"items": ["Order must contain at least one item"]})

    for item in items:
        if not isinstance(item, dict) or not item.get("menu_item_id"):
            raise ValidationError({"items": ["Each item must reference a menu item"]})

        quantity = item.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be a whole number of at least 1"]})

        addons = item.get("item_addons")
        if addons is not None and not isinstance(addons, list):
            raise ValidationError({"item_addons": ["Invalid addons format. Must be an array of addon objects."]})

    return items


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items = _parse_items(command.items)

        menu_repo = current_domain.repository_for(MenuItem)
        lines = []
        for item in items:
            menu_item_id = str(item["menu_item_id"])
            try:
                menu_item = menu_repo.get(menu_item_id)
            except ObjectNotFoundError:
                raise ObjectNotFoundError({"menu_item_id": [f"Menu item not found: {menu_item_id}"]}) from None

            lines.append(
                {
                    "menu_item_id": menu_item_id,
                    "quantity": item["quantity"],
                    "base_price": menu_item.price,
                    "unit_price": menu_item.unit_price,
                    "addons": item.get("item_addons") or [],
                }
            )

        order = Order.place(
            restaurant_id=command.restaurant_id,
            customer_id=command.customer_id,
            lines=lines,
            payment_type=command.payment_type,
            customer_notes=command.customer_notes,
            distance=command.distance,
            order_type=command.order_type,
            address=command.address,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
