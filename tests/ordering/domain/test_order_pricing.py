"""Tests for order pricing — line totals, add-ons, GST and the placement event."""

import json

import pytest
from ordering.order.events import OrderPlaced
from ordering.order.order import GST_RATE, Order, OrderStatus, addon_total, price_line
from protean.exceptions import ValidationError


class TestAddonTotal:
    def test_sums_numeric_extra_prices(self):
        assert addon_total([{"name": "Cheese", "extraPrice": 20}, {"name": "Mint dip", "extraPrice": 15.5}]) == 35.5

    def test_ignores_non_numeric_prices(self):
        addons = [{"name": "Cheese", "extraPrice": "20"}, {"name": "Onion"}, {"extraPrice": None}, {"extraPrice": 5}]
        assert addon_total(addons) == 5

    def test_ignores_booleans(self):
        assert addon_total([{"extraPrice": True}]) == 0.0

    def test_empty_and_missing(self):
        assert addon_total(None) == 0.0
        assert addon_total([]) == 0.0

    def test_non_dict_entries_ignored(self):
        assert addon_total(["cheese", 10, {"extraPrice": 3}]) == 3


class TestPriceLine:
    def test_unit_price_times_quantity(self):
        assert price_line(180.0, 2) == 360.0

    def test_addons_added_once_per_line(self):
        # Add-on prices are not multiplied by quantity
        assert price_line(100.0, 3, [{"extraPrice": 20}]) == 320.0


def _place(lines):
    return Order.place(restaurant_id="rest-001", customer_id="cust-001", lines=lines)


class TestOrderPlacement:
    def test_totals(self):
        order = _place(
            [
                {"menu_item_id": "m1", "quantity": 2, "base_price": 200.0, "unit_price": 180.0},
                {
                    "menu_item_id": "m2",
                    "quantity": 1,
                    "base_price": 150.0,
                    "unit_price": 150.0,
                    "addons": [{"name": "Butter", "extraPrice": 30}],
                },
            ]
        )

        assert order.pricing.items_amount == 540.0
        assert order.pricing.gst == pytest.approx(27.0)
        assert order.pricing.total_amount == pytest.approx(567.0)
        assert order.pricing.delivery_fee == 0.0

    @pytest.mark.parametrize(
        "lines",
        [
            [{"menu_item_id": "m1", "quantity": 1, "base_price": 99.99, "unit_price": 99.99}],
            [
                {"menu_item_id": "m1", "quantity": 7, "base_price": 12.5, "unit_price": 11.25},
                {"menu_item_id": "m2", "quantity": 3, "base_price": 40.0, "unit_price": 40.0},
            ],
        ],
    )
    def test_total_is_items_plus_five_percent(self, lines):
        order = _place(lines)
        assert order.pricing.gst == pytest.approx(order.pricing.items_amount * GST_RATE)
        assert order.pricing.total_amount == pytest.approx(order.pricing.items_amount * 1.05)

    def test_items_amount_is_sum_of_lines(self):
        lines = [
            {"menu_item_id": "m1", "quantity": 2, "base_price": 50.0, "unit_price": 45.0, "addons": [{"extraPrice": 5}]},
            {"menu_item_id": "m2", "quantity": 1, "base_price": 80.0, "unit_price": 80.0},
        ]
        order = _place(lines)
        expected = sum(price_line(line["unit_price"], line["quantity"], line.get("addons")) for line in lines)
        assert order.pricing.items_amount == pytest.approx(expected)

    def test_line_items_recorded(self):
        order = _place(
            [
                {
                    "menu_item_id": "m1",
                    "quantity": 2,
                    "base_price": 200.0,
                    "unit_price": 180.0,
                    "addons": [{"name": "Cheese", "extraPrice": 20}],
                }
            ]
        )

        assert len(order.items) == 1
        item = order.items[0]
        assert item.base_price == 200.0
        assert item.unit_price == 180.0
        assert item.total_addon_price == 20.0
        assert item.total_price == 380.0
        assert json.loads(item.addons) == [{"name": "Cheese", "extraPrice": 20}]
        assert item.addon_list == [{"name": "Cheese", "extraPrice": 20}]

    def test_new_order_is_pending_without_partner(self):
        order = _place([{"menu_item_id": "m1", "quantity": 1, "base_price": 10.0, "unit_price": 10.0}])
        assert order.status == OrderStatus.PENDING.value
        assert order.delivery_partner_id is None
        assert order.placed_at is not None

    def test_requires_at_least_one_line(self):
        with pytest.raises(ValidationError) as exc:
            _place([])
        assert "items" in exc.value.messages

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            _place([{"menu_item_id": "m1", "quantity": 0, "base_price": 10.0, "unit_price": 10.0}])

    def test_optional_details_kept(self):
        order = Order.place(
            restaurant_id="rest-001",
            customer_id="cust-001",
            lines=[{"menu_item_id": "m1", "quantity": 1, "base_price": 10.0, "unit_price": 10.0}],
            payment_type="cod",
            customer_notes="Less spicy",
            distance=3.2,
            order_type="delivery",
            address="12 MG Road, Bengaluru",
        )
        assert order.payment_type == "cod"
        assert order.customer_notes == "Less spicy"
        assert order.distance == 3.2
        assert order.order_type == "delivery"
        assert order.address == "12 MG Road, Bengaluru"


class TestOrderPlacedEvent:
    def test_event_raised_with_totals(self):
        order = _place(
            [
                {"menu_item_id": "m1", "quantity": 2, "base_price": 100.0, "unit_price": 100.0},
                {"menu_item_id": "m2", "quantity": 1, "base_price": 50.0, "unit_price": 50.0},
            ]
        )

        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.order_id == str(order.id)
        assert event.restaurant_id == "rest-001"
        assert event.customer_id == "cust-001"
        assert event.item_count == 2
        assert event.items_amount == 250.0
        assert event.total_amount == pytest.approx(262.5)
