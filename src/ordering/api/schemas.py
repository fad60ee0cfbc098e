"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class OrderLineSchema(BaseModel):
    menu_item_id: str
    quantity: int
    # Shape checked by PlaceOrderHandler
    item_addons: Any = None


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    restaurant_id: str
    customer_id: str
    items: list[OrderLineSchema] = Field(min_length=1)
    payment_type: str | None = None
    customer_notes: str | None = None
    distance: float | None = Field(default=None, ge=0)
    order_type: str | None = None
    address: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "restaurant_id": "rest-001",
                    "customer_id": "cust-001",
                    "items": [
                        {
                            "menu_item_id": "menu-001",
                            "quantity": 2,
                            "item_addons": [{"name": "Extra cheese", "extraPrice": 20}],
                        }
                    ],
                    "payment_type": "cod",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str


class AcceptOrderRequest(BaseModel):
    delivery_partner_id: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str


class OrderItemResponse(BaseModel):
    menu_item_id: str
    quantity: int
    base_price: float
    unit_price: float
    addons: list = []
    total_addon_price: float
    total_price: float


class OrderResponse(BaseModel):
    order_id: str
    restaurant_id: str
    customer_id: str
    delivery_partner_id: str | None = None
    status: str
    items: list[OrderItemResponse]
    items_amount: float
    gst: float
    delivery_fee: float
    total_amount: float
    payment_type: str | None = None
    customer_notes: str | None = None
    distance: float | None = None
    order_type: str | None = None
    address: str | None = None
    placed_at: datetime | None = None
    updated_at: datetime | None = None
    dp_accepted_at: datetime | None = None
