"""FastAPI routes for the Ordering domain — order placement and lifecycle."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AcceptOrderRequest,
    OrderIdResponse,
    OrderItemResponse,
    OrderResponse,
    OrderStatusResponse,
    PlaceOrderRequest,
    UpdateOrderStatusRequest,
)
from ordering.order.assignment import AcceptOrder
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder
from ordering.order.status import UpdateOrderStatus

order_router = APIRouter(prefix="/orders", tags=["orders"])


def _to_response(order: Order) -> OrderResponse:
    pricing = order.pricing
    return OrderResponse(
        order_id=str(order.id),
        restaurant_id=str(order.restaurant_id),
        customer_id=str(order.customer_id),
        delivery_partner_id=str(order.delivery_partner_id) if order.delivery_partner_id else None,
        status=order.status,
        items=[
            OrderItemResponse(
                menu_item_id=str(item.menu_item_id),
                quantity=item.quantity,
                base_price=item.base_price,
                unit_price=item.unit_price,
                addons=item.addon_list,
                total_addon_price=item.total_addon_price or 0.0,
                total_price=item.total_price,
            )
            for item in order.items
        ],
        items_amount=pricing.items_amount if pricing else 0.0,
        gst=pricing.gst if pricing else 0.0,
        delivery_fee=pricing.delivery_fee if pricing else 0.0,
        total_amount=pricing.total_amount if pricing else 0.0,
        payment_type=order.payment_type,
        customer_notes=order.customer_notes,
        distance=order.distance,
        order_type=order.order_type,
        address=order.address,
        placed_at=order.placed_at,
        updated_at=order.updated_at,
        dp_accepted_at=order.dp_accepted_at,
    )


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    command = PlaceOrder(
        restaurant_id=body.restaurant_id,
        customer_id=body.customer_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        payment_type=body.payment_type,
        customer_notes=body.customer_notes,
        distance=body.distance,
        order_type=body.order_type,
        address=body.address,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.get("/available-for-pickup", response_model=list[OrderResponse])
async def available_for_pickup() -> list[OrderResponse]:
    """Orders a delivery partner can still accept."""
    orders = current_domain.repository_for(Order).find_available_for_pickup()
    return [_to_response(order) for order in orders]


@order_router.get("", response_model=list[OrderResponse])
async def list_active_orders() -> list[OrderResponse]:
    """Every order still pending, preparing or ready."""
    return [_to_response(order) for order in current_domain.repository_for(Order).find_active()]


@order_router.get("/customers/{customer_id}", response_model=list[OrderResponse])
async def customer_orders(customer_id: str) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).find_by_customer(customer_id)
    return [_to_response(order) for order in orders]


@order_router.get("/restaurants/{restaurant_id}", response_model=list[OrderResponse])
async def restaurant_orders(restaurant_id: str) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).find_active_for_restaurant(restaurant_id)
    return [_to_response(order) for order in orders]


@order_router.get("/restaurants/{restaurant_id}/history", response_model=list[OrderResponse])
async def restaurant_order_history(restaurant_id: str) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).find_restaurant_history(restaurant_id)
    return [_to_response(order) for order in orders]


@order_router.get("/delivery-partners/{delivery_partner_id}", response_model=list[OrderResponse])
async def delivery_partner_orders(delivery_partner_id: str) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).find_for_delivery_partner(delivery_partner_id)
    return [_to_response(order) for order in orders]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    return _to_response(order)


@order_router.put("/{order_id}/status", response_model=OrderStatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderStatusResponse:
    command = UpdateOrderStatus(order_id=order_id, status=body.status)
    status = current_domain.process(command, asynchronous=False)
    return OrderStatusResponse(order_id=order_id, status=status)


@order_router.put("/{order_id}/accept", response_model=OrderResponse)
async def accept_order(order_id: str, body: AcceptOrderRequest) -> OrderResponse:
    command = AcceptOrder(order_id=order_id, delivery_partner_id=body.delivery_partner_id)
    current_domain.process(command, asynchronous=False)
    return _to_response(current_domain.repository_for(Order).get(order_id))
