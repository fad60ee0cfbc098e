"""FastAPI routes for push notifications.

Thin adapters over PushNotificationService: token registration, broadcasts
and the restaurant dashboard helpers. No business logic here.
"""

from fastapi import APIRouter, Depends, HTTPException

from notifications.api.schemas import (
    BroadcastRequest,
    BroadcastStatsResponse,
    PushTokensResponse,
    RegisterPushTokensRequest,
    RestaurantSettingsResponse,
    StatusResponse,
)
from notifications.dispatch.recipient import PushChannel, RecipientKind
from notifications.dispatch.request import NotificationRequest
from notifications.dispatch.service import PushNotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])

_KIND_SEGMENTS = {
    "customers": RecipientKind.CUSTOMER,
    "restaurants": RecipientKind.RESTAURANT,
    "delivery-partners": RecipientKind.DELIVERY_PARTNER,
}


def get_push_service() -> PushNotificationService:
    """Default service wiring; overridden in tests via ``app.dependency_overrides``."""
    from ordering.recipient.directory import StoredRecipientDirectory

    return PushNotificationService(StoredRecipientDirectory())


def _resolve_kind(segment: str) -> RecipientKind:
    kind = _KIND_SEGMENTS.get(segment)
    if kind is None:
        raise HTTPException(status_code=404, detail=f"Unknown recipient type: {segment}")
    return kind


def _resolve_channel(value: str) -> PushChannel:
    try:
        return PushChannel(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown push channel: {value}") from None


# ---------------------------------------------------------------------------
# Broadcasts
# ---------------------------------------------------------------------------
@router.post("/delivery-partners/broadcast", response_model=BroadcastStatsResponse)
async def broadcast_to_delivery_partners(
    body: BroadcastRequest, service: PushNotificationService = Depends(get_push_service)
) -> BroadcastStatsResponse:
    """Push to every live delivery partner."""
    result = await service.notify_delivery_partners(NotificationRequest.build(body.title, body.body, body.data))
    return BroadcastStatsResponse(total=len(result), successful=result.delivered_count, failed=result.failed_count)


@router.post("/customers/broadcast", response_model=BroadcastStatsResponse)
async def broadcast_to_customers(
    body: BroadcastRequest, service: PushNotificationService = Depends(get_push_service)
) -> BroadcastStatsResponse:
    """Push to every customer with a registered token."""
    stats = await service.notify_customers(NotificationRequest.build(body.title, body.body, body.data))
    return BroadcastStatsResponse(**stats)


# ---------------------------------------------------------------------------
# Restaurant dashboard
# ---------------------------------------------------------------------------
@router.post("/restaurants/{restaurant_id}/test", response_model=BroadcastStatsResponse)
async def send_restaurant_test(
    restaurant_id: str, service: PushNotificationService = Depends(get_push_service)
) -> BroadcastStatsResponse:
    result = await service.send_restaurant_test(restaurant_id)
    return BroadcastStatsResponse(total=len(result), successful=result.delivered_count, failed=result.failed_count)


@router.get("/restaurants/{restaurant_id}/settings", response_model=RestaurantSettingsResponse)
async def restaurant_settings(
    restaurant_id: str, service: PushNotificationService = Depends(get_push_service)
) -> RestaurantSettingsResponse:
    return RestaurantSettingsResponse(**await service.restaurant_settings(restaurant_id))


# ---------------------------------------------------------------------------
# Push tokens
# ---------------------------------------------------------------------------
@router.patch("/{recipient_type}/{recipient_id}/push-tokens", response_model=PushTokensResponse)
async def register_push_tokens(
    recipient_type: str,
    recipient_id: str,
    body: RegisterPushTokensRequest,
    service: PushNotificationService = Depends(get_push_service),
) -> PushTokensResponse:
    """Store a mobile token, a web token or both. At least one is required."""
    kind = _resolve_kind(recipient_type)
    if not body.mobile_token and not body.web_token:
        raise HTTPException(status_code=400, detail="At least one push token (mobile_token or web_token) is required")

    recipient = await service.directory.update_tokens(
        kind, recipient_id, mobile_token=body.mobile_token, web_token=body.web_token
    )
    return PushTokensResponse(
        kind=kind.value,
        recipient_id=recipient.recipient_id,
        has_mobile_token=bool(recipient.mobile_token),
        has_web_token=bool(recipient.web_token),
    )


@router.delete("/{recipient_type}/{recipient_id}/push-tokens/{channel}", response_model=StatusResponse)
async def remove_push_token(
    recipient_type: str,
    recipient_id: str,
    channel: str,
    token: str | None = None,
    service: PushNotificationService = Depends(get_push_service),
) -> StatusResponse:
    """Remove a push token. With ``?token=`` it is removed only if it still matches."""
    kind = _resolve_kind(recipient_type)
    push_channel = _resolve_channel(channel)

    if await service.directory.find(kind, recipient_id) is None:
        raise HTTPException(status_code=404, detail=f"{kind.value} not found: {recipient_id}")

    cleared = await service.directory.clear_token(kind, recipient_id, push_channel, token=token)
    return StatusResponse(status="removed" if cleared else "unchanged")
