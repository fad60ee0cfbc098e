"""Pydantic request/response models for the Notifications API.

API schemas are separate from the dispatcher's own types (anti-corruption pattern).
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class RegisterPushTokensRequest(BaseModel):
    mobile_token: str | None = Field(default=None, examples=["ExponentPushToken[xxxxxxxxxxxxxxxxxxxxxx]"])
    web_token: str | None = Field(default=None, description="FCM registration token")


class BroadcastRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1, max_length=1000)
    data: dict[str, str | int | float | bool] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class PushTokensResponse(BaseModel):
    kind: str
    recipient_id: str
    has_mobile_token: bool
    has_web_token: bool


class StatusResponse(BaseModel):
    status: str = "ok"


class BroadcastStatsResponse(BaseModel):
    total: int
    successful: int
    failed: int


class RestaurantSettingsResponse(BaseModel):
    restaurant_id: str
    notifications_enabled: bool
    token_count: int
    has_mobile_token: bool
    has_web_token: bool
