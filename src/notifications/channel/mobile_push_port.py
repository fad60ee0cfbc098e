"""Mobile push channel port — Expo-style batched push dispatch.

Mobile devices register an opaque provider token. The provider accepts a
batch of messages and answers with one receipt per message, in the same
order. Token shape is checked locally before anything is sent.
"""

import re
from abc import ABC, abstractmethod

_EXPO_TOKEN_PATTERN = re.compile(r"^Expo(nent)?PushToken\[.+\]$")
_UUID_PATTERN = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")


def is_expo_push_token(token) -> bool:
    """True for ``ExponentPushToken[...]``, ``ExpoPushToken[...]`` or a bare UUID."""
    if not isinstance(token, str) or not token:
        return False
    return bool(_EXPO_TOKEN_PATTERN.match(token) or _UUID_PATTERN.match(token))


def build_mobile_message(token: str, title: str, body: str, data: dict | None = None) -> dict:
    """Build one provider message for ``token``."""
    return {
        "to": token,
        "sound": "default",
        "title": title,
        "body": body,
        "data": dict(data or {}),
    }


class MobilePushPort(ABC):
    """Abstract interface for mobile push adapters."""

    max_batch_size = 100
    permanent_error_codes = frozenset({"DeviceNotRegistered"})

    def is_valid_token(self, token) -> bool:
        return is_expo_push_token(token)

    @abstractmethod
    async def send_batch(self, messages: list[dict]) -> list[dict]:
        """Send up to ``max_batch_size`` messages in one provider call.

        Returns:
            list of receipts aligned by index with ``messages``. Each receipt
            is a dict with keys: message_id, status ("sent" or "failed"),
            error (optional), error_code (optional provider code).
        """
        ...
