"""Web push channel port — FCM-style browser push dispatch.

Browsers register an FCM registration token. Single sends and multicast
sends share one message shape; all data values are strings on the wire.
"""

from abc import ABC, abstractmethod

WEB_PUSH_TTL_SECONDS = "86400"
DEFAULT_WEB_ICON = "/pwa.png"


def stringify_data(data: dict | None) -> dict[str, str]:
    """Convert every data value to a string."""
    return {str(key): str(value) for key, value in (data or {}).items()}


def build_web_push_message(title: str, body: str, data: dict | None = None, options: dict | None = None) -> dict:
    """Build the provider message (without the target token)."""
    options = options or {}
    click_action = options.get("click_action") or "/"
    payload = stringify_data(data)
    return {
        "notification": {"title": title, "body": body},
        "data": {**payload, "click_action": click_action},
        "webpush": {
            "headers": {"TTL": WEB_PUSH_TTL_SECONDS},
            "notification": {
                "title": title,
                "body": body,
                "icon": options.get("icon") or DEFAULT_WEB_ICON,
                "badge": options.get("badge") or DEFAULT_WEB_ICON,
                "image": options.get("image"),
                "tag": options.get("tag") or "default",
                "renotify": bool(options.get("renotify", False)),
                "requireInteraction": bool(options.get("requireInteraction", False)),
                "actions": list(options.get("actions") or []),
                "data": payload,
            },
            "fcm_options": {"link": options.get("link") or click_action},
        },
    }


class WebPushPort(ABC):
    """Abstract interface for web push adapters."""

    max_batch_size = 500
    permanent_error_codes = frozenset(
        {
            "messaging/registration-token-not-registered",
            "messaging/invalid-registration-token",
        }
    )

    @abstractmethod
    async def send(
        self,
        token: str,
        title: str,
        body: str,
        data: dict | None = None,
        options: dict | None = None,
    ) -> dict:
        """Send a web push notification to one token.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional),
            error_code (optional provider code)
        """
        ...

    @abstractmethod
    async def send_batch(
        self,
        tokens: list[str],
        title: str,
        body: str,
        data: dict | None = None,
        options: dict | None = None,
    ) -> dict:
        """Send one notification to up to ``max_batch_size`` tokens.

        Returns:
            dict with keys: success_count, failure_count, responses. ``responses``
            is aligned by index with ``tokens`` and holds per-token dicts shaped
            like the result of ``send``.
        """
        ...
