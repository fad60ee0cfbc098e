"""Runtime settings shared by the ordering, notifications and verification packages.

Values are read from environment variables once and frozen. Call
``reset_settings()`` after changing the environment (tests do this through
``monkeypatch.setenv``).
"""

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


def _get_bool(name: str, fallback: bool) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None or raw_value.strip() == "":
        return fallback
    return raw_value.strip().lower() in _TRUTHY


def _get_float(name: str, fallback: float) -> float:
    raw_value = os.getenv(name)
    if not raw_value:
        return fallback
    try:
        return float(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid numeric value for {name}: {raw_value!r}") from exc


def _get_int(name: str, fallback: int) -> int:
    raw_value = os.getenv(name)
    if not raw_value:
        return fallback
    try:
        return int(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer value for {name}: {raw_value!r}") from exc


@dataclass(frozen=True)
class Settings:
    notification_adapter: str = "fake"
    notification_send_timeout_seconds: float = 10.0
    order_transition_policy: str = "permissive"
    notify_customer_on_rejected: bool = False
    otp_ttl_seconds: int = 600
    otp_max_attempts: int = 3

    @classmethod
    def from_env(cls) -> "Settings":
        policy = os.getenv("ORDER_TRANSITION_POLICY", "permissive").strip().lower()
        if policy not in ("permissive", "strict"):
            raise RuntimeError(f"Unknown ORDER_TRANSITION_POLICY: {policy!r}")

        return cls(
            notification_adapter=os.getenv("NOTIFICATION_ADAPTER", "fake").strip().lower(),
            notification_send_timeout_seconds=_get_float("NOTIFICATION_SEND_TIMEOUT_SECONDS", 10.0),
            order_transition_policy=policy,
            notify_customer_on_rejected=_get_bool("NOTIFY_CUSTOMER_ON_REJECTED", False),
            otp_ttl_seconds=_get_int("OTP_TTL_SECONDS", 600),
            otp_max_attempts=_get_int("OTP_MAX_ATTEMPTS", 3),
        )


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings (singleton)."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings.from_env()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings_instance
    _settings_instance = None
