"""Channel adapter registry — pluggable notification dispatch channels.

Provides singleton access to channel adapters. Uses fake adapters by
default; the adapter family is selected with the NOTIFICATION_ADAPTER
environment variable.
"""

from enum import Enum

from shared.config import get_settings


class ChannelType(Enum):
    EMAIL = "Email"
    SMS = "SMS"
    MOBILE_PUSH = "MobilePush"
    WEB_PUSH = "WebPush"


_channel_instances: dict[str, object] = {}


def _build_fake(channel_type: str):
    if channel_type == ChannelType.EMAIL.value:
        from notifications.channel.fake_email import FakeEmailAdapter

        return FakeEmailAdapter()
    elif channel_type == ChannelType.SMS.value:
        from notifications.channel.fake_sms import FakeSMSAdapter

        return FakeSMSAdapter()
    elif channel_type == ChannelType.MOBILE_PUSH.value:
        from notifications.channel.fake_mobile_push import FakeMobilePushAdapter

        return FakeMobilePushAdapter()
    elif channel_type == ChannelType.WEB_PUSH.value:
        from notifications.channel.fake_web_push import FakeWebPushAdapter

        return FakeWebPushAdapter()
    raise ValueError(f"Unknown channel type: {channel_type}")


def get_channel(channel_type):
    """Return the configured channel adapter (singleton per channel type).

    Args:
        channel_type: A ChannelType member or its value ("Email", "SMS", "MobilePush", "WebPush")
    """
    if isinstance(channel_type, ChannelType):
        channel_type = channel_type.value

    if channel_type not in _channel_instances:
        adapter = get_settings().notification_adapter
        if adapter != "fake":
            raise ValueError(f"Unknown notification adapter: {adapter}")
        _channel_instances[channel_type] = _build_fake(channel_type)

    return _channel_instances[channel_type]


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
