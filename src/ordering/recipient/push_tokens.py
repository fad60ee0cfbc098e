"""PushTokens — the device tokens a recipient can be reached on.

Customers, restaurants and delivery partners all embed this value object.
It is immutable: registering or clearing a token replaces the whole value.
"""

from protean.fields import String

from ordering.domain import ordering

MOBILE = "mobile"
WEB = "web"


@ordering.value_object
class PushTokens:
    """At most one mobile (Expo) token and one web (FCM) token."""

    mobile = String(max_length=255)
    web = String(max_length=1024)

    def with_tokens(self, mobile=None, web=None):
        """Return a copy with the given tokens overwritten."""
        return PushTokens(
            mobile=mobile if mobile else self.mobile,
            web=web if web else self.web,
        )

    def without(self, channel, token=None):
        """Return a copy with ``channel`` cleared, or None when nothing is left.

        When ``token`` is given, the channel is cleared only if it still holds
        that exact token; otherwise ``self`` is returned unchanged.
        """
        current = self.mobile if channel == MOBILE else self.web
        if current is None or (token is not None and current != token):
            return self

        remaining_mobile = None if channel == MOBILE else self.mobile
        remaining_web = None if channel == WEB else self.web
        if not remaining_mobile and not remaining_web:
            return None
        return PushTokens(mobile=remaining_mobile, web=remaining_web)


def register_tokens(record, mobile=None, web=None):
    """Overwrite tokens on a recipient aggregate."""
    current = record.push_tokens or PushTokens()
    record.push_tokens = current.with_tokens(mobile=mobile, web=web)


def clear_token(record, channel, token=None) -> bool:
    """Clear a token on a recipient aggregate. Returns True if it changed."""
    current = record.push_tokens
    if current is None:
        return False
    remaining = current.without(channel, token)
    if remaining is current:
        return False
    record.push_tokens = remaining
    return True
