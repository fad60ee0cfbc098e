import pytest
from notifications.channel.fake_mobile_push import FakeMobilePushAdapter
from notifications.channel.fake_web_push import FakeWebPushAdapter
from notifications.dispatch.recipient import PushChannel, Recipient, RecipientDirectory, RecipientKind


class InMemoryRecipientDirectory(RecipientDirectory):
    """Recipients held in a dict, keyed by (kind, id)."""

    def __init__(self):
        self.recipients: dict[tuple[RecipientKind, str], Recipient] = {}
        self.live_partner_ids: set[str] = set()
        self.clear_calls: list[tuple] = []
        self.fail_clears = False

    def add(self, recipient: Recipient, live: bool = True) -> Recipient:
        self.recipients[(recipient.kind, recipient.recipient_id)] = recipient
        if recipient.kind == RecipientKind.DELIVERY_PARTNER and live:
            self.live_partner_ids.add(recipient.recipient_id)
        return recipient

    async def find(self, kind, recipient_id):
        return self.recipients.get((kind, recipient_id))

    async def find_live_delivery_partners(self):
        return [
            r
            for (kind, rid), r in self.recipients.items()
            if kind == RecipientKind.DELIVERY_PARTNER and rid in self.live_partner_ids and r.has_tokens
        ]

    async def find_customers_with_tokens(self):
        return [r for (kind, _), r in self.recipients.items() if kind == RecipientKind.CUSTOMER and r.has_tokens]

    async def update_tokens(self, kind, recipient_id, mobile_token=None, web_token=None):
        current = self.recipients[(kind, recipient_id)]
        updated = Recipient(
            kind=kind,
            recipient_id=recipient_id,
            name=current.name,
            mobile_token=mobile_token or current.mobile_token,
            web_token=web_token or current.web_token,
        )
        self.recipients[(kind, recipient_id)] = updated
        return updated

    async def clear_token(self, kind, recipient_id, channel, token=None):
        self.clear_calls.append((kind, recipient_id, channel, token))
        if self.fail_clears:
            raise ConnectionError("directory unavailable")

        current = self.recipients.get((kind, recipient_id))
        if current is None:
            return False
        stored = current.token_for(channel)
        if stored is None or (token is not None and stored != token):
            return False

        self.recipients[(kind, recipient_id)] = Recipient(
            kind=kind,
            recipient_id=recipient_id,
            name=current.name,
            mobile_token=None if channel == PushChannel.MOBILE else current.mobile_token,
            web_token=None if channel == PushChannel.WEB else current.web_token,
        )
        return True


@pytest.fixture()
def directory():
    return InMemoryRecipientDirectory()


@pytest.fixture()
def mobile():
    return FakeMobilePushAdapter()


@pytest.fixture()
def web():
    return FakeWebPushAdapter()


def mobile_token(n: int) -> str:
    return f"ExponentPushToken[device-{n:04d}]"


def web_token(n: int) -> str:
    return f"fcm-browser-{n:04d}"


@pytest.fixture()
def make_recipient():
    """Build a recipient with numbered tokens on the requested channels."""

    def _make(n, kind=RecipientKind.CUSTOMER, with_mobile=True, with_web=True, **overrides):
        fields = {
            "kind": kind,
            "recipient_id": f"{kind.value}-{n:04d}",
            "name": f"Recipient {n}",
            "mobile_token": mobile_token(n) if with_mobile else None,
            "web_token": web_token(n) if with_web else None,
        }
        fields.update(overrides)
        return Recipient(**fields)

    return _make
