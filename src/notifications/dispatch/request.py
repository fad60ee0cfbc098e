"""The logical notification handed to the dispatcher."""

from dataclasses import dataclass, field

from notifications.channel.web_push_port import stringify_data


@dataclass(frozen=True)
class NotificationRequest:
    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)
    web_options: dict = field(default_factory=dict)

    @classmethod
    def build(cls, title: str, body: str, data: dict | None = None, web_options: dict | None = None):
        """Create a request with all data values converted to strings."""
        return cls(
            title=title,
            body=body,
            data=stringify_data(data),
            web_options=dict(web_options or {}),
        )

    @classmethod
    def from_template(cls, rendered: dict) -> "NotificationRequest":
        return cls.build(
            title=rendered["title"],
            body=rendered["body"],
            data=rendered.get("data"),
            web_options=rendered.get("web_options"),
        )
