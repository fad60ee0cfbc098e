"""Verification code templates — one-time codes sent over email or SMS."""

from notifications.templates.types import NotificationType


def _expiry(context: dict) -> str:
    minutes = context.get("ttl_minutes", 10)
    return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"


class VerificationEmailTemplate:
    notification_type = NotificationType.VERIFICATION_CODE.value

    @staticmethod
    def render(context: dict) -> dict:
        code = context["code"]
        expiry = _expiry(context)
        return {
            "subject": "Your Email Verification Code",
            "body": f"Your verification code is: {code}\n\nThis code will expire in {expiry}.",
            "html_body": (
                f"<p>Your verification code is: <strong>{code}</strong></p>"
                f"<p>This code will expire in {expiry}.</p>"
            ),
        }


class VerificationSMSTemplate:
    notification_type = NotificationType.VERIFICATION_CODE.value

    @staticmethod
    def render(context: dict) -> dict:
        code = context["code"]
        return {
            "body": f"Your Gormish verification code is: {code}. This code will expire in {_expiry(context)}.",
        }
