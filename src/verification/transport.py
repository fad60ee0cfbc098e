"""OtpTransport — delivers verification codes over email or SMS."""

import structlog

from notifications.channel import ChannelType, get_channel
from notifications.channel.email_port import EmailPort
from notifications.channel.sms_port import SMSPort
from notifications.templates.verification_code import VerificationEmailTemplate, VerificationSMSTemplate
from verification.identifiers import ContactIdentifier, IdentifierType

logger = structlog.get_logger(__name__)


class TransportError(Exception):
    """The channel could not deliver the code."""


class OtpTransport:
    def __init__(self, email: EmailPort | None = None, sms: SMSPort | None = None):
        self.email = email if email is not None else get_channel(ChannelType.EMAIL)
        self.sms = sms if sms is not None else get_channel(ChannelType.SMS)

    async def deliver(self, identifier: ContactIdentifier, code: str, ttl_minutes: int) -> dict:
        """Send ``code`` to ``identifier``.

        Raises:
            TransportError: when the adapter reports a failure or raises.
        """
        context = {"code": code, "ttl_minutes": ttl_minutes}
        try:
            if identifier.type == IdentifierType.EMAIL:
                rendered = VerificationEmailTemplate.render(context)
                result = await self.email.send(
                    to=identifier.value,
                    subject=rendered["subject"],
                    body=rendered["body"],
                    html_body=rendered["html_body"],
                )
            else:
                rendered = VerificationSMSTemplate.render(context)
                result = await self.sms.send(to=identifier.value, body=rendered["body"])
        except Exception as exc:
            raise TransportError(str(exc)) from exc

        if result.get("status") != "sent":
            raise TransportError(result.get("error") or "Unknown delivery error")

        logger.info(
            "Verification code delivered",
            channel=identifier.type.value,
            message_id=result.get("message_id"),
        )
        return result
