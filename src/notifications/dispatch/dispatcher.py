"""NotificationDispatcher — fans one notification out to many recipients.

Every recipient may hold a mobile token, a web token, both or neither. The
dispatcher groups tokens per channel into provider-sized batches, sends all
batches concurrently and decomposes each batch response back into one
outcome per token by position. Each batch (or single send) is a unit of
work bounded by its own timeout; a unit that times out or raises fails only
the tokens it carried.

After sending, tokens the provider reported as permanently dead are
cleared in the recipient directory. Clearing is compare-and-clear, so a
token re-registered in the meantime survives.
"""

import asyncio

import structlog

from notifications.channel import ChannelType, get_channel
from notifications.channel.mobile_push_port import MobilePushPort, build_mobile_message
from notifications.channel.web_push_port import WebPushPort
from notifications.dispatch.outcome import (
    INVALID_TOKEN_FORMAT,
    MISSING_RECEIPT,
    TIMEOUT,
    ChannelOutcome,
    DispatchResult,
    InvalidToken,
    OutcomeStatus,
    RecipientResult,
)
from notifications.dispatch.recipient import PushChannel, Recipient, RecipientDirectory
from notifications.dispatch.request import NotificationRequest
from shared.config import get_settings

logger = structlog.get_logger(__name__)


def _chunks(items: list, size: int):
    for start in range(0, len(items), size):
        yield items[start : start + size]


def _outcome_from_receipt(receipt) -> ChannelOutcome:
    if not isinstance(receipt, dict):
        return ChannelOutcome.failed(MISSING_RECEIPT)
    if receipt.get("status") == "sent":
        return ChannelOutcome.sent(receipt.get("message_id"))
    return ChannelOutcome.failed(
        receipt.get("error") or "Push delivery failed",
        error_code=receipt.get("error_code"),
    )


class NotificationDispatcher:
    """Sends a NotificationRequest to recipients over mobile and web push."""

    def __init__(
        self,
        mobile: MobilePushPort | None = None,
        web: WebPushPort | None = None,
        directory: RecipientDirectory | None = None,
        timeout: float | None = None,
    ):
        self.mobile = mobile if mobile is not None else get_channel(ChannelType.MOBILE_PUSH)
        self.web = web if web is not None else get_channel(ChannelType.WEB_PUSH)
        self.directory = directory
        self.timeout = timeout if timeout is not None else get_settings().notification_send_timeout_seconds

    async def notify(self, recipients: list[Recipient], request: NotificationRequest) -> DispatchResult:
        """Send ``request`` to every recipient; never raises for delivery problems.

        Returns exactly one RecipientResult per input recipient, in input order.
        """
        recipients = list(recipients)
        mobile_outcomes: list[ChannelOutcome | None] = [None] * len(recipients)
        web_outcomes: list[ChannelOutcome | None] = [None] * len(recipients)
        mobile_targets: list[tuple[int, str]] = []
        web_targets: list[tuple[int, str]] = []

        for index, recipient in enumerate(recipients):
            if not recipient.mobile_token:
                mobile_outcomes[index] = ChannelOutcome.skipped()
            elif not self.mobile.is_valid_token(recipient.mobile_token):
                logger.warning(
                    "Malformed mobile push token, not sending",
                    recipient_kind=recipient.kind.value,
                    recipient_id=recipient.recipient_id,
                )
                mobile_outcomes[index] = ChannelOutcome.failed(INVALID_TOKEN_FORMAT)
            else:
                mobile_targets.append((index, recipient.mobile_token))

            if not recipient.web_token:
                web_outcomes[index] = ChannelOutcome.skipped()
            else:
                web_targets.append((index, recipient.web_token))

        units = [self._send_mobile_unit(chunk, request) for chunk in _chunks(mobile_targets, self.mobile.max_batch_size)]
        units += [self._send_web_unit(chunk, request) for chunk in _chunks(web_targets, self.web.max_batch_size)]

        for channel, unit_outcomes in await asyncio.gather(*units):
            target = mobile_outcomes if channel == PushChannel.MOBILE else web_outcomes
            for index, outcome in unit_outcomes:
                target[index] = outcome

        result = DispatchResult()
        for index, recipient in enumerate(recipients):
            mobile = mobile_outcomes[index] or ChannelOutcome.failed(MISSING_RECEIPT)
            web = web_outcomes[index] or ChannelOutcome.failed(MISSING_RECEIPT)
            result.per_recipient.append(RecipientResult(recipient=recipient, mobile=mobile, web=web))
            self._collect_invalid(result, recipient, PushChannel.MOBILE, mobile)
            self._collect_invalid(result, recipient, PushChannel.WEB, web)

        logger.info(
            "Notification dispatched",
            title=request.title,
            recipients=len(recipients),
            delivered=result.delivered_count,
            failed=result.failed_count,
            invalid_tokens=len(result.invalid_tokens),
        )

        if result.invalid_tokens:
            await self._invalidate(result.invalid_tokens)

        return result

    # -------------------------------------------------------------------
    # Units of work
    # -------------------------------------------------------------------
    async def _send_mobile_unit(self, chunk: list[tuple[int, str]], request: NotificationRequest):
        messages = [build_mobile_message(token, request.title, request.body, request.data) for _, token in chunk]

        try:
            response = await asyncio.wait_for(self.mobile.send_batch(messages), timeout=self.timeout)
            receipts = list(response or [])
        except TimeoutError:
            logger.warning("Mobile push batch timed out", batch_size=len(chunk), timeout=self.timeout)
            return PushChannel.MOBILE, [(index, ChannelOutcome.failed(TIMEOUT)) for index, _ in chunk]
        except Exception as exc:
            logger.error("Mobile push batch failed", batch_size=len(chunk), error=str(exc))
            return PushChannel.MOBILE, [(index, ChannelOutcome.failed(str(exc))) for index, _ in chunk]

        if len(receipts) < len(chunk):
            logger.warning("Mobile push batch returned fewer receipts", expected=len(chunk), received=len(receipts))

        outcomes = []
        for position, (index, _) in enumerate(chunk):
            receipt = receipts[position] if position < len(receipts) else None
            outcomes.append((index, _outcome_from_receipt(receipt)))
        return PushChannel.MOBILE, outcomes

    async def _send_web_unit(self, chunk: list[tuple[int, str]], request: NotificationRequest):
        tokens = [token for _, token in chunk]

        try:
            if len(tokens) == 1:
                response = await asyncio.wait_for(
                    self.web.send(tokens[0], request.title, request.body, request.data, request.web_options),
                    timeout=self.timeout,
                )
                receipts = [response]
            else:
                response = await asyncio.wait_for(
                    self.web.send_batch(tokens, request.title, request.body, request.data, request.web_options),
                    timeout=self.timeout,
                )
                receipts = list(response.get("responses") or []) if isinstance(response, dict) else []
        except TimeoutError:
            logger.warning("Web push unit timed out", batch_size=len(chunk), timeout=self.timeout)
            return PushChannel.WEB, [(index, ChannelOutcome.failed(TIMEOUT)) for index, _ in chunk]
        except Exception as exc:
            logger.error("Web push unit failed", batch_size=len(chunk), error=str(exc))
            return PushChannel.WEB, [(index, ChannelOutcome.failed(str(exc))) for index, _ in chunk]

        outcomes = []
        for position, (index, _) in enumerate(chunk):
            receipt = receipts[position] if position < len(receipts) else None
            outcomes.append((index, _outcome_from_receipt(receipt)))
        return PushChannel.WEB, outcomes

    # -------------------------------------------------------------------
    # Token invalidation
    # -------------------------------------------------------------------
    def _collect_invalid(self, result: DispatchResult, recipient: Recipient, channel: PushChannel, outcome):
        if outcome.status != OutcomeStatus.FAILED or not outcome.error_code:
            return
        port = self.mobile if channel == PushChannel.MOBILE else self.web
        if outcome.error_code in port.permanent_error_codes:
            result.invalid_tokens.append(
                InvalidToken(
                    recipient=recipient,
                    channel=channel,
                    token=recipient.token_for(channel),
                    error_code=outcome.error_code,
                )
            )

    async def _invalidate(self, invalid_tokens: list[InvalidToken]):
        if self.directory is None:
            logger.debug("No recipient directory configured, skipping token invalidation", count=len(invalid_tokens))
            return

        await asyncio.gather(*(self._clear(invalid) for invalid in invalid_tokens))

    async def _clear(self, invalid: InvalidToken):
        try:
            cleared = await self.directory.clear_token(
                invalid.recipient.kind,
                invalid.recipient.recipient_id,
                invalid.channel,
                token=invalid.token,
            )
        except Exception as exc:
            logger.error(
                "Failed to clear invalid push token",
                recipient_kind=invalid.recipient.kind.value,
                recipient_id=invalid.recipient.recipient_id,
                channel=invalid.channel.value,
                error=str(exc),
            )
            return

        logger.info(
            "Invalid push token cleared" if cleared else "Invalid push token already replaced",
            recipient_kind=invalid.recipient.kind.value,
            recipient_id=invalid.recipient.recipient_id,
            channel=invalid.channel.value,
            error_code=invalid.error_code,
        )
