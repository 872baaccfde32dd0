"""Mobile push strategy."""

from __future__ import annotations

from ..channels import NotificationChannel
from ..exceptions import RecipientValidationError
from ..models import NotificationRequest, NotificationResult
from ..ports.providers import IPushClient
from .base import ChannelStrategy

MAX_DEVICE_TOKEN_LENGTH = 4096


class PushStrategy(ChannelStrategy):
    """Sends the notification to a single device token.

    Subject and body become the push title and body; request metadata is
    forwarded as the structured data payload.
    """

    channel = NotificationChannel.PUSH

    def __init__(self, client: IPushClient):
        self.client = client

    def normalize_recipient(self, recipient: str) -> str:
        token = (recipient or "").strip()
        if not token:
            raise RecipientValidationError("Push recipient must be a device token")
        if any(ch.isspace() for ch in token):
            raise RecipientValidationError("Push device token must not contain whitespace")
        if len(token) > MAX_DEVICE_TOKEN_LENGTH:
            raise RecipientValidationError(
                f"Push device token exceeds {MAX_DEVICE_TOKEN_LENGTH} characters"
            )
        return token

    async def _deliver(self, recipient: str, request: NotificationRequest) -> NotificationResult:
        message_name = await self.client.send_push(
            device_token=recipient,
            title=request.subject,
            body=request.body,
            data=request.metadata or None,
        )
        return NotificationResult.successful(self.channel, message_name or None)
