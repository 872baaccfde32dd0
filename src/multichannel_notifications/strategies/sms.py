"""SMS strategy."""

from __future__ import annotations

from ..channels import NotificationChannel
from ..models import NotificationRequest, NotificationResult
from ..ports.providers import IMessagingClient
from .base import ChannelStrategy, normalize_phone_number


class SmsStrategy(ChannelStrategy):
    """Sends the notification as a plain-text SMS.

    The message is ``"{subject}\\n\\n{body}"``, prefixed with
    ``"{sender_name} :\\n"`` when a sender name is configured.
    """

    channel = NotificationChannel.SMS

    def __init__(
        self,
        client: IMessagingClient,
        from_number: str,
        sender_name: str | None = None,
    ):
        self.client = client
        self.from_number = from_number
        self.sender_name = sender_name

    def normalize_recipient(self, recipient: str) -> str:
        return normalize_phone_number(recipient)

    def render_message(self, request: NotificationRequest) -> str:
        message = f"{request.subject}\n\n{request.body}"
        if self.sender_name:
            message = f"{self.sender_name} :\n{message}"
        return message

    async def _deliver(self, recipient: str, request: NotificationRequest) -> NotificationResult:
        receipt = await self.client.send_message(
            to=recipient,
            from_=self.from_number,
            body=self.render_message(request),
        )
        metadata = {"provider_status": receipt.status} if receipt.status else None
        return NotificationResult.successful(self.channel, receipt.sid, metadata=metadata)
