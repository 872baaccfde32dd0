"""Email strategy."""

from __future__ import annotations

import re

from ..channels import NotificationChannel
from ..config import DEFAULT_SENDER_EMAIL, DEFAULT_SENDER_NAME
from ..exceptions import RecipientValidationError
from ..models import NotificationRequest, NotificationResult
from ..ports.providers import IEmailClient
from ..rendering import EmailBodyRenderer
from .base import ChannelStrategy

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class EmailStrategy(ChannelStrategy):
    """Sends the notification as an HTML email with a plain-text alternative."""

    channel = NotificationChannel.EMAIL

    def __init__(
        self,
        client: IEmailClient,
        sender_email: str = DEFAULT_SENDER_EMAIL,
        sender_name: str = DEFAULT_SENDER_NAME,
        renderer: EmailBodyRenderer | None = None,
    ):
        self.client = client
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.renderer = renderer or EmailBodyRenderer()

    def normalize_recipient(self, recipient: str) -> str:
        address = (recipient or "").strip()
        if not _EMAIL.match(address):
            raise RecipientValidationError(f"Recipient {recipient!r} is not a valid email address")
        return address

    async def _deliver(self, recipient: str, request: NotificationRequest) -> NotificationResult:
        body_html = self.renderer.render(request.subject, request.body)
        receipt = await self.client.send_email(
            to=recipient,
            from_=self.sender_email,
            subject=request.subject,
            body_text=request.body,
            body_html=body_html,
            from_name=self.sender_name,
        )
        return NotificationResult.successful(self.channel, receipt.message_id)
