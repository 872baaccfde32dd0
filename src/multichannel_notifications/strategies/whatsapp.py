"""WhatsApp strategy (Twilio-style ``whatsapp:`` addressing)."""

from __future__ import annotations

import logging

from ..channels import NotificationChannel
from ..models import NotificationRequest, NotificationResult
from ..ports.providers import IMessagingClient
from .base import ChannelStrategy, normalize_phone_number

logger = logging.getLogger(__name__)

TEMPLATE_ID_KEY = "template_id"


def whatsapp_address(phone_number: str) -> str:
    """Prefix an E.164 number for WhatsApp delivery (idempotent)."""
    if phone_number.startswith("whatsapp:"):
        return phone_number
    return f"whatsapp:{phone_number}"


class WhatsAppStrategy(ChannelStrategy):
    """
    Sends the notification as a WhatsApp message.

    Free text is ``"*{subject}*\\n\\n{body}"`` (bold title). When the request
    metadata carries ``template_id``, an approved template is sent instead and
    the remaining metadata entries become its variables; templates are what
    WhatsApp accepts outside an open conversation window.
    """

    channel = NotificationChannel.WHATSAPP

    def __init__(self, client: IMessagingClient, from_number: str):
        self.client = client
        self.from_number = from_number

    def normalize_recipient(self, recipient: str) -> str:
        if recipient and recipient.startswith("whatsapp:"):
            recipient = recipient[len("whatsapp:"):]
        return whatsapp_address(normalize_phone_number(recipient))

    async def _deliver(self, recipient: str, request: NotificationRequest) -> NotificationResult:
        sender = whatsapp_address(self.from_number.replace(" ", "").strip())
        template_id = request.metadata.get(TEMPLATE_ID_KEY)
        if template_id:
            variables = {k: v for k, v in request.metadata.items() if k != TEMPLATE_ID_KEY}
            logger.debug(f"Sending WhatsApp template {template_id} to {recipient}")
            receipt = await self.client.send_message(
                to=recipient,
                from_=sender,
                template_id=template_id,
                template_variables=variables,
            )
        else:
            receipt = await self.client.send_message(
                to=recipient,
                from_=sender,
                body=f"*{request.subject}*\n\n{request.body}",
            )
        metadata = {"provider_status": receipt.status} if receipt.status else None
        return NotificationResult.successful(self.channel, receipt.sid, metadata=metadata)
