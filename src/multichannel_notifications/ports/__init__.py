"""Port definitions for notification dispatch."""

from __future__ import annotations

from multichannel_notifications.ports.providers import (
    EmailReceipt,
    IEmailClient,
    IMessagingClient,
    IPushClient,
    MessageReceipt,
)
from multichannel_notifications.ports.strategy import INotificationStrategy

__all__ = [
    "EmailReceipt",
    "IEmailClient",
    "IMessagingClient",
    "INotificationStrategy",
    "IPushClient",
    "MessageReceipt",
]
