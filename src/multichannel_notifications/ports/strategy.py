"""Channel strategy port."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..channels import NotificationChannel
from ..models import NotificationRequest, NotificationResult


@runtime_checkable
class INotificationStrategy(Protocol):
    """
    Port for delivering a notification through one concrete channel.

    Implementations translate the generic request into a provider call and
    normalise the outcome into a result tagged with ``channel``. They must
    not let provider or validation errors escape ``send``.
    """

    channel: NotificationChannel

    async def send(self, request: NotificationRequest) -> NotificationResult:
        """Send the request and return this channel's result."""
        ...
