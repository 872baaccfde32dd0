"""Shared send flow for concrete channel strategies."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod

from ..channels import NotificationChannel
from ..exceptions import ProviderError, RecipientValidationError
from ..models import NotificationRequest, NotificationResult
from ..ports.strategy import INotificationStrategy

logger = logging.getLogger(__name__)

_E164 = re.compile(r"^\+[1-9]\d{6,14}$")
_PHONE_SEPARATORS = re.compile(r"[\s\-().]")


def normalize_phone_number(recipient: str) -> str:
    """Strip separators and validate an E.164 phone number."""
    normalized = _PHONE_SEPARATORS.sub("", recipient or "")
    if not _E164.match(normalized):
        raise RecipientValidationError(
            f"Recipient {recipient!r} is not a valid E.164 phone number"
        )
    return normalized


class ChannelStrategy(INotificationStrategy, ABC):
    """
    Template for concrete strategies: validate the recipient, deliver, and
    turn every outcome into a result for ``channel``.

    Subclasses implement :meth:`normalize_recipient` and :meth:`_deliver`;
    ``_deliver`` returns the successful result or raises. No exception other
    than cancellation leaves :meth:`send`.
    """

    channel: NotificationChannel

    async def send(self, request: NotificationRequest) -> NotificationResult:
        try:
            recipient = self.normalize_recipient(request.recipient)
        except RecipientValidationError as e:
            return NotificationResult.failed(self.channel, str(e))

        try:
            return await self._deliver(recipient, request)
        except ProviderError as e:
            logger.error(f"{e.provider} rejected {self.channel.value} notification: {e}")
            metadata = {"provider": e.provider}
            if e.code is not None:
                metadata["provider_code"] = str(e.code)
            return NotificationResult.failed(self.channel, str(e), metadata=metadata)
        except Exception as e:
            logger.exception(
                f"Error sending {self.channel.value} notification to {request.recipient}"
            )
            return NotificationResult.failed(self.channel, str(e) or type(e).__name__)

    @abstractmethod
    def normalize_recipient(self, recipient: str) -> str:
        """Return the recipient in the medium's canonical form, or raise."""

    @abstractmethod
    async def _deliver(self, recipient: str, request: NotificationRequest) -> NotificationResult:
        """Call the provider and return the successful result."""
