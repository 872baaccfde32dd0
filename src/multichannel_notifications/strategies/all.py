"""Composite strategy that sends through every concrete channel at once."""

from __future__ import annotations

import asyncio
import logging

from ..channels import CONCRETE_CHANNELS, NotificationChannel
from ..dispatch import fan_out
from ..models import NotificationRequest, NotificationResult
from ..registry import StrategyRegistry

logger = logging.getLogger(__name__)


class AllChannelsStrategy:
    """
    Fans a request out to every concrete channel and returns their union.

    It is never registered in the registry (it would resolve itself); the
    orchestrator invokes it directly when ``ALL`` is requested. Concrete
    strategies are looked up through the registry inside each channel's
    error boundary, so a missing channel is reported as a failed result for
    that channel only.
    """

    channel = NotificationChannel.ALL

    def __init__(self, registry: StrategyRegistry) -> None:
        self._registry = registry

    async def send(
        self,
        request: NotificationRequest,
        *,
        cancel_event: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> frozenset[NotificationResult]:
        results = await fan_out(
            request,
            CONCRETE_CHANNELS,
            self._registry.resolve,
            cancel_event=cancel_event,
            timeout=timeout,
        )
        succeeded = sum(1 for result in results if result.success)
        logger.info(
            f"All channels notification completed: {succeeded} succeeded, "
            f"{len(results) - succeeded} failed"
        )
        return results
