"""Application entry point: validate a send command, then dispatch it."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from .correlation import correlation_scope
from .models import NotificationResult
from .orchestrator import NotificationOrchestrator
from .validation import SendNotificationCommand, validate_command

logger = logging.getLogger(__name__)


class SendNotificationHandler:
    """
    Handles :class:`SendNotificationCommand` by delegating to the orchestrator.

    Invalid input raises :class:`InvalidNotificationError` and nothing is sent.
    """

    def __init__(self, orchestrator: NotificationOrchestrator):
        self.orchestrator = orchestrator

    async def handle(
        self,
        data: Mapping[str, Any] | SendNotificationCommand,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> frozenset[NotificationResult]:
        command = validate_command(data)
        with correlation_scope(command.correlation_id):
            logger.debug(
                f"Handling SendNotificationCommand {command.command_id} "
                f"for {len(command.channels)} channel(s)"
            )
            return await self.orchestrator.send(command.to_request(), cancel_event=cancel_event)
