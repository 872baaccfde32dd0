"""Console strategy for development debugging."""

from __future__ import annotations

import logging

from ..channels import NotificationChannel
from ..models import NotificationRequest, NotificationResult
from ..ports.strategy import INotificationStrategy

logger = logging.getLogger(__name__)


class ConsoleStrategy(INotificationStrategy):
    """
    Development adapter that prints notifications to the console.
    """

    def __init__(self, channel: NotificationChannel, output_to_stdout: bool = True):
        if not channel.is_concrete:
            raise ValueError("ConsoleStrategy needs a concrete channel")
        self.channel = channel
        self.output_to_stdout = output_to_stdout

    async def send(self, request: NotificationRequest) -> NotificationResult:
        output = [
            "═" * 50,
            f"NOTIFICATION SENT VIA {self.channel.value.upper()}",
            f"To:      {request.recipient}",
            f"Subject: {request.subject}",
            f"Body:    {request.body}",
        ]

        if request.metadata:
            pairs = ", ".join(f"{k}={v}" for k, v in sorted(request.metadata.items()))
            output.append(f"Data:    {pairs}")

        output.append("═" * 50)

        full_output = "\n".join(output)
        logger.info(full_output)

        if self.output_to_stdout:
            print(full_output)

        return NotificationResult.successful(self.channel, "console-debug")
