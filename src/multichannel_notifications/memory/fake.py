"""In-memory strategy for test assertions."""

from __future__ import annotations

import asyncio
import logging

from ..channels import NotificationChannel
from ..models import NotificationRequest, NotificationResult
from ..ports.strategy import INotificationStrategy

logger = logging.getLogger(__name__)


class InMemoryStrategy(INotificationStrategy):
    """
    Test double (Fake) that records requests and returns a canned outcome.

    ``error`` is raised from ``send`` as-is, which lets tests exercise the
    orchestrator's per-channel error boundary. ``delay`` holds the send open
    so tests can observe concurrency and cancellation.
    """

    def __init__(
        self,
        channel: NotificationChannel,
        *,
        result: NotificationResult | None = None,
        error: BaseException | None = None,
        delay: float = 0.0,
        external_reference: str = "test-id",
    ) -> None:
        self.channel = channel
        self.result = result
        self.error = error
        self.delay = delay
        self.external_reference = external_reference
        self.sent_requests: list[NotificationRequest] = []
        self.started = asyncio.Event()
        self.completed = False

    async def send(self, request: NotificationRequest) -> NotificationResult:
        self.sent_requests.append(request)
        self.started.set()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.completed = True
        if self.result is not None:
            return self.result
        return NotificationResult.successful(self.channel, self.external_reference)

    def assert_sent(self, count: int = 1) -> None:
        """Helper for test assertions."""
        if len(self.sent_requests) != count:
            raise AssertionError(
                f"Expected {count} requests via {self.channel.value}, "
                f"but found {len(self.sent_requests)}."
            )

    def clear(self) -> None:
        """Clear all recorded requests."""
        self.sent_requests.clear()
        self.started.clear()
        self.completed = False
