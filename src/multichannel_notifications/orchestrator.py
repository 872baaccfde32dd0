"""Notification orchestrator: the single entry point for multi-channel sends."""

from __future__ import annotations

import asyncio
import json
import logging
import time

from .channels import NotificationChannel, ordered
from .correlation import correlation_scope
from .dispatch import fan_out
from .exceptions import InvalidNotificationError
from .models import NotificationRequest, NotificationResult, ordered_results
from .registry import StrategyRegistry
from .sanitization import MetadataSanitizer, default_sanitizer
from .strategies.all import AllChannelsStrategy

logger = logging.getLogger(__name__)


class NotificationOrchestrator:
    """
    Dispatches one logical notification through its requested channels.

    Every concrete channel is sent concurrently and yields exactly one
    result, success or failure. Channel-level errors never escape; only a
    malformed request fails the whole call, with
    :class:`InvalidNotificationError`, before anything is dispatched.

    Cancellation policy: when ``cancel_event`` is set (or ``timeout``
    elapses) the channels still in flight are cancelled and reported as
    failed results carrying ``CANCELLED_MESSAGE``; channels that already
    finished keep their real outcome.
    """

    def __init__(
        self,
        registry: StrategyRegistry,
        *,
        dispatch_timeout: float | None = None,
        sanitizer: MetadataSanitizer | None = None,
    ) -> None:
        self._registry = registry
        self._all_channels = AllChannelsStrategy(registry)
        self._dispatch_timeout = dispatch_timeout
        self._sanitizer = sanitizer or default_sanitizer

    @property
    def registry(self) -> StrategyRegistry:
        return self._registry

    async def send(
        self,
        request: NotificationRequest,
        *,
        cancel_event: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> frozenset[NotificationResult]:
        """Send ``request`` and return one result per effective concrete channel."""
        self._ensure_dispatchable(request)
        effective_timeout = timeout if timeout is not None else self._dispatch_timeout

        with correlation_scope() as correlation_id:
            channel_names = [channel.value for channel in ordered(request.channels)]
            logger.debug(
                f"Dispatching notification to {request.recipient} via {channel_names} "
                f"(metadata={self._sanitizer.sanitize(request.metadata)})"
            )
            start = time.monotonic()
            if NotificationChannel.ALL in request.channels:
                # ALL already covers any concrete channel requested alongside it.
                results = await self._all_channels.send(
                    request, cancel_event=cancel_event, timeout=effective_timeout
                )
            else:
                results = await fan_out(
                    request,
                    request.channels,
                    self._registry.resolve,
                    cancel_event=cancel_event,
                    timeout=effective_timeout,
                )
            self._log_summary(results, time.monotonic() - start, correlation_id)
        return results

    def _ensure_dispatchable(self, request: NotificationRequest) -> None:
        errors: dict[str, list[str]] = {}
        unknown = sorted(
            repr(value)
            for value in request.channels
            if not isinstance(value, NotificationChannel)
        )
        if not request.channels:
            errors["channels"] = ["At least one notification channel must be specified"]
        elif unknown:
            errors["channels"] = [f"Unknown notification channel: {value}" for value in unknown]
        for field_name in ("recipient", "subject", "body"):
            value = getattr(request, field_name)
            if not isinstance(value, str) or not value.strip():
                errors[field_name] = [f"{field_name.capitalize()} is required"]
        if errors:
            logger.warning(f"Rejected notification request before dispatch: {errors}")
            raise InvalidNotificationError(errors)

    def _log_summary(
        self,
        results: frozenset[NotificationResult],
        elapsed: float,
        correlation_id: str,
    ) -> None:
        entry = {
            "channels": [result.channel.value for result in ordered_results(results)],
            "succeeded": sum(1 for result in results if result.success),
            "failed": sum(1 for result in results if not result.success),
            "cancelled": sum(1 for result in results if result.is_cancelled),
            "duration_ms": round(elapsed * 1000, 2),
            "correlation_id": correlation_id,
        }
        logger.info(json.dumps(entry))
