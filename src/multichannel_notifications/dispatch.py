"""Concurrent fan-out shared by the orchestrator and the all-channels strategy.

Each concrete channel runs as its own asyncio task behind an error boundary
that turns any failure into a failed result, so one channel can never abort
or corrupt a sibling. The join waits for every task, or until the
cancellation signal fires, in which case unfinished channels are cancelled
and reported as cancelled failures.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Callable, Iterable

from .channels import NotificationChannel, ordered
from .exceptions import UnknownChannelError
from .models import NotificationRequest, NotificationResult
from .ports.strategy import INotificationStrategy

logger = logging.getLogger(__name__)

StrategyResolver = Callable[[NotificationChannel], INotificationStrategy]


async def fan_out(
    request: NotificationRequest,
    channels: Iterable[NotificationChannel],
    resolve: StrategyResolver,
    *,
    cancel_event: asyncio.Event | None = None,
    timeout: float | None = None,
) -> frozenset[NotificationResult]:
    """Send ``request`` through every channel concurrently and collect one result each.

    ``channels`` must already be concrete; duplicates collapse. Never raises
    for channel-level failures. If the calling task is itself cancelled, the
    children are cancelled and awaited before ``CancelledError`` propagates.
    """
    effective = ordered(frozenset(channels))
    if not effective:
        return frozenset()

    tasks = {
        channel: asyncio.create_task(
            _send_isolated(channel, resolve, request),
            name=f"notify-{channel.value}",
        )
        for channel in effective
    }
    await _join(set(tasks.values()), cancel_event, timeout)

    results: dict[NotificationChannel, NotificationResult] = {}
    for channel, task in tasks.items():
        if task.cancelled():
            logger.warning(f"Notification via {channel.value} cancelled before completion")
            results[channel] = NotificationResult.cancelled(channel)
        else:
            results[channel] = task.result()
    return frozenset(results.values())


async def _join(
    pending: set[asyncio.Task[NotificationResult]],
    cancel_event: asyncio.Event | None,
    timeout: float | None,
) -> None:
    loop = asyncio.get_running_loop()
    deadline = None if timeout is None else loop.time() + timeout
    cancel_waiter = (
        asyncio.create_task(cancel_event.wait(), name="notify-cancel-watch")
        if cancel_event is not None
        else None
    )
    try:
        while pending:
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f"Cancellation requested with {len(pending)} channel(s) in flight")
                break
            remaining = None if deadline is None else deadline - loop.time()
            if remaining is not None and remaining <= 0:
                logger.warning(f"Dispatch timeout reached with {len(pending)} channel(s) in flight")
                break
            waiting: set[asyncio.Future[object]] = set(pending)
            if cancel_waiter is not None:
                waiting.add(cancel_waiter)
            done, _ = await asyncio.wait(
                waiting, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
            )
            pending.difference_update(done)
    finally:
        leftovers: set[asyncio.Future[object]] = set(pending)
        if cancel_waiter is not None:
            leftovers.add(cancel_waiter)
        for task in leftovers:
            task.cancel()
        if leftovers:
            await asyncio.gather(*leftovers, return_exceptions=True)


async def _send_isolated(
    channel: NotificationChannel,
    resolve: StrategyResolver,
    request: NotificationRequest,
) -> NotificationResult:
    try:
        strategy = resolve(channel)
        result = await strategy.send(request)
    except UnknownChannelError as e:
        logger.warning(f"No strategy registered for {channel.value}: {e}")
        return NotificationResult.failed(channel, str(e))
    except Exception as e:
        logger.exception(
            f"Error sending notification via {channel.value} to {request.recipient}"
        )
        return NotificationResult.failed(channel, str(e) or type(e).__name__)

    if not isinstance(result, NotificationResult):
        return NotificationResult.failed(
            channel, f"{type(strategy).__name__} returned no notification result"
        )
    if result.channel is not channel:
        logger.warning(
            f"{type(strategy).__name__} reported {result.channel.value} for {channel.value}"
        )
        result = dataclasses.replace(result, channel=channel)

    if result.success:
        logger.info(f"Successfully sent notification via {channel.value} to {request.recipient}")
    else:
        logger.warning(
            f"Failed to send notification via {channel.value} to {request.recipient}: "
            f"{result.error_message}"
        )
    return result
