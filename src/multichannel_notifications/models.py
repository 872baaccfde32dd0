"""Notification request/result value objects."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .channels import NotificationChannel, ordered


CANCELLED_MESSAGE = "Notification send cancelled before completion"


def _coerce_channel(value: Any) -> Any:
    # Unknown values are kept so the orchestrator can reject them as invalid input.
    try:
        return NotificationChannel.parse(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class NotificationRequest:
    """Immutable, channel-agnostic notification to dispatch.

    ``recipient`` is interpreted per channel (phone number, email address or
    push token); each strategy validates it for its own medium.
    """

    recipient: str
    subject: str
    body: str
    channels: frozenset[NotificationChannel] = field(default_factory=frozenset)
    metadata: dict[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        channels = frozenset(_coerce_channel(value) for value in self.channels or ())
        object.__setattr__(self, "channels", channels)
        object.__setattr__(self, "metadata", dict(self.metadata or {}))


@dataclass(frozen=True)
class NotificationResult:
    """Immutable outcome of one concrete channel's send attempt."""

    channel: NotificationChannel
    success: bool
    error_message: str | None = None
    external_reference: str | None = None
    metadata: dict[str, str] | None = field(default=None, hash=False)

    def __post_init__(self) -> None:
        if not self.channel.is_concrete:
            raise ValueError("Results must be reported under a concrete channel, not ALL")
        if self.success and self.error_message is not None:
            raise ValueError("A successful result cannot carry an error message")
        if not self.success and not self.error_message:
            raise ValueError("A failed result requires an error message")
        if not self.success and self.external_reference is not None:
            raise ValueError("A failed result cannot carry an external reference")
        if self.metadata is not None:
            object.__setattr__(self, "metadata", dict(self.metadata))

    @classmethod
    def successful(
        cls,
        channel: NotificationChannel,
        external_reference: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> NotificationResult:
        """Create a successful result."""
        return cls(
            channel=channel,
            success=True,
            external_reference=external_reference,
            metadata=dict(metadata) if metadata else None,
        )

    @classmethod
    def failed(
        cls,
        channel: NotificationChannel,
        error_message: str,
        metadata: Mapping[str, str] | None = None,
    ) -> NotificationResult:
        """Create a failed result."""
        return cls(
            channel=channel,
            success=False,
            error_message=error_message or "Unknown error",
            metadata=dict(metadata) if metadata else None,
        )

    @classmethod
    def cancelled(cls, channel: NotificationChannel) -> NotificationResult:
        """Create the failed result reported for a channel cut off by cancellation."""
        return cls.failed(channel, CANCELLED_MESSAGE, metadata={"cancelled": "true"})

    @property
    def is_cancelled(self) -> bool:
        return bool(self.metadata and self.metadata.get("cancelled") == "true")


def results_by_channel(
    results: Iterable[NotificationResult],
) -> dict[NotificationChannel, NotificationResult]:
    """Index a result collection by its concrete channel."""
    return {result.channel: result for result in results}


def ordered_results(results: Iterable[NotificationResult]) -> list[NotificationResult]:
    """Results sorted by channel declaration order."""
    by_channel = results_by_channel(results)
    return [by_channel[channel] for channel in ordered(by_channel)]
