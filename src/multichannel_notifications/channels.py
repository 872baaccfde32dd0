"""Delivery channel enum and channel-set expansion."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum


class NotificationChannel(Enum):
    """Supported notification channels.

    ``ALL`` is a meta-channel meaning "every concrete channel". It is only
    valid in requests; results are always reported under a concrete channel.
    """

    ALL = "all"
    SMS = "sms"
    WHATSAPP = "whatsapp"
    EMAIL = "email"
    PUSH = "push"

    @property
    def is_concrete(self) -> bool:
        return self is not NotificationChannel.ALL

    @classmethod
    def parse(cls, value: str | NotificationChannel) -> NotificationChannel:
        """Resolve a member from its value or name, case-insensitively."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if normalized in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Unknown notification channel: {value!r}")


CONCRETE_CHANNELS: tuple[NotificationChannel, ...] = (
    NotificationChannel.SMS,
    NotificationChannel.WHATSAPP,
    NotificationChannel.EMAIL,
    NotificationChannel.PUSH,
)


def expand_channels(channels: Iterable[NotificationChannel]) -> frozenset[NotificationChannel]:
    """Return the effective concrete channel set for a request.

    ``ALL`` expands to every concrete channel; duplicates collapse.
    """
    requested = frozenset(channels)
    if NotificationChannel.ALL in requested:
        return frozenset(CONCRETE_CHANNELS)
    return requested


def ordered(channels: Iterable[NotificationChannel]) -> list[NotificationChannel]:
    """Sort channels in declaration order (stable dispatch and log output)."""
    order = {channel: index for index, channel in enumerate(NotificationChannel)}
    return sorted(channels, key=order.__getitem__)
