"""Strategy registry: maps each concrete channel to its strategy."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .channels import NotificationChannel, ordered
from .exceptions import StrategyRegistrationError, UnknownChannelError
from .ports.strategy import INotificationStrategy

logger = logging.getLogger(__name__)


class StrategyRegistry:
    """Process-wide channel -> strategy lookup, built once at startup.

    **Fail closed:** resolving a channel with no registered strategy raises
    :class:`UnknownChannelError`. ``ALL`` is never registrable and never
    resolvable; callers expand it to the concrete channels first.

    **Conflict detection:** registering a second, different strategy for a
    channel raises :class:`StrategyRegistrationError`. Re-registering the
    same instance is a no-op.
    """

    def __init__(self, strategies: Iterable[INotificationStrategy] = ()) -> None:
        self._strategies: dict[NotificationChannel, INotificationStrategy] = {}
        for strategy in strategies:
            self.register(strategy)

    def register(self, strategy: INotificationStrategy) -> None:
        channel = strategy.channel
        if not channel.is_concrete:
            raise StrategyRegistrationError(
                f"Cannot register {type(strategy).__name__} under the ALL meta-channel"
            )
        existing = self._strategies.get(channel)
        if existing is not None and existing is not strategy:
            msg = (
                f"Duplicate strategy for {channel.value}: "
                f"{type(existing).__name__} already registered, "
                f"cannot register {type(strategy).__name__}"
            )
            raise StrategyRegistrationError(msg)
        self._strategies[channel] = strategy
        logger.debug(f"Registered strategy {channel.value} -> {type(strategy).__name__}")

    def resolve(self, channel: NotificationChannel) -> INotificationStrategy:
        strategy = self._strategies.get(channel) if channel.is_concrete else None
        if strategy is None:
            raise UnknownChannelError(channel)
        return strategy

    @property
    def channels(self) -> list[NotificationChannel]:
        """Registered channels, in declaration order."""
        return ordered(self._strategies)

    def __contains__(self, channel: object) -> bool:
        return channel in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)
