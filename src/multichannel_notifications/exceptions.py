"""Exception hierarchy for notification dispatch."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .channels import NotificationChannel


class NotificationError(Exception):
    """Root exception for the notification toolkit."""


class InvalidNotificationError(NotificationError):
    """Raised when a request is malformed and must not be dispatched.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))


class UnknownChannelError(NotificationError):
    """Raised when no strategy is registered for a channel."""

    def __init__(self, channel: NotificationChannel | str) -> None:
        self.channel = channel
        label = getattr(channel, "value", channel)
        super().__init__(f"Unknown notification channel: {label}")


class StrategyRegistrationError(NotificationError):
    """Raised when a strategy registration conflicts with an existing one."""


class ProviderError(NotificationError):
    """Raised by provider clients when a send is rejected or fails in transit.

    The message is meant to be human readable: it becomes the
    ``error_message`` of the failed result.
    """

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        code: str | int | None = None,
        status: int | None = None,
    ) -> None:
        self.provider = provider
        self.code = code
        self.status = status
        super().__init__(message)


class RecipientValidationError(NotificationError):
    """Raised when a recipient is not valid for a channel's medium."""


class ConfigurationError(NotificationError):
    """Raised when notification settings are missing or malformed."""
