"""Multi-channel notification dispatch (SMS, WhatsApp, email, push)."""

from __future__ import annotations

from .bootstrap import build_orchestrator, build_registry
from .channels import CONCRETE_CHANNELS, NotificationChannel, expand_channels
from .config import EmailSettings, NotificationSettings, PushSettings, TwilioSettings
from .correlation import correlation_scope, get_correlation_id, set_correlation_id
from .exceptions import (
    ConfigurationError,
    InvalidNotificationError,
    NotificationError,
    ProviderError,
    RecipientValidationError,
    StrategyRegistrationError,
    UnknownChannelError,
)
from .handler import SendNotificationHandler
from .memory import ConsoleStrategy, InMemoryStrategy
from .models import (
    CANCELLED_MESSAGE,
    NotificationRequest,
    NotificationResult,
    ordered_results,
    results_by_channel,
)
from .orchestrator import NotificationOrchestrator
from .ports import INotificationStrategy
from .registry import StrategyRegistry
from .sanitization import MetadataSanitizer, default_sanitizer
from .strategies import (
    AllChannelsStrategy,
    ChannelStrategy,
    EmailStrategy,
    PushStrategy,
    SmsStrategy,
    WhatsAppStrategy,
)
from .validation import SendNotificationCommand, validate_command

__all__ = [
    "CANCELLED_MESSAGE",
    "CONCRETE_CHANNELS",
    "AllChannelsStrategy",
    "ChannelStrategy",
    "ConfigurationError",
    "ConsoleStrategy",
    "EmailSettings",
    "EmailStrategy",
    "INotificationStrategy",
    "InMemoryStrategy",
    "InvalidNotificationError",
    "MetadataSanitizer",
    "NotificationChannel",
    "NotificationError",
    "NotificationOrchestrator",
    "NotificationRequest",
    "NotificationResult",
    "NotificationSettings",
    "ProviderError",
    "PushSettings",
    "PushStrategy",
    "RecipientValidationError",
    "SendNotificationCommand",
    "SendNotificationHandler",
    "SmsStrategy",
    "StrategyRegistrationError",
    "StrategyRegistry",
    "TwilioSettings",
    "UnknownChannelError",
    "WhatsAppStrategy",
    "build_orchestrator",
    "build_registry",
    "correlation_scope",
    "default_sanitizer",
    "expand_channels",
    "get_correlation_id",
    "ordered_results",
    "results_by_channel",
    "set_correlation_id",
    "validate_command",
]
