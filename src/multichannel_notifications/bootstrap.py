"""Startup wiring: settings -> strategies -> registry -> orchestrator."""

from __future__ import annotations

import logging

from .channels import CONCRETE_CHANNELS
from .config import EmailSettings, NotificationSettings, PushSettings, TwilioSettings
from .exceptions import ConfigurationError
from .memory.console import ConsoleStrategy
from .orchestrator import NotificationOrchestrator
from .ports.providers import IEmailClient
from .ports.strategy import INotificationStrategy
from .providers.fcm import FcmPushClient, TokenProvider
from .providers.ses import SesEmailClient
from .providers.smtp import SmtpEmailClient
from .providers.twilio import TwilioMessagingClient
from .registry import StrategyRegistry
from .strategies import EmailStrategy, PushStrategy, SmsStrategy, WhatsAppStrategy

logger = logging.getLogger(__name__)


def build_registry(
    settings: NotificationSettings,
    *,
    push_token_provider: TokenProvider | None = None,
) -> StrategyRegistry:
    """
    Register one strategy per configured channel.

    Unconfigured channels stay unregistered and fail closed at send time,
    unless ``settings.console_fallback`` is set, in which case they print to
    the console instead.
    """
    registry = StrategyRegistry()

    if settings.twilio is not None:
        for strategy in _twilio_strategies(settings.twilio):
            registry.register(strategy)
    if settings.email is not None:
        registry.register(_email_strategy(settings.email))
    if settings.push is not None:
        registry.register(_push_strategy(settings.push, push_token_provider))

    missing = [channel for channel in CONCRETE_CHANNELS if channel not in registry]
    if missing and settings.console_fallback:
        for channel in missing:
            registry.register(ConsoleStrategy(channel))
        names = ", ".join(channel.value for channel in missing)
        logger.warning(f"Console fallback enabled for unconfigured channels: {names}")
    elif missing:
        names = ", ".join(channel.value for channel in missing)
        logger.info(f"Channels left unconfigured: {names}")
    return registry


def build_orchestrator(
    settings: NotificationSettings,
    *,
    push_token_provider: TokenProvider | None = None,
) -> NotificationOrchestrator:
    """Build the process-wide orchestrator from ``settings``."""
    registry = build_registry(settings, push_token_provider=push_token_provider)
    return NotificationOrchestrator(registry, dispatch_timeout=settings.dispatch_timeout)


def _twilio_strategies(settings: TwilioSettings) -> list[INotificationStrategy]:
    client = TwilioMessagingClient(
        settings.account_sid, settings.auth_token, timeout=settings.timeout
    )
    strategies: list[INotificationStrategy] = []
    if settings.phone_number:
        strategies.append(SmsStrategy(client, settings.phone_number, settings.sender_name))
    if settings.whatsapp_sender:
        strategies.append(WhatsAppStrategy(client, settings.whatsapp_sender))
    if not strategies:
        logger.warning("Twilio credentials configured without an SMS or WhatsApp sender")
    return strategies


def _email_strategy(settings: EmailSettings) -> EmailStrategy:
    client: IEmailClient
    if settings.backend == "ses":
        client = SesEmailClient(region_name=settings.region_name, timeout=settings.timeout)
    else:
        if not settings.host:
            raise ConfigurationError("SMTP email backend requires a host")
        client = SmtpEmailClient(
            host=settings.host,
            port=settings.port,
            username=settings.username,
            password=settings.password,
            use_tls=settings.use_tls,
            timeout=settings.timeout,
        )
    return EmailStrategy(
        client, sender_email=settings.sender_email, sender_name=settings.sender_name
    )


def _push_strategy(
    settings: PushSettings, token_provider: TokenProvider | None
) -> PushStrategy:
    if settings.access_token is None and token_provider is None:
        raise ConfigurationError(
            "Push is configured without an access token or token provider"
        )
    client = FcmPushClient(
        settings.project_id,
        access_token=settings.access_token,
        token_provider=token_provider,
        timeout=settings.timeout,
    )
    return PushStrategy(client)
