"""Provider settings and their environment loader."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

from .exceptions import ConfigurationError

ENV_PREFIX = "NOTIFY_"

DEFAULT_SENDER_EMAIL = "noreply@example.com"
DEFAULT_SENDER_NAME = "Notification Service"
DEFAULT_PROVIDER_TIMEOUT = 10.0

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True)
class TwilioSettings:
    """
    Twilio credentials shared by the SMS and WhatsApp channels.

    Attributes:
        account_sid: Twilio account SID.
        auth_token: Twilio auth token.
        phone_number: E.164 sender for SMS. SMS stays unconfigured without it.
        whatsapp_sender: E.164 sender for WhatsApp. WhatsApp stays
            unconfigured without it.
        sender_name: Optional prefix line for SMS bodies.
        timeout: HTTP timeout in seconds.
    """

    account_sid: str
    auth_token: str
    phone_number: str | None = None
    whatsapp_sender: str | None = None
    sender_name: str | None = None
    timeout: float = DEFAULT_PROVIDER_TIMEOUT


@dataclass(frozen=True)
class EmailSettings:
    """
    Email backend settings.

    ``backend="smtp"`` requires ``host``; ``backend="ses"`` uses
    ``region_name`` and the ambient AWS credential chain.
    """

    backend: Literal["smtp", "ses"] = "smtp"
    host: str | None = None
    port: int = 587
    username: str | None = None
    password: str | None = None
    use_tls: bool = True
    region_name: str = "us-east-1"
    sender_email: str = DEFAULT_SENDER_EMAIL
    sender_name: str = DEFAULT_SENDER_NAME
    timeout: float = DEFAULT_PROVIDER_TIMEOUT

    def __post_init__(self) -> None:
        if self.backend not in ("smtp", "ses"):
            raise ConfigurationError(f"Unsupported email backend: {self.backend!r}")
        if self.backend == "smtp" and not self.host:
            raise ConfigurationError("SMTP email backend requires a host")


@dataclass(frozen=True)
class PushSettings:
    """Firebase Cloud Messaging settings."""

    project_id: str
    access_token: str | None = None
    timeout: float = DEFAULT_PROVIDER_TIMEOUT


@dataclass(frozen=True)
class NotificationSettings:
    """
    Top-level settings. A ``None`` section leaves its channels unconfigured.

    Attributes:
        twilio: SMS/WhatsApp provider settings.
        email: Email provider settings.
        push: Push provider settings.
        dispatch_timeout: Upper bound in seconds for one orchestrator send.
        console_fallback: Register console strategies for unconfigured
            channels instead of leaving them unregistered.
    """

    twilio: TwilioSettings | None = None
    email: EmailSettings | None = None
    push: PushSettings | None = None
    dispatch_timeout: float | None = None
    console_fallback: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> NotificationSettings:
        """Build settings from ``NOTIFY_*`` variables (``os.environ`` by default)."""
        env = _Env(os.environ if environ is None else environ)
        return cls(
            twilio=_twilio_from_env(env),
            email=_email_from_env(env),
            push=_push_from_env(env),
            dispatch_timeout=env.get_float("DISPATCH_TIMEOUT"),
            console_fallback=env.get_bool("CONSOLE_FALLBACK", default=False),
        )


class _Env:
    """Typed, prefixed view over an environment mapping."""

    def __init__(self, environ: Mapping[str, str]) -> None:
        self._environ = environ

    def get_str(self, key: str, default: str | None = None) -> str | None:
        value = self._environ.get(ENV_PREFIX + key)
        if value is None or not value.strip():
            return default
        return value.strip()

    def get_float(self, key: str, default: float | None = None) -> float | None:
        raw = self.get_str(key)
        if raw is None:
            return default
        try:
            value = float(raw)
        except ValueError:
            msg = f"{ENV_PREFIX}{key} must be a number, got {raw!r}"
            raise ConfigurationError(msg) from None
        if value <= 0:
            raise ConfigurationError(f"{ENV_PREFIX}{key} must be positive, got {raw!r}")
        return value

    def get_int(self, key: str, default: int) -> int:
        raw = self.get_str(key)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            msg = f"{ENV_PREFIX}{key} must be an integer, got {raw!r}"
            raise ConfigurationError(msg) from None

    def get_bool(self, key: str, default: bool) -> bool:
        raw = self._environ.get(ENV_PREFIX + key)
        if raw is None:
            return default
        normalized = raw.strip().lower()
        if normalized in _TRUE:
            return True
        if normalized in _FALSE:
            return False
        raise ConfigurationError(f"{ENV_PREFIX}{key} must be a boolean, got {raw!r}")

    def get_text(self, key: str, default: str) -> str:
        return self.get_str(key) or default

    def get_timeout(self, key: str) -> float:
        return self.get_float(key) or DEFAULT_PROVIDER_TIMEOUT


def _twilio_from_env(env: _Env) -> TwilioSettings | None:
    account_sid = env.get_str("TWILIO_ACCOUNT_SID")
    auth_token = env.get_str("TWILIO_AUTH_TOKEN")
    if not (account_sid and auth_token):
        return None
    return TwilioSettings(
        account_sid=account_sid,
        auth_token=auth_token,
        phone_number=env.get_str("TWILIO_PHONE_NUMBER"),
        whatsapp_sender=env.get_str("TWILIO_WHATSAPP_SENDER"),
        sender_name=env.get_str("TWILIO_SENDER_NAME"),
        timeout=env.get_timeout("TWILIO_TIMEOUT"),
    )


def _email_from_env(env: _Env) -> EmailSettings | None:
    backend = env.get_text("EMAIL_BACKEND", "").lower()
    host = env.get_str("EMAIL_HOST")
    if not backend:
        if not host:
            return None
        backend = "smtp"
    if backend not in ("smtp", "ses"):
        msg = f"{ENV_PREFIX}EMAIL_BACKEND must be 'smtp' or 'ses', got {backend!r}"
        raise ConfigurationError(msg)
    return EmailSettings(
        backend=backend,  # type: ignore[arg-type]
        host=host,
        port=env.get_int("EMAIL_PORT", 587),
        username=env.get_str("EMAIL_USERNAME"),
        password=env.get_str("EMAIL_PASSWORD"),
        use_tls=env.get_bool("EMAIL_USE_TLS", default=True),
        region_name=env.get_text("EMAIL_REGION", "us-east-1"),
        sender_email=env.get_text("EMAIL_SENDER", DEFAULT_SENDER_EMAIL),
        sender_name=env.get_text("EMAIL_SENDER_NAME", DEFAULT_SENDER_NAME),
        timeout=env.get_timeout("EMAIL_TIMEOUT"),
    )


def _push_from_env(env: _Env) -> PushSettings | None:
    project_id = env.get_str("PUSH_PROJECT_ID")
    if not project_id:
        return None
    return PushSettings(
        project_id=project_id,
        access_token=env.get_str("PUSH_ACCESS_TOKEN"),
        timeout=env.get_timeout("PUSH_TIMEOUT"),
    )
