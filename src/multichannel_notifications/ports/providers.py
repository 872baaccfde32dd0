"""Provider client ports: the wire clients strategies delegate to."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class MessageReceipt:
    """Provider acknowledgement for an SMS/WhatsApp message."""

    sid: str
    status: str | None = None


@dataclass(frozen=True)
class EmailReceipt:
    """Provider acknowledgement for an email."""

    message_id: str | None = None


@runtime_checkable
class IMessagingClient(Protocol):
    """SMS/WhatsApp provider client. Raises ``ProviderError`` on failure."""

    async def send_message(
        self,
        to: str,
        from_: str,
        body: str | None = None,
        template_id: str | None = None,
        template_variables: Mapping[str, str] | None = None,
    ) -> MessageReceipt:
        """Send a free-text or templated message."""
        ...


@runtime_checkable
class IEmailClient(Protocol):
    """Email provider client. Raises ``ProviderError`` on failure."""

    async def send_email(
        self,
        to: str,
        from_: str,
        subject: str,
        body_text: str,
        body_html: str | None = None,
        from_name: str | None = None,
    ) -> EmailReceipt:
        """Send an email and return its delivery receipt."""
        ...


@runtime_checkable
class IPushClient(Protocol):
    """Mobile push provider client. Raises ``ProviderError`` on failure."""

    async def send_push(
        self,
        device_token: str,
        title: str,
        body: str,
        data: Mapping[str, str] | None = None,
    ) -> str:
        """Send a push notification and return the provider message name."""
        ...
