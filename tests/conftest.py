"""Test configuration for multichannel-notifications."""

from __future__ import annotations

from collections.abc import Mapping
from types import SimpleNamespace

import pytest

from multichannel_notifications.channels import NotificationChannel
from multichannel_notifications.models import NotificationRequest
from multichannel_notifications.ports.providers import (
    EmailReceipt,
    IEmailClient,
    IMessagingClient,
    IPushClient,
    MessageReceipt,
)


class RecordingMessagingClient(IMessagingClient):
    """Messaging client that records calls and returns a fixed receipt."""

    def __init__(self, sid: str = "SM123", status: str | None = "queued", error=None):
        self.sid = sid
        self.status = status
        self.error = error
        self.calls: list[dict] = []

    async def send_message(
        self,
        to: str,
        from_: str,
        body: str | None = None,
        template_id: str | None = None,
        template_variables: Mapping[str, str] | None = None,
    ) -> MessageReceipt:
        self.calls.append(
            {
                "to": to,
                "from_": from_,
                "body": body,
                "template_id": template_id,
                "template_variables": template_variables,
            }
        )
        if self.error is not None:
            raise self.error
        return MessageReceipt(sid=self.sid, status=self.status)


class RecordingEmailClient(IEmailClient):
    def __init__(self, message_id: str | None = "<msg-1@example.com>", error=None):
        self.message_id = message_id
        self.error = error
        self.calls: list[dict] = []

    async def send_email(
        self,
        to: str,
        from_: str,
        subject: str,
        body_text: str,
        body_html: str | None = None,
        from_name: str | None = None,
    ) -> EmailReceipt:
        self.calls.append(
            {
                "to": to,
                "from_": from_,
                "subject": subject,
                "body_text": body_text,
                "body_html": body_html,
                "from_name": from_name,
            }
        )
        if self.error is not None:
            raise self.error
        return EmailReceipt(message_id=self.message_id)


class RecordingPushClient(IPushClient):
    def __init__(self, name: str = "projects/demo/messages/1", error=None):
        self.name = name
        self.error = error
        self.calls: list[dict] = []

    async def send_push(
        self,
        device_token: str,
        title: str,
        body: str,
        data: Mapping[str, str] | None = None,
    ) -> str:
        self.calls.append(
            {"device_token": device_token, "title": title, "body": body, "data": data}
        )
        if self.error is not None:
            raise self.error
        return self.name


@pytest.fixture
def make_request():
    """Factory for notification requests with sensible defaults."""

    def _make(*channels: NotificationChannel, **overrides) -> NotificationRequest:
        values = {
            "recipient": "+15551234567",
            "subject": "Order shipped",
            "body": "Your order is on its way.",
            "channels": frozenset(channels or (NotificationChannel.SMS,)),
        }
        values.update(overrides)
        return NotificationRequest(**values)

    return _make


@pytest.fixture
def messaging_client():
    return RecordingMessagingClient()


@pytest.fixture
def email_client():
    return RecordingEmailClient()


@pytest.fixture
def push_client():
    return RecordingPushClient()


@pytest.fixture
def recording_clients():
    """The recording client classes, for tests that need custom receipts or errors."""
    return SimpleNamespace(
        messaging=RecordingMessagingClient,
        email=RecordingEmailClient,
        push=RecordingPushClient,
    )
