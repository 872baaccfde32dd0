"""Tests for the send-notification handler."""

from unittest.mock import AsyncMock

import pytest

from multichannel_notifications.channels import NotificationChannel
from multichannel_notifications.correlation import get_correlation_id
from multichannel_notifications.exceptions import InvalidNotificationError
from multichannel_notifications.handler import SendNotificationHandler
from multichannel_notifications.memory import InMemoryStrategy
from multichannel_notifications.models import NotificationResult
from multichannel_notifications.orchestrator import NotificationOrchestrator
from multichannel_notifications.registry import StrategyRegistry
from multichannel_notifications.validation import SendNotificationCommand

PAYLOAD = {
    "recipient": "alice@example.com",
    "subject": "Welcome",
    "body": "Hello Alice",
    "channels": ["email", "push"],
}


@pytest.mark.asyncio
async def test_handle_dispatches_validated_request():
    email = InMemoryStrategy(NotificationChannel.EMAIL)
    push = InMemoryStrategy(NotificationChannel.PUSH)
    handler = SendNotificationHandler(NotificationOrchestrator(StrategyRegistry([email, push])))

    results = await handler.handle(PAYLOAD)

    assert {result.channel for result in results} == {
        NotificationChannel.EMAIL,
        NotificationChannel.PUSH,
    }
    (request,) = email.sent_requests
    assert request.recipient == "alice@example.com"
    push.assert_sent(1)


@pytest.mark.asyncio
async def test_invalid_input_never_reaches_orchestrator():
    orchestrator = AsyncMock(spec=NotificationOrchestrator)
    handler = SendNotificationHandler(orchestrator)

    with pytest.raises(InvalidNotificationError):
        await handler.handle({**PAYLOAD, "channels": []})

    orchestrator.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_command_correlation_id_is_propagated():
    seen = []

    class Probe:
        channel = NotificationChannel.EMAIL

        async def send(self, request):
            seen.append(get_correlation_id())
            return NotificationResult.successful(self.channel)

    handler = SendNotificationHandler(NotificationOrchestrator(StrategyRegistry([Probe()])))
    command = SendNotificationCommand(**{**PAYLOAD, "channels": ["email"]}, correlation_id="c-7")

    await handler.handle(command)

    assert seen == ["c-7"]


@pytest.mark.asyncio
async def test_cancel_event_is_forwarded():
    orchestrator = AsyncMock(spec=NotificationOrchestrator)
    orchestrator.send.return_value = frozenset()
    handler = SendNotificationHandler(orchestrator)
    event = object()

    await handler.handle(PAYLOAD, cancel_event=event)  # type: ignore[arg-type]

    assert orchestrator.send.await_args.kwargs["cancel_event"] is event
