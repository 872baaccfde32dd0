"""Tests for the notification orchestrator."""

import asyncio
import json
import logging

import pytest

from multichannel_notifications.channels import CONCRETE_CHANNELS, NotificationChannel
from multichannel_notifications.correlation import correlation_scope, get_correlation_id
from multichannel_notifications.exceptions import InvalidNotificationError, ProviderError
from multichannel_notifications.memory import InMemoryStrategy
from multichannel_notifications.models import (
    CANCELLED_MESSAGE,
    NotificationResult,
    results_by_channel,
)
from multichannel_notifications.orchestrator import NotificationOrchestrator
from multichannel_notifications.registry import StrategyRegistry
from multichannel_notifications.strategies import SmsStrategy

SMS = NotificationChannel.SMS
WHATSAPP = NotificationChannel.WHATSAPP
EMAIL = NotificationChannel.EMAIL
PUSH = NotificationChannel.PUSH
ALL = NotificationChannel.ALL


def _orchestrator(*strategies, **kwargs) -> NotificationOrchestrator:
    return NotificationOrchestrator(StrategyRegistry(strategies), **kwargs)


def _all_fakes() -> dict[NotificationChannel, InMemoryStrategy]:
    return {channel: InMemoryStrategy(channel) for channel in CONCRETE_CHANNELS}


@pytest.mark.asyncio
async def test_one_result_per_requested_channel(make_request):
    """Two requested channels yield exactly two results, one per channel."""
    sms = InMemoryStrategy(SMS)
    email = InMemoryStrategy(EMAIL, error=RuntimeError("smtp down"))
    orchestrator = _orchestrator(sms, email)

    results = await orchestrator.send(make_request(SMS, EMAIL))

    assert len(results) == 2
    by_channel = results_by_channel(results)
    assert set(by_channel) == {SMS, EMAIL}
    assert by_channel[SMS].success
    assert not by_channel[EMAIL].success


@pytest.mark.asyncio
async def test_all_expands_to_every_concrete_channel(make_request):
    fakes = _all_fakes()
    orchestrator = _orchestrator(*fakes.values())

    results = await orchestrator.send(make_request(ALL))

    assert len(results) == len(CONCRETE_CHANNELS)
    assert {result.channel for result in results} == set(CONCRETE_CHANNELS)
    assert all(result.channel is not ALL for result in results)
    for fake in fakes.values():
        fake.assert_sent(1)


@pytest.mark.asyncio
async def test_all_with_explicit_channel_sends_once_per_channel(make_request):
    fakes = _all_fakes()
    orchestrator = _orchestrator(*fakes.values())

    results = await orchestrator.send(make_request(ALL, SMS))

    assert len(results) == len(CONCRETE_CHANNELS)
    fakes[SMS].assert_sent(1)


@pytest.mark.asyncio
async def test_duplicate_channels_collapse(make_request):
    sms = InMemoryStrategy(SMS)
    orchestrator = _orchestrator(sms)
    request = make_request(SMS, SMS)

    results = await orchestrator.send(request)

    assert len(results) == 1
    sms.assert_sent(1)


@pytest.mark.asyncio
async def test_strategy_crash_does_not_affect_siblings(make_request):
    """An unexpected SMS error leaves the email result untouched."""
    sms = InMemoryStrategy(SMS, error=RuntimeError("internal failure"))
    email = InMemoryStrategy(EMAIL, external_reference="msg-1")
    orchestrator = _orchestrator(sms, email)

    results = results_by_channel(await orchestrator.send(make_request(SMS, EMAIL)))

    assert results[SMS] == NotificationResult.failed(SMS, "internal failure")
    assert results[EMAIL] == NotificationResult.successful(EMAIL, "msg-1")


@pytest.mark.asyncio
async def test_exception_without_message_uses_type_name(make_request):
    orchestrator = _orchestrator(InMemoryStrategy(SMS, error=KeyError()))

    (result,) = await orchestrator.send(make_request(SMS))

    assert not result.success
    assert result.error_message == "KeyError"


@pytest.mark.asyncio
async def test_empty_channels_fail_fast_without_dispatch(make_request):
    sms = InMemoryStrategy(SMS)
    orchestrator = _orchestrator(sms)

    with pytest.raises(InvalidNotificationError) as exc_info:
        await orchestrator.send(make_request(channels=frozenset()))

    assert "channels" in exc_info.value.errors
    sms.assert_sent(0)


@pytest.mark.asyncio
async def test_channel_names_are_accepted_as_strings(make_request):
    sms = InMemoryStrategy(SMS)
    orchestrator = _orchestrator(sms)

    (result,) = await orchestrator.send(make_request(channels=frozenset({"sms"})))

    assert result.channel is SMS
    assert result.success
    sms.assert_sent(1)


@pytest.mark.asyncio
async def test_unknown_channel_value_fails_fast_without_dispatch(make_request):
    sms = InMemoryStrategy(SMS)
    orchestrator = _orchestrator(sms)

    with pytest.raises(InvalidNotificationError) as exc_info:
        await orchestrator.send(make_request(channels=frozenset({SMS, "fax"})))

    assert exc_info.value.errors == {"channels": ["Unknown notification channel: 'fax'"]}
    sms.assert_sent(0)


@pytest.mark.asyncio
async def test_blank_fields_fail_fast(make_request):
    sms = InMemoryStrategy(SMS)
    orchestrator = _orchestrator(sms)

    with pytest.raises(InvalidNotificationError) as exc_info:
        await orchestrator.send(make_request(SMS, recipient="  ", body=""))

    assert set(exc_info.value.errors) == {"recipient", "body"}
    sms.assert_sent(0)


@pytest.mark.asyncio
async def test_success_round_trips_external_reference(make_request):
    orchestrator = _orchestrator(InMemoryStrategy(SMS, external_reference="SM123"))

    results = await orchestrator.send(make_request(SMS))

    assert results == frozenset(
        {NotificationResult(channel=SMS, success=True, external_reference="SM123")}
    )


@pytest.mark.asyncio
async def test_rate_limited_provider_yields_failed_result(make_request, recording_clients):
    """A provider rate-limit error becomes a failed SMS result, never an exception."""
    client = recording_clients.messaging(
        error=ProviderError(
            "twilio", "Too Many Requests: rate limit exceeded", code=20429, status=429
        )
    )
    orchestrator = _orchestrator(SmsStrategy(client, from_number="+15550000000"))
    request = make_request(
        SMS, recipient="+15551234567", subject="OTP", body="Your code is 482913"
    )

    (result,) = await orchestrator.send(request)

    assert result.channel is SMS
    assert not result.success
    assert result.error_message == "Too Many Requests: rate limit exceeded"
    assert result.metadata == {"provider": "twilio", "provider_code": "20429"}


@pytest.mark.asyncio
async def test_unregistered_channel_yields_failed_result(make_request):
    orchestrator = _orchestrator(InMemoryStrategy(SMS))

    results = results_by_channel(await orchestrator.send(make_request(SMS, PUSH)))

    assert results[SMS].success
    assert not results[PUSH].success
    assert results[PUSH].error_message == "Unknown notification channel: push"


@pytest.mark.asyncio
async def test_all_with_partial_registry_reports_missing_channels(make_request):
    orchestrator = _orchestrator(InMemoryStrategy(EMAIL))

    results = results_by_channel(await orchestrator.send(make_request(ALL)))

    assert set(results) == set(CONCRETE_CHANNELS)
    assert results[EMAIL].success
    assert {c for c, r in results.items() if not r.success} == {SMS, WHATSAPP, PUSH}


class _WrongChannelStrategy:
    channel = SMS

    async def send(self, request):
        return NotificationResult.successful(EMAIL, "x")


class _NoResultStrategy:
    channel = PUSH

    async def send(self, request):
        return None


@pytest.mark.asyncio
async def test_results_are_tagged_with_the_dispatched_channel(make_request):
    orchestrator = _orchestrator(_WrongChannelStrategy(), _NoResultStrategy())

    results = results_by_channel(await orchestrator.send(make_request(SMS, PUSH)))

    assert results[SMS] == NotificationResult.successful(SMS, "x")
    assert not results[PUSH].success
    assert "_NoResultStrategy" in results[PUSH].error_message


class _RendezvousStrategy:
    """Completes only once its partner has started, which requires concurrency."""

    def __init__(self, channel, own: asyncio.Event, partner: asyncio.Event):
        self.channel = channel
        self.own = own
        self.partner = partner

    async def send(self, request):
        self.own.set()
        await self.partner.wait()
        return NotificationResult.successful(self.channel)


@pytest.mark.asyncio
async def test_channels_are_sent_concurrently(make_request):
    sms_started, email_started = asyncio.Event(), asyncio.Event()
    orchestrator = _orchestrator(
        _RendezvousStrategy(SMS, sms_started, email_started),
        _RendezvousStrategy(EMAIL, email_started, sms_started),
    )

    results = await asyncio.wait_for(orchestrator.send(make_request(SMS, EMAIL)), timeout=2)

    assert all(result.success for result in results)


@pytest.mark.asyncio
async def test_cancel_event_returns_partial_results(make_request):
    """Finished channels keep their outcome; in-flight ones are reported cancelled."""
    fast = InMemoryStrategy(SMS)
    slow = InMemoryStrategy(EMAIL, delay=30)
    orchestrator = _orchestrator(fast, slow)
    cancel_event = asyncio.Event()

    task = asyncio.create_task(
        orchestrator.send(make_request(SMS, EMAIL), cancel_event=cancel_event)
    )
    await slow.started.wait()
    cancel_event.set()
    results = results_by_channel(await asyncio.wait_for(task, timeout=2))

    assert results[SMS].success
    assert not results[EMAIL].success
    assert results[EMAIL].error_message == CANCELLED_MESSAGE
    assert results[EMAIL].is_cancelled
    assert not slow.completed


@pytest.mark.asyncio
async def test_cancel_event_already_set_cancels_everything(make_request):
    orchestrator = _orchestrator(InMemoryStrategy(SMS, delay=30))
    cancel_event = asyncio.Event()
    cancel_event.set()

    (result,) = await orchestrator.send(make_request(SMS), cancel_event=cancel_event)

    assert result.is_cancelled


@pytest.mark.asyncio
async def test_timeout_cancels_slow_channels(make_request):
    orchestrator = _orchestrator(InMemoryStrategy(SMS), InMemoryStrategy(PUSH, delay=30))

    results = results_by_channel(
        await orchestrator.send(make_request(SMS, PUSH), timeout=0.05)
    )

    assert results[SMS].success
    assert results[PUSH].is_cancelled


@pytest.mark.asyncio
async def test_dispatch_timeout_default_applies(make_request):
    orchestrator = _orchestrator(InMemoryStrategy(EMAIL, delay=30), dispatch_timeout=0.05)

    (result,) = await orchestrator.send(make_request(EMAIL))

    assert result.is_cancelled


@pytest.mark.asyncio
async def test_caller_cancellation_cancels_children(make_request):
    slow = InMemoryStrategy(SMS, delay=30)
    orchestrator = _orchestrator(slow)

    task = asyncio.create_task(orchestrator.send(make_request(SMS)))
    await slow.started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert not slow.completed


class _CorrelationProbe:
    def __init__(self, channel):
        self.channel = channel
        self.seen = None

    async def send(self, request):
        self.seen = get_correlation_id()
        return NotificationResult.successful(self.channel)


@pytest.mark.asyncio
async def test_every_channel_sees_the_same_correlation_id(make_request):
    sms, email = _CorrelationProbe(SMS), _CorrelationProbe(EMAIL)
    orchestrator = _orchestrator(sms, email)

    await orchestrator.send(make_request(SMS, EMAIL))

    assert sms.seen is not None
    assert sms.seen == email.seen
    assert get_correlation_id() is None


@pytest.mark.asyncio
async def test_ambient_correlation_id_is_reused(make_request):
    sms = _CorrelationProbe(SMS)
    orchestrator = _orchestrator(sms)

    with correlation_scope("req-123"):
        await orchestrator.send(make_request(SMS))

    assert sms.seen == "req-123"


@pytest.mark.asyncio
async def test_summary_log_entry(make_request, caplog):
    orchestrator = _orchestrator(
        InMemoryStrategy(SMS), InMemoryStrategy(EMAIL, error=RuntimeError("x"))
    )

    with caplog.at_level(logging.INFO, logger="multichannel_notifications.orchestrator"):
        with correlation_scope("corr-1"):
            await orchestrator.send(make_request(SMS, EMAIL))

    entries = [
        json.loads(record.getMessage())
        for record in caplog.records
        if record.name == "multichannel_notifications.orchestrator"
        and record.getMessage().startswith("{")
    ]
    assert len(entries) == 1
    entry = entries[0]
    assert entry["channels"] == ["sms", "email"]
    assert entry["succeeded"] == 1
    assert entry["failed"] == 1
    assert entry["cancelled"] == 0
    assert entry["correlation_id"] == "corr-1"
    assert entry["duration_ms"] >= 0


@pytest.mark.asyncio
async def test_sensitive_metadata_is_not_logged(make_request, caplog):
    orchestrator = _orchestrator(InMemoryStrategy(SMS))
    request = make_request(SMS, metadata={"otp": "482913", "order_id": "42"})

    with caplog.at_level(logging.DEBUG, logger="multichannel_notifications"):
        await orchestrator.send(request)

    assert "482913" not in caplog.text
    assert "order_id" in caplog.text


@pytest.mark.asyncio
async def test_channel_outcomes_are_logged(make_request, caplog):
    orchestrator = _orchestrator(
        InMemoryStrategy(SMS, result=NotificationResult.failed(SMS, "Queue full")),
        InMemoryStrategy(EMAIL),
    )

    with caplog.at_level(logging.INFO, logger="multichannel_notifications.dispatch"):
        await orchestrator.send(make_request(SMS, EMAIL))

    messages = {record.getMessage() for record in caplog.records}
    assert "Failed to send notification via sms to +15551234567: Queue full" in messages
    assert "Successfully sent notification via email to +15551234567" in messages


class _SelfCancellingStrategy:
    channel = WHATSAPP

    async def send(self, request):
        raise asyncio.CancelledError()


@pytest.mark.asyncio
async def test_strategy_cancelling_itself_only_affects_its_channel(make_request):
    orchestrator = _orchestrator(_SelfCancellingStrategy(), InMemoryStrategy(SMS))

    results = results_by_channel(await orchestrator.send(make_request(SMS, WHATSAPP)))

    assert results[WHATSAPP].is_cancelled
    assert results[SMS].success
