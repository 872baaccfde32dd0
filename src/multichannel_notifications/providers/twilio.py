"""Twilio SMS/WhatsApp client (optional)."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any

from ..exceptions import ProviderError
from ..ports.providers import IMessagingClient, MessageReceipt

logger = logging.getLogger(__name__)


class TwilioMessagingClient(IMessagingClient):
    """
    Twilio Programmable Messaging client.

    Requires twilio library:
    pip install 'multichannel-notifications[twilio]'

    The Twilio REST client is synchronous; calls run in a worker thread so a
    slow Twilio request never blocks the other channels of a fan-out.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        timeout: float = 10.0,
        client: Any | None = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> Any:
        """Lazy-initialize the Twilio REST client."""
        if self._client is None:
            try:
                from twilio.http.http_client import TwilioHttpClient
                from twilio.rest import Client as TwilioClient
            except ImportError as e:
                raise ImportError(
                    "twilio is required for TwilioMessagingClient. "
                    "Install with: pip install 'multichannel-notifications[twilio]'"
                ) from e

            self._client = TwilioClient(
                self.account_sid,
                self.auth_token,
                http_client=TwilioHttpClient(timeout=self.timeout),
            )
        return self._client

    async def send_message(
        self,
        to: str,
        from_: str,
        body: str | None = None,
        template_id: str | None = None,
        template_variables: Mapping[str, str] | None = None,
    ) -> MessageReceipt:
        try:
            from twilio.base.exceptions import TwilioRestException
        except ImportError as e:
            raise ImportError(
                "twilio is required for TwilioMessagingClient. "
                "Install with: pip install 'multichannel-notifications[twilio]'"
            ) from e

        params: dict[str, Any] = {"to": to, "from_": from_}
        if template_id:
            params["content_sid"] = template_id
            params["content_variables"] = json.dumps(dict(template_variables or {}))
        else:
            params["body"] = body or ""

        client = self._get_client()
        try:
            message = await asyncio.to_thread(client.messages.create, **params)
        except TwilioRestException as e:
            logger.error(f"Twilio API error: {e.msg}")
            raise ProviderError("twilio", e.msg or str(e), code=e.code, status=e.status) from e
        except Exception as e:
            logger.error(f"Failed to send message via Twilio: {str(e)}")
            raise ProviderError("twilio", f"Twilio request failed: {e}") from e

        status = getattr(message.status, "value", message.status)
        logger.info(f"Message sent via Twilio to {to} (SID: {message.sid}, status: {status})")
        return MessageReceipt(sid=message.sid, status=str(status) if status else None)
