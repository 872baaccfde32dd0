"""Firebase Cloud Messaging (HTTP v1) push client using httpx."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx

from ..correlation import get_correlation_id
from ..exceptions import ProviderError
from ..ports.providers import IPushClient

logger = logging.getLogger(__name__)

FCM_BASE_URL = "https://fcm.googleapis.com"

TokenProvider = Callable[[], str | Awaitable[str]]


class FcmPushClient(IPushClient):
    """
    Sends single-device push messages through the FCM HTTP v1 API.

    Authentication is a bearer token: either a static ``access_token`` or a
    ``token_provider`` callable (sync or async) invoked per send, so tokens
    minted by an OAuth2 service-account flow can be refreshed outside this
    client.
    """

    def __init__(
        self,
        project_id: str,
        access_token: str | None = None,
        token_provider: TokenProvider | None = None,
        timeout: float = 10.0,
        base_url: str = FCM_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not access_token and token_provider is None:
            raise ValueError("FcmPushClient requires an access_token or a token_provider")
        self.project_id = project_id
        self.access_token = access_token
        self.token_provider = token_provider
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/v1/projects/{self.project_id}/messages:send"

    async def _bearer_token(self) -> str:
        if self.token_provider is None:
            return self.access_token or ""
        token = self.token_provider()
        if inspect.isawaitable(token):
            token = await token
        return str(token)

    async def send_push(
        self,
        device_token: str,
        title: str,
        body: str,
        data: Mapping[str, str] | None = None,
    ) -> str:
        message: dict[str, Any] = {
            "token": device_token,
            "notification": {"title": title, "body": body},
        }
        if data:
            # FCM data payload values must be strings
            message["data"] = {str(k): str(v) for k, v in data.items()}

        headers = {
            "Authorization": f"Bearer {await self._bearer_token()}",
            "Content-Type": "application/json",
            "X-Correlation-ID": get_correlation_id() or "",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint, json={"message": message}, headers=headers
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error = _error_payload(e.response)
            logger.error(f"FCM HTTP error: {e.response.status_code} - {error.get('message')}")
            raise ProviderError(
                "fcm",
                error.get("message") or f"HTTP {e.response.status_code}",
                code=error.get("status"),
                status=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to send push via FCM: {str(e)}")
            raise ProviderError("fcm", f"FCM request failed: {e}") from e

        name = str(response.json().get("name", ""))
        logger.info(f"Push sent via FCM (name: {name})")
        return name


def _error_payload(response: httpx.Response) -> dict[str, Any]:
    """Extract ``{"code", "message", "status"}`` from an FCM error body."""
    try:
        payload = response.json()
    except ValueError:
        return {"message": response.text or None}
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        return error
    return {"message": str(error) if error else None}
