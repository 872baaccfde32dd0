"""AWS SES email client (optional)."""

from __future__ import annotations

import importlib.util
import logging
from email.utils import formataddr
from typing import Any

from ..exceptions import ProviderError
from ..ports.providers import EmailReceipt, IEmailClient

logger = logging.getLogger(__name__)


class SesEmailClient(IEmailClient):
    """
    AWS SES email client using aiobotocore.

    Requires AWS credentials and region configuration.
    """

    def __init__(
        self,
        region_name: str = "us-east-1",
        timeout: float = 10.0,
        session: Any | None = None,
    ):
        self.region_name = region_name
        self.timeout = timeout
        self._session = session

    def _get_session(self) -> Any:
        """Lazy-initialize the aiobotocore session."""
        if self._session is None:
            if importlib.util.find_spec("aiobotocore") is None:
                raise ImportError(
                    "aiobotocore is required for SesEmailClient. "
                    "Install with: pip install 'multichannel-notifications[aws]'"
                )

            from aiobotocore.session import get_session

            self._session = get_session()
        return self._session

    async def send_email(
        self,
        to: str,
        from_: str,
        subject: str,
        body_text: str,
        body_html: str | None = None,
        from_name: str | None = None,
    ) -> EmailReceipt:
        body: dict[str, Any] = {"Text": {"Data": body_text, "Charset": "UTF-8"}}
        if body_html:
            body["Html"] = {"Data": body_html, "Charset": "UTF-8"}

        message_params: dict[str, Any] = {
            "Source": formataddr((from_name, from_)) if from_name else from_,
            "Destination": {"ToAddresses": [to]},
            "Message": {"Subject": {"Data": subject, "Charset": "UTF-8"}, "Body": body},
        }

        session = self._get_session()
        from aiobotocore.config import AioConfig

        config = AioConfig(connect_timeout=self.timeout, read_timeout=self.timeout)
        try:
            async with session.create_client(
                "ses", region_name=self.region_name, config=config
            ) as client:
                response = await client.send_email(**message_params)
        except Exception as e:
            error = getattr(e, "response", {}).get("Error", {})
            logger.error(f"Failed to send email via SES to {to}: {str(e)}")
            raise ProviderError(
                "ses", error.get("Message") or str(e), code=error.get("Code")
            ) from e

        logger.info(f"Email sent to {to} via SES (MessageId: {response['MessageId']})")
        return EmailReceipt(message_id=response["MessageId"])
