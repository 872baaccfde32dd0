"""SMTP email client."""

from __future__ import annotations

import email.message
import email.policy
import email.utils
import logging

from ..exceptions import ProviderError
from ..ports.providers import EmailReceipt, IEmailClient

logger = logging.getLogger(__name__)


class SmtpEmailClient(IEmailClient):
    """
    Async SMTP email client using aiosmtplib.
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def build_message(
        self,
        to: str,
        from_: str,
        subject: str,
        body_text: str,
        body_html: str | None = None,
        from_name: str | None = None,
    ) -> email.message.EmailMessage:
        message = email.message.EmailMessage(policy=email.policy.default)
        message["To"] = to
        message["From"] = email.utils.formataddr((from_name, from_)) if from_name else from_
        message["Subject"] = subject
        message["Message-ID"] = email.utils.make_msgid(domain=from_.rpartition("@")[2] or None)

        message.set_content(body_text, subtype="plain", charset="utf-8")
        if body_html:
            message.add_alternative(body_html, subtype="html", charset="utf-8")
        return message

    async def send_email(
        self,
        to: str,
        from_: str,
        subject: str,
        body_text: str,
        body_html: str | None = None,
        from_name: str | None = None,
    ) -> EmailReceipt:
        # Lazy import of aiosmtplib
        try:
            import aiosmtplib
        except ImportError as e:
            raise ImportError(
                "aiosmtplib is required for SmtpEmailClient. "
                "Install with: pip install 'multichannel-notifications[smtp]'"
            ) from e

        message = self.build_message(to, from_, subject, body_text, body_html, from_name)

        try:
            async with aiosmtplib.SMTP(
                hostname=self.host,
                port=self.port,
                timeout=self.timeout,
                start_tls=self.use_tls,
            ) as smtp:
                if self.username and self.password:
                    await smtp.login(self.username, self.password)
                await smtp.send_message(message)
        except aiosmtplib.SMTPException as e:
            logger.error(f"SMTP error sending email to {to}: {str(e)}")
            raise ProviderError("smtp", str(e), code=getattr(e, "code", None)) from e
        except (OSError, TimeoutError) as e:
            logger.error(f"SMTP transport error sending email to {to}: {str(e)}")
            raise ProviderError("smtp", f"SMTP connection failed: {e}") from e

        logger.info(f"Email sent to {to} via SMTP")
        return EmailReceipt(message_id=message["Message-ID"])
