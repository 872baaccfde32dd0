"""Provider clients for SMS/WhatsApp, email and push."""

from __future__ import annotations

import importlib.util

from .fcm import FcmPushClient
from .smtp import SmtpEmailClient

__all__ = ["FcmPushClient", "SmtpEmailClient"]

# Twilio optional
if importlib.util.find_spec("twilio") is not None:
    from .twilio import TwilioMessagingClient  # noqa: F401

    __all__.append("TwilioMessagingClient")

# AWS SES optional
if importlib.util.find_spec("aiobotocore") is not None:
    from .ses import SesEmailClient  # noqa: F401

    __all__.append("SesEmailClient")
