"""Channel strategies."""

from __future__ import annotations

from .all import AllChannelsStrategy
from .base import ChannelStrategy
from .email import EmailStrategy
from .push import PushStrategy
from .sms import SmsStrategy
from .whatsapp import WhatsAppStrategy

__all__ = [
    "AllChannelsStrategy",
    "ChannelStrategy",
    "EmailStrategy",
    "PushStrategy",
    "SmsStrategy",
    "WhatsAppStrategy",
]
