"""Inbound command model and its validation."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .channels import NotificationChannel
from .correlation import get_correlation_id
from .exceptions import InvalidNotificationError
from .models import NotificationRequest

MAX_RECIPIENT_LENGTH = 500
MAX_SUBJECT_LENGTH = 500
MAX_BODY_LENGTH = 10_000


class SendNotificationCommand(BaseModel):
    """
    Request to send one notification through one or more channels.

    Channels accept enum members or their names/values in any case
    (``"sms"``, ``"SMS"``, ``"All"``).
    """

    model_config = ConfigDict(frozen=True)

    command_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    correlation_id: str | None = Field(default_factory=get_correlation_id)

    recipient: str = Field(min_length=1, max_length=MAX_RECIPIENT_LENGTH)
    subject: str = Field(min_length=1, max_length=MAX_SUBJECT_LENGTH)
    body: str = Field(min_length=1, max_length=MAX_BODY_LENGTH)
    channels: list[NotificationChannel] = Field(min_length=1)
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("recipient", "subject", "body")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("channels", mode="before")
    @classmethod
    def _parse_channels(cls, value: Any) -> Any:
        if isinstance(value, (str, NotificationChannel)):
            value = [value]
        if not isinstance(value, (list, tuple, set, frozenset)):
            return value
        return [NotificationChannel.parse(item) for item in value]

    def to_request(self) -> NotificationRequest:
        return NotificationRequest(
            recipient=self.recipient,
            subject=self.subject,
            body=self.body,
            channels=frozenset(self.channels),
            metadata=dict(self.metadata),
        )


def validate_command(
    data: Mapping[str, Any] | SendNotificationCommand,
) -> SendNotificationCommand:
    """Validate raw input (or re-validate a command) and return the command.

    Raises:
        InvalidNotificationError: with ``{dotted.field: [messages]}`` errors.
    """
    payload = data.model_dump() if isinstance(data, SendNotificationCommand) else data
    try:
        return SendNotificationCommand.model_validate(payload)
    except PydanticValidationError as exc:
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            loc = ".".join(str(p) for p in error.get("loc", ())) or "__root__"
            msg = error.get("msg", "validation error")
            errors.setdefault(loc, []).append(msg)
        raise InvalidNotificationError(errors) from exc
