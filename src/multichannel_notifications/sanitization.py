"""Scrubs request metadata before it reaches a log line."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping
from typing import Any

MASK = "***"

_CREDENTIAL_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "passphrase",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "auth_token",
        "authorization",
        "api_key",
        "private_key",
        "otp",
        "code",
    }
)

_MASK = "mask"
_HASH = "hash"


def _fingerprint(value: Any) -> str:
    return "sha256:" + hashlib.sha256(str(value).encode("utf-8")).hexdigest()


class MetadataSanitizer:
    """
    Produces log-safe copies of request metadata.

    Strategies always see the caller's metadata untouched (push data,
    template variables). Keys are matched case-insensitively; a key listed
    in ``hash_fields`` is replaced by a stable SHA-256 fingerprint so log
    lines can still be correlated, any other listed key is masked.
    Recipients stay readable because deliveries are diagnosed from them.
    """

    def __init__(
        self,
        *,
        redact_fields: set[str] | None = None,
        hash_fields: set[str] | None = None,
        sensitive_fields: set[str] | None = None,
    ) -> None:
        masked: Iterable[str] = sensitive_fields or _CREDENTIAL_KEYS
        self._actions: dict[str, str] = {}
        for name in (*masked, *(redact_fields or ())):
            self._actions[name.lower()] = _MASK
        for name in hash_fields or ():
            self._actions[name.lower()] = _HASH

    def sanitize(self, metadata: Mapping[str, Any] | None) -> dict[str, Any]:
        """Return a scrubbed copy of ``metadata``; ``None`` yields ``{}``."""
        if not metadata:
            return {}
        return self._scrub_mapping(metadata)

    def _scrub_mapping(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return {str(key): self._scrub(str(key).lower(), value) for key, value in data.items()}

    def _scrub(self, key: str, value: Any) -> Any:
        # A listed key covers its whole value, nested containers included.
        action = self._actions.get(key)
        if action == _MASK:
            return MASK
        if action == _HASH:
            return _fingerprint(value)
        if isinstance(value, Mapping):
            return self._scrub_mapping(value)
        if isinstance(value, list):
            return [self._scrub(key, item) for item in value]
        return value


default_sanitizer = MetadataSanitizer()
