"""Masking of credential-looking statement parameters before logging."""

from __future__ import annotations

from typing import Any, Iterable, List

REDACTED_VALUE = "***"

_SENSITIVE_MARKERS = ("password", "passwd", "secret", "token", "api_key", "apikey", "bearer")


def _looks_sensitive(value: Any) -> bool:
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    if not isinstance(value, str):
        return False
    lowered = value.lower()
    return any(marker in lowered for marker in _SENSITIVE_MARKERS)


def redact_params(params: Iterable[Any]) -> List[Any]:
    """
    Return ``params`` with every credential-looking string or bytes value masked.
    """
    return [REDACTED_VALUE if _looks_sensitive(value) else value for value in params]
