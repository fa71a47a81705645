"""
Utility helpers shared across microorm packages.
"""

from .logging import configure_logging, get_logger, resolve_slow_query_ms, time_call
from .redaction import REDACTED_VALUE, redact_params

__all__ = [
    "REDACTED_VALUE",
    "configure_logging",
    "get_logger",
    "redact_params",
    "resolve_slow_query_ms",
    "time_call",
]
