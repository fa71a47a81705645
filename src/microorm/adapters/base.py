"""
Adapter protocol and connection configuration for microorm.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, List, Mapping, Protocol, Sequence
from urllib.parse import parse_qsl, urlsplit, urlunsplit

from ..dialects import Dialect


class AdapterError(RuntimeError):
    """Base error for adapter-related failures."""


class AdapterConfigurationError(AdapterError):
    """Raised when configuration or required dependencies are invalid."""


class AdapterConnectionError(AdapterError):
    """Raised when establishing or using a connection fails."""


class AdapterExecutionError(AdapterError):
    """Raised when SQL execution or parameter validation fails."""


def _coerce(value: str, convert, *, key: str):
    try:
        return convert(value)
    except ValueError as exc:
        raise AdapterConfigurationError(f"Invalid value for '{key}' in DSN: {value!r}") from exc


@dataclass
class ConnectionConfig:
    """
    Where a session connects and how.

    ``url`` is the DSN as given. Its query string may carry ``timeout`` and
    ``isolation_level``; remaining query parameters become driver options.
    """

    url: str
    isolation_level: str | None = None
    timeout: float | None = None
    options: dict[str, Any] | None = None
    source: str | None = None

    @property
    def scheme(self) -> str:
        return urlsplit(self.url).scheme

    @property
    def base_url(self) -> str:
        """
        The DSN without its query string, as handed to the driver.
        """
        return self.url.split("?", 1)[0]

    @classmethod
    def from_dsn(cls, dsn: str, **kwargs: Any) -> "ConnectionConfig":
        query = dict(parse_qsl(urlsplit(dsn).query))

        timeout = query.pop("timeout", None)
        isolation_level = query.pop("isolation_level", None)
        if "connect_timeout" in query:
            query["connect_timeout"] = _coerce(query["connect_timeout"], int, key="connect_timeout")
        options: dict[str, Any] = {**query, **(kwargs.pop("options", None) or {})}

        return cls(
            url=dsn,
            isolation_level=kwargs.pop("isolation_level", isolation_level),
            timeout=kwargs.pop(
                "timeout", None if timeout is None else _coerce(timeout, float, key="timeout")
            ),
            options=options or None,
            **kwargs,
        )

    @classmethod
    def from_env(cls, env_var: str, **kwargs: Any) -> "ConnectionConfig":
        value = os.getenv(env_var)
        if not value:
            raise AdapterConfigurationError(f"Environment variable {env_var} is not set")
        return cls.from_dsn(value, source=env_var, **kwargs)

    def redacted_dsn(self) -> str:
        """
        The DSN with its password masked, for log lines and error messages.
        """
        parts = urlsplit(self.url)
        if parts.password is None:
            return self.url
        credentials, host = parts.netloc.rsplit("@", 1)
        user = credentials.split(":", 1)[0]
        return urlunsplit(parts._replace(netloc=f"{user}:***@{host}"))

    def descriptive_label(self) -> str:
        redacted = self.redacted_dsn()
        if self.source:
            return f"{self.source} ({redacted})"
        return redacted


class DatabaseAdapter(Protocol):
    """
    Storage capability a session runs against: one connection, one transaction.
    """

    dialect: Dialect

    def connect(self, config: ConnectionConfig) -> Any:
        """
        Acquire the connection described by ``config``.
        """

    def close(self) -> None:
        """
        Release the connection. Implementations should be idempotent.
        """

    def query(self, sql: str, params: Sequence[Any] | None = None) -> List[Mapping[str, Any]]:
        """
        Run a read and return every row with named-column access.
        """

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> int:
        """
        Run a write and return the affected row count.
        """

    def begin(self) -> None:
        """
        Open the transaction.
        """

    def commit(self) -> None:
        """
        Commit the current transaction.
        """

    def rollback(self) -> None:
        """
        Roll back the current transaction.
        """
