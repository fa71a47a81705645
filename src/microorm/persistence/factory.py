"""
Session factory opening one adapter connection per session.
"""

from __future__ import annotations

from typing import Any, Optional

from ..adapters import AdapterFactory, ConnectionConfig, adapter_factory_for
from ..core.metadata import MetadataRegistry, NullPolicy, default_registry
from ..utils import get_logger
from .session import Session

DSN_ENV = "MICROORM_DSN"


class SessionFactory:
    """
    Creates sessions sharing one metadata registry and one connection configuration.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        adapter_factory: Optional[AdapterFactory] = None,
        registry: Optional[MetadataRegistry] = None,
        null_policy: NullPolicy = NullPolicy.OMIT,
    ) -> None:
        self.config = config
        self.adapter_factory = adapter_factory or adapter_factory_for(config)
        self.registry = registry if registry is not None else default_registry
        self.null_policy = null_policy
        self.logger = get_logger("persistence.factory")

    @classmethod
    def from_dsn(cls, dsn: str, **kwargs: Any) -> "SessionFactory":
        return cls(ConnectionConfig.from_dsn(dsn), **kwargs)

    @classmethod
    def from_env(cls, env_var: str = DSN_ENV, **kwargs: Any) -> "SessionFactory":
        return cls(ConnectionConfig.from_env(env_var), **kwargs)

    def create_session(self) -> Session:
        self.logger.debug("Creating session for %s", self.config.descriptive_label())
        return Session(
            self.adapter_factory(),
            connection_config=self.config,
            registry=self.registry,
            null_policy=self.null_policy,
        )
