"""Descriptor for a Redis-backed configuration source."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import timedelta
from typing import TYPE_CHECKING, Optional

from ..core.errors import ConfigurationValidationError

if TYPE_CHECKING:
    from ..core.builder import ConfigurationBuilder
    from .redis_provider import ClientFactory, RedisConfigurationProvider

DEFAULT_ENDPOINT = "localhost:6379"
DEFAULT_RECONNECT_INTERVAL = timedelta(seconds=30)


@dataclass
class RedisConfigurationSource:
    """Settings for one Redis configuration source.

    Fields may be assigned freely; ``namespace`` is only checked when
    ``build`` is called. The provider receives a copy, so changing the
    descriptor afterwards does not affect a provider already built.

    Attributes:
        namespace: Project name; every key belonging to the source is stored
            in Redis as ``"{namespace}:{path}"``.
        endpoint: ``host:port[,option=value...]`` or a ``redis://`` URL.
        database: Redis database index.
        optional: Whether load-time failures yield an empty source instead
            of an error.
        reconnect_interval: Delay before the subscription is re-established
            after a transport error.
        client_factory: Creates the Redis client; defaults to
            ``create_client``. Tests substitute an in-process fake here.
    """

    namespace: str = ""
    endpoint: str = DEFAULT_ENDPOINT
    database: int = 0
    optional: bool = False
    reconnect_interval: timedelta = field(default=DEFAULT_RECONNECT_INTERVAL)
    client_factory: Optional["ClientFactory"] = field(default=None, repr=False, compare=False)

    @property
    def name(self) -> str:
        return f"redis:{self.namespace}@{self.endpoint}/{self.database}"

    def validate(self) -> None:
        """Raise ConfigurationValidationError if the namespace is blank."""
        if self.namespace is None or not str(self.namespace).strip():
            raise ConfigurationValidationError(
                "namespace must be specified for Redis configuration source",
                field="namespace",
            )

    def build(
        self, builder: Optional["ConfigurationBuilder"] = None
    ) -> "RedisConfigurationProvider":
        """Validate the descriptor and create its provider.

        Args:
            builder: The builder requesting the provider; unused.

        Returns:
            A provider that has not been loaded yet.

        Raises:
            ConfigurationValidationError: If ``namespace`` is blank.
        """
        self.validate()
        from .redis_provider import RedisConfigurationProvider

        return RedisConfigurationProvider(dataclasses.replace(self))
