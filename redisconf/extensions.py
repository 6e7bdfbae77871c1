"""Registration helpers attaching Redis sources to a ConfigurationBuilder."""

from __future__ import annotations

from typing import Callable

from .core.builder import ConfigurationBuilder
from .sources.redis_source import DEFAULT_ENDPOINT, RedisConfigurationSource


def add_redis(
    builder: ConfigurationBuilder,
    project_name: str,
    connection_string: str = DEFAULT_ENDPOINT,
    optional: bool = False,
) -> ConfigurationBuilder:
    """Add a Redis source reading keys under ``project_name``.

    Arguments are not validated here; a blank project name fails when the
    builder is built.

    Args:
        builder: The configuration builder.
        project_name: Namespace used as key prefix in Redis.
        connection_string: Redis endpoint.
        optional: Whether the source may be unavailable at startup.

    Returns:
        The same builder, for chaining.
    """

    def configure(source: RedisConfigurationSource) -> None:
        source.namespace = project_name
        source.endpoint = connection_string
        source.optional = optional

    return add_redis_source(builder, configure)


def add_redis_source(
    builder: ConfigurationBuilder,
    configure: Callable[[RedisConfigurationSource], None],
) -> ConfigurationBuilder:
    """Add a Redis source configured by ``configure``.

    Args:
        builder: The configuration builder.
        configure: Called with a default descriptor to fill in.

    Returns:
        The same builder, for chaining.
    """
    source = RedisConfigurationSource()
    configure(source)
    return builder.add(source)
