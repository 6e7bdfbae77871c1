"""redisconf - live configuration from Redis.

Load namespaced Redis keys into a hierarchical configuration and keep them
fresh through pub/sub change notifications.
"""

import logging

from .core.builder import ConfigurationBuilder
from .core.configuration import Configuration, ConfigurationSection
from .core.errors import (
    ConfigurationError,
    ConfigurationLoadError,
    ConfigurationReloadError,
    ConfigurationValidationError,
)
from .core.types import ConfigurationSnapshot
from .extensions import add_redis, add_redis_source
from .sources.memory import MemoryConfigurationSource
from .sources.redis_provider import RedisConfigurationProvider
from .sources.redis_source import RedisConfigurationSource

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ConfigurationBuilder",
    "Configuration",
    "ConfigurationSection",
    "ConfigurationSnapshot",
    "ConfigurationError",
    "ConfigurationLoadError",
    "ConfigurationReloadError",
    "ConfigurationValidationError",
    "MemoryConfigurationSource",
    "RedisConfigurationProvider",
    "RedisConfigurationSource",
    "add_redis",
    "add_redis_source",
]
