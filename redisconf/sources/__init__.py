"""Configuration source implementations.

This package contains the Redis source with live reload and a static
in-memory source for defaults.
"""

from .memory import MemoryConfigurationProvider, MemoryConfigurationSource
from .redis_provider import RedisConfigurationProvider
from .redis_source import RedisConfigurationSource

__all__ = [
    "MemoryConfigurationProvider",
    "MemoryConfigurationSource",
    "RedisConfigurationProvider",
    "RedisConfigurationSource",
]
