"""Exception types raised by redisconf."""

from __future__ import annotations

from typing import Optional


class ConfigurationError(Exception):
    """Base class for all configuration errors."""


class ConfigurationValidationError(ConfigurationError, ValueError):
    """A source descriptor is missing a required setting.

    Attributes:
        field: Name of the offending descriptor field.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ConfigurationLoadError(ConfigurationError):
    """The initial load of a non-optional source failed.

    Attributes:
        source_name: Name of the provider that failed.
        cause: The underlying transport exception.
    """

    prefix = "Failed to load Redis configuration"

    def __init__(self, cause: BaseException, source_name: Optional[str] = None):
        super().__init__(f"{self.prefix}: {cause}")
        self.source_name = source_name
        self.cause = cause


class ConfigurationReloadError(ConfigurationLoadError):
    """A reload requested with ``raise_on_error=True`` failed."""

    prefix = "Failed to reload Redis configuration"
