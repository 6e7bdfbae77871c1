"""Source and provider protocols for the configuration chain."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Mapping, Optional, Protocol, Tuple

from .types import ChangeCallback

if TYPE_CHECKING:
    from .builder import ConfigurationBuilder


class ConfigurationProvider(Protocol):
    """Protocol defining what the configuration chain needs from a provider.

    A provider owns one snapshot of flat, colon-delimited keys. The chain
    loads every provider once at startup, reads through ``try_get`` and
    listens for reloads through ``register_change_callback``.
    """

    name: str

    @property
    def data(self) -> Mapping[str, str]:
        """Current snapshot of the provider's values."""
        ...

    def load(self) -> None:
        """Load values from the backing store.

        Raises:
            ConfigurationLoadError: If the store cannot be read and the
                source is not optional.
        """
        ...

    def try_get(self, key: str) -> Tuple[bool, Optional[str]]:
        """Look up a key without blocking.

        Args:
            key: Configuration key, compared case-insensitively.

        Returns:
            ``(True, value)`` when present, ``(False, None)`` otherwise. The
            found flag comes first: ``found, value = provider.try_get(key)``.
        """
        ...

    def reload(self) -> bool:
        """Reload values, returning True when the snapshot was replaced."""
        ...

    def register_change_callback(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register a callback fired after every successful reload.

        Args:
            callback: Zero-argument callable.

        Returns:
            A function that unregisters the callback.
        """
        ...

    def close(self) -> None:
        """Release connections and background workers."""
        ...


class ConfigurationSource(Protocol):
    """A descriptor that knows how to build a provider."""

    @property
    def name(self) -> str:
        ...

    def build(self, builder: Optional["ConfigurationBuilder"] = None) -> ConfigurationProvider:
        """Validate the descriptor and create its provider.

        Raises:
            ConfigurationValidationError: If a required setting is missing.
        """
        ...
