"""Aggregated view over an ordered list of configuration providers."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence

from . import keys as keypath
from .merge import merge_providers
from .source import ConfigurationProvider
from .types import ChangeCallback, ProvenanceRecord

logger = logging.getLogger(__name__)


class Configuration:
    """Read configuration across providers, later providers taking precedence.

    Lookups go straight to each provider's current snapshot, so values
    refreshed by a background reload are visible immediately without calling
    ``reload`` here.
    """

    def __init__(self, providers: Sequence[ConfigurationProvider]):
        """Initialize Configuration.

        Args:
            providers: Loaded providers in ascending order of precedence.
        """
        self.providers: List[ConfigurationProvider] = list(providers)
        self._callbacks: List[ChangeCallback] = []
        self._callbacks_lock = threading.Lock()
        self._unregister: List[Callable[[], None]] = [
            p.register_change_callback(self._on_provider_changed) for p in self.providers
        ]

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        for provider in reversed(self.providers):
            found, value = provider.try_get(key)
            if found:
                return value
        return default

    def __getitem__(self, key: str) -> Optional[str]:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return any(p.try_get(key)[0] for p in self.providers)

    def values(self) -> Dict[str, str]:
        effective, _ = merge_providers(self.providers)
        return effective

    def provenance(self, key: str) -> Optional[ProvenanceRecord]:
        _, provenance = merge_providers(self.providers)
        return provenance.get(key.casefold())

    def get_section(self, path: str) -> "ConfigurationSection":
        return ConfigurationSection(self, path)

    def get_children(self, path: Optional[str] = None) -> List["ConfigurationSection"]:
        all_keys: List[str] = []
        for provider in self.providers:
            all_keys.extend(provider.data.keys())
        return [
            ConfigurationSection(self, keypath.combine(path, child))
            for child in keypath.child_keys(all_keys, path)
        ]

    def on_change(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register ``callback`` to run after any provider reloads successfully.

        Returns:
            A function that unregisters the callback.
        """
        with self._callbacks_lock:
            self._callbacks.append(callback)

        def unregister() -> None:
            with self._callbacks_lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return unregister

    def _on_provider_changed(self) -> None:
        with self._callbacks_lock:
            callbacks = list(self._callbacks)
        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Configuration change callback %r failed", callback)

    def reload(self) -> None:
        for provider in self.providers:
            provider.reload()

    def close(self) -> None:
        for unregister in self._unregister:
            unregister()
        self._unregister.clear()
        for provider in self.providers:
            provider.close()

    def __enter__(self) -> "Configuration":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


class ConfigurationSection:
    """A view of the configuration rooted at ``path``."""

    def __init__(self, root: Configuration, path: str):
        self.root = root
        self.path = path

    @property
    def key(self) -> str:
        return keypath.section_key(self.path)

    @property
    def value(self) -> Optional[str]:
        return self.root.get(self.path)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self.root.get(keypath.combine(self.path, key), default)

    def __getitem__(self, key: str) -> Optional[str]:
        return self.get(key)

    def get_section(self, key: str) -> "ConfigurationSection":
        return ConfigurationSection(self.root, keypath.combine(self.path, key))

    def get_children(self) -> List["ConfigurationSection"]:
        return self.root.get_children(self.path)

    def exists(self) -> bool:
        return self.value is not None or bool(self.get_children())

    def __repr__(self) -> str:
        return f"ConfigurationSection(path={self.path!r})"
