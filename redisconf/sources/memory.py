from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Mapping, Optional, Tuple

from ..core.types import ChangeCallback, ConfigurationSnapshot

if TYPE_CHECKING:
    from ..core.builder import ConfigurationBuilder


class MemoryConfigurationProvider:
    """Static values held in process, typically defaults under a Redis source."""

    def __init__(self, values: Mapping[str, str], name: str = "memory"):
        self.name = name
        self._data = ConfigurationSnapshot(values)

    @property
    def data(self) -> ConfigurationSnapshot:
        return self._data

    def load(self) -> None:
        pass

    def try_get(self, key: str) -> Tuple[bool, Optional[str]]:
        data = self._data
        if key in data:
            return True, data[key]
        return False, None

    def reload(self) -> bool:
        return True

    def register_change_callback(self, callback: ChangeCallback) -> Callable[[], None]:
        # values never change, so there is nothing to notify
        return lambda: None

    def close(self) -> None:
        pass


class MemoryConfigurationSource:
    def __init__(self, values: Optional[Mapping[str, str]] = None, name: Optional[str] = None):
        self.values = dict(values or {})
        self._name = name or "memory"

    @property
    def name(self) -> str:
        return self._name

    def build(self, builder: Optional["ConfigurationBuilder"] = None) -> MemoryConfigurationProvider:
        return MemoryConfigurationProvider(self.values, name=self._name)
