"""Type definitions for the redisconf configuration system."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union


class ConfigurationSnapshot(Mapping[str, str]):
    """Immutable, case-insensitive mapping of configuration keys to values.

    A provider builds a new snapshot on every load and swaps it in as a single
    reference assignment, so readers never need a lock. Iteration yields the
    first spelling seen for each key; lookups ignore case. When the input
    repeats a key the last value wins.
    """

    __slots__ = ("_entries",)

    def __init__(
        self,
        items: Union[Mapping[str, str], Iterable[Tuple[str, str]], None] = None,
    ):
        entries: Dict[str, Tuple[str, str]] = {}
        if items is not None:
            pairs = items.items() if isinstance(items, Mapping) else items
            for key, value in pairs:
                folded = key.casefold()
                original = entries[folded][0] if folded in entries else key
                entries[folded] = (original, value)
        self._entries = entries

    def __getitem__(self, key: str) -> str:
        return self._entries[key.casefold()][1]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self._entries

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        if len(other) != len(self):
            return False
        for key, value in other.items():
            if not isinstance(key, str) or key not in self or self[key] != value:
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        entry = self._entries.get(key.casefold())
        return default if entry is None else entry[1]

    def to_dict(self) -> Dict[str, str]:
        return dict(self._entries.values())

    def __repr__(self) -> str:
        return f"ConfigurationSnapshot({self.to_dict()!r})"


EMPTY_SNAPSHOT = ConfigurationSnapshot()


@dataclass(frozen=True)
class ProvenanceRecord:
    """Record tracking which provider supplied a configuration value.

    Attributes:
        key: Configuration key.
        provider_name: Name of the provider the value came from.
        timestamp_loaded: When the merged view was built.
    """

    key: str
    provider_name: str
    timestamp_loaded: datetime


ChangeCallback = Callable[[], None]
