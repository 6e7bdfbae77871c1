"""Helpers for hierarchical configuration keys.

Keys are colon-delimited paths such as ``weather:location``. Remote keys
carry one extra leading segment, the namespace, which is stripped before a
value becomes visible to the configuration tree.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional

KEY_DELIMITER = ":"

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def namespace_prefix(namespace: str) -> str:
    return f"{namespace}{KEY_DELIMITER}"


def namespace_pattern(namespace: str) -> str:
    """Glob matching every remote key that belongs to ``namespace``.

    The same pattern is used to SCAN keys and to PSUBSCRIBE for change
    notifications. Glob metacharacters in the namespace are escaped so it is
    always matched literally.
    """
    return _GLOB_SPECIAL.sub(r"\\\1", namespace) + KEY_DELIMITER + "*"


def strip_prefix(namespace: str, remote_key: str) -> Optional[str]:
    """Convert ``"{namespace}:group:setting"`` into ``"group:setting"``.

    The prefix comparison ignores case. Returns None when the key belongs to
    another namespace or nothing follows the prefix.
    """
    prefix = namespace_prefix(namespace)
    if len(remote_key) <= len(prefix):
        return None
    if remote_key[: len(prefix)].casefold() != prefix.casefold():
        return None
    return remote_key[len(prefix) :]


def combine(*segments: Optional[str]) -> str:
    return KEY_DELIMITER.join(s for s in segments if s)


def section_key(path: str) -> str:
    """Last segment of ``path``."""
    if not path:
        return path
    return path.rsplit(KEY_DELIMITER, 1)[-1]


def parent_path(path: str) -> Optional[str]:
    if not path or KEY_DELIMITER not in path:
        return None
    return path.rsplit(KEY_DELIMITER, 1)[0]


def child_keys(keys: Iterable[str], parent: Optional[str] = None) -> List[str]:
    """Distinct immediate children of ``parent`` among ``keys``.

    Comparison is case-insensitive; the first spelling seen wins. The result
    is sorted case-insensitively.

    Args:
        keys: Flat configuration keys.
        parent: Path whose children are wanted, or None for the root.

    Returns:
        Child segment names.
    """
    prefix = (parent + KEY_DELIMITER).casefold() if parent else ""
    found: Dict[str, str] = {}
    for key in keys:
        if prefix and not key.casefold().startswith(prefix):
            continue
        rest = key[len(prefix) :]
        if not rest:
            continue
        child = rest.split(KEY_DELIMITER, 1)[0]
        found.setdefault(child.casefold(), child)
    return sorted(found.values(), key=str.casefold)
