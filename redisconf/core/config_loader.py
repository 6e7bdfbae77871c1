"""Source declarations read from redisconf.yaml.

The file maps environment names to ordered source lists::

    environments:
      production:
        sources:
          - type: memory
            values: {"weather:location": "Unknown"}
          - namespace: myapp
            endpoint: cache.internal:6379
            optional: true
"""

from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .source import ConfigurationSource

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "redisconf.yaml"


def find_config_file(config_path: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Return ``config_path`` if it exists, else the nearest redisconf.yaml
    in the working directory or one of its parents."""
    if config_path is not None:
        path = Path(config_path)
        return path if path.exists() else None

    cwd = Path.cwd()
    for directory in (cwd, *cwd.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate
    return None


def read_declarations(path: Path, environment: str) -> List[Dict[str, Any]]:
    """Read the raw source declarations for ``environment``.

    An unreadable file is logged and treated as declaring nothing.

    Raises:
        ValueError: If the file is not valid YAML.
    """
    try:
        with open(path, "r") as f:
            document = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid {CONFIG_FILE_NAME} at {path}: {e}") from e
    except OSError as e:
        logger.warning("Could not read %s: %s", path, e)
        return []

    env_config = (document.get("environments") or {}).get(environment) or {}
    return env_config.get("sources") or []


def parse_source(source_config: Dict[str, Any]) -> ConfigurationSource:
    """Turn one declaration into a source descriptor.

    Validation of required fields is left to ``build`` so a file can be
    read before every value is known.

    Args:
        source_config: Raw source declaration from YAML.

    Returns:
        The configured source.

    Raises:
        ValueError: If the source type is not supported.
    """
    kind = str(source_config.get("type", "redis")).lower()
    if kind == "redis":
        from ..sources.redis_source import RedisConfigurationSource

        source = RedisConfigurationSource()
        namespace = source_config.get("namespace", source_config.get("project_name"))
        if namespace is not None:
            source.namespace = str(namespace)
        endpoint = source_config.get("endpoint", source_config.get("connection_string"))
        if endpoint is not None:
            source.endpoint = str(endpoint)
        if "database" in source_config:
            source.database = int(source_config["database"])
        if "optional" in source_config:
            source.optional = bool(source_config["optional"])
        if "reconnect_interval" in source_config:
            source.reconnect_interval = timedelta(
                seconds=float(source_config["reconnect_interval"])
            )
        return source
    if kind == "memory":
        from ..sources.memory import MemoryConfigurationSource

        values = source_config.get("values") or {}
        return MemoryConfigurationSource(
            {str(k): str(v) for k, v in values.items()},
            name=source_config.get("name"),
        )
    raise ValueError(f"Unsupported source type: {kind}")
