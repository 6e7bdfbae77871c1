"""Creation of Redis clients from source descriptors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict

import redis

if TYPE_CHECKING:
    from .redis_source import RedisConfigurationSource

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6379
DEFAULT_TIMEOUT_SECONDS = 5.0

_URL_SCHEMES = ("redis://", "rediss://", "unix://")
_TRUE = {"true", "1", "yes", "on"}


def _split_host_port(address: str) -> Dict[str, Any]:
    address = address.strip()
    if address.startswith("["):
        # [ipv6]:port
        host, _, rest = address[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
    elif address.count(":") == 1:
        host, _, port = address.partition(":")
    else:
        host, port = address, ""
    return {
        "host": host or DEFAULT_HOST,
        "port": int(port) if port else DEFAULT_PORT,
    }


def parse_endpoint(endpoint: str) -> Dict[str, Any]:
    """Translate ``host:port[,option=value...]`` into ``redis.Redis`` kwargs.

    Only the first address is used when several are listed. Recognised
    options are ``password``, ``user``, ``ssl``, ``connectTimeout`` and
    ``syncTimeout`` (milliseconds) and ``name``/``clientName``.
    ``abortConnect`` is accepted and ignored; clients never connect eagerly.

    Args:
        endpoint: Endpoint string; blank means ``localhost:6379``.

    Returns:
        Keyword arguments for ``redis.Redis``.

    Raises:
        ValueError: If a port or timeout is not numeric.
    """
    kwargs: Dict[str, Any] = {}
    addresses = []
    for part in (endpoint or "").split(","):
        part = part.strip()
        if not part:
            continue
        if "=" not in part:
            addresses.append(part)
            continue
        option, _, value = part.partition("=")
        option = option.strip().lower()
        value = value.strip()
        if option == "password":
            kwargs["password"] = value
        elif option == "user":
            kwargs["username"] = value
        elif option == "ssl":
            kwargs["ssl"] = value.lower() in _TRUE
        elif option == "connecttimeout":
            kwargs["socket_connect_timeout"] = int(value) / 1000.0
        elif option == "synctimeout":
            kwargs["socket_timeout"] = int(value) / 1000.0
        elif option in ("name", "clientname"):
            kwargs["client_name"] = value
        elif option == "abortconnect":
            pass
        else:
            logger.warning("Ignoring unsupported Redis endpoint option %r", option)

    if len(addresses) > 1:
        logger.warning(
            "Multiple Redis endpoints given; using %s and ignoring %s",
            addresses[0],
            ", ".join(addresses[1:]),
        )
    kwargs.update(_split_host_port(addresses[0] if addresses else ""))
    return kwargs


def create_client(source: "RedisConfigurationSource") -> redis.Redis:
    """Create the client used by a Redis provider.

    redis-py connects lazily, so this never fails because the server is
    unreachable; the first command does.
    """
    common: Dict[str, Any] = {
        "db": source.database,
        "decode_responses": True,
        # undecodable bytes become U+FFFD instead of failing the whole scan
        "encoding_errors": "replace",
        "health_check_interval": int(source.reconnect_interval.total_seconds()),
    }
    timeouts = {
        "socket_connect_timeout": DEFAULT_TIMEOUT_SECONDS,
        "socket_timeout": DEFAULT_TIMEOUT_SECONDS,
    }
    endpoint = (source.endpoint or "").strip()
    if endpoint.startswith(_URL_SCHEMES):
        # database and options embedded in the URL take precedence
        return redis.Redis.from_url(endpoint, **timeouts, **common)

    kwargs = dict(timeouts)
    kwargs.update(parse_endpoint(endpoint))
    kwargs.update(common)
    return redis.Redis(**kwargs)
