"""Redis configuration provider with live reload over keyspace pub/sub.

Values live in Redis as plain strings under ``"{namespace}:{path}"``. Any
message published on a channel matching ``"{namespace}:*"`` triggers a full
rescan. Reloads run on a dedicated worker thread fed by a queue, which keeps
them serial; readers only ever see complete snapshots because each rescan
builds a new one and swaps it in with one assignment.
"""

from __future__ import annotations

import logging
import queue
import threading
from itertools import islice
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import redis

from ..core import keys as keypath
from ..core.errors import ConfigurationLoadError, ConfigurationReloadError
from ..core.types import EMPTY_SNAPSHOT, ChangeCallback, ConfigurationSnapshot
from .redis_connection import create_client
from .redis_source import RedisConfigurationSource

logger = logging.getLogger(__name__)

ClientFactory = Callable[[RedisConfigurationSource], "redis.Redis"]

SCAN_COUNT = 500
MGET_BATCH_SIZE = 500
PUBSUB_POLL_SECONDS = 1.0
WORKER_JOIN_SECONDS = 5.0

_STOP = object()


def _batched(items: Iterable[str], size: int) -> Iterator[List[str]]:
    it = iter(items)
    while True:
        batch = list(islice(it, size))
        if not batch:
            return
        yield batch


class RedisConfigurationProvider:
    """Configuration provider backed by Redis keys under one namespace."""

    def __init__(
        self,
        source: RedisConfigurationSource,
        client_factory: Optional[ClientFactory] = None,
    ):
        """Initialize the provider without touching the network.

        Args:
            source: Descriptor the provider reads its settings from.
            client_factory: Creates the Redis client. Falls back to the
                descriptor's factory, then to ``create_client``.

        Raises:
            TypeError: If ``source`` is None.
        """
        if source is None:
            raise TypeError("source must not be None")
        self._source = source
        self._client_factory = client_factory or source.client_factory or create_client
        self.name = source.name
        self.namespace = source.namespace
        self.optional = source.optional
        self.pattern = keypath.namespace_pattern(source.namespace)

        self._data: ConfigurationSnapshot = EMPTY_SNAPSHOT
        self._reload_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._notifying = threading.local()
        self._callbacks: List[ChangeCallback] = []
        self._notifications: "queue.Queue[Any]" = queue.Queue()
        self._closed = threading.Event()

        self._client: Optional[redis.Redis] = None
        self._pubsub: Optional[redis.client.PubSub] = None
        self._listener: Optional[threading.Thread] = None
        self._worker: Optional[threading.Thread] = None

    def __repr__(self) -> str:
        return f"RedisConfigurationProvider({self.name!r})"

    @property
    def data(self) -> ConfigurationSnapshot:
        return self._data

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def try_get(self, key: str) -> Tuple[bool, Optional[str]]:
        data = self._data
        if key in data:
            return True, data[key]
        return False, None

    def load(self) -> None:
        """Connect, read every key in the namespace and subscribe for changes.

        Calling ``load`` again reuses the connection and subscription and only
        rescans.

        Raises:
            ConfigurationLoadError: If any step fails and the source is not
                optional. Optional sources end up empty instead.
        """
        subscribed = self._pubsub is not None
        try:
            self._connect()
            with self._reload_lock:
                self.scan_and_populate()
            self._subscribe()
        except Exception as exc:
            if not subscribed:
                self._teardown_transport()
            if self.optional:
                self._data = EMPTY_SNAPSHOT
                logger.warning(
                    "Optional Redis source %s unavailable, continuing without it: %s",
                    self.name,
                    exc,
                )
                return
            raise ConfigurationLoadError(exc, source_name=self.name) from exc
        logger.info("Loaded %d key(s) from %s", len(self._data), self.name)

    def scan_and_populate(self) -> ConfigurationSnapshot:
        """Replace the snapshot with the current contents of the namespace.

        The current snapshot is left untouched if reading fails.

        Returns:
            The new snapshot.
        """
        client = self._client
        if client is None:
            raise redis.ConnectionError(f"{self.name} is not connected")

        remote_keys = list(client.scan_iter(match=self.pattern, count=SCAN_COUNT))
        pairs: List[Tuple[str, str]] = []
        for batch in _batched(remote_keys, MGET_BATCH_SIZE):
            for remote_key, value in zip(batch, client.mget(batch)):
                if not value:
                    continue
                config_key = keypath.strip_prefix(self.namespace, remote_key)
                if config_key is None:
                    continue
                pairs.append((config_key, value))

        snapshot = ConfigurationSnapshot(pairs)
        self._data = snapshot
        return snapshot

    def reload(self, raise_on_error: bool = False) -> bool:
        """Rescan the namespace and notify change callbacks.

        Only one rescan runs at a time; callers block until any rescan in
        progress finishes. Callbacks run after the lock is released and are
        not invoked when the rescan fails. A reload requested from inside a
        change callback rescans but does not invoke the callbacks again.

        Args:
            raise_on_error: Raise ConfigurationReloadError instead of logging.

        Returns:
            True if the snapshot was replaced.
        """
        with self._reload_lock:
            if self.closed:
                return False
            try:
                snapshot = self.scan_and_populate()
            except Exception as exc:
                if self.closed:
                    return False
                if raise_on_error:
                    raise ConfigurationReloadError(exc, source_name=self.name) from exc
                logger.warning(
                    "Reload of %s failed, keeping previous values", self.name, exc_info=True
                )
                return False
            logger.debug("Reloaded %d key(s) from %s", len(snapshot), self.name)
        if not getattr(self._notifying, "active", False):
            self._notify_changed()
        return True

    def register_change_callback(self, callback: ChangeCallback) -> Callable[[], None]:
        with self._state_lock:
            self._callbacks.append(callback)

        def unregister() -> None:
            with self._state_lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return unregister

    def _notify_changed(self) -> None:
        with self._state_lock:
            callbacks = list(self._callbacks)
        self._notifying.active = True
        try:
            for callback in callbacks:
                try:
                    callback()
                except Exception:
                    logger.exception("Change callback for %s failed", self.name)
        finally:
            self._notifying.active = False

    def _connect(self) -> None:
        if self.closed:
            raise redis.ConnectionError(f"{self.name} is closed")
        if self._client is None:
            self._client = self._client_factory(self._source)

    def _subscribe(self) -> None:
        if self._pubsub is not None:
            return
        pubsub = self._client.pubsub(ignore_subscribe_messages=True)
        pubsub.psubscribe(**{self.pattern: self._on_message})
        self._pubsub = pubsub

        self._worker = threading.Thread(
            target=self._drain_notifications,
            args=(self._notifications,),
            name=f"redisconf-reload-{self.namespace}",
            daemon=True,
        )
        self._worker.start()
        self._listener = pubsub.run_in_thread(
            sleep_time=PUBSUB_POLL_SECONDS,
            daemon=True,
            exception_handler=self._on_listener_error,
        )
        logger.debug("Subscribed to %s for %s", self.pattern, self.name)

    def _on_message(self, message: Dict[str, Any]) -> None:
        if self.closed:
            return
        logger.debug("Change notification on %s", message.get("channel"))
        self._notifications.put(message.get("channel"))

    def _on_listener_error(
        self, exc: BaseException, pubsub: Any, thread: threading.Thread
    ) -> None:
        if self.closed:
            return
        logger.warning(
            "Subscription for %s failed, retrying in %ss: %s",
            self.name,
            self._source.reconnect_interval.total_seconds(),
            exc,
        )
        if self._closed.wait(self._source.reconnect_interval.total_seconds()):
            return
        # changes published while disconnected were missed
        self._notifications.put(None)

    def _drain_notifications(self, notifications: "queue.Queue[Any]") -> None:
        while True:
            item = notifications.get()
            if item is _STOP:
                return
            # collapse a burst into a single pass
            while True:
                try:
                    item = notifications.get_nowait()
                except queue.Empty:
                    break
                if item is _STOP:
                    return
            self.reload()

    def _teardown_transport(self) -> None:
        self._notifications.put(_STOP)
        pubsub, self._pubsub = self._pubsub, None
        listener, self._listener = self._listener, None
        worker, self._worker = self._worker, None
        client, self._client = self._client, None

        if pubsub is not None:
            try:
                pubsub.punsubscribe(self.pattern)
            except Exception as exc:
                logger.debug("Unsubscribe from %s failed: %s", self.pattern, exc)
        if listener is not None:
            listener.stop()
            if listener is not threading.current_thread():
                listener.join(WORKER_JOIN_SECONDS)
        if pubsub is not None:
            try:
                pubsub.close()
            except Exception as exc:
                logger.debug("Closing pubsub for %s failed: %s", self.name, exc)
        if worker is not None and worker is not threading.current_thread():
            worker.join(WORKER_JOIN_SECONDS)
        if client is not None:
            try:
                client.close()
            except Exception as exc:
                logger.debug("Closing client for %s failed: %s", self.name, exc)
        self._notifications = queue.Queue()

    def close(self) -> None:
        """Unsubscribe, stop the reload worker and close the connection.

        Safe to call more than once and before ``load``.
        """
        if self._closed.is_set():
            return
        self._closed.set()
        self._teardown_transport()
        with self._state_lock:
            self._callbacks.clear()

    def __enter__(self) -> "RedisConfigurationProvider":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
