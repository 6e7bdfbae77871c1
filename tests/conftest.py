"""Shared fixtures: an in-process stand-in for the Redis client."""

from __future__ import annotations

import queue
import threading
import time
from datetime import timedelta
from fnmatch import fnmatchcase
from typing import Any, Callable, Dict, List, Optional

import pytest
import redis

from redisconf.sources.redis_provider import RedisConfigurationProvider
from redisconf.sources.redis_source import RedisConfigurationSource


class FakePubSubThread(threading.Thread):
    """Delivers published messages to handlers, like PubSubWorkerThread."""

    def __init__(self, pubsub: "FakePubSub", exception_handler: Optional[Callable] = None):
        super().__init__(daemon=True)
        self.pubsub = pubsub
        self.exception_handler = exception_handler
        self._running = threading.Event()

    def run(self) -> None:
        self._running.set()
        while self._running.is_set():
            try:
                self.pubsub.deliver_one(timeout=0.02)
            except Exception as exc:
                if self.exception_handler is None:
                    raise
                self.exception_handler(exc, self.pubsub, self)

    def stop(self) -> None:
        self._running.clear()


class FakePubSub:
    def __init__(self, server: "FakeRedis"):
        self.server = server
        self.handlers: Dict[str, Callable[[Dict[str, Any]], None]] = {}
        self.inbox: "queue.Queue[Dict[str, Any]]" = queue.Queue()
        self.closed = False
        self.fail_next_delivery: Optional[Exception] = None

    def psubscribe(self, **handlers: Callable[[Dict[str, Any]], None]) -> None:
        self.handlers.update(handlers)
        self.server.subscribers.append(self)

    def punsubscribe(self, *patterns: str) -> None:
        for pattern in patterns or list(self.handlers):
            self.handlers.pop(pattern, None)

    def run_in_thread(
        self,
        sleep_time: float = 0.0,
        daemon: bool = False,
        exception_handler: Optional[Callable] = None,
    ) -> FakePubSubThread:
        thread = FakePubSubThread(self, exception_handler)
        thread.start()
        return thread

    def deliver_one(self, timeout: float) -> None:
        if self.fail_next_delivery is not None:
            exc, self.fail_next_delivery = self.fail_next_delivery, None
            raise exc
        try:
            message = self.inbox.get(timeout=timeout)
        except queue.Empty:
            return
        for pattern, handler in list(self.handlers.items()):
            if fnmatchcase(message["channel"], pattern):
                handler(dict(message, pattern=pattern, type="pmessage"))

    def close(self) -> None:
        self.closed = True
        if self in self.server.subscribers:
            self.server.subscribers.remove(self)


class FakeRedis:
    """Just enough of ``redis.Redis`` for the provider."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})
        self.subscribers: List[FakePubSub] = []
        self.fail_with: Optional[Exception] = None
        self.scan_delay = 0.0
        self.scan_calls = 0
        self.closed = False

    def scan_iter(self, match: str = "*", count: Optional[int] = None):
        self.scan_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        if self.scan_delay:
            time.sleep(self.scan_delay)
        return iter([k for k in list(self.data) if fnmatchcase(k, match)])

    def mget(self, keys: List[str]) -> List[Optional[str]]:
        if self.fail_with is not None:
            raise self.fail_with
        return [self.data.get(k) for k in keys]

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def publish(self, channel: str, message: str = "changed") -> int:
        receivers = [
            ps
            for ps in list(self.subscribers)
            if any(fnmatchcase(channel, p) for p in ps.handlers)
        ]
        for ps in receivers:
            ps.inbox.put({"channel": channel, "data": message})
        return len(receivers)

    def pubsub(self, ignore_subscribe_messages: bool = False) -> FakePubSub:
        if self.fail_with is not None:
            raise self.fail_with
        return FakePubSub(self)

    def close(self) -> None:
        self.closed = True


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


WEATHER = {
    "myapp:weather:location": "Auckland",
    "myapp:weather:maxTemp": "30",
    "other:x": "1",
}


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis(WEATHER)


@pytest.fixture
def unreachable() -> Callable[[RedisConfigurationSource], Any]:
    def factory(source: RedisConfigurationSource) -> Any:
        fake = FakeRedis()
        fake.fail_with = redis.ConnectionError("Error 111 connecting to localhost:6379")
        return fake

    return factory


@pytest.fixture
def make_provider(fake_redis: FakeRedis):
    created: List[RedisConfigurationProvider] = []

    def make(
        namespace: str = "myapp",
        optional: bool = False,
        client: Any = None,
        reconnect_interval: timedelta = timedelta(milliseconds=50),
    ):
        source = RedisConfigurationSource(
            namespace=namespace,
            optional=optional,
            reconnect_interval=reconnect_interval,
            client_factory=lambda _source: client if client is not None else fake_redis,
        )
        provider = source.build()
        created.append(provider)
        return provider

    yield make
    for provider in created:
        provider.close()


@pytest.fixture
def wait() -> Callable[..., bool]:
    return wait_for
