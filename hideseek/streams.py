from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, cast

import redis

if TYPE_CHECKING:
    from hideseek.api.models import GameState


def updates_channel(key: str) -> str:
    return f"{key}:updates"


def publish_state(*, r: redis.Redis, key: str, state: "GameState") -> int:
    """Push the full document to everyone subscribed to the key's change feed.

    Returns the number of subscribers that received it.
    """

    return cast(int, r.publish(updates_channel(key), state.model_dump_json()))


class StateFeed:
    """Subscription to one key's change feed.

    The subscription is live once the constructor returns, so nothing published
    afterwards is missed.
    """

    def __init__(self, *, r: redis.Redis, key: str) -> None:
        self._pubsub = r.pubsub(ignore_subscribe_messages=True)
        self._pubsub.subscribe(updates_channel(key))

    def get(self, timeout: float = 1.0) -> str | None:
        """Next raw payload, or None if `timeout` seconds pass without one."""

        msg = self._pubsub.get_message(timeout=timeout)
        if msg is None:
            return None
        data = msg.get("data")
        return data.decode("utf-8") if isinstance(data, bytes) else str(data)

    def close(self) -> None:
        self._pubsub.close()

    def __enter__(self) -> "StateFeed":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def iter_raw_updates(*, r: redis.Redis, key: str, timeout: float = 1.0) -> Iterator[str | None]:
    """Subscribe to the change feed and yield raw payloads as they arrive.

    Yields None whenever `timeout` seconds pass without a message, so callers
    can check for shutdown. Unsubscribes when the generator is closed.
    """

    with StateFeed(r=r, key=key) as feed:
        while True:
            yield feed.get(timeout)
