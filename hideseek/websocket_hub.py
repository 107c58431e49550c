from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass

import redis
from fastapi import WebSocket
from starlette.concurrency import run_in_threadpool

from hideseek.api.models import GameState
from hideseek.errors import MalformedStateError
from hideseek.game_store import decode_state
from hideseek.streams import StateFeed

logger = logging.getLogger(__name__)

RedisFactory = Callable[[], redis.Redis]


def state_message(state: GameState | None) -> dict[str, object]:
    return {"type": "game_state", "state": state.model_dump(mode="json") if state is not None else None}


@dataclass(slots=True)
class _Relay:
    task: asyncio.Task[None]
    ready: asyncio.Event
    stop: asyncio.Event


class GameWebSocketHub:
    """WebSocket fan-out keyed by state document key.

    Contract:
      - register a connection via `connect(key, websocket, redis_factory=...)`.
      - while a key has connections, one relay per process follows the key's Redis
        change feed and pushes every published document to all of them, whichever
        process did the write.
      - `broadcast(key, payload)` pushes directly to this process's connections.
    """

    def __init__(self, *, poll_timeout: float = 0.2) -> None:
        self._by_key: dict[str, set[WebSocket]] = defaultdict(set)
        self._relays: dict[str, _Relay] = {}
        self._lock = asyncio.Lock()
        self._poll_timeout = poll_timeout

    async def connect(self, key: str, websocket: WebSocket, *, redis_factory: RedisFactory | None = None) -> None:
        await websocket.accept()
        async with self._lock:
            self._by_key[key].add(websocket)
            relay = self._relays.get(key)
            if relay is None and redis_factory is not None:
                ready = asyncio.Event()
                stop = asyncio.Event()
                task = asyncio.create_task(self._relay(key, redis_factory, ready, stop))
                relay = self._relays[key] = _Relay(task=task, ready=ready, stop=stop)

        if relay is not None:
            # Subscribed before the caller reads its snapshot.
            await relay.ready.wait()

    async def disconnect(self, key: str, websocket: WebSocket) -> None:
        relay: _Relay | None = None
        async with self._lock:
            conns = self._by_key.get(key, set())
            conns.discard(websocket)
            # Sockets dropped by a failed broadcast leave an empty set behind.
            if not conns:
                self._by_key.pop(key, None)
                relay = self._relays.pop(key, None)
                if relay is not None:
                    relay.stop.set()

        if relay is not None:
            # Let the relay unsubscribe before the last connection goes away.
            await asyncio.gather(relay.task, return_exceptions=True)

    def connection_count(self, key: str) -> int:
        return len(self._by_key.get(key, ()))

    def is_relaying(self, key: str) -> bool:
        return key in self._relays

    async def broadcast(self, key: str, payload: dict[str, object]) -> None:
        async with self._lock:
            conns = list(self._by_key.get(key, set()))

        if not conns:
            return

        dead: list[WebSocket] = []
        for ws in conns:
            try:
                await ws.send_json(payload)
            except Exception:
                dead.append(ws)

        if dead:
            logger.debug("Dropping %d dead websocket(s) for %s", len(dead), key)
            async with self._lock:
                for ws in dead:
                    self._by_key.get(key, set()).discard(ws)

    async def broadcast_state(self, key: str, state: GameState) -> None:
        await self.broadcast(key, state_message(state))

    async def _relay(self, key: str, redis_factory: RedisFactory, ready: asyncio.Event, stop: asyncio.Event) -> None:
        r: redis.Redis | None = None
        try:
            r = redis_factory()
            feed = await run_in_threadpool(StateFeed, r=r, key=key)
        except Exception:
            logger.exception("Could not subscribe to change feed of %s", key)
            async with self._lock:
                if self._relays.get(key) is not None and self._relays[key].task is asyncio.current_task():
                    self._relays.pop(key, None)
            ready.set()
            if r is not None:
                r.close()
            raise

        ready.set()
        logger.debug("Relaying change feed of %s", key)
        try:
            while not stop.is_set():
                raw = await run_in_threadpool(feed.get, self._poll_timeout)
                if raw is None:
                    continue
                try:
                    state = decode_state(raw)
                except MalformedStateError as e:
                    logger.warning("Not relaying malformed push on %s: %s", key, e)
                    continue
                await self.broadcast_state(key, state)
        finally:
            feed.close()
            r.close()
            logger.debug("Stopped relaying %s", key)


hub = GameWebSocketHub()
