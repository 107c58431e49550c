from __future__ import annotations

import random
from collections.abc import Callable, Generator
from functools import lru_cache

import redis

from hideseek.assets.registry import GameAssets
from hideseek.assets.singleton import get_assets
from hideseek.config import get_settings
from hideseek.infra.redis_client import create_redis


def get_redis() -> Generator[redis.Redis, None, None]:
    client = create_redis()
    try:
        yield client
    finally:
        try:
            client.close()
        except Exception:
            # Some redis client versions don't require explicit close.
            pass


def get_game_assets() -> GameAssets:
    return get_assets()


def get_redis_factory() -> Callable[[], redis.Redis]:
    """Client factory for long-lived subscribers that outlive a single request."""

    return create_redis


@lru_cache(maxsize=1)
def _process_rng(seed: int | None) -> random.Random:
    return random.Random(seed)


def get_rng() -> random.Random:
    """Process-wide random source for challenge draws.

    Seeded when HIDESEEK_CHALLENGE_SEED is set, so a run replays one draw sequence.
    """

    return _process_rng(get_settings().challenge_seed)
