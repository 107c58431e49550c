from __future__ import annotations

import random
from collections.abc import Generator

import fakeredis
import pytest
from fastapi.testclient import TestClient

from hideseek.assets.registry import GameAssets
from hideseek.config import PROJECT_ROOT

RNG_SEED = 7


@pytest.fixture(scope="session", autouse=True)
def _init_assets_from_repo() -> None:
    """Initialize the board from the repo's `assets/` dir before any test runs."""

    from hideseek.assets.singleton import init_assets, reset_assets_for_tests

    reset_assets_for_tests()
    init_assets(assets_dir=PROJECT_ROOT / "assets")


@pytest.fixture()
def assets() -> GameAssets:
    from hideseek.assets.singleton import get_assets

    return get_assets()


@pytest.fixture()
def rng_seed() -> int:
    return RNG_SEED


@pytest.fixture()
def redis_server() -> fakeredis.FakeServer:
    return fakeredis.FakeServer()


@pytest.fixture()
def r(redis_server: fakeredis.FakeServer) -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(server=redis_server, decode_responses=True)


@pytest.fixture()
def client_and_redis(
    r: fakeredis.FakeRedis, redis_server: fakeredis.FakeServer
) -> Generator[tuple[TestClient, fakeredis.FakeRedis], None, None]:
    """FastAPI TestClient wired to fakeredis and a seeded challenge draw."""

    from hideseek.api.deps import get_redis, get_redis_factory, get_rng
    from hideseek.main import app

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    app.dependency_overrides[get_redis] = _override
    rng = random.Random(RNG_SEED)
    app.dependency_overrides[get_rng] = lambda: rng
    # The change-feed relay closes its client, so it gets its own connection to the same server.
    app.dependency_overrides[get_redis_factory] = lambda: (
        lambda: fakeredis.FakeRedis(server=redis_server, decode_responses=True)
    )
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()
