from __future__ import annotations

import random
from collections.abc import Generator

import fakeredis
import pytest
from fastapi.testclient import TestClient

from hideseek import actions
from hideseek.api.deps import _process_rng, get_rng
from hideseek.assets.registry import GameAssets
from hideseek.config import get_settings

SEED = 11


@pytest.fixture()
def seeded_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("HIDESEEK_CHALLENGE_SEED", str(SEED))
    get_settings.cache_clear()
    _process_rng.cache_clear()
    yield
    get_settings.cache_clear()
    _process_rng.cache_clear()


def test_seeded_draws_continue_one_sequence(
    seeded_settings: None, r: fakeredis.FakeRedis, assets: GameAssets
) -> None:
    actions.assign_teams(r=r, assets=assets)
    # Alice shuttles between Central and Admiralty; every move draws once.
    route = ["Admiralty", "Central"] * 3
    for destination in route:
        state = actions.move_player(r=r, assets=assets, player="Alice", destination=destination, rng=get_rng()).state

    expected = random.Random(SEED)
    drawn = [c.challenge for c in state.challenges]
    assert drawn == [expected.choice(assets.challenge_pool) for _ in route]


def test_rng_is_shared_across_requests(seeded_settings: None) -> None:
    assert get_rng() is get_rng()


def test_api_moves_draw_from_one_sequence(
    client_and_redis: tuple[TestClient, fakeredis.FakeRedis], assets: GameAssets, rng_seed: int
) -> None:
    client, _ = client_and_redis
    client.post("/game/teams")
    client.post("/game/players/Alice/move", json={"destination": "Admiralty"})
    data = client.post("/game/players/Alice/move", json={"destination": "Wan Chai"}).json()

    expected = random.Random(rng_seed)
    assert [c["challenge"] for c in data["challenges"]] == [
        expected.choice(assets.challenge_pool),
        expected.choice(assets.challenge_pool),
    ]
