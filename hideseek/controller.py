"""Game reducers.

Each function takes the current document and returns the next one; nothing here
touches Redis or FastAPI. `hideseek.actions` runs them inside a conditional write.
"""

from __future__ import annotations

import random
from uuid import UUID, uuid4

from hideseek.api.models import ChallengeRecord, GameState, Teams
from hideseek.assets.registry import GameAssets
from hideseek.rules import ValidationContext, pipeline_for_action

SEEKER_TEAM_SIZE = 3


def assign_teams(*, assets: GameAssets, game_id: UUID | None = None) -> GameState:
    """Fresh game: first three players seek together, the next three form the
    second seeker team, anyone after that hides. Everyone starts at the start station.

    Each call starts a new game id unless one is given.
    """

    roster = list(assets.roster)
    n = SEEKER_TEAM_SIZE
    return GameState(
        game_id=game_id or uuid4(),
        teams=Teams(seekers1=roster[:n], seekers2=roster[n : 2 * n], hiders=roster[2 * n :]),
        coins=0,
        questions=[],
        locations={p: assets.start_station for p in roster},
        challenges=[],
    )


def draw_challenge(*, assets: GameAssets, rng: random.Random) -> str:
    return rng.choice(assets.challenge_pool)


def move_player(
    *,
    state: GameState,
    player: str,
    destination: str,
    assets: GameAssets,
    rng: random.Random,
) -> GameState:
    pipeline_for_action("move").validate(
        ctx=ValidationContext(action="move", player=player, destination=destination),
        state=state,
        assets=assets,
    )

    record = ChallengeRecord(
        player=player,
        station=destination,
        challenge=draw_challenge(assets=assets, rng=rng),
        completed=False,
    )
    return state.model_copy(
        update={
            "locations": {**state.locations, player: destination},
            "challenges": [*state.challenges, record],
        },
        deep=True,
    )


def toggle_challenge_complete(*, state: GameState, index: int, assets: GameAssets) -> GameState:
    pipeline_for_action("toggle").validate(
        ctx=ValidationContext(action="toggle", index=index),
        state=state,
        assets=assets,
    )

    nxt = state.model_copy(deep=True)
    entry = nxt.challenges[index]
    nxt.challenges[index] = entry.model_copy(update={"completed": not entry.completed})
    return nxt
