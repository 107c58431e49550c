from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Literal

import redis

from hideseek import controller
from hideseek.api.models import GameState
from hideseek.assets.registry import GameAssets
from hideseek.errors import InvalidMoveError
from hideseek.game_store import write_state

logger = logging.getLogger(__name__)

ActionName = Literal["assign_teams", "move", "toggle"]


@dataclass(frozen=True, slots=True)
class ActionResult:
    action: ActionName
    state: GameState


def assign_teams(*, r: redis.Redis, assets: GameAssets, key: str | None = None) -> ActionResult:
    """Start over: unconditional reset of the whole document."""

    state = write_state(
        r=r,
        key=key,
        overwrite=True,
        mutate=lambda _current: controller.assign_teams(assets=assets),
    )
    logger.info("Teams assigned: %s", state.teams.model_dump())
    return ActionResult(action="assign_teams", state=state)


def move_player(
    *,
    r: redis.Redis,
    assets: GameAssets,
    player: str,
    destination: str,
    rng: random.Random,
    expected_version: int | None = None,
    key: str | None = None,
) -> ActionResult:
    def _mutate(current: GameState | None) -> GameState:
        assert current is not None
        return controller.move_player(state=current, player=player, destination=destination, assets=assets, rng=rng)

    try:
        state = write_state(r=r, key=key, expected_version=expected_version, mutate=_mutate)
    except InvalidMoveError as e:
        logger.info("Rejected move %s: %s -> %s", e.player, e.origin, e.destination)
        raise

    logger.info("%s moved to %s", player, destination)
    return ActionResult(action="move", state=state)


def toggle_challenge_complete(
    *,
    r: redis.Redis,
    assets: GameAssets,
    index: int,
    expected_version: int | None = None,
    key: str | None = None,
) -> ActionResult:
    def _mutate(current: GameState | None) -> GameState:
        assert current is not None
        return controller.toggle_challenge_complete(state=current, index=index, assets=assets)

    state = write_state(r=r, key=key, expected_version=expected_version, mutate=_mutate)
    return ActionResult(action="toggle", state=state)
