from __future__ import annotations

import pytest

from hideseek import controller
from hideseek.assets.registry import GameAssets
from hideseek.errors import ChallengeNotFoundError, InvalidMoveError, UnknownPlayerError
from hideseek.rules import ValidationContext, pipeline_for_action


def test_move_pipeline_accepts_one_hop(assets: GameAssets) -> None:
    state = controller.assign_teams(assets=assets)
    ctx = ValidationContext(action="move", player="Frank", destination="Star Ferry")
    pipeline_for_action("move").validate(ctx=ctx, state=state, assets=assets)


def test_move_pipeline_checks_player_before_destination(assets: GameAssets) -> None:
    state = controller.assign_teams(assets=assets)
    ctx = ValidationContext(action="move", player="Nobody", destination="Nowhere")

    with pytest.raises(UnknownPlayerError) as e:
        pipeline_for_action("move").validate(ctx=ctx, state=state, assets=assets)
    assert "Nobody" in str(e.value)


def test_move_pipeline_rejects_unknown_station(assets: GameAssets) -> None:
    state = controller.assign_teams(assets=assets)
    ctx = ValidationContext(action="move", player="Frank", destination="Nowhere")

    with pytest.raises(InvalidMoveError):
        pipeline_for_action("move").validate(ctx=ctx, state=state, assets=assets)


def test_toggle_pipeline_requires_index(assets: GameAssets) -> None:
    state = controller.assign_teams(assets=assets)
    with pytest.raises(ChallengeNotFoundError) as e:
        pipeline_for_action("toggle").validate(ctx=ValidationContext(action="toggle"), state=state, assets=assets)
    assert str(e.value) == "Challenge index is required"
    assert e.value.index is None


def test_unknown_action_pipeline_raises() -> None:
    with pytest.raises(ValueError) as e:
        pipeline_for_action("nope")
    assert "Unknown action" in str(e.value)
