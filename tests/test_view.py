from __future__ import annotations

import random

import pytest

from hideseek import controller
from hideseek.api.models import ChallengeFilter, GameState, Role, Teams
from hideseek.assets.registry import GameAssets
from hideseek.view import build_view, filter_challenges, render_text, role_for


def _played(assets: GameAssets) -> GameState:
    rng = random.Random(11)
    state = controller.assign_teams(assets=assets)
    for player, dest in [("Alice", "Admiralty"), ("Bob", "Star Ferry"), ("Alice", "Wan Chai"), ("Eve", "Admiralty")]:
        state = controller.move_player(state=state, player=player, destination=dest, assets=assets, rng=rng)
    state = controller.toggle_challenge_complete(state=state, index=0, assets=assets)
    return controller.toggle_challenge_complete(state=state, index=2, assets=assets)


def test_role_derivation() -> None:
    teams = Teams(seekers1=["Alice"], seekers2=["Bob"], hiders=["Carol"])
    assert role_for(teams=teams, player="Alice") == Role.seeker
    assert role_for(teams=teams, player="Bob") == Role.seeker
    assert role_for(teams=teams, player="Carol") == Role.hider
    # not on any team
    assert role_for(teams=teams, player="Dan") == Role.hider


def test_filters_partition_challenges(assets: GameAssets) -> None:
    challenges = _played(assets).challenges

    everything = filter_challenges(challenges, ChallengeFilter.all)
    done = filter_challenges(challenges, ChallengeFilter.done)
    notdone = filter_challenges(challenges, ChallengeFilter.notdone)

    assert [c.index for c in everything] == [0, 1, 2, 3]
    assert [c.index for c in done] == [0, 2]
    assert [c.index for c in notdone] == [1, 3]

    done_idx = {c.index for c in done}
    notdone_idx = {c.index for c in notdone}
    assert done_idx & notdone_idx == set()
    assert done_idx | notdone_idx == {c.index for c in everything}


def test_filtered_entries_keep_their_full_list_index(assets: GameAssets) -> None:
    state = _played(assets)
    for c in filter_challenges(state.challenges, ChallengeFilter.notdone):
        full = state.challenges[c.index]
        assert (c.player, c.station, c.challenge, c.completed) == (
            full.player,
            full.station,
            full.challenge,
            full.completed,
        )


def test_view_lists_players_with_moves(assets: GameAssets) -> None:
    view = build_view(state=_played(assets), assets=assets)

    assert view.started is True
    assert [p.name for p in view.players] == list(assets.roster)
    alice = next(p for p in view.players if p.name == "Alice")
    assert alice.role == Role.seeker
    assert alice.location == "Wan Chai"
    assert alice.moves == ["Admiralty", "Tsim Sha Tsui"]

    charlie = next(p for p in view.players if p.name == "Charlie")
    assert charlie.moves == ["Admiralty", "Star Ferry"]


def test_view_without_game_is_empty(assets: GameAssets) -> None:
    view = build_view(state=None, assets=assets, challenge_filter=ChallengeFilter.done)

    assert view.started is False
    assert view.version == 0
    assert view.coins == 0
    assert view.teams == Teams()
    assert view.challenges == []
    assert all(p.location == "Unknown" and p.moves == [] for p in view.players)
    assert all(p.role == Role.hider for p in view.players)


@pytest.mark.parametrize("challenge_filter", list(ChallengeFilter))
def test_render_text_mentions_every_shown_challenge(assets: GameAssets, challenge_filter: ChallengeFilter) -> None:
    view = build_view(state=_played(assets), assets=assets, challenge_filter=challenge_filter)
    text = render_text(view)

    assert f"[{challenge_filter.value}]" in text
    for c in view.challenges:
        assert f"#{c.index} {c.player} at {c.station}" in text


def test_render_text_without_game(assets: GameAssets) -> None:
    assert render_text(build_view(state=None, assets=assets)) == "No game in progress."
