from __future__ import annotations

from hideseek.api.models import (
    ChallengeFilter,
    ChallengeRecord,
    ChallengeView,
    GameState,
    GameView,
    PlayerView,
    Role,
    Teams,
)
from hideseek.assets.registry import GameAssets

UNKNOWN_LOCATION = "Unknown"


def role_for(*, teams: Teams, player: str) -> Role:
    return Role.seeker if teams.is_seeker(player) else Role.hider


def _keep(record: ChallengeRecord, challenge_filter: ChallengeFilter) -> bool:
    if challenge_filter == ChallengeFilter.done:
        return record.completed
    if challenge_filter == ChallengeFilter.notdone:
        return not record.completed
    return True


def filter_challenges(
    challenges: list[ChallengeRecord],
    challenge_filter: ChallengeFilter = ChallengeFilter.all,
) -> list[ChallengeView]:
    """Filtered challenges, each tagged with its position in the full list."""

    return [
        ChallengeView(index=i, **c.model_dump())
        for i, c in enumerate(challenges)
        if _keep(c, challenge_filter)
    ]


def build_view(
    *,
    state: GameState | None,
    assets: GameAssets,
    challenge_filter: ChallengeFilter = ChallengeFilter.all,
) -> GameView:
    """Project the shared document for one viewer.

    With no document yet, every roster player shows up as an unplaced hider.
    """

    teams = state.teams if state is not None else Teams()
    locations = state.locations if state is not None else {}
    challenges = state.challenges if state is not None else []

    players = []
    for name in assets.roster:
        location = locations.get(name)
        players.append(
            PlayerView(
                name=name,
                role=role_for(teams=teams, player=name),
                location=location or UNKNOWN_LOCATION,
                moves=list(assets.graph.neighbors(location)),
            )
        )

    return GameView(
        started=state is not None,
        version=state.version if state is not None else 0,
        teams=teams,
        coins=state.coins if state is not None else 0,
        players=players,
        filter=challenge_filter,
        challenges=filter_challenges(challenges, challenge_filter),
    )


def render_text(view: GameView) -> str:
    """Plain-text rendering of a view, for terminals and logs."""

    if not view.started:
        return "No game in progress."

    lines = [f"Game v{view.version} (coins: {view.coins})"]
    for p in view.players:
        moves = ", ".join(p.moves) or "-"
        lines.append(f"  {p.name} ({p.role.value}) at {p.location} -> {moves}")

    lines.append(f"Challenges [{view.filter.value}]:")
    if not view.challenges:
        lines.append("  (none)")
    for c in view.challenges:
        mark = "x" if c.completed else " "
        lines.append(f"  [{mark}] #{c.index} {c.player} at {c.station}: {c.challenge}")
    return "\n".join(lines)
