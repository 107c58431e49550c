from __future__ import annotations

import logging

from hideseek.api.models import ChallengeFilter, GameState, GameView
from hideseek.assets.registry import GameAssets
from hideseek.errors import MalformedStateError
from hideseek.game_store import decode_state
from hideseek.view import build_view

logger = logging.getLogger(__name__)


class StateMirror:
    """Local copy of the shared document, fed by the change feed.

    Every accepted push replaces the whole local view. A push from a different game
    (a reset) is always taken, even if its version restarted lower. Within one game,
    pushes older than what we already hold (out-of-order delivery) and payloads that
    don't decode are dropped.
    """

    def __init__(self, state: GameState | None = None) -> None:
        self._state = state

    @property
    def state(self) -> GameState | None:
        return self._state

    @property
    def version(self) -> int:
        return self._state.version if self._state is not None else 0

    def apply(self, state: GameState) -> bool:
        current = self._state
        if current is not None and state.game_id == current.game_id and state.version < current.version:
            logger.debug("Ignoring stale push v%d (holding v%d)", state.version, current.version)
            return False
        self._state = state
        return True

    def apply_raw(self, raw: str | bytes) -> bool:
        try:
            state = decode_state(raw)
        except MalformedStateError as e:
            logger.warning("Ignoring malformed game state push: %s", e)
            return False
        return self.apply(state)

    def view(self, *, assets: GameAssets, challenge_filter: ChallengeFilter = ChallengeFilter.all) -> GameView:
        return build_view(state=self._state, assets=assets, challenge_filter=challenge_filter)
