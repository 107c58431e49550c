from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from hideseek.api.models import GameState
from hideseek.assets.registry import GameAssets
from hideseek.errors import ChallengeNotFoundError, InvalidMoveError, UnknownPlayerError


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Inputs available to validators.

    Keep this tight and serializable-ish so we can safely log it.
    """

    action: str
    player: str | None = None
    destination: str | None = None
    index: int | None = None


class ActionValidator(ABC):
    """A small, composable validation unit for an incoming action."""

    @abstractmethod
    def validate(self, *, ctx: ValidationContext, state: GameState, assets: GameAssets) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class KnownPlayerValidator(ActionValidator):
    """The acting player must be on the roster."""

    def validate(self, *, ctx: ValidationContext, state: GameState, assets: GameAssets) -> None:
        if ctx.player is None or ctx.player not in assets.roster:
            raise UnknownPlayerError(str(ctx.player))


@dataclass(frozen=True, slots=True)
class AdjacentDestinationValidator(ActionValidator):
    """A move is one hop along the station graph from the player's current station."""

    def validate(self, *, ctx: ValidationContext, state: GameState, assets: GameAssets) -> None:
        player = str(ctx.player)
        origin = state.locations.get(player)
        destination = ctx.destination or ""
        if not assets.graph.is_adjacent(origin, destination):
            raise InvalidMoveError(player, origin, destination)


@dataclass(frozen=True, slots=True)
class ChallengeIndexValidator(ActionValidator):
    def validate(self, *, ctx: ValidationContext, state: GameState, assets: GameAssets) -> None:
        size = len(state.challenges)
        if ctx.index is None or not 0 <= ctx.index < size:
            raise ChallengeNotFoundError(ctx.index, size)


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[ActionValidator, ...]

    def validate(self, *, ctx: ValidationContext, state: GameState, assets: GameAssets) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, state=state, assets=assets)


DEFAULT_ACTION_PIPELINES: dict[str, ValidatorPipeline] = {
    "move": ValidatorPipeline(
        validators=(
            KnownPlayerValidator(),
            AdjacentDestinationValidator(),
        )
    ),
    "toggle": ValidatorPipeline(validators=(ChallengeIndexValidator(),)),
}


def pipeline_for_action(action: str) -> ValidatorPipeline:
    pipe = DEFAULT_ACTION_PIPELINES.get(action)
    if pipe is None:
        raise ValueError(f"Unknown action: {action}")
    return pipe
