from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class Role(StrEnum):
    seeker = "Seeker"
    hider = "Hider"


class ChallengeFilter(StrEnum):
    all = "all"
    done = "done"
    notdone = "notdone"


class Teams(BaseModel):
    seekers1: list[str] = Field(default_factory=list)
    seekers2: list[str] = Field(default_factory=list)
    hiders: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _each_player_in_one_team(self) -> "Teams":
        seen: set[str] = set()
        for name in [*self.seekers1, *self.seekers2, *self.hiders]:
            if name in seen:
                raise ValueError(f"player {name!r} is listed in more than one team")
            seen.add(name)
        return self

    def is_seeker(self, player: str) -> bool:
        return player in self.seekers1 or player in self.seekers2


class ChallengeRecord(BaseModel):
    player: str
    station: str
    challenge: str
    completed: bool = False


class GameState(BaseModel):
    """The shared game document.

    `teams`, `locations` and `challenges` are required: a stored document missing
    any of them is rejected at decode time instead of being patched with defaults.
    """

    # New for every "assign teams"; None for documents written before games carried an id.
    game_id: UUID | None = None
    # Bumped by the store on every successful write. Only comparable within one game_id.
    version: int = Field(0, ge=0)
    updated_at: datetime | None = None

    teams: Teams
    coins: int = 0
    # Never mutated; kept so the stored shape stays stable.
    questions: list[Any] = Field(default_factory=list)
    locations: dict[str, str]
    challenges: list[ChallengeRecord]


class MoveRequest(BaseModel):
    destination: str = Field(..., min_length=1)
    expected_version: int | None = Field(None, ge=0)


class ToggleRequest(BaseModel):
    expected_version: int | None = Field(None, ge=0)


class PlayerView(BaseModel):
    name: str
    role: Role
    location: str
    moves: list[str] = Field(default_factory=list)


class ChallengeView(BaseModel):
    # Position in the full (unfiltered) challenge list; use it to toggle.
    index: int
    player: str
    station: str
    challenge: str
    completed: bool


class GameView(BaseModel):
    started: bool
    version: int
    teams: Teams
    coins: int
    players: list[PlayerView]
    filter: ChallengeFilter
    challenges: list[ChallengeView]


class BoardResponse(BaseModel):
    players: list[str]
    stations: list[str]
    start_station: str
    adjacency: dict[str, list[str]]
    challenge_pool: list[str]
