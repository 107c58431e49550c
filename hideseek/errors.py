from __future__ import annotations


class GameError(ValueError):
    """Base class for domain errors raised by the game controller and store."""


class GameNotStartedError(GameError):
    def __init__(self, message: str = "No game in progress; assign teams first") -> None:
        super().__init__(message)


class UnknownPlayerError(GameError):
    def __init__(self, player: str) -> None:
        super().__init__(f"Unknown player: {player}")
        self.player = player


class InvalidMoveError(GameError):
    def __init__(self, player: str, origin: str | None, destination: str) -> None:
        super().__init__("Invalid move.")
        self.player = player
        self.origin = origin
        self.destination = destination


class ChallengeNotFoundError(GameError):
    def __init__(self, index: int | None, size: int) -> None:
        if index is None:
            super().__init__("Challenge index is required")
        else:
            super().__init__(f"Challenge index {index} out of range (have {size})")
        self.index = index
        self.size = size


class StaleStateError(GameError):
    """The stored document changed under us (version mismatch or lost WATCH race)."""


class MalformedStateError(GameError):
    """The stored document exists but does not decode into a GameState."""
