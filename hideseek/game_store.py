from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime

import redis
from pydantic import ValidationError

from hideseek.api.models import GameState
from hideseek.config import get_settings
from hideseek.errors import GameNotStartedError, MalformedStateError, StaleStateError
from hideseek.streams import publish_state

logger = logging.getLogger(__name__)

# Receives the decoded current document (None when overwriting) and returns the next one.
Mutation = Callable[[GameState | None], GameState]


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _state_key(key: str | None) -> str:
    return key or get_settings().state_key


def decode_state(raw: str | bytes) -> GameState:
    """Validate a stored/published document; anything that doesn't fit is rejected."""

    try:
        return GameState.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedStateError(f"Stored game state is malformed: {e.error_count()} error(s)") from e


def _peek_version(raw: str | None) -> int:
    # Lenient read used when the document is about to be replaced anyway.
    if not raw:
        return 0
    try:
        version = json.loads(raw).get("version", 0)
    except (ValueError, AttributeError):
        return 0
    return version if isinstance(version, int) and version >= 0 else 0


def get_state(*, r: redis.Redis, key: str | None = None) -> GameState | None:
    raw = r.get(_state_key(key))
    if not raw:
        return None
    return decode_state(raw)


def require_state(*, r: redis.Redis, key: str | None = None) -> GameState:
    state = get_state(r=r, key=key)
    if state is None:
        raise GameNotStartedError()
    return state


def write_state(
    *,
    r: redis.Redis,
    mutate: Mutation,
    key: str | None = None,
    expected_version: int | None = None,
    overwrite: bool = False,
    retries: int | None = None,
) -> GameState:
    """Conditionally replace the whole document.

    WATCHes the key, derives the next document from the current one and commits it
    with MULTI/EXEC. If another writer gets in between, the read-modify-write is
    redone up to `retries` times before giving up with StaleStateError.

    - `expected_version`: if given, the stored version must match or nothing is written.
    - `overwrite`: don't decode the current document (a reset may replace a malformed one).

    The new document is published on the change feed after the commit.
    """

    skey = _state_key(key)
    attempts = retries if retries is not None else get_settings().write_retries

    for attempt in range(1, attempts + 1):
        with r.pipeline() as pipe:
            try:
                pipe.watch(skey)
                raw = pipe.get(skey)

                current: GameState | None
                if overwrite:
                    current = None
                    current_version = _peek_version(raw)
                else:
                    if not raw:
                        raise GameNotStartedError()
                    current = decode_state(raw)
                    current_version = current.version

                if expected_version is not None and expected_version != current_version:
                    raise StaleStateError(
                        f"Game state changed (expected version {expected_version}, found {current_version})"
                    )

                nxt = mutate(current).model_copy(update={"version": current_version + 1, "updated_at": _now()})

                pipe.multi()
                pipe.set(skey, nxt.model_dump_json())
                pipe.execute()
            except redis.WatchError:
                logger.warning("Concurrent write on %s (attempt %d/%d)", skey, attempt, attempts)
                continue

        logger.info("Wrote %s at version %d", skey, nxt.version)
        publish_state(r=r, key=skey, state=nxt)
        return nxt

    raise StaleStateError(f"Gave up writing {skey} after {attempts} concurrent modifications")
