from __future__ import annotations

import logging
import random
from collections.abc import Callable

import redis
from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from hideseek import actions
from hideseek.api.deps import get_game_assets, get_redis, get_redis_factory, get_rng
from hideseek.api.models import (
    BoardResponse,
    ChallengeFilter,
    GameState,
    GameView,
    MoveRequest,
    ToggleRequest,
)
from hideseek.assets.registry import GameAssets
from hideseek.config import get_settings
from hideseek.errors import GameNotStartedError, MalformedStateError, StaleStateError
from hideseek.game_store import get_state
from hideseek.view import build_view
from hideseek.websocket_hub import hub, state_message

logger = logging.getLogger(__name__)

router = APIRouter()


def _http_error(e: ValueError) -> HTTPException:
    if isinstance(e, GameNotStartedError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, StaleStateError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(e, MalformedStateError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    return HTTPException(status_code=code, detail=str(e))


@router.websocket("/ws/game")
async def game_updates_ws(
    websocket: WebSocket,
    r: redis.Redis = Depends(get_redis),
    redis_factory: Callable[[], redis.Redis] = Depends(get_redis_factory),
) -> None:
    """Send the current document, then every document published on the change feed."""

    key = get_settings().state_key
    await hub.connect(key, websocket, redis_factory=redis_factory)

    try:
        try:
            snapshot = get_state(r=r, key=key)
        except MalformedStateError as e:
            logger.warning("Not sending malformed snapshot: %s", e)
            snapshot = None
        await websocket.send_json(state_message(snapshot))

        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(key, websocket)
    except Exception:
        await hub.disconnect(key, websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/board", response_model=BoardResponse)
async def board_route(assets: GameAssets = Depends(get_game_assets)) -> BoardResponse:
    graph = assets.graph
    return BoardResponse(
        players=list(assets.roster),
        stations=list(graph.stations),
        start_station=graph.start_station,
        adjacency={s: list(n) for s, n in graph.adjacency.items()},
        challenge_pool=list(assets.challenge_pool),
    )


@router.get("/game/state", response_model=GameState)
async def get_state_route(r: redis.Redis = Depends(get_redis)) -> GameState:
    try:
        state = get_state(r=r)
    except MalformedStateError as e:
        raise _http_error(e) from e
    if state is None:
        raise _http_error(GameNotStartedError())
    return state


@router.get("/game/view", response_model=GameView)
async def get_view_route(
    challenge_filter: ChallengeFilter = Query(ChallengeFilter.all, alias="filter"),
    r: redis.Redis = Depends(get_redis),
    assets: GameAssets = Depends(get_game_assets),
) -> GameView:
    try:
        state = get_state(r=r)
    except MalformedStateError as e:
        logger.warning("Showing empty view: %s", e)
        state = None
    return build_view(state=state, assets=assets, challenge_filter=challenge_filter)


@router.post("/game/teams", response_model=GameState, status_code=status.HTTP_201_CREATED)
async def assign_teams_route(
    r: redis.Redis = Depends(get_redis),
    assets: GameAssets = Depends(get_game_assets),
) -> GameState:
    try:
        result = actions.assign_teams(r=r, assets=assets)
    except ValueError as e:
        raise _http_error(e) from e

    return result.state


@router.post("/game/players/{player}/move", response_model=GameState)
async def move_route(
    player: str,
    payload: MoveRequest,
    r: redis.Redis = Depends(get_redis),
    assets: GameAssets = Depends(get_game_assets),
    rng: random.Random = Depends(get_rng),
) -> GameState:
    try:
        result = actions.move_player(
            r=r,
            assets=assets,
            player=player,
            destination=payload.destination,
            rng=rng,
            expected_version=payload.expected_version,
        )
    except ValueError as e:
        raise _http_error(e) from e

    return result.state


@router.post("/game/challenges/{index}/toggle", response_model=GameState)
async def toggle_route(
    index: int,
    payload: ToggleRequest | None = None,
    r: redis.Redis = Depends(get_redis),
    assets: GameAssets = Depends(get_game_assets),
) -> GameState:
    try:
        result = actions.toggle_challenge_complete(
            r=r,
            assets=assets,
            index=index,
            expected_version=payload.expected_version if payload is not None else None,
        )
    except ValueError as e:
        raise _http_error(e) from e

    return result.state
