"""Follow the shared game document from a terminal.

Contract
- Subscribes to the Redis change feed of the game state key.
- Prints the projected view on start and after every accepted push.
- Out-of-order or malformed pushes are ignored (see `StateMirror`).

Usage:
    uv run python scripts/watch_game.py --filter notdone

Reads REDIS_URL / HIDESEEK_* settings from the environment or `.env`.
"""

from __future__ import annotations

import argparse
import logging
import sys

from hideseek.api.models import ChallengeFilter
from hideseek.assets.singleton import init_assets
from hideseek.config import get_settings
from hideseek.errors import MalformedStateError
from hideseek.game_store import get_state
from hideseek.infra.redis_client import create_redis
from hideseek.streams import iter_raw_updates
from hideseek.sync import StateMirror
from hideseek.view import render_text

logger = logging.getLogger("watch_game")


def main() -> int:
    parser = argparse.ArgumentParser(description="Watch the HK Hide-and-Seek game state")
    parser.add_argument(
        "--filter",
        choices=[f.value for f in ChallengeFilter],
        default=ChallengeFilter.all.value,
        help="Which challenges to show",
    )
    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    assets = init_assets(assets_dir=settings.assets_dir)
    challenge_filter = ChallengeFilter(args.filter)

    r = create_redis()
    mirror = StateMirror()
    try:
        initial = get_state(r=r, key=settings.state_key)
    except MalformedStateError as e:
        logger.warning("Ignoring stored state: %s", e)
        initial = None
    if initial is not None:
        mirror.apply(initial)
    print(render_text(mirror.view(assets=assets, challenge_filter=challenge_filter)), flush=True)

    try:
        for raw in iter_raw_updates(r=r, key=settings.state_key):
            if raw is None:
                continue
            if mirror.apply_raw(raw):
                print(render_text(mirror.view(assets=assets, challenge_filter=challenge_filter)), flush=True)
    except KeyboardInterrupt:
        return 0
    finally:
        r.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
