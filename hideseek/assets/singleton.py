from __future__ import annotations

from pathlib import Path

from hideseek.assets.registry import GameAssets, load_game_assets


_ASSETS: GameAssets | None = None


def init_assets(*, assets_dir: Path) -> GameAssets:
    """Load the board once and cache it.

    Safe to call multiple times; subsequent calls return the already loaded instance.
    """

    global _ASSETS
    if _ASSETS is None:
        _ASSETS = load_game_assets(assets_dir=assets_dir)
    return _ASSETS


def reset_assets_for_tests() -> None:
    global _ASSETS
    _ASSETS = None


def get_assets() -> GameAssets:
    if _ASSETS is None:
        raise RuntimeError("Assets not initialized. Call init_assets() at startup.")
    return _ASSETS
