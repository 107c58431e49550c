from __future__ import annotations

from hideseek.assets.singleton import init_assets
from hideseek.config import get_settings


def init_assets_for_app() -> None:
    init_assets(assets_dir=get_settings().assets_dir)
