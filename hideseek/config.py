from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# project root is one level up from this file: hideseek/config.py
PROJECT_ROOT = Path(__file__).resolve().parents[1]


@dataclass(frozen=True, slots=True)
class Settings:
    redis_url: str
    state_key: str
    assets_dir: Path
    write_retries: int
    challenge_seed: int | None
    log_level: str


def _optional_int(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    return int(raw)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings from the environment (and `.env` if present) once per process."""

    load_dotenv(dotenv_path=PROJECT_ROOT / ".env", override=False)

    assets_dir = os.environ.get("HIDESEEK_ASSETS_DIR")
    return Settings(
        redis_url=os.environ.get("REDIS_URL", "redis://localhost:6379/0"),
        state_key=os.environ.get("HIDESEEK_STATE_KEY", "hideseek:game:state"),
        assets_dir=Path(assets_dir) if assets_dir else PROJECT_ROOT / "assets",
        write_retries=max(1, int(os.environ.get("HIDESEEK_WRITE_RETRIES", "3"))),
        challenge_seed=_optional_int(os.environ.get("HIDESEEK_CHALLENGE_SEED")),
        log_level=os.environ.get("HIDESEEK_LOG_LEVEL", "INFO").upper(),
    )
