from fastapi import FastAPI
import logging

from hideseek.api.routes import router
from hideseek.assets.startup import init_assets_for_app
from hideseek.config import get_settings

app = FastAPI(title="hk-hide-and-seek", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    init_assets_for_app()
    logger.info("Serving game state from %s", get_settings().state_key)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "hk-hide-and-seek", "version": "0.1.0"}
