from __future__ import annotations

import logging

from fastapi import FastAPI

from waypoint import __version__
from waypoint.api.deps import init_game
from waypoint.api.routes import router
from waypoint.infra.settings import get_data_dir, get_log_level, load_env_file

load_env_file()

# Configure logging
logging.basicConfig(level=get_log_level())
logger = logging.getLogger(__name__)

app = FastAPI(title="waypoint", version=__version__)
app.include_router(router)


@app.on_event("startup")
async def _startup() -> None:
    data_dir = get_data_dir()
    logger.info("Loading game data from %s", data_dir)
    init_game(app, data_dir=data_dir)
