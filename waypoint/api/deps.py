from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request, status

from waypoint.controller import InteractionController
from waypoint.world.registry import WorldLoadError, load_world

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GameHandle:
    """What the app owns after startup: a running controller or the load error."""

    controller: InteractionController | None = None
    load_error: str | None = None


def init_game(app: FastAPI, *, data_dir: Path) -> GameHandle:
    """Load the world and attach the one session to `app.state`.

    A load failure is recorded rather than raised, so the UI can show it.
    """

    try:
        loaded = load_world(data_dir=data_dir)
    except WorldLoadError as e:
        logger.exception("Failed to load game data from %s", data_dir)
        handle = GameHandle(load_error=str(e))
    else:
        handle = GameHandle(controller=InteractionController.from_loaded(loaded))

    app.state.game = handle
    return handle


def get_game(request: Request) -> GameHandle:
    handle = getattr(request.app.state, "game", None)
    if handle is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Game not initialized")
    return handle


def get_controller(request: Request) -> InteractionController:
    handle = get_game(request)
    if handle.controller is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=handle.load_error or "Game data not loaded",
        )
    return handle.controller
