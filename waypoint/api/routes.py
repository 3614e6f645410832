from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError

from waypoint import __version__
from waypoint.api.deps import GameHandle, get_controller, get_game
from waypoint.api.models import CommandResponse, InfoResponse
from waypoint.commands import Command, command_adapter, command_for_key
from waypoint.controller import InteractionController
from waypoint.core.views import Frame, error_frame
from waypoint.websocket_hub import hub

router = APIRouter()


async def _apply(controller: InteractionController, command: Command) -> CommandResponse:
    result = controller.dispatch(command)
    if result.changed and controller.last_frame is not None:
        frame = controller.last_frame
        await hub.broadcast({"type": "frame", "frame": frame.model_dump(mode="json")})
    else:
        frame = controller.frame()
    return CommandResponse(changed=result.changed, reason=result.reason, frame=frame)


@router.websocket("/ws/frames")
async def frames_ws(websocket: WebSocket) -> None:
    await hub.connect(websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(websocket)
    except Exception:
        await hub.disconnect(websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/info", response_model=InfoResponse)
async def info(game: GameHandle = Depends(get_game)) -> InfoResponse:
    return InfoResponse(name="waypoint", version=__version__, loaded=game.controller is not None)


@router.get("/frame", response_model=Frame)
async def frame_route(game: GameHandle = Depends(get_game)) -> Frame:
    if game.controller is None:
        return error_frame()
    return game.controller.frame()


@router.post("/commands", response_model=CommandResponse)
async def command_route(
    body: dict[str, Any],
    controller: InteractionController = Depends(get_controller),
) -> CommandResponse:
    try:
        command = command_adapter.validate_python(body)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    return await _apply(controller, command)


@router.post("/keys/{key}", response_model=CommandResponse)
async def key_route(key: str, controller: InteractionController = Depends(get_controller)) -> CommandResponse:
    command = command_for_key(key)
    if command is None:
        return CommandResponse(changed=False, reason=f"unbound key {key!r}", frame=controller.frame())
    return await _apply(controller, command)
