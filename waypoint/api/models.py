from __future__ import annotations

from pydantic import BaseModel

from waypoint.core.views import Frame


class CommandResponse(BaseModel):
    changed: bool
    # Why an unchanged command was ignored.
    reason: str | None = None
    frame: Frame


class InfoResponse(BaseModel):
    name: str
    version: str
    loaded: bool
