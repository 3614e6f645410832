from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from waypoint.world.models import Direction

CommandName = Literal["move", "start_interaction", "select_choice", "end_interaction"]


class MoveCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["move"] = "move"
    direction: Direction


class StartInteractionCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["start_interaction"] = "start_interaction"
    character_id: str


class SelectChoiceCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["select_choice"] = "select_choice"
    index: int = Field(..., ge=0)


class EndInteractionCommand(BaseModel):
    """Leave the current conversation (same as selecting an absent choice)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["end_interaction"] = "end_interaction"


Command = Annotated[
    MoveCommand | StartInteractionCommand | SelectChoiceCommand | EndInteractionCommand,
    Field(discriminator="type"),
]

command_adapter: TypeAdapter[Command] = TypeAdapter(Command)


# Keyboard collaborator: WASD movement only.
KEY_BINDINGS: dict[str, Direction] = {
    "w": Direction.north,
    "a": Direction.west,
    "s": Direction.south,
    "d": Direction.east,
}

KEY_HINTS: dict[Direction, str] = {d: k.upper() for k, d in KEY_BINDINGS.items()}


def command_for_key(key: str) -> MoveCommand | None:
    direction = KEY_BINDINGS.get(key.strip().lower())
    if direction is None:
        return None
    return MoveCommand(direction=direction)
