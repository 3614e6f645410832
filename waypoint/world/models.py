from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

START_NODE = "start"
END_NODE = "end"


class Direction(StrEnum):
    north = "north"
    south = "south"
    east = "east"
    west = "west"


def _read_only(v: Mapping[Any, Any]) -> Mapping[Any, Any]:
    # Shared by every reader of the world; block in-place edits after load.
    return MappingProxyType(dict(v))


class WorldRecord(BaseModel):
    """Base for content loaded from the data files.

    Content files use camelCase keys (`mapIcon`, `currentLocation`); Python code
    uses the snake_case field names. Records are immutable once loaded.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Choice(WorldRecord):
    text: str
    # Either a node key in the same character's dialogue or END_NODE.
    next: str

    @property
    def ends_dialogue(self) -> bool:
        return self.next == END_NODE


class DialogueNode(WorldRecord):
    text: str
    choices: tuple[Choice, ...] = ()

    @field_validator("choices", mode="before")
    @classmethod
    def _none_means_no_choices(cls, v: Any) -> Any:
        return () if v is None else v


class Character(WorldRecord):
    id: str
    name: str
    icon: str = ""
    dialogue: Mapping[str, DialogueNode] = Field(default_factory=dict, validate_default=True)

    @field_validator("dialogue", mode="after")
    @classmethod
    def _freeze_dialogue(cls, v: Mapping[str, DialogueNode]) -> Mapping[str, DialogueNode]:
        return _read_only(v)

    @field_serializer("dialogue")
    def _dump_dialogue(self, v: Mapping[str, DialogueNode]) -> dict[str, DialogueNode]:
        return dict(v)

    def __hash__(self) -> int:
        return hash(self.id)


class Location(WorldRecord):
    id: str
    x: int
    y: int
    name: str
    description: str = ""
    map_icon: str = ""
    connections: Mapping[Direction, str] = Field(default_factory=dict, validate_default=True)
    characters: tuple[str, ...] = ()

    @field_validator("connections", mode="before")
    @classmethod
    def _lowercase_directions(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, Mapping):
            return {str(k).strip().lower(): target for k, target in v.items()}
        return v

    @field_validator("connections", mode="after")
    @classmethod
    def _freeze_connections(cls, v: Mapping[Direction, str]) -> Mapping[Direction, str]:
        return _read_only(v)

    @field_serializer("connections")
    def _dump_connections(self, v: Mapping[Direction, str]) -> dict[Direction, str]:
        return dict(v)

    @field_validator("characters", mode="before")
    @classmethod
    def _none_means_nobody(cls, v: Any) -> Any:
        return () if v is None else v

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def coords(self) -> tuple[int, int]:
        return (self.x, self.y)


class PlayerStats(WorldRecord):
    shields: int = 0
    hp: int = 0
    energy: int = 0
    physique: int = 0
    reflexes: int = 0
    aim: int = 0
    intelligence: int = 0
    willpower: int = 0


class Player(WorldRecord):
    current_location: str
    stats: PlayerStats = Field(default_factory=PlayerStats)
    level: int = Field(default=1, ge=0)
    xp: int = 0
    credits: int = 0
    status_effects: tuple[str, ...] = ()
