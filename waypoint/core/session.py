from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from waypoint.world.models import START_NODE, Character, Player


class InteractionMode(StrEnum):
    exploring = "exploring"
    dialogue = "dialogue"


class InteractionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: InteractionMode = InteractionMode.exploring

    # Only set while mode == dialogue.
    active_character: Character | None = None
    active_node: str | None = None

    @staticmethod
    def exploring() -> "InteractionState":
        return InteractionState()

    @staticmethod
    def talking_to(character: Character, node: str = START_NODE) -> "InteractionState":
        return InteractionState(mode=InteractionMode.dialogue, active_character=character, active_node=node)

    @property
    def in_dialogue(self) -> bool:
        return self.mode == InteractionMode.dialogue


class SessionState(BaseModel):
    """Live session: the player record plus the interaction mode.

    Never persisted. Transitions return a new value via `model_copy(update=...)`.
    """

    model_config = ConfigDict(frozen=True)

    player: Player
    interaction: InteractionState = Field(default_factory=InteractionState)

    @staticmethod
    def start(player: Player) -> "SessionState":
        return SessionState(player=player, interaction=InteractionState.exploring())
