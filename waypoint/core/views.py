"""Render-ready descriptors derived from the world and the session.

Everything here is a pure function of its inputs: calling it twice on the same
state yields equal descriptors, so a presentation layer can diff frames.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from waypoint.commands import (
    Command,
    EndInteractionCommand,
    KEY_HINTS,
    MoveCommand,
    SelectChoiceCommand,
    StartInteractionCommand,
)
from waypoint.core.dialogue import DialogueStatus, lookup_node, node_status
from waypoint.core.session import InteractionMode, SessionState
from waypoint.world.models import Direction, Location, Player, PlayerStats
from waypoint.world.registry import WorldModel

MAP_RADIUS = 2
CONTROL_SLOTS = 15

# Fixed slots so movement buttons never jump around between locations.
DIRECTION_SLOTS: dict[Direction, int] = {
    Direction.north: 1,
    Direction.west: 5,
    Direction.south: 6,
    Direction.east: 7,
}
FIRST_TALK_SLOT = 10

LEAVE_LABEL = "Leave"
LOAD_ERROR_TEXT = "Error: Could not load game data."


class Descriptor(BaseModel):
    model_config = ConfigDict(frozen=True)


class CellDescriptor(Descriptor):
    dx: int
    dy: int
    x: int
    y: int
    glyph: str = ""
    location_id: str | None = None
    is_player: bool = False

    @property
    def is_empty(self) -> bool:
        return self.location_id is None


class ButtonDescriptor(Descriptor):
    slot: int
    label: str
    command: Command


class StatsSnapshot(Descriptor):
    stats: PlayerStats
    level: int
    xp: int
    xp_to_next_level: int
    credits: int
    status_effects: tuple[str, ...] = ()


class NarrativeView(Descriptor):
    mode: InteractionMode
    text: str
    speaker: str
    # Only shown for characters; locations have no portrait.
    icon: str | None = None
    dialogue_status: DialogueStatus | None = None


class Frame(Descriptor):
    stats: StatsSnapshot | None = None
    narrative: NarrativeView | None = None
    map_cells: tuple[CellDescriptor, ...] = ()
    controls: tuple[ButtonDescriptor | None, ...] = ()
    error: str | None = None


def map_window(*, world: WorldModel, center: tuple[int, int]) -> list[CellDescriptor]:
    """5x5 cells around `center`, row-major (y outer, x inner).

    Consumers index into this positionally; the center cell is index 12 and is
    always flagged as the player's cell, whether or not a location exists there.
    """

    cx, cy = center
    cells: list[CellDescriptor] = []
    for dy in range(-MAP_RADIUS, MAP_RADIUS + 1):
        for dx in range(-MAP_RADIUS, MAP_RADIUS + 1):
            x, y = cx + dx, cy + dy
            loc = world.location_at(x, y)
            cells.append(
                CellDescriptor(
                    dx=dx,
                    dy=dy,
                    x=x,
                    y=y,
                    glyph=loc.map_icon if loc is not None else "",
                    location_id=loc.id if loc is not None else None,
                    is_player=(dx == 0 and dy == 0),
                )
            )
    return cells


def direction_label(direction: Direction) -> str:
    return f"{direction.value.capitalize()} ({KEY_HINTS[direction]})"


def _place(slots: list[ButtonDescriptor | None], slot: int, label: str, command: Command) -> None:
    if 0 <= slot < len(slots) and slots[slot] is None:
        slots[slot] = ButtonDescriptor(slot=slot, label=label, command=command)


def _exploring_controls(*, world: WorldModel, location: Location) -> list[ButtonDescriptor | None]:
    slots: list[ButtonDescriptor | None] = [None] * CONTROL_SLOTS

    for direction, slot in DIRECTION_SLOTS.items():
        # A button is shown for every declared exit, even one whose target is
        # missing; pressing it is simply a no-op.
        if direction in location.connections:
            _place(slots, slot, direction_label(direction), MoveCommand(direction=direction))

    # Talk slots follow the character's position in the location list, so an
    # unresolved id leaves its slot empty instead of shifting the rest.
    for i, character_id in enumerate(location.characters):
        character = world.find_character(character_id)
        if character is None:
            continue
        _place(
            slots,
            FIRST_TALK_SLOT + i,
            f"Talk to {character.name}",
            StartInteractionCommand(character_id=character.id),
        )

    return slots


def _dialogue_controls(*, session: SessionState) -> list[ButtonDescriptor | None]:
    slots: list[ButtonDescriptor | None] = [None] * CONTROL_SLOTS
    character = session.interaction.active_character
    node = lookup_node(character, session.interaction.active_node) if character is not None else None

    if node is None or not node.choices:
        # Dead end or unresolved node: always leave the player a way out.
        _place(slots, 0, LEAVE_LABEL, EndInteractionCommand())
        return slots

    for i, choice in enumerate(node.choices[:CONTROL_SLOTS]):
        _place(slots, i, choice.text, SelectChoiceCommand(index=i))
    return slots


def control_layout(*, world: WorldModel, session: SessionState) -> list[ButtonDescriptor | None]:
    """The 15 control slots for the current state; empty slots are None."""

    if session.interaction.in_dialogue:
        return _dialogue_controls(session=session)

    location = world.find_location(session.player.current_location)
    if location is None:
        return [None] * CONTROL_SLOTS
    return _exploring_controls(world=world, location=location)


def stats_snapshot(player: Player) -> StatsSnapshot:
    return StatsSnapshot(
        stats=player.stats,
        level=player.level,
        xp=player.xp,
        xp_to_next_level=player.level * 1000,
        credits=player.credits,
        status_effects=player.status_effects,
    )


def narrative_view(*, world: WorldModel, session: SessionState) -> NarrativeView:
    interaction = session.interaction
    character = interaction.active_character

    if interaction.in_dialogue and character is not None:
        node = lookup_node(character, interaction.active_node)
        return NarrativeView(
            mode=InteractionMode.dialogue,
            text=node.text if node is not None else "",
            speaker=character.name,
            icon=character.icon or None,
            dialogue_status=node_status(character, interaction.active_node),
        )

    location = world.find_location(session.player.current_location)
    return NarrativeView(
        mode=InteractionMode.exploring,
        text=location.description if location is not None else "",
        speaker=location.name if location is not None else "",
    )


def render_frame(*, world: WorldModel, session: SessionState) -> Frame:
    location = world.find_location(session.player.current_location)
    center = location.coords if location is not None else (0, 0)

    return Frame(
        stats=stats_snapshot(session.player),
        narrative=narrative_view(world=world, session=session),
        map_cells=tuple(map_window(world=world, center=center)),
        controls=tuple(control_layout(world=world, session=session)),
    )


def error_frame(message: str = LOAD_ERROR_TEXT) -> Frame:
    return Frame(error=message)
