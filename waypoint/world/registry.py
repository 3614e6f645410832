from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from waypoint.world.models import Character, Location, Player

logger = logging.getLogger(__name__)

PLAYER_FILE = "player.json"
LOCATIONS_FILE = "locations.json"
CHARACTERS_FILE = "characters.json"


class WorldLoadError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class DanglingReference:
    location_id: str
    kind: str  # "connection" | "character"
    target_id: str


@dataclass(frozen=True, slots=True)
class WorldModel:
    """Locations and characters for one session.

    Canonical data is stored in load order; lookups go through indexes built once
    in `from_records`. Every lookup returns None on a miss.
    """

    locations: tuple[Location, ...]
    characters: tuple[Character, ...]
    _location_by_id: dict[str, Location]
    _character_by_id: dict[str, Character]
    _location_by_coords: dict[tuple[int, int], Location]

    @staticmethod
    def from_records(*, locations: list[Location], characters: list[Character]) -> "WorldModel":
        location_by_id: dict[str, Location] = {}
        location_by_coords: dict[tuple[int, int], Location] = {}
        for loc in locations:
            if loc.id in location_by_id:
                raise WorldLoadError(f"Duplicate location id: {loc.id}")
            if loc.coords in location_by_coords:
                other = location_by_coords[loc.coords]
                raise WorldLoadError(f"Locations {other.id} and {loc.id} share coordinates {loc.coords}")
            location_by_id[loc.id] = loc
            location_by_coords[loc.coords] = loc

        character_by_id: dict[str, Character] = {}
        for c in characters:
            if c.id in character_by_id:
                raise WorldLoadError(f"Duplicate character id: {c.id}")
            character_by_id[c.id] = c

        return WorldModel(
            locations=tuple(locations),
            characters=tuple(characters),
            _location_by_id=location_by_id,
            _character_by_id=character_by_id,
            _location_by_coords=location_by_coords,
        )

    def find_location(self, id: str) -> Location | None:
        return self._location_by_id.get(id)

    def find_character(self, id: str) -> Character | None:
        return self._character_by_id.get(id)

    def location_at(self, x: int, y: int) -> Location | None:
        return self._location_by_coords.get((x, y))

    def dangling_references(self) -> list[DanglingReference]:
        """Connection / character ids that don't resolve.

        These are tolerated at runtime (treated as absent), but worth reporting
        to whoever authors the content.
        """

        out: list[DanglingReference] = []
        for loc in self.locations:
            for target in loc.connections.values():
                if target not in self._location_by_id:
                    out.append(DanglingReference(location_id=loc.id, kind="connection", target_id=target))
            for cid in loc.characters:
                if cid not in self._character_by_id:
                    out.append(DanglingReference(location_id=loc.id, kind="character", target_id=cid))
        return out


@dataclass(frozen=True, slots=True)
class LoadedWorld:
    world: WorldModel
    player: Player


def _read_json(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise WorldLoadError(f"World data file not found: {path}") from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise WorldLoadError(f"Invalid JSON in {path.name}: {e}") from e


def _read_records(path: Path, model: type[Location] | type[Character]) -> list[Any]:
    data = _read_json(path)
    if not isinstance(data, list):
        raise WorldLoadError(f"Expected a list of records in {path.name}, got {type(data).__name__}")

    out = []
    for i, row in enumerate(data):
        try:
            out.append(model.model_validate(row))
        except ValidationError as e:
            raise WorldLoadError(f"Invalid record #{i} in {path.name}: {e}") from e
    return out


def load_player(path: Path) -> Player:
    try:
        return Player.model_validate(_read_json(path))
    except ValidationError as e:
        raise WorldLoadError(f"Invalid player record in {path.name}: {e}") from e


def build_world(*, locations: list[Location], characters: list[Character], player: Player) -> LoadedWorld:
    world = WorldModel.from_records(locations=locations, characters=characters)
    if world.find_location(player.current_location) is None:
        raise WorldLoadError(f"Player start location not found: {player.current_location}")

    for ref in world.dangling_references():
        logger.warning("Location %s references unknown %s %r", ref.location_id, ref.kind, ref.target_id)

    return LoadedWorld(world=world, player=player)


def load_world(*, data_dir: Path) -> LoadedWorld:
    """Load the player, locations and characters from `data_dir`.

    Any missing file, malformed JSON or schema error raises WorldLoadError naming
    the offending file, so the caller can surface it instead of starting a session.
    """

    player = load_player(data_dir / PLAYER_FILE)
    locations = _read_records(data_dir / LOCATIONS_FILE, Location)
    characters = _read_records(data_dir / CHARACTERS_FILE, Character)

    loaded = build_world(locations=locations, characters=characters, player=player)
    logger.info(
        "Loaded world from %s: %d locations, %d characters",
        data_dir,
        len(loaded.world.locations),
        len(loaded.world.characters),
    )
    return loaded
