from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from waypoint.world.models import Direction, Location, Player
from waypoint.world.registry import WorldLoadError, WorldModel, build_world, load_world

from factories import make_character, make_location

DATA_DIR = Path(__file__).resolve().parent / "data"


def _write_world(root: Path, *, player: object, locations: object, characters: object) -> Path:
    (root / "player.json").write_text(json.dumps(player), encoding="utf-8")
    (root / "locations.json").write_text(json.dumps(locations), encoding="utf-8")
    (root / "characters.json").write_text(json.dumps(characters), encoding="utf-8")
    return root


def test_load_world_from_data_files() -> None:
    loaded = load_world(data_dir=DATA_DIR)

    assert loaded.player.current_location == "docking-bay"
    assert loaded.player.stats.shields == 40
    assert loaded.player.status_effects == ("Well Rested",)

    bay = loaded.world.find_location("docking-bay")
    assert bay is not None
    assert bay.map_icon == "⚓"
    assert bay.connections[Direction.north] == "promenade"
    assert bay.characters == ("dock-officer",)

    vance = loaded.world.find_character("dock-officer")
    assert vance is not None
    assert vance.dialogue["start"].choices[2].ends_dialogue


def test_lookups_return_none_on_miss() -> None:
    world = load_world(data_dir=DATA_DIR).world

    assert world.find_location("nope") is None
    assert world.find_character("nope") is None
    assert world.location_at(99, 99) is None
    assert world.location_at(-1, -1).id == "cantina"  # type: ignore[union-attr]


def test_connection_keys_are_normalized_to_lowercase() -> None:
    loc = Location.model_validate(
        {"id": "x", "x": 0, "y": 0, "name": "X", "mapIcon": "x", "connections": {"North": "y", " EAST ": "z"}}
    )
    assert loc.connections == {Direction.north: "y", Direction.east: "z"}


def test_missing_optional_fields_default_to_empty() -> None:
    loc = Location.model_validate({"id": "x", "x": 0, "y": 0, "name": "X", "connections": None, "characters": None})
    assert loc.connections == {}
    assert loc.characters == ()

    c = make_character("c", {"start": {"text": "...", "choices": None}})
    assert c.dialogue["start"].choices == ()


def test_duplicate_ids_and_coordinates_rejected() -> None:
    a = make_location("a", 0, 0)

    with pytest.raises(WorldLoadError, match="Duplicate location id"):
        WorldModel.from_records(locations=[a, make_location("a", 1, 0)], characters=[])

    with pytest.raises(WorldLoadError, match="share coordinates"):
        WorldModel.from_records(locations=[a, make_location("b", 0, 0)], characters=[])

    with pytest.raises(WorldLoadError, match="Duplicate character id"):
        WorldModel.from_records(locations=[a], characters=[make_character("c"), make_character("c")])


def test_missing_file_is_a_load_error(tmp_path: Path) -> None:
    with pytest.raises(WorldLoadError, match="not found"):
        load_world(data_dir=tmp_path)


def test_invalid_json_names_the_file(tmp_path: Path) -> None:
    _write_world(tmp_path, player={"currentLocation": "a"}, locations=[], characters=[])
    (tmp_path / "locations.json").write_text("[{not json", encoding="utf-8")

    with pytest.raises(WorldLoadError, match="locations.json"):
        load_world(data_dir=tmp_path)


def test_unknown_direction_is_a_load_error(tmp_path: Path) -> None:
    _write_world(
        tmp_path,
        player={"currentLocation": "a"},
        locations=[{"id": "a", "x": 0, "y": 0, "name": "A", "connections": {"up": "b"}}],
        characters=[],
    )

    with pytest.raises(WorldLoadError, match="Invalid record #0 in locations.json"):
        load_world(data_dir=tmp_path)


def test_records_file_must_be_a_list(tmp_path: Path) -> None:
    _write_world(tmp_path, player={"currentLocation": "a"}, locations={"id": "a"}, characters=[])

    with pytest.raises(WorldLoadError, match="Expected a list"):
        load_world(data_dir=tmp_path)


def test_player_start_location_must_exist() -> None:
    with pytest.raises(WorldLoadError, match="start location"):
        build_world(locations=[make_location("a", 0, 0)], characters=[], player=Player(current_location="b"))


def test_dangling_references_are_tolerated_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    a = make_location("a", 0, 0, connections={"west": "ghost"}, characters=["c", "phantom"])

    with caplog.at_level(logging.WARNING, logger="waypoint.world.registry"):
        loaded = build_world(locations=[a], characters=[make_character("c")], player=Player(current_location="a"))

    refs = loaded.world.dangling_references()
    assert [(r.kind, r.target_id) for r in refs] == [("connection", "ghost"), ("character", "phantom")]
    assert "ghost" in caplog.text
    assert "phantom" in caplog.text


def test_loaded_records_are_read_only() -> None:
    world = load_world(data_dir=DATA_DIR).world
    bay = world.find_location("docking-bay")
    vance = world.find_character("dock-officer")
    assert bay is not None and vance is not None

    with pytest.raises(TypeError):
        bay.connections[Direction.south] = "cantina"  # type: ignore[index]
    with pytest.raises(TypeError):
        vance.dialogue["start"] = vance.dialogue["papers"]  # type: ignore[index]

    assert Direction.south not in bay.connections
    assert {bay, bay} == {bay}
    assert bay.model_dump(by_alias=True)["connections"] == {"north": "promenade", "east": "cargo-hold"}
