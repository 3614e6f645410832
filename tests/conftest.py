from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from waypoint.core.session import SessionState
from waypoint.world.models import Player
from waypoint.world.registry import LoadedWorld, WorldModel, build_world

from factories import make_character, make_location

TEST_DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture()
def small_world() -> LoadedWorld:
    """A (0,0) -> north -> B (0,-1) world with one talker at A.

    A also has a dangling east exit so navigation can be checked against bad data.
    """

    a = make_location("a", 0, 0, connections={"north": "b", "east": "nowhere"}, characters=["c"])
    b = make_location("b", 0, -1, connections={"south": "a"})
    c = make_character(
        "c",
        {
            "start": {
                "text": "Hi",
                "choices": [
                    {"text": "Tell me more", "next": "more"},
                    {"text": "Bye", "next": "end"},
                ],
            },
            "more": {
                "text": "There's nothing more.",
                "choices": [{"text": "Back", "next": "start"}, {"text": "Odd", "next": "missing"}],
            },
            "silent": {"text": "..."},
        },
    )
    return build_world(locations=[a, b], characters=[c], player=Player(current_location="a"))


@pytest.fixture()
def world(small_world: LoadedWorld) -> WorldModel:
    return small_world.world


@pytest.fixture()
def session(small_world: LoadedWorld) -> SessionState:
    return SessionState.start(small_world.player)


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
    """TestClient over a fresh app session loaded from `tests/data`."""

    monkeypatch.setenv("WAYPOINT_DATA_DIR", str(TEST_DATA_DIR))

    from waypoint.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture()
def broken_client(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[TestClient, None, None]:
    """TestClient whose startup load fails (empty data dir)."""

    monkeypatch.setenv("WAYPOINT_DATA_DIR", str(tmp_path))

    from waypoint.main import app

    with TestClient(app) as c:
        yield c
