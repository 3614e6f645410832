from __future__ import annotations

from waypoint.core.navigation import available_exits, move
from waypoint.world.models import Direction
from waypoint.world.registry import WorldModel


def test_move_follows_connection(world: WorldModel) -> None:
    a = world.find_location("a")
    assert a is not None

    b = move(world=world, current=a, direction=Direction.north)
    assert b is not None
    assert b.id == "b"
    assert b.coords == (0, -1)


def test_move_without_exit_is_no_move(world: WorldModel) -> None:
    b = world.find_location("b")
    assert b is not None

    assert move(world=world, current=b, direction=Direction.north) is None
    assert move(world=world, current=b, direction=Direction.west) is None


def test_move_to_unknown_location_is_no_move(world: WorldModel) -> None:
    a = world.find_location("a")
    assert a is not None
    assert a.connections[Direction.east] == "nowhere"

    assert move(world=world, current=a, direction=Direction.east) is None


def test_move_never_throws_and_matches_connections(world: WorldModel) -> None:
    for loc in world.locations:
        for d in Direction:
            target = move(world=world, current=loc, direction=d)
            if target is None:
                assert d not in loc.connections or world.find_location(loc.connections[d]) is None
            else:
                assert target.id == loc.connections[d]


def test_available_exits_skips_dangling(world: WorldModel) -> None:
    a = world.find_location("a")
    assert a is not None
    assert available_exits(world=world, current=a) == [Direction.north]
