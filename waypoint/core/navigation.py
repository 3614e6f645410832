"""Directional movement over the location graph."""

from __future__ import annotations

import logging

from waypoint.world.models import Direction, Location
from waypoint.world.registry import WorldModel

logger = logging.getLogger(__name__)


def move(*, world: WorldModel, current: Location, direction: Direction) -> Location | None:
    """Return the location reached from `current` going `direction`, or None.

    None means "no move": either there is no exit that way, or the exit names a
    location that isn't in the world. Neither is an error.
    """

    target_id = current.connections.get(direction)
    if target_id is None:
        return None

    target = world.find_location(target_id)
    if target is None:
        logger.debug("Exit %s from %s points at unknown location %r", direction.value, current.id, target_id)
        return None
    return target


def available_exits(*, world: WorldModel, current: Location) -> list[Direction]:
    """Directions from `current` that lead to a real location, in enum order."""

    return [d for d in Direction if move(world=world, current=current, direction=d) is not None]
