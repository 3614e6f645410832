from __future__ import annotations

import pytest
from statemachine.exceptions import TransitionNotAllowed

from waypoint.core.session import InteractionMode, InteractionState
from waypoint.fsm import InteractionFSM
from waypoint.world.registry import WorldModel


def test_fsm_starts_from_interaction_mode(world: WorldModel) -> None:
    assert InteractionFSM(InteractionState.exploring()).mode == InteractionMode.exploring

    c = world.find_character("c")
    assert c is not None
    assert InteractionFSM(InteractionState.talking_to(c)).mode == InteractionMode.dialogue


def test_fsm_dialogue_round_trip() -> None:
    fsm = InteractionFSM(InteractionState.exploring())

    fsm.start_dialogue()
    assert fsm.mode == InteractionMode.dialogue

    fsm.choose()
    assert fsm.mode == InteractionMode.dialogue

    fsm.end_dialogue()
    assert fsm.mode == InteractionMode.exploring


def test_fsm_guards_illegal_transitions() -> None:
    fsm = InteractionFSM(InteractionState.exploring())

    with pytest.raises(TransitionNotAllowed):
        fsm.choose()
    with pytest.raises(TransitionNotAllowed):
        fsm.end_dialogue()

    fsm.start_dialogue()
    with pytest.raises(TransitionNotAllowed):
        fsm.start_dialogue()
