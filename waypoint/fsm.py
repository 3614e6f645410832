from __future__ import annotations

from statemachine import State, StateMachine

from waypoint.core.session import InteractionMode, InteractionState


class InteractionFSM(StateMachine):
    """FSM wrapper around InteractionState.

    Modes: exploring <-> dialogue. The reducer builds the new session values;
    the FSM only guards which transitions are legal from the current mode.
    """

    exploring = State(
        InteractionMode.exploring.value,
        value=InteractionMode.exploring.value,
        initial=True,
    )
    dialogue = State(InteractionMode.dialogue.value, value=InteractionMode.dialogue.value)

    start_dialogue = exploring.to(dialogue)
    choose = dialogue.to.itself()
    end_dialogue = dialogue.to(exploring)

    def __init__(self, interaction: InteractionState):
        super().__init__(start_value=interaction.mode.value)

    @property
    def mode(self) -> InteractionMode:
        return InteractionMode(str(self.current_state.value))
