from __future__ import annotations

import logging
from dataclasses import dataclass

from waypoint.command_processing.validators import CommandRejected, ValidationContext, pipeline_for_command
from waypoint.commands import (
    Command,
    EndInteractionCommand,
    MoveCommand,
    SelectChoiceCommand,
    StartInteractionCommand,
)
from waypoint.core import dialogue, navigation
from waypoint.core.session import InteractionState, SessionState
from waypoint.fsm import InteractionFSM
from waypoint.world.models import Choice
from waypoint.world.registry import WorldModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of applying a command.

    - `session`: the session after the command (the same object when unchanged).
    - `changed`: whether anything the presentation layer shows may differ.
    - `reason`: why an unchanged command was ignored, for logging/debugging.
    """

    session: SessionState
    changed: bool
    reason: str | None = None


def _unchanged(session: SessionState, reason: str) -> CommandResult:
    logger.debug("Command ignored: %s", reason)
    return CommandResult(session=session, changed=False, reason=reason)


def apply_move(*, world: WorldModel, session: SessionState, command: MoveCommand) -> CommandResult:
    current = world.find_location(session.player.current_location)
    if current is None:
        return _unchanged(session, f"current location {session.player.current_location!r} not found")

    target = navigation.move(world=world, current=current, direction=command.direction)
    if target is None:
        return _unchanged(session, f"no exit {command.direction.value} from {current.id}")

    player = session.player.model_copy(update={"current_location": target.id})
    return CommandResult(session=session.model_copy(update={"player": player}), changed=True)


def apply_start_interaction(
    *, world: WorldModel, session: SessionState, command: StartInteractionCommand
) -> CommandResult:
    character = world.find_character(command.character_id)
    if character is None:
        # Stay exploring rather than entering a dialogue with no content.
        logger.warning("Cannot start interaction: unknown character %r", command.character_id)
        return _unchanged(session, f"unknown character {command.character_id!r}")

    fsm = InteractionFSM(session.interaction)
    fsm.start_dialogue()

    interaction = InteractionState.talking_to(character, dialogue.entry_node())
    return CommandResult(session=session.model_copy(update={"interaction": interaction}), changed=True)


def apply_choice(*, session: SessionState, choice: Choice | None) -> CommandResult:
    """Advance the active dialogue via `choice` (None ends the conversation)."""

    character = session.interaction.active_character
    if character is None:
        return _unchanged(session, "no active character")

    fsm = InteractionFSM(session.interaction)
    step = dialogue.advance(character, session.interaction.active_node, choice)

    if isinstance(step, dialogue.DialogueEnded):
        fsm.end_dialogue()
        interaction = InteractionState.exploring()
    else:
        fsm.choose()
        interaction = InteractionState.talking_to(character, step.node)
        if dialogue.lookup_node(character, step.node) is None:
            logger.warning("Character %s has no dialogue node %r", character.id, step.node)

    return CommandResult(session=session.model_copy(update={"interaction": interaction}), changed=True)


def dispatch_command(*, world: WorldModel, session: SessionState, command: Command) -> CommandResult:
    """Entry point for keyboard input and on-screen buttons.

    Applies a command by:
    - validating it against the current mode via the command pipeline
    - guarding the mode transition via the FSM
    - returning a new session value (the input session is never mutated)

    Commands that don't apply right now come back with `changed=False`.
    """

    ctx = ValidationContext(
        command=command.type,
        choice_index=command.index if isinstance(command, SelectChoiceCommand) else None,
    )
    try:
        pipeline_for_command(command.type).validate(ctx=ctx, state=session)
    except CommandRejected as e:
        return _unchanged(session, str(e))

    if isinstance(command, MoveCommand):
        return apply_move(world=world, session=session, command=command)

    if isinstance(command, StartInteractionCommand):
        return apply_start_interaction(world=world, session=session, command=command)

    if isinstance(command, SelectChoiceCommand):
        character = session.interaction.active_character
        choice = dialogue.choice_at(character, session.interaction.active_node, command.index) if character else None
        return apply_choice(session=session, choice=choice)

    if isinstance(command, EndInteractionCommand):
        return apply_choice(session=session, choice=None)

    raise ValueError(f"Unknown command: {command!r}")
