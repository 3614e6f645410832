from __future__ import annotations

import logging
from collections.abc import Callable

from waypoint.actions import CommandResult, apply_choice, dispatch_command
from waypoint.commands import (
    Command,
    EndInteractionCommand,
    MoveCommand,
    SelectChoiceCommand,
    StartInteractionCommand,
    command_for_key,
)
from waypoint.core.session import SessionState
from waypoint.core.views import Frame, render_frame
from waypoint.world.models import Choice, Direction, Location
from waypoint.world.registry import LoadedWorld, WorldModel

logger = logging.getLogger(__name__)

RenderListener = Callable[[Frame], None]


class InteractionController:
    """Holds the one live session and routes every command through the reducer.

    The controller never draws anything: after each command that changes state it
    builds a single Frame and hands it to the registered listeners.
    """

    def __init__(self, *, world: WorldModel, session: SessionState) -> None:
        self.world = world
        self.session = session
        self._listeners: list[RenderListener] = []
        # Frame built by the most recent state-changing command.
        self.last_frame: Frame | None = None

    @classmethod
    def from_loaded(cls, loaded: LoadedWorld) -> "InteractionController":
        logger.info("Starting session at %s", loaded.player.current_location)
        return cls(world=loaded.world, session=SessionState.start(loaded.player))

    @property
    def current_location(self) -> Location | None:
        return self.world.find_location(self.session.player.current_location)

    def add_listener(self, listener: RenderListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: RenderListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def frame(self) -> Frame:
        return render_frame(world=self.world, session=self.session)

    def dispatch(self, command: Command) -> CommandResult:
        return self._commit(dispatch_command(world=self.world, session=self.session, command=command))

    def _commit(self, result: CommandResult) -> CommandResult:
        if result.changed:
            self.session = result.session
            self.last_frame = self.frame()
            for listener in list(self._listeners):
                listener(self.last_frame)
        return result

    def move(self, direction: Direction) -> CommandResult:
        return self.dispatch(MoveCommand(direction=direction))

    def start_interaction(self, character_id: str) -> CommandResult:
        return self.dispatch(StartInteractionCommand(character_id=character_id))

    def select_choice(self, index: int) -> CommandResult:
        if index < 0:
            logger.debug("Command ignored: choice index %d out of range", index)
            return CommandResult(session=self.session, changed=False, reason="choice index out of range")
        return self.dispatch(SelectChoiceCommand(index=index))

    def end_interaction(self) -> CommandResult:
        return self.dispatch(EndInteractionCommand())

    def handle_choice(self, choice: Choice | None) -> CommandResult:
        """Advance the dialogue with a choice value; None ends it."""

        if choice is None:
            return self.end_interaction()

        interaction = self.session.interaction
        if not interaction.in_dialogue:
            logger.debug("Command ignored: choice %r outside dialogue", choice.text)
            return CommandResult(session=self.session, changed=False, reason="not in dialogue")

        return self._commit(apply_choice(session=self.session, choice=choice))

    def press_key(self, key: str) -> CommandResult | None:
        command = command_for_key(key)
        if command is None:
            return None
        return self.dispatch(command)
