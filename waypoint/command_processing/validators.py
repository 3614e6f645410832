from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from waypoint.commands import CommandName
from waypoint.core.dialogue import lookup_node
from waypoint.core.session import InteractionMode, SessionState


class CommandRejected(ValueError):
    """A command that isn't applicable right now.

    Reachable through normal rapid input, so the dispatcher turns this into a
    no-op rather than an error.
    """


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Inputs available to validators.

    Keep this tight and serializable-ish so we can safely log it.
    """

    command: CommandName
    choice_index: int | None = None


class CommandValidator(ABC):
    """A small, composable validation unit for an incoming command."""

    @abstractmethod
    def validate(self, *, ctx: ValidationContext, state: SessionState) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class ModeValidator(CommandValidator):
    """Movement and dialogue are mutually exclusive; check the current mode."""

    allowed_modes: frozenset[InteractionMode]

    def validate(self, *, ctx: ValidationContext, state: SessionState) -> None:
        mode = state.interaction.mode
        if mode not in self.allowed_modes:
            allowed = ",".join(sorted(m.value for m in self.allowed_modes))
            raise CommandRejected(f"Command '{ctx.command}' not allowed in mode '{mode.value}' (allowed: {allowed})")


@dataclass(frozen=True, slots=True)
class ChoiceIndexValidator(CommandValidator):
    """The selected index must name a choice on the active node."""

    def validate(self, *, ctx: ValidationContext, state: SessionState) -> None:
        character = state.interaction.active_character
        if character is None:
            raise CommandRejected("No active character")

        node = lookup_node(character, state.interaction.active_node)
        n = len(node.choices) if node is not None else 0
        if ctx.choice_index is None or not 0 <= ctx.choice_index < n:
            raise CommandRejected(f"Choice index {ctx.choice_index} out of range (node offers {n})")


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[CommandValidator, ...]

    def validate(self, *, ctx: ValidationContext, state: SessionState) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, state=state)


_EXPLORING = frozenset({InteractionMode.exploring})
_DIALOGUE = frozenset({InteractionMode.dialogue})

DEFAULT_COMMAND_PIPELINES: dict[CommandName, ValidatorPipeline] = {
    "move": ValidatorPipeline(validators=(ModeValidator(allowed_modes=_EXPLORING),)),
    "start_interaction": ValidatorPipeline(validators=(ModeValidator(allowed_modes=_EXPLORING),)),
    "select_choice": ValidatorPipeline(
        validators=(
            ModeValidator(allowed_modes=_DIALOGUE),
            ChoiceIndexValidator(),
        )
    ),
    "end_interaction": ValidatorPipeline(validators=(ModeValidator(allowed_modes=_DIALOGUE),)),
}


def pipeline_for_command(command: str) -> ValidatorPipeline:
    pipe = DEFAULT_COMMAND_PIPELINES.get(command)  # type: ignore[call-overload]
    if pipe is None:
        raise ValueError(f"Unknown command: {command}")
    return pipe
