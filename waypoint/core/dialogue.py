from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from waypoint.world.models import START_NODE, Character, Choice, DialogueNode


class DialogueStatus(StrEnum):
    active = "active"
    # Node exists but offers no choices.
    dead_end = "dead_end"
    # Node key doesn't exist in the character's dialogue.
    missing_node = "missing_node"


@dataclass(frozen=True, slots=True)
class NodeReached:
    node: str


@dataclass(frozen=True, slots=True)
class DialogueEnded:
    pass


DialogueStep = NodeReached | DialogueEnded


def entry_node() -> str:
    # Conversations always restart from the top; no per-character progress is kept.
    return START_NODE


def lookup_node(character: Character, node: str | None) -> DialogueNode | None:
    if node is None:
        return None
    return character.dialogue.get(node)


def node_status(character: Character, node: str | None) -> DialogueStatus:
    resolved = lookup_node(character, node)
    if resolved is None:
        return DialogueStatus.missing_node
    if not resolved.choices:
        return DialogueStatus.dead_end
    return DialogueStatus.active


def advance(character: Character, current: str | None, choice: Choice | None) -> DialogueStep:
    """Transition out of `current` via `choice`.

    An absent choice or one pointing at the end sentinel ends the conversation.
    The target node is *not* checked against `character.dialogue`; callers resolve
    it with `lookup_node` and treat a miss as `DialogueStatus.missing_node`.
    """

    if choice is None or choice.ends_dialogue:
        return DialogueEnded()
    return NodeReached(node=choice.next)


def choice_at(character: Character, node: str | None, index: int) -> Choice | None:
    resolved = lookup_node(character, node)
    if resolved is None or index < 0 or index >= len(resolved.choices):
        return None
    return resolved.choices[index]
