"""Typed statements produced by the script parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

COMMAND_MARKER = "@"
LABEL_MARKER = ":"
COMMENT_MARKER = "--"
CHOICE_ARROW = "->"

COMPARISON_OPS: Tuple[str, ...] = (">=", "<=", ">", "<", "==")


@dataclass(frozen=True)
class Dialogue:
    """Dialogue line shown verbatim.

    Args:
        text: Full line, including any leading ``Name:`` speaker tag.
    """

    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "dialogue", "text": self.text}

    def to_line(self) -> str:
        return self.text


@dataclass(frozen=True)
class Label:
    """Jump target declaration."""

    name: str

    def to_line(self) -> str:
        return f"{LABEL_MARKER}{self.name}"


@dataclass(frozen=True)
class TransitionSpec:
    """Optional transition tokens trailing a ``bg`` command.

    Args:
        name: Effect name, e.g. ``transition``.
        mask: Mask image path handed to the effect.
        extra: Any further tokens, passed through untouched.
    """

    name: str
    mask: str
    extra: Tuple[str, ...] = ()

    def tokens(self) -> List[str]:
        return [self.mask, self.name, *self.extra]


@dataclass(frozen=True)
class Background:
    """Background image placed on a layer."""

    layer: int
    image: str
    transition: Optional[TransitionSpec] = None

    def to_line(self) -> str:
        parts = ["bg", str(self.layer), self.image]
        if self.transition is not None:
            parts.extend(self.transition.tokens())
        return _command_line(parts)


@dataclass(frozen=True)
class CharacterArt:
    """Character sprite placed on a layer."""

    layer: int
    position: str
    image: str

    def to_line(self) -> str:
        return _command_line(["chara", str(self.layer), self.position, self.image])


@dataclass(frozen=True)
class ChoiceOption:
    """Choice option entry."""

    text: str
    target: str

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "target": self.target}


@dataclass(frozen=True)
class ChoiceCommand:
    """Replace the pending choice set."""

    options: Tuple[ChoiceOption, ...] = ()

    def to_line(self) -> str:
        parts = ["choice"]
        for option in self.options:
            parts.extend([option.text, CHOICE_ARROW, option.target])
        return _command_line(parts)


@dataclass(frozen=True)
class AffectionChange:
    """Apply a signed delta to a character's affection."""

    character: str
    delta: int

    def to_line(self) -> str:
        return _command_line(["affection", self.character, str(self.delta)])


@dataclass(frozen=True)
class Condition:
    """Single comparison, ``affection <character> <op> <value>``."""

    subject: str
    character: str
    op: str
    value: int

    def tokens(self) -> List[str]:
        return [self.subject, self.character, self.op, str(self.value)]


@dataclass(frozen=True)
class If:
    """Open a conditional block. ``condition`` is None when malformed."""

    condition: Optional[Condition]

    def to_line(self) -> str:
        return _conditional_line("if", self.condition)


@dataclass(frozen=True)
class ElseIf:
    condition: Optional[Condition]

    def to_line(self) -> str:
        return _conditional_line("elseif", self.condition)


@dataclass(frozen=True)
class Else:
    def to_line(self) -> str:
        return _command_line(["else"])


@dataclass(frozen=True)
class EndIf:
    def to_line(self) -> str:
        return _command_line(["endif"])


@dataclass(frozen=True)
class Jump:
    """Jump to a label on the next step."""

    target: str

    def to_line(self) -> str:
        return _command_line(["jump", self.target])


@dataclass(frozen=True)
class ClearLayer:
    """Remove image and character content from a layer."""

    layer: int

    def to_line(self) -> str:
        return _command_line(["clear", str(self.layer)])


@dataclass(frozen=True)
class UnknownCommand:
    """Command name the engine does not recognize."""

    name: str
    args: Tuple[str, ...] = ()

    def to_line(self) -> str:
        return _command_line([self.name, *self.args])


Command = Union[
    Background,
    CharacterArt,
    ChoiceCommand,
    AffectionChange,
    If,
    ElseIf,
    Else,
    EndIf,
    Jump,
    ClearLayer,
    UnknownCommand,
]
Statement = Union[Dialogue, Label, Command]


def normalize_choice_options(
    options: Iterable[Union[ChoiceOption, Tuple[str, str]]],
) -> List[ChoiceOption]:
    normalized: List[ChoiceOption] = []
    for option in options:
        if isinstance(option, ChoiceOption):
            normalized.append(option)
        else:
            text, target = option
            normalized.append(ChoiceOption(text=text, target=target))
    return normalized


def _command_line(parts: Iterable[str]) -> str:
    return COMMAND_MARKER + " ".join(parts)


def _conditional_line(name: str, condition: Optional[Condition]) -> str:
    if condition is None:
        return _command_line([name])
    return _command_line([name, *condition.tokens()])
