"""Turn script lines into typed statements.

Parsing happens lazily, one line at a time, when the engine consumes the
line. Recoverable problems (a truncated choice list, a non-numeric affection
delta) are logged here and the best-effort statement is returned. Missing
mandatory arguments raise :class:`ScriptSyntaxError`, which the engine logs
before moving on.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from .errors import ScriptSyntaxError
from .types import (
    CHOICE_ARROW,
    COMMAND_MARKER,
    LABEL_MARKER,
    AffectionChange,
    Background,
    CharacterArt,
    ChoiceCommand,
    ChoiceOption,
    ClearLayer,
    Command,
    Condition,
    Dialogue,
    Else,
    ElseIf,
    EndIf,
    If,
    Jump,
    Label,
    Statement,
    TransitionSpec,
    UnknownCommand,
)

logger = logging.getLogger(__name__)

CommandParser = Callable[[List[str], str], Command]


def parse_line(line: str) -> Statement:
    """Classify a trimmed script line and parse it."""

    if line.startswith(COMMAND_MARKER):
        return parse_command(line)
    if line.startswith(LABEL_MARKER):
        return Label(name=label_name(line))
    return Dialogue(text=line)


def parse_command(line: str) -> Command:
    tokens = line[len(COMMAND_MARKER):].split()
    if not tokens:
        return UnknownCommand(name="")
    name, args = tokens[0], tokens[1:]
    parser = _COMMAND_PARSERS.get(name)
    if parser is None:
        return UnknownCommand(name=name, args=tuple(args))
    return parser(args, line)


def command_name(line: str) -> Optional[str]:
    """Return the command token of ``line``, or None for non-command lines."""

    if not line.startswith(COMMAND_MARKER):
        return None
    tokens = line[len(COMMAND_MARKER):].split(maxsplit=1)
    return tokens[0] if tokens else ""


def label_name(line: str) -> str:
    return line[len(LABEL_MARKER):].strip()


def parse_condition(args: Sequence[str], line: str) -> Optional[Condition]:
    """Parse ``affection <character> <op> <value>``; None when malformed."""

    if len(args) < 4:
        logger.warning("Incomplete condition, treating as false: %r", line)
        return None
    subject, character, op, raw_value = args[0], args[1], args[2], args[3]
    try:
        value = int(raw_value)
    except ValueError:
        logger.warning("Non-integer condition value %r in %r", raw_value, line)
        return None
    return Condition(subject=subject, character=character, op=op, value=value)


def _require(args: Sequence[str], count: int, line: str, usage: str) -> None:
    if len(args) < count:
        raise ScriptSyntaxError(line, f"expected {usage}")


def _parse_layer(token: str, line: str) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise ScriptSyntaxError(line, f"layer index {token!r} is not an integer") from exc


def _parse_background(args: List[str], line: str) -> Background:
    _require(args, 2, line, "bg <layer> <image> [mask transition ...]")
    layer = _parse_layer(args[0], line)
    transition = None
    if len(args) >= 4:
        transition = TransitionSpec(name=args[3], mask=args[2], extra=tuple(args[4:]))
    elif len(args) == 3:
        logger.warning("Ignoring transition without an effect name: %r", line)
    return Background(layer=layer, image=args[1], transition=transition)


def _parse_character(args: List[str], line: str) -> CharacterArt:
    _require(args, 3, line, "chara <layer> <position> <image>")
    return CharacterArt(
        layer=_parse_layer(args[0], line), position=args[1], image=args[2]
    )


def _parse_choice(args: List[str], line: str) -> ChoiceCommand:
    options: List[ChoiceOption] = []
    for index in range(0, len(args), 3):
        group = args[index:index + 3]
        if len(group) < 3:
            logger.warning("Incomplete choice option %s in %r", group, line)
            break
        text, arrow, target = group
        if arrow != CHOICE_ARROW:
            logger.warning("Choice option %r is missing %r", text, CHOICE_ARROW)
            break
        options.append(ChoiceOption(text=text, target=target))
    return ChoiceCommand(options=tuple(options))


def _parse_affection(args: List[str], line: str) -> AffectionChange:
    _require(args, 1, line, "affection <character> <delta>")
    delta = 0
    if len(args) < 2:
        logger.warning("Missing affection delta, using 0: %r", line)
    else:
        try:
            delta = int(args[1])
        except ValueError:
            logger.warning("Non-integer affection delta %r, using 0", args[1])
    return AffectionChange(character=args[0], delta=delta)


def _parse_if(args: List[str], line: str) -> If:
    return If(condition=parse_condition(args, line))


def _parse_elseif(args: List[str], line: str) -> ElseIf:
    return ElseIf(condition=parse_condition(args, line))


def _parse_jump(args: List[str], line: str) -> Jump:
    _require(args, 1, line, "jump <label>")
    return Jump(target=args[0])


def _parse_clear(args: List[str], line: str) -> ClearLayer:
    _require(args, 1, line, "clear <layer>")
    return ClearLayer(layer=_parse_layer(args[0], line))


_COMMAND_PARSERS: Dict[str, CommandParser] = {
    "bg": _parse_background,
    "chara": _parse_character,
    "choice": _parse_choice,
    "affection": _parse_affection,
    "if": _parse_if,
    "elseif": _parse_elseif,
    "else": lambda args, line: Else(),
    "endif": lambda args, line: EndIf(),
    "jump": _parse_jump,
    "clear": _parse_clear,
}
