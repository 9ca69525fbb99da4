"""Script builder with stable, documented signatures."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple, Union

from .loader import ScriptProgram
from .types import (
    COMMAND_MARKER,
    COMMENT_MARKER,
    LABEL_MARKER,
    AffectionChange,
    Background,
    CharacterArt,
    ChoiceCommand,
    ChoiceOption,
    ClearLayer,
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
    normalize_choice_options,
)

ChoiceOptionInput = Union[ChoiceOption, Tuple[str, str]]


class ScriptBuilder:
    """Incrementally author a script and render it as script text.

    Command arguments are written one token each, so values containing
    whitespace would not survive a round trip. Dialogue must fit on one line
    and must not read as a command, label or comment. Both raise ValueError.
    """

    def __init__(self) -> None:
        self._lines: List[str] = []

    @property
    def lines(self) -> List[str]:
        """Current script lines (read-only snapshot)."""

        return list(self._lines)

    def add_statement(self, statement: Statement) -> None:
        """Append a pre-built statement."""

        self._lines.append(statement.to_line())

    def comment(self, text: str) -> None:
        self._lines.append(f"{COMMENT_MARKER} {text}")

    def label(self, name: str) -> None:
        self.add_statement(Label(name=_token(name, "label")))

    def dialogue(self, text: str, speaker: Optional[str] = None) -> None:
        """Append a dialogue line, optionally prefixed with ``speaker:``.

        Raises:
            ValueError: The text is blank, spans several lines, or starts with
                a command, label or comment marker.
        """

        if speaker:
            text = f"{speaker}: {text}"
        stripped = text.strip()
        if not stripped or len(text.splitlines()) != 1:
            raise ValueError(f"dialogue must be a single non-blank line: {text!r}")
        if stripped.startswith((COMMAND_MARKER, LABEL_MARKER, COMMENT_MARKER)):
            raise ValueError(f"dialogue would be read as markup: {text!r}")
        self.add_statement(Dialogue(text=stripped))

    def background(
        self,
        layer: int,
        image: str,
        transition: Optional[str] = None,
        mask: Optional[str] = None,
    ) -> None:
        spec = None
        if transition is not None:
            if mask is None:
                raise ValueError("a transition needs a mask image")
            spec = TransitionSpec(
                name=_token(transition, "transition"), mask=_token(mask, "mask")
            )
        self.add_statement(
            Background(layer=layer, image=_token(image, "image"), transition=spec)
        )

    def character(self, layer: int, position: str, image: str) -> None:
        self.add_statement(
            CharacterArt(
                layer=layer,
                position=_token(position, "position"),
                image=_token(image, "image"),
            )
        )

    def choice(self, options: Iterable[ChoiceOptionInput]) -> None:
        normalized = normalize_choice_options(options)
        for option in normalized:
            _token(option.text, "choice text")
            _token(option.target, "choice target")
        self.add_statement(ChoiceCommand(options=tuple(normalized)))

    def affection(self, character: str, delta: int) -> None:
        self.add_statement(
            AffectionChange(character=_token(character, "character"), delta=delta)
        )

    def if_affection(self, character: str, op: str, value: int) -> None:
        self.add_statement(If(condition=_affection_condition(character, op, value)))

    def elseif_affection(self, character: str, op: str, value: int) -> None:
        self.add_statement(ElseIf(condition=_affection_condition(character, op, value)))

    def else_(self) -> None:
        self.add_statement(Else())

    def endif(self) -> None:
        self.add_statement(EndIf())

    def jump(self, target: str) -> None:
        self.add_statement(Jump(target=_token(target, "jump target")))

    def clear(self, layer: int) -> None:
        self.add_statement(ClearLayer(layer=layer))

    def to_text(self) -> str:
        """Render the script as newline-terminated text."""

        return "\n".join(self._lines) + "\n"

    def build(self) -> ScriptProgram:
        """Finalize and return a loaded program."""

        return ScriptProgram.from_lines(self._lines, source="<builder>")


def _token(value: str, what: str) -> str:
    if len(value.split()) != 1 or value != value.strip():
        raise ValueError(f"{what} must be a single token: {value!r}")
    return value


def _affection_condition(character: str, op: str, value: int) -> Condition:
    return Condition(
        subject="affection", character=_token(character, "character"), op=op, value=value
    )
