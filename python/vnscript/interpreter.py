"""Script interpreter driven one step per tick."""

from __future__ import annotations

import enum
import logging
import operator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from .affection import AffectionTable
from .choices import ChoiceRegistry
from .config import EngineConfig
from .display import DisplaySink
from .errors import AssetError, LayerIndexError, ScriptSyntaxError, UnresolvedLabelError
from .loader import ScriptProgram, load_script
from .parser import command_name, parse_line
from .types import (
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
    UnknownCommand,
)

logger = logging.getLogger(__name__)

_COMPARATORS: Dict[str, Callable[[int, int], bool]] = {
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
    "==": operator.eq,
}

_BRANCH_MARKERS = ("elseif", "else", "endif")
_ENDIF_MARKERS = ("endif",)


class SuspendState(enum.Enum):
    RUNNING = "running"
    WAITING_FOR_INPUT = "waiting_for_input"
    WAITING_FOR_CHOICE = "waiting_for_choice"


@dataclass
class ExecutionCursor:
    """Execution position within the loaded program.

    Args:
        current_line: Index of the next line to consume.
        pending_jump: Label to jump to on the next step.
        conditional_stack: One entry per open ``if`` block; True once a branch
            of that block has been taken.
    """

    current_line: int = 0
    pending_jump: Optional[str] = None
    conditional_stack: List[bool] = field(default_factory=list)


class ScriptEngine:
    """Interpreter for one loaded script.

    The driver calls :meth:`execute_step` once per tick. Each call consumes
    at most one line, except right after a choice is selected, when lines run
    until the engine suspends again so the player never waits an extra tick.

    Args:
        display: Sink receiving text and layer updates.
        choices: Registry shared with the input layer.
        affection: Affection stats read by conditions.
        config: Engine configuration.
    """

    def __init__(
        self,
        display: DisplaySink,
        *,
        choices: Optional[ChoiceRegistry] = None,
        affection: Optional[AffectionTable] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.display = display
        self.choices = choices or ChoiceRegistry()
        self.affection = affection or AffectionTable(
            min_value=self.config.affection_min,
            max_value=self.config.affection_max,
            default_value=self.config.affection_default,
        )
        self.program = ScriptProgram()
        self.cursor = ExecutionCursor()
        self.state = SuspendState.RUNNING
        self.current_text = ""
        self._pending_choices: List[ChoiceOption] = []
        self._handlers: Dict[type, Callable[..., None]] = {
            Dialogue: self._run_dialogue,
            Label: self._run_label,
            Background: self._run_background,
            CharacterArt: self._run_character,
            ChoiceCommand: self._run_choice,
            AffectionChange: self._run_affection,
            If: self._run_if,
            ElseIf: self._run_elseif,
            Else: self._run_else,
            EndIf: self._run_endif,
            Jump: self._run_jump,
            ClearLayer: self._run_clear,
            UnknownCommand: self._run_unknown,
        }

    @property
    def waiting_for_input(self) -> bool:
        return self.state is SuspendState.WAITING_FOR_INPUT

    @property
    def waiting_for_choice(self) -> bool:
        return self.state is SuspendState.WAITING_FOR_CHOICE

    @property
    def pending_choices(self) -> List[ChoiceOption]:
        return list(self._pending_choices)

    @property
    def finished(self) -> bool:
        """True when no line, jump or suspension is left."""

        return (
            self.state is SuspendState.RUNNING
            and self.cursor.pending_jump is None
            and self.cursor.current_line >= len(self.program)
        )

    def load_script(self, path: Union[Path, str]) -> None:
        """Load a script file and reset execution.

        Raises:
            ScriptLoadError: The file cannot be read.
        """

        self.load_program(load_script(path))

    def load_program(self, program: ScriptProgram) -> None:
        """Replace the program and reset cursor, suspension and choices."""

        self.program = program
        self.cursor = ExecutionCursor()
        self.state = SuspendState.RUNNING
        self.current_text = ""
        self._clear_choices()

    def execute_step(self) -> bool:
        """Run one step of the script.

        Returns:
            False only once the program is exhausted with nothing pending.
        """

        if self.state is SuspendState.WAITING_FOR_CHOICE:
            selected, label = self.choices.poll_selection()
            if not selected:
                return True
            self._clear_choices()
            self.state = SuspendState.RUNNING
            self.jump_to_label(label)
            self._run_until_suspended()
            return True
        if self.state is SuspendState.WAITING_FOR_INPUT:
            return True
        return self._step()

    def advance(self) -> bool:
        """Handle a "continue" input while dialogue is displayed.

        The first press finishes a partially revealed line; a press on a fully
        revealed line resumes the script.

        Returns:
            Whether the engine resumed.
        """

        if self.state is not SuspendState.WAITING_FOR_INPUT:
            return False
        if not self.display.is_ready():
            self.display.complete_text()
            return False
        self.state = SuspendState.RUNNING
        return True

    def jump_to_label(self, label: str) -> bool:
        """Move the cursor just past ``:label``; unknown labels leave it alone."""

        self._clear_choices()
        try:
            index = self.program.require_label(label)
        except UnresolvedLabelError as exc:
            logger.error("%s (jump from line %d)", exc, self.cursor.current_line)
            return False
        self.cursor.current_line = index + 1
        logger.info("Jumped to %s (line %d)", label, index + 1)
        return True

    def evaluate(self, condition: Optional[Condition]) -> bool:
        if condition is None:
            return False
        if condition.subject != "affection":
            logger.warning("Unknown condition subject %r", condition.subject)
            return False
        compare = _COMPARATORS.get(condition.op)
        if compare is None:
            logger.warning("Unknown comparison operator %r", condition.op)
            return False
        return compare(self.affection.get(condition.character), condition.value)

    def _step(self) -> bool:
        cursor = self.cursor
        if cursor.pending_jump is not None:
            label, cursor.pending_jump = cursor.pending_jump, None
            self.jump_to_label(label)
            return True
        if cursor.current_line >= len(self.program):
            return False

        line_number = cursor.current_line
        line = self.program[line_number]
        cursor.current_line += 1
        try:
            statement = parse_line(line)
        except ScriptSyntaxError as exc:
            logger.warning("Skipping line %d: %s", line_number, exc)
            return True
        self._execute(statement)
        if self.state is SuspendState.RUNNING and self._pending_choices:
            self._show_choices()
        return True

    def _run_until_suspended(self) -> None:
        limit = self.config.max_chain_steps
        for _ in range(limit):
            if self.state is not SuspendState.RUNNING:
                return
            if not self._step():
                return
        logger.error(
            "Ran %d lines without suspending, stopping at line %d (jump cycle?)",
            limit,
            self.cursor.current_line,
        )

    def _execute(self, statement: Statement) -> None:
        self._handlers[type(statement)](statement)

    def _show_choices(self) -> None:
        self.choices.set_choices(self._pending_choices)
        self.state = SuspendState.WAITING_FOR_CHOICE
        logger.info(
            "Showing choices: %s",
            ", ".join(f"{option.text} -> {option.target}" for option in self._pending_choices),
        )

    def _clear_choices(self) -> None:
        self._pending_choices = []
        self.choices.clear()

    def _skip_forward(self, markers: Tuple[str, ...]) -> None:
        # Stops on a marker belonging to the current block; nested blocks are
        # stepped over whole.
        lines = self.program.lines
        depth = 0
        while self.cursor.current_line < len(lines):
            name = command_name(lines[self.cursor.current_line])
            if name == "if":
                depth += 1
            elif depth > 0:
                if name == "endif":
                    depth -= 1
            elif name in markers:
                return
            self.cursor.current_line += 1

    def _run_dialogue(self, statement: Dialogue) -> None:
        self.current_text = statement.text
        self.display.set_text(statement.text)
        self.state = SuspendState.WAITING_FOR_INPUT

    def _run_label(self, statement: Label) -> None:
        pass

    def _run_background(self, statement: Background) -> None:
        try:
            self.display.set_image(statement.layer, statement.image, statement.transition)
        except (AssetError, LayerIndexError) as exc:
            logger.error("Failed to set background: %s", exc)
        else:
            logger.info("Background on layer %d: %s", statement.layer, statement.image)

    def _run_character(self, statement: CharacterArt) -> None:
        try:
            self.display.set_character(statement.layer, statement.position, statement.image)
        except (AssetError, LayerIndexError) as exc:
            logger.error("Failed to set character: %s", exc)
        else:
            logger.info("Character %s -> %s", statement.position, statement.image)

    def _run_choice(self, statement: ChoiceCommand) -> None:
        self._clear_choices()
        self._pending_choices = list(statement.options)
        if not self._pending_choices:
            logger.warning("Choice command at line %d has no options", self.cursor.current_line - 1)

    def _run_affection(self, statement: AffectionChange) -> None:
        self.affection.change(statement.character, statement.delta)

    def _run_if(self, statement: If) -> None:
        taken = self.evaluate(statement.condition)
        self.cursor.conditional_stack.append(taken)
        if not taken:
            self._skip_forward(_BRANCH_MARKERS)

    def _run_elseif(self, statement: ElseIf) -> None:
        stack = self.cursor.conditional_stack
        if not stack or stack[-1]:
            self._skip_forward(_ENDIF_MARKERS)
            return
        taken = self.evaluate(statement.condition)
        stack[-1] = taken
        if not taken:
            self._skip_forward(_BRANCH_MARKERS)

    def _run_else(self, statement: Else) -> None:
        stack = self.cursor.conditional_stack
        if stack and not stack[-1]:
            stack[-1] = True
        else:
            self._skip_forward(_ENDIF_MARKERS)

    def _run_endif(self, statement: EndIf) -> None:
        if self.cursor.conditional_stack:
            self.cursor.conditional_stack.pop()

    def _run_jump(self, statement: Jump) -> None:
        self.cursor.pending_jump = statement.target
        logger.info("Jump to %s pending", statement.target)

    def _run_clear(self, statement: ClearLayer) -> None:
        try:
            self.display.clear(statement.layer)
        except LayerIndexError as exc:
            logger.error("Failed to clear layer: %s", exc)

    def _run_unknown(self, statement: UnknownCommand) -> None:
        logger.warning("Unknown command: %s", statement.name)
