"""Script loading: read, strip comments and blanks, freeze."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple, Union

from .errors import ScriptLoadError, UnresolvedLabelError
from .parser import label_name
from .types import COMMENT_MARKER, LABEL_MARKER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScriptProgram:
    """Immutable, ordered script lines.

    Args:
        lines: Trimmed, non-empty, comment-free source lines.
        source: Where the lines came from, for log messages.
    """

    lines: Tuple[str, ...] = ()
    source: str = "<memory>"

    @classmethod
    def from_lines(cls, raw_lines: Iterable[str], source: str = "<memory>") -> "ScriptProgram":
        kept = []
        for raw in raw_lines:
            line = raw.strip()
            if not line or line.startswith(COMMENT_MARKER):
                continue
            kept.append(line)
        return cls(lines=tuple(kept), source=source)

    @classmethod
    def from_text(cls, text: str, source: str = "<memory>") -> "ScriptProgram":
        return cls.from_lines(text.splitlines(), source=source)

    def find_label(self, name: str) -> Optional[int]:
        """Return the index of the first ``:name`` line in the whole program."""

        for index, line in enumerate(self.lines):
            if line.startswith(LABEL_MARKER) and label_name(line) == name:
                return index
        return None

    def require_label(self, name: str) -> int:
        index = self.find_label(name)
        if index is None:
            raise UnresolvedLabelError(name)
        return index

    def labels(self) -> Tuple[str, ...]:
        return tuple(
            label_name(line) for line in self.lines if line.startswith(LABEL_MARKER)
        )

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> str:
        return self.lines[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)


def load_script(path: Union[Path, str]) -> ScriptProgram:
    """Read a UTF-8 script file.

    Raises:
        ScriptLoadError: The file cannot be opened or decoded.
    """

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8-sig") as handle:
            program = ScriptProgram.from_lines(handle, source=str(path))
    except (OSError, UnicodeDecodeError) as exc:
        raise ScriptLoadError(f"failed to read script file {path}: {exc}") from exc
    logger.info("Loaded script %s (%d lines)", path, len(program))
    return program
