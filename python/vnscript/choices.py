"""Choice registry shared by the engine and the input layer."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Optional, Tuple, Union

from .types import ChoiceOption, normalize_choice_options

logger = logging.getLogger(__name__)

ChoiceOptionInput = Union[ChoiceOption, Tuple[str, str]]


class ChoiceRegistry:
    """Current candidate branches and the selection made on them.

    The engine writes options; the input layer hovers and selects; the engine
    polls the selection once per tick. Every access holds the same lock so a
    render thread never observes a half-replaced option list.
    """

    def __init__(self) -> None:
        self._options: List[ChoiceOption] = []
        self._active = False
        self._hovered: Optional[int] = None
        self._selected: Optional[int] = None
        self._lock = threading.RLock()

    @property
    def options(self) -> List[ChoiceOption]:
        """Current options (read-only snapshot)."""

        with self._lock:
            return list(self._options)

    @property
    def hovered_index(self) -> Optional[int]:
        with self._lock:
            return self._hovered

    def is_active(self) -> bool:
        with self._lock:
            return self._active

    def set_choices(self, options: Iterable[ChoiceOptionInput]) -> None:
        """Replace the options atomically; a non-empty set activates display."""

        normalized = normalize_choice_options(options)
        with self._lock:
            self._options = normalized
            self._hovered = None
            self._selected = None
            self._active = bool(normalized)

    def clear(self) -> None:
        self.set_choices([])

    def activate(self) -> None:
        with self._lock:
            self._active = bool(self._options)

    def deactivate(self) -> None:
        with self._lock:
            self._active = False
            self._hovered = None

    def hover(self, index: Optional[int]) -> None:
        """Record the option under the pointer, or None when over nothing."""

        with self._lock:
            if index is not None and not 0 <= index < len(self._options):
                index = None
            self._hovered = index

    def select(self, index: Optional[int] = None) -> bool:
        """Select ``index`` (default: the hovered option).

        Returns:
            Whether a selection was recorded.
        """

        with self._lock:
            if not self._active:
                return False
            if index is None:
                index = self._hovered
            if index is None or not 0 <= index < len(self._options):
                return False
            self._selected = index
            return True

    def poll_selection(self) -> Tuple[bool, str]:
        """Report a pending selection once, closing the choice display."""

        with self._lock:
            if not self._active or self._selected is None:
                return False, ""
            option = self._options[self._selected]
            self._selected = None
            self._active = False
            self._hovered = None
        logger.info("Choice selected: %s -> %s", option.text, option.target)
        return True, option.target
