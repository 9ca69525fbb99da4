"""Per-character affection stats."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

AffectionObserver = Callable[[str, int], None]


class AffectionTable:
    """Bounded integer stat per character.

    Every write is clamped to ``[min_value, max_value]``. Characters that were
    never written read as ``default_value``, which is not itself clamped.
    Observers run synchronously, in registration order, after each write.

    Args:
        min_value: Lower clamp bound.
        max_value: Upper clamp bound.
        default_value: Value read for unknown characters.
    """

    def __init__(
        self, min_value: int = 0, max_value: int = 100, default_value: int = 50
    ) -> None:
        if min_value > max_value:
            raise ValueError(
                f"min_value {min_value} is greater than max_value {max_value}"
            )
        self.min_value = min_value
        self.max_value = max_value
        self.default_value = default_value
        self._values: Dict[str, int] = {}
        self._observers: List[AffectionObserver] = []
        self._lock = threading.RLock()

    def get(self, character: str) -> int:
        with self._lock:
            return self._values.get(character, self.default_value)

    def set(self, character: str, value: int) -> int:
        """Store a clamped value and return it."""

        with self._lock:
            clamped = self._clamp(value)
            self._values[character] = clamped
            self._notify(character, clamped)
            return clamped

    def change(self, character: str, delta: int) -> int:
        """Apply ``delta`` to the current value, clamp, and return the result.

        A character that was never written starts from ``default_value``, so
        ``change("Yuki", 5)`` on a fresh table with the default of 50 gives 55.
        """

        with self._lock:
            current = self._values.get(character, self.default_value)
            clamped = self._clamp(current + delta)
            self._values[character] = clamped
            logger.info("Affection %s %+d -> %d", character, delta, clamped)
            self._notify(character, clamped)
            return clamped

    def add_observer(self, observer: AffectionObserver) -> None:
        with self._lock:
            self._observers.append(observer)

    def _clamp(self, value: int) -> int:
        return max(self.min_value, min(self.max_value, int(value)))

    def _notify(self, character: str, value: int) -> None:
        for observer in list(self._observers):
            observer(character, value)
