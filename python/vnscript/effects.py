"""Transition effects driven once per tick."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol

from .types import TransitionSpec

logger = logging.getLogger(__name__)

DEFAULT_TRANSITION_SPEED = 0.01


class Canvas(Protocol):
    """Drawing surface supplied by the front end."""

    def draw_transition(
        self, layer: int, source: Optional[str], target: str, mask: str, progress: float
    ) -> None:
        ...


class Effect(Protocol):
    def advance(self) -> bool:
        """Move one tick forward; return True once finished."""
        ...

    def render(self, canvas: Canvas) -> None:
        ...


@dataclass
class MaskTransition:
    """Blend ``source`` into ``target`` on a layer through a mask image."""

    layer: int
    source: Optional[str]
    target: str
    mask: str
    speed: float = DEFAULT_TRANSITION_SPEED
    progress: float = 0.0

    def advance(self) -> bool:
        self.progress += self.speed
        if self.progress >= 1.0:
            self.progress = 1.0
            return True
        return False

    def render(self, canvas: Canvas) -> None:
        if self.source is None:
            return
        canvas.draw_transition(self.layer, self.source, self.target, self.mask, self.progress)


EffectFactory = Callable[[int, Optional[str], str, TransitionSpec], Effect]


def _mask_transition(
    layer: int, source: Optional[str], target: str, spec: TransitionSpec
) -> Effect:
    return MaskTransition(layer=layer, source=source, target=target, mask=spec.mask)


EFFECT_FACTORIES: Dict[str, EffectFactory] = {
    "transition": _mask_transition,
}


class EffectQueue:
    """Active effects, advanced together and dropped when finished."""

    def __init__(self, factories: Optional[Dict[str, EffectFactory]] = None) -> None:
        self._factories = dict(EFFECT_FACTORIES if factories is None else factories)
        self._effects: List[Effect] = []

    @property
    def effects(self) -> List[Effect]:
        return list(self._effects)

    def has_active(self) -> bool:
        return bool(self._effects)

    def add(self, effect: Effect) -> None:
        self._effects.append(effect)

    def start(
        self, layer: int, source: Optional[str], target: str, spec: TransitionSpec
    ) -> Optional[Effect]:
        """Build and queue the effect named by ``spec``; unknown names are logged."""

        factory = self._factories.get(spec.name)
        if factory is None:
            logger.warning("Unknown transition effect %r on layer %d", spec.name, layer)
            return None
        effect = factory(layer, source, target, spec)
        self._effects.append(effect)
        return effect

    def update(self) -> List[Effect]:
        """Advance every effect one tick and return those that finished."""

        finished: List[Effect] = []
        running: List[Effect] = []
        for effect in self._effects:
            (finished if effect.advance() else running).append(effect)
        self._effects = running
        return finished

    def render(self, canvas: Canvas) -> None:
        for effect in self._effects:
            effect.render(canvas)

    def clear(self) -> None:
        self._effects.clear()
