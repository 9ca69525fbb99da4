"""Display sink interface and an in-memory stage implementing it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Union

from .effects import Canvas, EffectQueue
from .errors import AssetError, LayerIndexError
from .types import TransitionSpec

logger = logging.getLogger(__name__)

AssetResolver = Callable[[str], Path]


class DisplaySink(Protocol):
    """What the engine needs from the presentation layer."""

    def set_text(self, text: str) -> None:
        ...

    def is_ready(self) -> bool:
        """Whether the current text is fully revealed."""
        ...

    def complete_text(self) -> None:
        ...

    def set_image(
        self, layer: int, image: str, transition: Optional[TransitionSpec] = None
    ) -> None:
        ...

    def set_character(self, layer: int, position: str, image: str) -> None:
        ...

    def clear(self, layer: int) -> None:
        ...


class FileAssetResolver:
    """Resolve image paths under ``root`` and insist that they exist."""

    def __init__(self, root: Union[Path, str] = ".") -> None:
        self.root = Path(root)

    def __call__(self, image: str) -> Path:
        path = Path(image)
        if not path.is_absolute():
            path = self.root / path
        if not path.is_file():
            raise AssetError(f"failed to load image {image}: {path} not found")
        return path


class TextBox:
    """Typewriter reveal of the current dialogue line.

    Args:
        char_delay: Ticks between two revealed characters.
    """

    def __init__(self, char_delay: int = 2) -> None:
        self.char_delay = char_delay
        self.text = ""
        self.char_index = 0
        self.frame_count = 0
        self.ready = False

    @property
    def visible_text(self) -> str:
        return self.text[:self.char_index]

    @property
    def speaker(self) -> Optional[str]:
        """Leading ``Name:`` token of the line, without the colon."""

        words = self.text.split(" ", 1)
        if words and len(words[0]) > 1 and words[0].endswith(":"):
            return words[0][:-1]
        return None

    def set_text(self, text: str) -> None:
        self.text = text
        self.char_index = 0
        self.frame_count = 0
        self.ready = False

    def update(self) -> None:
        if not self.ready and self.char_index < len(self.text):
            self.frame_count += 1
            if self.frame_count >= self.char_delay:
                self.char_index += 1
                self.frame_count = 0
        elif self.char_index >= len(self.text):
            self.ready = True

    def complete(self) -> None:
        self.char_index = len(self.text)
        self.ready = True

    def clear(self) -> None:
        self.set_text("")


@dataclass
class Layer:
    """One addressable visual slot."""

    z_index: int
    image: Optional[str] = None
    character: Optional[str] = None
    position: Optional[str] = None
    visible: bool = True

    def clear_image(self) -> None:
        self.image = None

    def clear_character(self) -> None:
        self.character = None
        self.position = None


class Stage:
    """In-memory display sink: layers, dialogue text and running effects.

    Only one layer holds the active background and one the active character;
    placing either on a new layer clears it from the previous one.

    Args:
        layer_count: Number of layers.
        char_delay: Typewriter speed passed to the text box.
        resolver: Callable validating image paths; raises ``AssetError``.
        effects: Effect queue for transitions.
    """

    def __init__(
        self,
        layer_count: int = 5,
        *,
        char_delay: int = 2,
        resolver: Optional[AssetResolver] = None,
        effects: Optional[EffectQueue] = None,
    ) -> None:
        self.layers: List[Layer] = [Layer(z_index=index) for index in range(layer_count)]
        self.text_box = TextBox(char_delay=char_delay)
        self.effects = effects or EffectQueue()
        self._resolver = resolver or FileAssetResolver()
        self.current_image_layer: Optional[int] = None
        self.current_character_layer: Optional[int] = None

    def set_text(self, text: str) -> None:
        self.text_box.set_text(text)

    def is_ready(self) -> bool:
        return self.text_box.ready

    def complete_text(self) -> None:
        self.text_box.complete()

    def layer(self, index: int) -> Layer:
        if not 0 <= index < len(self.layers):
            raise LayerIndexError(index, len(self.layers))
        return self.layers[index]

    def set_image(
        self, layer: int, image: str, transition: Optional[TransitionSpec] = None
    ) -> None:
        target = self.layer(layer)
        self._resolver(image)
        source = target.image
        if transition is not None:
            self._start_transition(layer, source, image, transition)
        if self.current_image_layer is not None:
            self.layers[self.current_image_layer].clear_image()
        target.image = image
        target.visible = True
        self.current_image_layer = layer

    def set_character(self, layer: int, position: str, image: str) -> None:
        target = self.layer(layer)
        self._resolver(image)
        if self.current_character_layer is not None:
            self.layers[self.current_character_layer].clear_character()
        target.character = image
        target.position = position
        target.visible = True
        self.current_character_layer = layer

    def clear(self, layer: int) -> None:
        target = self.layer(layer)
        target.clear_image()
        target.clear_character()

    def update(self) -> None:
        """Advance text reveal and effects by one tick."""

        self.text_box.update()
        self.effects.update()

    def render(self, canvas: Canvas) -> None:
        self.effects.render(canvas)

    def visible_layers(self) -> List[Layer]:
        return sorted(
            (layer for layer in self.layers if layer.visible), key=lambda item: item.z_index
        )

    def _start_transition(
        self, layer: int, source: Optional[str], image: str, transition: TransitionSpec
    ) -> None:
        try:
            self._resolver(transition.mask)
        except AssetError as exc:
            logger.error("Transition on layer %d skipped: %s", layer, exc)
            return
        self.effects.start(layer, source, image, transition)
