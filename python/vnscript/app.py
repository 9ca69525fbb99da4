"""Convenience runtime helpers for the script engine."""

from __future__ import annotations

import itertools
import logging
import sys
from typing import Callable, Dict, List, Optional

from .config import load_config
from .display import FileAssetResolver, Stage
from .errors import ScriptLoadError
from .interpreter import ScriptEngine
from .types import Dialogue

logger = logging.getLogger(__name__)

EventCallback = Callable[[Dict[str, object]], None]
Chooser = Callable[[Dict[str, object]], int]


class EngineApp:
    """Drive an engine tick by tick until the script ends.

    Dialogue is continued as soon as it is shown, so the loop needs no real
    input device.

    Args:
        engine: Engine with a program already loaded.
    """

    def __init__(self, engine: ScriptEngine) -> None:
        self.engine = engine

    def run(
        self,
        chooser: Optional[Chooser] = None,
        *,
        on_event: Optional[EventCallback] = None,
        max_ticks: Optional[int] = 100000,
    ) -> List[Dict[str, object]]:
        """Run the engine until the end and collect events.

        Args:
            chooser: Optional callback invoked for choice events. The callback
                receives the choice event dict and returns the selected index.
            on_event: Optional callback receiving each event as it happens.
            max_ticks: Tick budget; None runs without limit.

        Returns:
            List of event dictionaries in the order they were shown.

        Raises:
            ValueError: The chooser returned an index outside the options.
            RuntimeError: The script did not end within ``max_ticks``.
        """

        engine = self.engine
        events: List[Dict[str, object]] = []

        def emit(event: Dict[str, object]) -> None:
            events.append(event)
            if on_event is not None:
                on_event(event)

        ticks = itertools.count() if max_ticks is None else range(max_ticks)
        for _ in ticks:
            update = getattr(engine.display, "update", None)
            if update is not None:
                update()
            if engine.waiting_for_input:
                emit(Dialogue(text=engine.current_text).to_dict())
                if not engine.advance():
                    engine.advance()
            elif engine.waiting_for_choice:
                event: Dict[str, object] = {
                    "type": "choice",
                    "options": [option.to_dict() for option in engine.choices.options],
                }
                emit(event)
                index = chooser(event) if chooser else 0
                if not engine.choices.select(index):
                    raise ValueError(f"Choice index {index} is out of range")
            if not engine.execute_step():
                return events
        raise RuntimeError(f"Script did not finish within {max_ticks} ticks")


def _print_event(event: Dict[str, object]) -> None:
    if event.get("type") == "dialogue":
        print(event["text"])
        input()


def _prompt_choice(event: Dict[str, object]) -> int:
    options = list(event.get("options", []))  # type: ignore[call-overload]
    for number, option in enumerate(options, start=1):
        print(f"{number}. {option['text']}")
    while True:
        raw = input("> ").strip()
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return int(raw) - 1
        print(f"Enter a number between 1 and {len(options)}.")


def main() -> None:
    """Play the configured start script in the terminal."""

    config = load_config()
    logging.basicConfig(
        level=config.log_level, format="%(levelname)s %(name)s: %(message)s"
    )
    stage = Stage(
        config.layer_count,
        char_delay=config.char_delay,
        resolver=FileAssetResolver(config.asset_root),
    )
    engine = ScriptEngine(stage, config=config)
    try:
        engine.load_script(config.start_script)
    except ScriptLoadError as exc:
        logger.critical("%s", exc)
        sys.exit(1)
    try:
        EngineApp(engine).run(_prompt_choice, on_event=_print_event, max_ticks=None)
    except (KeyboardInterrupt, EOFError):
        print()
