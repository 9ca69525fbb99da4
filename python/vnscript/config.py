"""Engine configuration loaded from an optional JSON file."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "vnscript.json"
DEFAULT_START_SCRIPT = "resource/script/first.rgo"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


@dataclass
class EngineConfig:
    """Runtime knobs for the interpreter and the stage.

    Args:
        affection_min: Lowest value an affection stat can hold.
        affection_max: Highest value an affection stat can hold.
        affection_default: Value read for a character never written.
        layer_count: Number of addressable stage layers.
        char_delay: Ticks between two revealed characters of dialogue.
        max_chain_steps: Upper bound on lines run after a choice selection.
        start_script: Script loaded by the console entry point.
        asset_root: Directory image paths are resolved against.
        log_level: Name of the root logging level.
    """

    affection_min: int = 0
    affection_max: int = 100
    affection_default: int = 50
    layer_count: int = 5
    char_delay: int = 2
    max_chain_steps: int = 10000
    start_script: str = DEFAULT_START_SCRIPT
    asset_root: str = "."
    log_level: str = "INFO"

    def clamp(self) -> "EngineConfig":
        self.affection_min = int(self.affection_min)
        self.affection_max = int(self.affection_max)
        if self.affection_min > self.affection_max:
            logger.warning(
                "affection_min %d exceeds affection_max %d; using defaults",
                self.affection_min,
                self.affection_max,
            )
            self.affection_min, self.affection_max = 0, 100
        self.affection_default = int(self.affection_default)
        self.layer_count = _clamp(int(self.layer_count), 1, 64)
        self.char_delay = max(int(self.char_delay), 0)
        self.max_chain_steps = max(int(self.max_chain_steps), 1)
        self.start_script = str(self.start_script)
        self.asset_root = str(self.asset_root)
        level = str(self.log_level).upper()
        self.log_level = level if level in _LOG_LEVELS else "INFO"
        return self

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "EngineConfig":
        if not isinstance(data, Mapping):
            return cls()
        defaults = cls()

        def _as_int(key: str) -> int:
            default = getattr(defaults, key)
            try:
                return int(data.get(key, default))
            except (TypeError, ValueError):
                return default

        config = cls(
            affection_min=_as_int("affection_min"),
            affection_max=_as_int("affection_max"),
            affection_default=_as_int("affection_default"),
            layer_count=_as_int("layer_count"),
            char_delay=_as_int("char_delay"),
            max_chain_steps=_as_int("max_chain_steps"),
            start_script=str(data.get("start_script", defaults.start_script)),
            asset_root=str(data.get("asset_root", defaults.asset_root)),
            log_level=str(data.get("log_level", defaults.log_level)),
        )
        return config.clamp()


def load_config(path: Union[Path, str] = CONFIG_FILENAME) -> EngineConfig:
    """Read configuration from ``path``; a missing or broken file yields defaults."""

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        return EngineConfig()
    except (OSError, json.JSONDecodeError, TypeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return EngineConfig()
    return EngineConfig.from_dict(data)
