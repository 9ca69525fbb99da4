"""Script interpreter for line-based visual novel scripts."""

from .affection import AffectionTable
from .app import EngineApp, main
from .builder import ScriptBuilder
from .choices import ChoiceRegistry
from .config import EngineConfig, load_config
from .display import DisplaySink, FileAssetResolver, Layer, Stage, TextBox
from .effects import Effect, EffectQueue, MaskTransition
from .errors import (
    AssetError,
    LayerIndexError,
    ScriptLoadError,
    ScriptSyntaxError,
    UnresolvedLabelError,
    VNScriptError,
)
from .interpreter import ExecutionCursor, ScriptEngine, SuspendState
from .loader import ScriptProgram, load_script
from .parser import parse_command, parse_line
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
    TransitionSpec,
    UnknownCommand,
)

__all__ = [
    "AffectionChange",
    "AffectionTable",
    "AssetError",
    "Background",
    "CharacterArt",
    "ChoiceCommand",
    "ChoiceOption",
    "ChoiceRegistry",
    "ClearLayer",
    "Condition",
    "Dialogue",
    "DisplaySink",
    "Effect",
    "EffectQueue",
    "Else",
    "ElseIf",
    "EndIf",
    "EngineApp",
    "EngineConfig",
    "ExecutionCursor",
    "FileAssetResolver",
    "If",
    "Jump",
    "Label",
    "Layer",
    "LayerIndexError",
    "MaskTransition",
    "ScriptBuilder",
    "ScriptEngine",
    "ScriptLoadError",
    "ScriptProgram",
    "ScriptSyntaxError",
    "Stage",
    "Statement",
    "SuspendState",
    "TextBox",
    "TransitionSpec",
    "UnknownCommand",
    "UnresolvedLabelError",
    "VNScriptError",
    "load_config",
    "load_script",
    "main",
    "parse_command",
    "parse_line",
]
