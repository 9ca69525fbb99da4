"""Exception taxonomy for the script engine."""


class VNScriptError(Exception):
    """Base exception for the script engine."""


class ScriptLoadError(VNScriptError, OSError):
    """Raised when a script file cannot be opened or read."""


class AssetError(VNScriptError):
    """Raised when an image referenced by a command cannot be loaded."""


class ScriptSyntaxError(VNScriptError):
    """Raised when a command line has malformed arguments.

    Args:
        line: Offending script line.
        reason: Human readable description of the problem.
    """

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason


class UnresolvedLabelError(VNScriptError, LookupError):
    """Raised when a jump target has no matching label line."""

    def __init__(self, label: str) -> None:
        super().__init__(f"Label not found: {label}")
        self.label = label


class LayerIndexError(VNScriptError, IndexError):
    """Raised when a layer index is outside the stage."""

    def __init__(self, index: int, layer_count: int) -> None:
        super().__init__(f"Layer index {index} out of range (0..{layer_count - 1})")
        self.index = index
        self.layer_count = layer_count
