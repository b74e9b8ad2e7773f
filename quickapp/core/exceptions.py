"""
Custom exception hierarchy for QuickApp.

All exceptions inherit from QuickAppError to enable consistent error handling
across the compile, build and deploy commands. Structural errors are detected
before any file is generated; external tool errors carry the tool's captured
output verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class QuickAppError(Exception):
    """Base exception for all QuickApp errors."""

    message: str
    context: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        ctx = f" | context: {self.context}" if self.context else ""
        cause = f" | caused by: {self.cause}" if self.cause else ""
        return f"{self.message}{ctx}{cause}"


@dataclass
class StructuralError(QuickAppError):
    """Raised when a script is not a well-formed app declaration.

    Always aborts the pipeline before generation and is never retried.
    """

    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        base = super().__str__()
        if self.line is None:
            return base
        location = f"line {self.line}"
        if self.column is not None:
            location += f", column {self.column}"
        return f"{base} ({location})"


@dataclass
class ParseError(StructuralError):
    """Raised on lexical or syntax errors in a script."""


@dataclass
class UnknownDeclarationError(StructuralError):
    """Raised when a script calls a declaration QuickApp does not define."""

    name: str = ""


@dataclass
class InvalidArgumentError(StructuralError):
    """Raised when a declaration receives missing, unknown or mistyped arguments."""

    primitive: str = ""
    argument: str = ""


@dataclass
class MissingEntryError(StructuralError):
    """Raised when a script has no top-level app declaration."""


@dataclass
class MultipleEntryError(StructuralError):
    """Raised when a script has more than one top-level app declaration."""

    count: int = 0


@dataclass
class ScopeViolationError(StructuralError):
    """Raised when a declaration appears outside the block it belongs to."""

    primitive: str = ""


@dataclass
class DuplicateScreenError(StructuralError):
    """Raised when two screens share a name (case-sensitive)."""

    screen: str = ""


@dataclass
class EmptyAppError(StructuralError):
    """Raised when an app declares no screens."""


@dataclass
class DuplicateInputIdError(StructuralError):
    """Raised when two inputs of the same screen share an id."""

    screen: str = ""
    input_id: str = ""


@dataclass
class UnknownInputReferenceError(StructuralError):
    """Raised when an action reads from or writes to an input its screen lacks."""

    screen: str = ""
    input_id: str = ""


@dataclass
class ScriptReadError(QuickAppError):
    """Raised when a script file cannot be read or is not UTF-8 text."""

    path: str = ""

    def __str__(self) -> str:
        return self.message


@dataclass
class GenerationError(QuickAppError):
    """Raised when generation runs on a model that was never validated.

    This is a defect in the caller, not a user-facing condition.
    """


@dataclass
class ExternalToolError(QuickAppError):
    """Raised when an external tool (gradle, adb) exits with a non-zero code."""

    tool: str = ""
    command: list[str] = field(default_factory=list)
    returncode: int | None = None
    output: str = ""

    def __str__(self) -> str:
        if not self.output:
            return self.message
        return f"{self.message}\n{self.output.rstrip()}"


@dataclass
class ToolNotFoundError(ExternalToolError):
    """Raised when a required external tool is not available."""

    tool_name: str = ""
    expected_path: str = ""
    install_hint: str = ""

    def __str__(self) -> str:
        hint = f" Install hint: {self.install_hint}" if self.install_hint else ""
        return f"Tool '{self.tool_name}' not found at '{self.expected_path}'.{hint}"


@dataclass
class DeviceCountError(QuickAppError):
    """Raised when zero or several devices are connected for `run`."""

    count: int = 0

    def __str__(self) -> str:
        return self.message


@dataclass
class NavigationError(QuickAppError):
    """Raised when the navigation runtime is driven after it has exited."""
