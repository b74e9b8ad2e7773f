"""Core infrastructure components for QuickApp."""

from .config import Config, get_config
from .exceptions import (
    DeviceCountError,
    DuplicateInputIdError,
    DuplicateScreenError,
    EmptyAppError,
    ExternalToolError,
    GenerationError,
    InvalidArgumentError,
    MissingEntryError,
    MultipleEntryError,
    NavigationError,
    ParseError,
    QuickAppError,
    ScopeViolationError,
    ScriptReadError,
    StructuralError,
    ToolNotFoundError,
    UnknownDeclarationError,
    UnknownInputReferenceError,
)
from .logging import bind_context, clear_context, get_logger, setup_logging

__all__ = [
    "Config",
    "get_config",
    "QuickAppError",
    "StructuralError",
    "ParseError",
    "UnknownDeclarationError",
    "InvalidArgumentError",
    "MissingEntryError",
    "MultipleEntryError",
    "ScopeViolationError",
    "DuplicateScreenError",
    "EmptyAppError",
    "DuplicateInputIdError",
    "UnknownInputReferenceError",
    "ScriptReadError",
    "GenerationError",
    "ExternalToolError",
    "ToolNotFoundError",
    "DeviceCountError",
    "NavigationError",
    "get_logger",
    "setup_logging",
    "bind_context",
    "clear_context",
]
