"""
Scope checking for parsed scripts.

Locates the single entry declaration and rejects every declaration that
appears in a block it does not belong to. Runs over the generic call tree
before any model is built.
"""

from __future__ import annotations

from enum import Enum

from ...core.exceptions import (
    MissingEntryError,
    MultipleEntryError,
    ScopeViolationError,
    UnknownDeclarationError,
)
from .parser import Call, Script

ENTRY = "app"
SCREEN = "screen"
CONTAINERS = frozenset({"column", "row"})
BUTTON = "button"
LEAF_WIDGETS = frozenset({"text", "input", "image"})
WIDGETS = CONTAINERS | LEAF_WIDGETS | {BUTTON}
ACTIONS = frozenset({"goTo", "toast", "log", "httpGet", "readFile", "writeFile"})
IN_SCREEN_PRIMITIVES = WIDGETS | ACTIONS
KNOWN = IN_SCREEN_PRIMITIVES | {ENTRY, SCREEN}


class Scope(str, Enum):
    """Block kinds a declaration can appear in."""

    TOP = "top"
    APP = "app"
    SCREEN = "screen"
    HANDLER = "handler"
    LEAF = "leaf"


def find_entry(script: Script) -> Call:
    """Return the single top-level app declaration.

    Raises:
        MissingEntryError: If there is none.
        MultipleEntryError: If there is more than one.
    """
    entries = [call for call in script.calls if call.name == ENTRY]
    if not entries:
        raise MissingEntryError(message=f"No '{ENTRY}' declaration found")
    if len(entries) > 1:
        second = entries[1]
        raise MultipleEntryError(
            message=f"Only one '{ENTRY}' declaration is allowed, found {len(entries)}",
            count=len(entries),
            line=second.line,
            column=second.column,
        )
    return entries[0]


def check_scopes(script: Script) -> Call:
    """Validate declaration placement and return the entry declaration.

    Args:
        script: Parsed script

    Returns:
        The entry call, whose block holds the screens

    Raises:
        MissingEntryError, MultipleEntryError: On a wrong number of entries.
        ScopeViolationError: When a declaration appears in the wrong block.
        UnknownDeclarationError: When a name is not a QuickApp declaration.
    """
    entry = find_entry(script)
    for call in script.calls:
        _check(call, Scope.TOP, parent=None)
    return entry


def _violation(call: Call, detail: str) -> ScopeViolationError:
    return ScopeViolationError(
        message=f"'{call.name}' {detail}",
        primitive=call.name,
        line=call.line,
        column=call.column,
    )


def _check(call: Call, scope: Scope, parent: Call | None) -> None:
    if call.name not in KNOWN:
        raise UnknownDeclarationError(
            message=f"Unknown declaration '{call.name}'",
            name=call.name,
            line=call.line,
            column=call.column,
        )

    if scope is Scope.LEAF and parent is not None:
        raise _violation(call, f"cannot be declared inside '{parent.name}'")

    if call.name == ENTRY:
        if scope is not Scope.TOP:
            raise _violation(call, "must be declared at the top level of the script")
        inner = Scope.APP
    elif call.name == SCREEN:
        if scope is not Scope.APP:
            raise _violation(call, f"must be declared directly inside the '{ENTRY}' block")
        inner = Scope.SCREEN
    elif scope in (Scope.TOP, Scope.APP):
        raise _violation(call, "must be declared inside a screen")
    elif call.name in ACTIONS:
        inner = Scope.LEAF
    elif scope is Scope.HANDLER:
        raise _violation(call, f"cannot be declared inside '{parent.name if parent else BUTTON}'")
    elif call.name in CONTAINERS:
        inner = Scope.SCREEN
    elif call.name == BUTTON:
        inner = Scope.HANDLER
    else:
        inner = Scope.LEAF

    for child in call.children:
        _check(child, inner, parent=call)
