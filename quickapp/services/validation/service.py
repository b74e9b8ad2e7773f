"""
Validation Service.

Enforces cross-cutting invariants on a built AppDeclaration before generation.
Validation is total and side-effect-free; it never mutates the model.
"""

from __future__ import annotations

from ...core.exceptions import (
    DuplicateInputIdError,
    DuplicateScreenError,
    EmptyAppError,
    UnknownInputReferenceError,
)
from ...models.app import AppDeclaration, GoToAction, ScreenDeclaration, action_input_refs


def _check_screen_names(app: AppDeclaration) -> None:
    seen: set[str] = set()
    for screen in app.screens:
        if screen.name in seen:
            raise DuplicateScreenError(
                message=f"Screen '{screen.name}' is declared more than once",
                screen=screen.name,
                line=screen.line,
            )
        seen.add(screen.name)


def _check_inputs(screen: ScreenDeclaration) -> None:
    ids: set[str] = set()
    for input_node in screen.inputs:
        if input_node.id in ids:
            raise DuplicateInputIdError(
                message=f"Input id '{input_node.id}' is used more than once in screen '{screen.name}'",
                screen=screen.name,
                input_id=input_node.id,
                line=screen.line,
            )
        ids.add(input_node.id)

    for action in screen.actions:
        for ref in action_input_refs(action):
            if ref not in ids:
                raise UnknownInputReferenceError(
                    message=f"Action '{action.kind}' in screen '{screen.name}' refers to unknown input '{ref}'",
                    screen=screen.name,
                    input_id=ref,
                    line=screen.line,
                )


def validate_app(app: AppDeclaration) -> AppDeclaration:
    """Confirm an app declaration is structurally sound.

    Args:
        app: Front-end output

    Returns:
        The same declaration, unchanged

    Raises:
        EmptyAppError: If no screen is declared
        DuplicateScreenError: If two screens share a name
        DuplicateInputIdError: If two inputs of a screen share an id
        UnknownInputReferenceError: If an action names an input its screen lacks
    """
    if not app.screens:
        raise EmptyAppError(message=f"App '{app.name}' declares no screens; a home screen is required")
    _check_screen_names(app)
    for screen in app.screens:
        _check_inputs(screen)
    return app


def unknown_targets(app: AppDeclaration) -> list[tuple[str, str]]:
    """List (screen, target) pairs whose ``goTo`` names no declared screen.

    These are not errors: the running app reports them when triggered.
    """
    names = set(app.screen_names)
    missing: list[tuple[str, str]] = []
    for screen in app.screens:
        for action in screen.actions:
            if isinstance(action, GoToAction) and action.target not in names:
                missing.append((screen.name, action.target))
    return missing
