"""
Model builder.

Binds call arguments to each declaration's signature and turns the
scope-checked call tree into an immutable AppDeclaration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ...core.exceptions import InvalidArgumentError
from ...models.app import (
    Action,
    AppDeclaration,
    ButtonNode,
    ColumnNode,
    GoToAction,
    HttpGetAction,
    ImageNode,
    InputNode,
    LogAction,
    ReadFileAction,
    RowNode,
    ScreenDeclaration,
    TextNode,
    ToastAction,
    WidgetNode,
    WriteFileAction,
)
from .parser import Call
from .scope import ACTIONS


@dataclass(frozen=True)
class Signature:
    """Parameters of a declaration, in positional order."""

    params: tuple[tuple[str, type], ...]
    required: frozenset[str] = frozenset()

    def bind(self, call: Call) -> dict[str, Any]:
        types = dict(self.params)
        order = [name for name, _ in self.params]
        bound: dict[str, Any] = {}
        positional_done = False

        for index, arg in enumerate(call.args):
            if arg.name is None:
                if positional_done:
                    raise _arg_error(call, "", "positional arguments must come before named ones", arg)
                if index >= len(order):
                    raise _arg_error(call, "", f"takes at most {len(order)} arguments", arg)
                name = order[index]
            else:
                positional_done = True
                name = arg.name
                if name not in types:
                    raise _arg_error(call, name, f"has no parameter '{name}'", arg)
            if name in bound:
                raise _arg_error(call, name, f"got '{name}' more than once", arg)
            expected = types[name]
            # bool is an int subclass
            mistyped = isinstance(arg.value, bool) and expected is not bool
            if mistyped or not isinstance(arg.value, expected):
                raise _arg_error(
                    call, name, f"expects {_type_name(expected)} for '{name}'", arg
                )
            bound[name] = arg.value

        for name in order:
            if name in self.required and name not in bound:
                raise _arg_error(call, name, f"requires '{name}'")
        return bound


def _type_name(expected: type) -> str:
    return {str: "a string", int: "an integer", bool: "a boolean"}.get(expected, expected.__name__)


def _arg_error(call: Call, argument: str, detail: str, arg: Any = None) -> InvalidArgumentError:
    return InvalidArgumentError(
        message=f"'{call.name}' {detail}",
        primitive=call.name,
        argument=argument,
        line=arg.line if arg is not None else call.line,
        column=arg.column if arg is not None else call.column,
    )


SIGNATURES: dict[str, Signature] = {
    "app": Signature((("name", str),), frozenset({"name"})),
    "screen": Signature((("name", str),), frozenset({"name"})),
    "column": Signature((("padding", int), ("spacing", int))),
    "row": Signature((("padding", int), ("spacing", int))),
    "text": Signature((("text", str), ("size", int)), frozenset({"text"})),
    "button": Signature((("label", str),), frozenset({"label"})),
    "input": Signature((("id", str), ("hint", str), ("value", str)), frozenset({"id"})),
    "image": Signature((("asset", str),), frozenset({"asset"})),
    "goTo": Signature((("target", str),), frozenset({"target"})),
    "toast": Signature((("message", str),), frozenset({"message"})),
    "log": Signature((("message", str), ("tag", str)), frozenset({"message"})),
    "httpGet": Signature((("url", str), ("into", str)), frozenset({"url"})),
    "readFile": Signature((("path", str), ("into", str)), frozenset({"path", "into"})),
    "writeFile": Signature((("path", str), ("from", str)), frozenset({"path", "from"})),
}


def _construct(call: Call, model: type, **values: Any) -> Any:
    try:
        return model(**values)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field_name = str(first["loc"][0]) if first.get("loc") else ""
        raise InvalidArgumentError(
            message=f"'{call.name}' has an invalid '{field_name}': {first['msg']}",
            primitive=call.name,
            argument=field_name,
            line=call.line,
            column=call.column,
            cause=e,
        ) from e


def build_action(call: Call) -> Action:
    args = SIGNATURES[call.name].bind(call)
    if call.name == "goTo":
        return _construct(call, GoToAction, **args)
    if call.name == "toast":
        return _construct(call, ToastAction, **args)
    if call.name == "log":
        return _construct(call, LogAction, **args)
    if call.name == "httpGet":
        return _construct(call, HttpGetAction, **args)
    if call.name == "readFile":
        return _construct(call, ReadFileAction, **args)
    return _construct(call, WriteFileAction, path=args["path"], source=args["from"])


def build_widget(call: Call, on_show: list[Action]) -> WidgetNode:
    """Build one widget; actions met inside containers are appended to ``on_show``."""
    args = SIGNATURES[call.name].bind(call)
    if call.name in ("column", "row"):
        children = _build_body(call.children, on_show)
        model = ColumnNode if call.name == "column" else RowNode
        return _construct(call, model, children=tuple(children), **args)
    if call.name == "button":
        actions = tuple(build_action(child) for child in call.children)
        return _construct(call, ButtonNode, actions=actions, **args)
    if call.name == "text":
        return _construct(call, TextNode, **args)
    if call.name == "input":
        return _construct(call, InputNode, **args)
    return _construct(call, ImageNode, **args)


def _build_body(calls: list[Call], on_show: list[Action]) -> list[WidgetNode]:
    widgets: list[WidgetNode] = []
    for call in calls:
        if call.name in ACTIONS:
            on_show.append(build_action(call))
        else:
            widgets.append(build_widget(call, on_show))
    return widgets


def build_screen(call: Call) -> ScreenDeclaration:
    """Build a screen; a body of several widgets is wrapped in a default column."""
    args = SIGNATURES["screen"].bind(call)
    on_show: list[Action] = []
    widgets = _build_body(call.children, on_show)
    root: WidgetNode = widgets[0] if len(widgets) == 1 else ColumnNode(children=tuple(widgets))
    return ScreenDeclaration(
        name=args["name"],
        root=root,
        on_show=tuple(on_show),
        line=call.line,
    )


def build_app(entry: Call) -> AppDeclaration:
    """Build the app declaration from a scope-checked entry call."""
    args = SIGNATURES["app"].bind(entry)
    screens = tuple(build_screen(call) for call in entry.children)
    return AppDeclaration(name=args["name"], screens=screens)
