"""
App declaration models.

These models are the canonical, immutable representation of one compiled app:
its screens, the widget tree of each screen and the actions widgets trigger.
They are produced by the front-end, checked by the validator and consumed by
the generator and the navigation runtime.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

DEFAULT_PADDING = 16
DEFAULT_SPACING = 8
DEFAULT_TEXT_SIZE = 16
DEFAULT_LOG_TAG = "QuickApp"


class _Frozen(BaseModel):
    model_config = {"frozen": True}


# Actions


class GoToAction(_Frozen):
    """Navigate to another screen by name."""

    kind: Literal["goTo"] = "goTo"
    target: str = Field(description="Name of the destination screen")


class ToastAction(_Frozen):
    """Show a short user-visible message."""

    kind: Literal["toast"] = "toast"
    message: str


class LogAction(_Frozen):
    """Write a line to the device log."""

    kind: Literal["log"] = "log"
    message: str
    tag: str = Field(default=DEFAULT_LOG_TAG)


class HttpGetAction(_Frozen):
    """Fetch a URL off the UI context and optionally place the body into an input."""

    kind: Literal["httpGet"] = "httpGet"
    url: str
    into: str | None = Field(default=None, description="Input id receiving the response body")


class ReadFileAction(_Frozen):
    """Read an app-private file off the UI context into an input."""

    kind: Literal["readFile"] = "readFile"
    path: str
    into: str = Field(description="Input id receiving the file contents")


class WriteFileAction(_Frozen):
    """Write the current text of an input to an app-private file."""

    kind: Literal["writeFile"] = "writeFile"
    path: str
    source: str = Field(description="Input id whose text is written")


Action = Annotated[
    Union[GoToAction, ToastAction, LogAction, HttpGetAction, ReadFileAction, WriteFileAction],
    Field(discriminator="kind"),
]


def action_input_refs(action: Action) -> tuple[str, ...]:
    """Input ids an action reads from or writes to."""
    if isinstance(action, WriteFileAction):
        return (action.source,)
    if isinstance(action, (HttpGetAction, ReadFileAction)) and action.into is not None:
        return (action.into,)
    return ()


# Widgets


class ColumnNode(_Frozen):
    """Vertical container."""

    kind: Literal["column"] = "column"
    padding: int = Field(default=DEFAULT_PADDING, ge=0, description="Inner padding in dp")
    spacing: int = Field(default=DEFAULT_SPACING, ge=0, description="Gap between children in dp")
    children: tuple[WidgetNode, ...] = ()


class RowNode(_Frozen):
    """Horizontal container."""

    kind: Literal["row"] = "row"
    padding: int = Field(default=DEFAULT_PADDING, ge=0, description="Inner padding in dp")
    spacing: int = Field(default=DEFAULT_SPACING, ge=0, description="Gap between children in dp")
    children: tuple[WidgetNode, ...] = ()


class TextNode(_Frozen):
    """Static text label."""

    kind: Literal["text"] = "text"
    text: str
    size: int = Field(default=DEFAULT_TEXT_SIZE, gt=0, description="Text size in sp")


class ButtonNode(_Frozen):
    """Clickable button running its actions in order."""

    kind: Literal["button"] = "button"
    label: str
    actions: tuple[Action, ...] = ()


class InputNode(_Frozen):
    """Single-line text field addressable by id."""

    kind: Literal["input"] = "input"
    id: str
    hint: str = ""
    value: str = ""


class ImageNode(_Frozen):
    """Image loaded from the app's assets."""

    kind: Literal["image"] = "image"
    asset: str = Field(description="Path relative to the assets directory")


WidgetNode = Annotated[
    Union[ColumnNode, RowNode, TextNode, ButtonNode, InputNode, ImageNode],
    Field(discriminator="kind"),
]

ColumnNode.model_rebuild()
RowNode.model_rebuild()

CONTAINER_TYPES = (ColumnNode, RowNode)


def walk_widgets(node: WidgetNode):
    """Yield a widget and all its descendants, depth-first in declaration order."""
    yield node
    if isinstance(node, CONTAINER_TYPES):
        for child in node.children:
            yield from walk_widgets(child)


# Declarations


class ScreenDeclaration(_Frozen):
    """One named, independently addressable screen."""

    name: str = Field(description="Screen name, unique within the app")
    root: WidgetNode = Field(default_factory=ColumnNode)
    on_show: tuple[Action, ...] = Field(
        default=(), description="Actions run each time the screen is shown"
    )
    line: int | None = Field(default=None, description="Source line of the declaration")

    @property
    def inputs(self) -> list[InputNode]:
        """Input widgets of this screen in declaration order."""
        return [w for w in walk_widgets(self.root) if isinstance(w, InputNode)]

    @property
    def actions(self) -> list[Action]:
        """All actions of this screen: on-show first, then button handlers in order."""
        collected: list[Action] = list(self.on_show)
        for widget in walk_widgets(self.root):
            if isinstance(widget, ButtonNode):
                collected.extend(widget.actions)
        return collected


class AppDeclaration(_Frozen):
    """One compiled app."""

    name: str = Field(description="App label")
    screens: tuple[ScreenDeclaration, ...] = ()

    @property
    def home(self) -> ScreenDeclaration | None:
        """The first declared screen."""
        return self.screens[0] if self.screens else None

    @property
    def screen_names(self) -> list[str]:
        return [screen.name for screen in self.screens]

    def get_screen(self, name: str) -> ScreenDeclaration | None:
        """Get a screen by name."""
        for screen in self.screens:
            if screen.name == name:
                return screen
        return None
