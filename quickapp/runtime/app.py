"""
Application controller.

Python counterpart of the generated activity: owns the Navigator and the UI
context for the lifetime of one app, executes button and on-show actions,
and runs file and network work on a single background worker whose
completions are marshaled back onto the UI context.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import Any, TypeVar

import httpx

from ..core.exceptions import NavigationError
from ..core.logging import get_logger
from ..models.app import (
    Action,
    AppDeclaration,
    ButtonNode,
    GoToAction,
    HttpGetAction,
    LogAction,
    ReadFileAction,
    ScreenDeclaration,
    ToastAction,
    WriteFileAction,
    walk_widgets,
)
from .context import UIContext
from .navigation import Navigator

logger = get_logger(__name__)

T = TypeVar("T")

HTTP_TIMEOUT = 30.0


def _reraise(error: BaseException) -> None:
    raise error


class AppController:
    """Runs one app declaration against a UI context."""

    def __init__(
        self,
        app: AppDeclaration,
        files_dir: Path | None = None,
        context: UIContext | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self.app = app
        self.files_dir = files_dir or Path.cwd()
        self.context = context or UIContext()
        self._http = http
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="quickapp-bg")

        self.inputs: dict[str, str] = {}
        self.toasts: list[str] = []
        self.log_lines: list[tuple[str, str]] = []
        self.finished = False

        self.navigator = Navigator(
            app.screen_names,
            context=self.context,
            on_show=self._show,
            on_notify=self.toasts.append,
            on_exit=self._finish,
        )

    @property
    def screen(self) -> ScreenDeclaration | None:
        current = self.navigator.current
        return self.app.get_screen(current) if current is not None else None

    def start(self) -> None:
        """Show the home screen."""
        self.navigator.start()

    def back(self) -> bool:
        return self.navigator.back()

    def _show(self, name: str) -> None:
        screen = self.app.get_screen(name)
        if screen is None:
            raise NavigationError(message=f"Screen is not declared: {name}", context={"screen": name})
        self.inputs = {node.id: node.value for node in screen.inputs}
        for action in screen.on_show:
            self.perform(action)

    def _finish(self) -> None:
        self.finished = True
        self.shutdown()

    def set_input(self, input_id: str, value: str) -> None:
        self.context.ensure_owner()
        if input_id not in self.inputs:
            raise KeyError(input_id)
        self.inputs[input_id] = value

    def click(self, label: str) -> list[Future[Any]]:
        """Press the first button on the current screen with this label.

        Returns:
            Futures of the background work the button started
        """
        screen = self.screen
        if screen is None:
            raise NavigationError(message="Cannot click: the app has exited")
        for node in walk_widgets(screen.root):
            if isinstance(node, ButtonNode) and node.label == label:
                started = [self.perform(action) for action in node.actions]
                return [future for future in started if future is not None]
        raise KeyError(label)

    def perform(self, action: Action) -> Future[Any] | None:
        """Execute one action on the UI context.

        File and network actions return the future of their background work.
        """
        self.context.ensure_owner()
        if isinstance(action, GoToAction):
            self.navigator.go_to(action.target)
        elif isinstance(action, ToastAction):
            self.toasts.append(action.message)
        elif isinstance(action, LogAction):
            logger.info(action.message, tag=action.tag)
            self.log_lines.append((action.tag, action.message))
        elif isinstance(action, HttpGetAction):
            url = action.url
            return self.run_in_background(lambda: self._http_get(url), self._fill(action.into))
        elif isinstance(action, ReadFileAction):
            path = self.files_dir / action.path
            return self.run_in_background(
                lambda: path.read_text(encoding="utf-8"), self._fill(action.into)
            )
        elif isinstance(action, WriteFileAction):
            text = self.inputs.get(action.source, "")
            path = self.files_dir / action.path
            return self.run_in_background(
                lambda: path.write_text(text, encoding="utf-8"), lambda _: None
            )
        return None

    def _http_get(self, url: str) -> str:
        if self._http is not None:
            return self._http.get(url).raise_for_status().text
        with httpx.Client(timeout=HTTP_TIMEOUT, follow_redirects=True) as client:
            return client.get(url).raise_for_status().text

    def _fill(self, input_id: str | None) -> Callable[[str], None]:
        def apply(value: str) -> None:
            # The input may belong to a screen that is no longer shown
            if input_id is not None and input_id in self.inputs:
                self.inputs[input_id] = value

        return apply

    def run_in_background(self, work: Callable[[], T], on_done: Callable[[T], None]) -> Future[T]:
        """Run work off the UI thread and post its completion back.

        The completion is queued before the returned future resolves. A
        failure is not translated: it is re-raised on the UI context, which
        ends the app the way an uncaught exception does on a device, and is
        also kept on the future.
        """

        def task() -> T:
            try:
                result = work()
            except Exception as error:
                logger.error("Background task failed", error=str(error))
                self.context.post(partial(_reraise, error))
                raise
            self.context.post(lambda: on_done(result))
            return result

        return self._executor.submit(task)

    def shutdown(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait)
