"""
Navigation state machine.

One state per registered screen plus the terminal exited state. The
backstack holds previously visited screens; the current screen is kept
apart from it, so a fresh navigator has an empty backstack.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from ..core.exceptions import NavigationError
from ..core.logging import get_logger
from .context import UIContext

logger = get_logger(__name__)

NOT_FOUND_MESSAGE = "Screen not found: {target}"


class Navigator:
    """Screen backstack driven from the UI context."""

    def __init__(
        self,
        screens: Sequence[str],
        home: str | None = None,
        context: UIContext | None = None,
        on_show: Callable[[str], None] | None = None,
        on_notify: Callable[[str], None] | None = None,
        on_exit: Callable[[], None] | None = None,
    ) -> None:
        if not screens:
            raise NavigationError(message="A navigator needs at least one screen")
        home = screens[0] if home is None else home
        if home not in screens:
            raise NavigationError(
                message=f"Home screen '{home}' is not registered",
                context={"screens": list(screens)},
            )
        self._screens = tuple(screens)
        self._context = context
        self._on_show = on_show
        self._on_notify = on_notify
        self._on_exit = on_exit

        self._current: str | None = home
        self._backstack: list[str] = []
        self.notifications: list[str] = []

    @property
    def screens(self) -> tuple[str, ...]:
        return self._screens

    @property
    def current(self) -> str | None:
        """Screen on display, or None once exited."""
        return self._current

    @property
    def backstack(self) -> tuple[str, ...]:
        """Previously visited screens, oldest first."""
        return tuple(self._backstack)

    @property
    def depth(self) -> int:
        return len(self._backstack)

    @property
    def exited(self) -> bool:
        return self._current is None

    def _guard(self, operation: str) -> None:
        if self._context is not None:
            self._context.ensure_owner()
        if self.exited:
            raise NavigationError(
                message=f"Cannot {operation}: the app has exited",
                context={"operation": operation},
            )

    def _show(self, screen: str) -> None:
        if self._on_show is not None:
            self._on_show(screen)

    def start(self) -> None:
        """Show the current screen without changing state."""
        self._guard("start")
        self._show(self._current)  # type: ignore[arg-type]

    def go_to(self, target: str) -> bool:
        """Navigate forward.

        Returns:
            True if the target exists and became current; False if it is
            unknown, in which case state is untouched and a notification is
            emitted instead
        """
        self._guard("go to a screen")
        if target not in self._screens:
            message = NOT_FOUND_MESSAGE.format(target=target)
            logger.warning("Navigation target not found", target=target)
            self.notifications.append(message)
            if self._on_notify is not None:
                self._on_notify(message)
            return False

        self._backstack.append(self._current)  # type: ignore[arg-type]
        self._current = target
        self._show(target)
        return True

    def back(self) -> bool:
        """Navigate back.

        Returns:
            True if a previous screen became current; False if the backstack
            was empty and the navigator exited
        """
        self._guard("go back")
        if not self._backstack:
            self._current = None
            if self._on_exit is not None:
                self._on_exit()
            return False

        self._current = self._backstack.pop()
        self._show(self._current)
        return True
