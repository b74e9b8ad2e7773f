"""
Single-threaded UI context.

Callbacks posted from any thread run in FIFO order on the thread that owns
the context, the same contract Android's main looper gives the generated
activity.
"""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable

from ..core.exceptions import NavigationError

Callback = Callable[[], None]


class UIContext:
    """FIFO callback queue owned by one thread."""

    def __init__(self, owner: threading.Thread | None = None) -> None:
        self._owner = owner or threading.current_thread()
        self._queue: deque[Callback] = deque()
        self._lock = threading.Lock()

    @property
    def owner(self) -> threading.Thread:
        return self._owner

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    def is_owner(self) -> bool:
        return threading.current_thread() is self._owner

    def ensure_owner(self) -> None:
        """Raise NavigationError unless called on the owning thread."""
        if not self.is_owner():
            raise NavigationError(
                message="UI state may only be touched on the UI thread",
                context={
                    "owner": self._owner.name,
                    "caller": threading.current_thread().name,
                },
            )

    def post(self, callback: Callback) -> None:
        """Queue a callback; safe to call from any thread."""
        with self._lock:
            self._queue.append(callback)

    def run_pending(self) -> int:
        """Run queued callbacks until the queue is empty.

        Callbacks posted while draining run in the same pass. If a callback
        raises, the exception propagates and later callbacks stay queued.

        Returns:
            Number of callbacks run
        """
        self.ensure_owner()
        count = 0
        while True:
            with self._lock:
                if not self._queue:
                    return count
                callback = self._queue.popleft()
            callback()
            count += 1
