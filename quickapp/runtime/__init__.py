"""Reference navigation runtime mirroring the generated activity."""

from .app import AppController
from .context import UIContext
from .navigation import NOT_FOUND_MESSAGE, Navigator

__all__ = ["AppController", "NOT_FOUND_MESSAGE", "Navigator", "UIContext"]
