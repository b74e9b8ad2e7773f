"""Test configuration for QuickApp."""

import logging
import tempfile
from pathlib import Path

import pytest
import structlog

from quickapp.core.config import BuildConfig, Config, ToolsConfig
from quickapp.services.toolchain import ToolResult

SHOPPING_LIST = """\
import quickapp.*

// Two screens and one navigation button
app("Shopping List") {
    screen("main") {
        column(padding = 24) {
            text("Groceries", size = 22)
            input(id = "item", hint = "Item")
            button("Details") { goTo("details") }
        }
    }
    screen("details") { text("Nothing yet") }
}
"""


class FakeRunner:
    """Stands in for ToolRunner; records commands and replays canned results.

    ``responses`` maps a command keyword (``"devices"``, ``"install"``, ...) to
    a ToolResult. ``on_run`` is called with the command and cwd before the
    result is returned, which lets a test drop a fake APK where Gradle would.
    """

    def __init__(self, responses=None, on_run=None):
        self.responses = responses or {}
        self.on_run = on_run
        self.calls = []

    async def run(self, command, cwd=None, sink=None):
        command = [str(part) for part in command]
        self.calls.append((command, cwd))
        if self.on_run is not None:
            self.on_run(command, cwd)
        for keyword, result in self.responses.items():
            if keyword in command:
                if sink is not None:
                    for line in result.output.splitlines():
                        sink(line)
                return result
        return ToolResult(returncode=0, output="")

    def commands_with(self, keyword):
        return [command for command, _ in self.calls if keyword in command]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A Path object pointing to the temporary directory.
            The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def shopping_list_source():
    """The two-screen sample script."""
    return SHOPPING_LIST


@pytest.fixture
def script_path(temp_dir):
    """Write the sample script as ShoppingList.kt.

    Returns:
        Path: The script file inside the temporary directory.
    """
    path = temp_dir / "ShoppingList.kt"
    path.write_text(SHOPPING_LIST, encoding="utf-8")
    return path


@pytest.fixture
def config(temp_dir):
    """Configuration pointing every tool at fixed fake locations.

    The SDK root is a directory under the temporary directory; gradle and adb
    are never executed because tests inject a FakeRunner.
    """
    sdk = temp_dir / "sdk"
    sdk.mkdir()
    return Config(
        tools=ToolsConfig(
            android_sdk_root=sdk,
            gradle_path=Path("/opt/gradle/bin/gradle"),
            adb_path=Path("/opt/platform-tools/adb"),
        ),
        build=BuildConfig(build_root=Path(".quickapp")),
    )


@pytest.fixture
def storage(temp_dir):
    """Create a storage backend for testing.

    Returns:
        LocalStorageBackend: A local storage backend rooted at the temporary directory.
    """
    from quickapp.storage import LocalStorageBackend

    return LocalStorageBackend(temp_dir)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configuration made by CLI invocations."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)


@pytest.fixture
def make_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner
