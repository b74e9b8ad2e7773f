"""
External tool runner.

Locates gradle, adb and the Android SDK, and runs tools as asyncio
subprocesses with stderr merged into stdout. Output is streamed to a
caller-supplied sink line by line while it is captured in full.
"""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import cast
from pathlib import Path

from ..core.config import ToolsConfig
from ..core.exceptions import ToolNotFoundError
from ..core.logging import get_logger

logger = get_logger(__name__)

LineSink = Callable[[str], None]

SDK_HINT = "Install the Android SDK and set ANDROID_SDK_ROOT (or ANDROID_HOME)"
GRADLE_HINT = "Install Gradle and add it to PATH, or set QUICKAPP_GRADLE_PATH"
ADB_HINT = "Install Android platform-tools, or set QUICKAPP_ADB_PATH"


@dataclass
class ToolResult:
    """Exit status and merged output of one tool invocation."""

    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ToolRunner:
    """Runs external tools; swapped for a fake in tests."""

    async def run(
        self,
        command: Sequence[str],
        cwd: Path | None = None,
        sink: LineSink | None = None,
    ) -> ToolResult:
        """Run a command to completion.

        Args:
            command: Executable and arguments
            cwd: Working directory
            sink: Receives each output line as it arrives, without the line ending

        Returns:
            ToolResult with the exit code and the complete output

        Raises:
            ToolNotFoundError: If the executable cannot be started
        """
        cmd = [str(part) for part in command]
        logger.debug("Running command", command=" ".join(cmd), cwd=str(cwd) if cwd else None)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                cwd=cwd,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise ToolNotFoundError(
                message=f"Tool could not be started: {cmd[0]}",
                tool=Path(cmd[0]).name,
                command=cmd,
                tool_name=Path(cmd[0]).name,
                expected_path=cmd[0],
                cause=e,
            ) from e

        chunks: list[str] = []
        stdout = cast(asyncio.StreamReader, process.stdout)
        while True:
            line = await stdout.readline()
            if not line:
                break
            decoded = line.decode("utf-8", errors="replace")
            chunks.append(decoded)
            if sink is not None:
                sink(decoded.rstrip("\r\n"))

        returncode = await process.wait()
        logger.debug("Command completed", command=cmd[0], returncode=returncode)
        return ToolResult(returncode=returncode, output="".join(chunks))


def resolve_sdk_root(tools: ToolsConfig) -> Path:
    """Return the Android SDK root.

    Raises:
        ToolNotFoundError: If neither ANDROID_SDK_ROOT nor ANDROID_HOME is set
    """
    if tools.android_sdk_root is None:
        raise ToolNotFoundError(
            message="Android SDK root is not configured",
            tool="android-sdk",
            tool_name="android-sdk",
            expected_path="ANDROID_SDK_ROOT or ANDROID_HOME",
            install_hint=SDK_HINT,
        )
    return tools.android_sdk_root


def resolve_gradle(tools: ToolsConfig) -> str:
    """Return the gradle executable: the configured path, else ``gradle`` on PATH."""
    if tools.gradle_path is not None:
        return str(tools.gradle_path)
    found = shutil.which("gradle")
    if found:
        return found
    raise ToolNotFoundError(
        message="Tool not found: gradle",
        tool="gradle",
        tool_name="gradle",
        expected_path="PATH or QUICKAPP_GRADLE_PATH",
        install_hint=GRADLE_HINT,
    )


def resolve_adb(tools: ToolsConfig) -> str:
    """Return the adb executable.

    Order: configured path, ``<sdk root>/platform-tools/adb``, ``adb`` on PATH.
    """
    if tools.adb_path is not None:
        return str(tools.adb_path)
    if tools.android_sdk_root is not None:
        for name in ("adb", "adb.exe"):
            candidate = tools.android_sdk_root / "platform-tools" / name
            if candidate.exists():
                return str(candidate)
    found = shutil.which("adb")
    if found:
        return found
    raise ToolNotFoundError(
        message="Tool not found: adb",
        tool="adb",
        tool_name="adb",
        expected_path="QUICKAPP_ADB_PATH, <sdk root>/platform-tools or PATH",
        install_hint=ADB_HINT,
    )
