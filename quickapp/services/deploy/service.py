"""
Deploy Service.

Installs and launches a script's package on the single connected device,
rebuilding first when the package is missing or older than the script.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from ...core.config import Config, get_config
from ...core.exceptions import DeviceCountError, ExternalToolError
from ...core.logging import get_logger
from ...models.package import PackageIdentity
from ..build import BuildService
from ..toolchain import LineSink, ToolResult, ToolRunner, resolve_adb

logger = get_logger(__name__)

READY_STATE = "device"
LAUNCH_ACTIVITY = ".MainActivity"


class Device(BaseModel):
    """One line of ``adb devices`` output."""

    serial: str
    state: str


class DeployOutput(BaseModel):
    """Result of a successful install and launch."""

    package_path: Path
    package_name: str
    serial: str
    rebuilt: bool = Field(default=False, description="Whether a build ran first")
    launch_output: str = Field(default="", description="Output of the launch command, unmodified")


def parse_devices(output: str) -> list[Device]:
    """Parse ``adb devices`` output into serial/state pairs.

    The header line, daemon status lines starting with ``*`` and blank lines
    are skipped.
    """
    devices = []
    for line in output.splitlines():
        line = line.strip()
        if not line or line.startswith("*") or line.startswith("List of devices"):
            continue
        parts = line.split()
        if len(parts) < 2:
            continue
        devices.append(Device(serial=parts[0], state=parts[1]))
    return devices


def is_stale(script_path: Path, package_path: Path) -> bool:
    """True if the package is missing or older than the script."""
    if not package_path.exists():
        return True
    if not script_path.exists():
        # The rebuild reports the unreadable script
        return True
    return package_path.stat().st_mtime < script_path.stat().st_mtime


class DeployService:
    """Service installing and launching a package via adb."""

    def __init__(
        self,
        config: Config | None = None,
        runner: ToolRunner | None = None,
        builder: BuildService | None = None,
        cwd: Path | None = None,
        sink: LineSink | None = None,
    ) -> None:
        self.config = config or get_config()
        self.runner = runner or ToolRunner()
        self.builder = builder or BuildService(
            config=self.config, runner=self.runner, cwd=cwd, sink=sink
        )
        self.sink = sink

    async def _adb(self, adb: str, *args: str, failure: str) -> ToolResult:
        command = [adb, *args]
        result = await self.runner.run(command, sink=self.sink)
        if not result.ok:
            raise ExternalToolError(
                message=f"{failure} (adb exit code {result.returncode})",
                tool="adb",
                command=command,
                returncode=result.returncode,
                output=result.output,
            )
        return result

    async def select_device(self, adb: str) -> Device:
        """Return the only device in the ready state.

        Raises:
            DeviceCountError: If zero or several devices are ready
        """
        command = [adb, "devices"]
        result = await self.runner.run(command)
        if not result.ok:
            raise ExternalToolError(
                message=f"Listing devices failed (adb exit code {result.returncode})",
                tool="adb",
                command=command,
                returncode=result.returncode,
                output=result.output,
            )
        ready = [d for d in parse_devices(result.output) if d.state == READY_STATE]
        if len(ready) != 1:
            raise DeviceCountError(
                message=(
                    "exactly one connected device or emulator is required. "
                    f"Found: {len(ready)}."
                ),
                count=len(ready),
            )
        return ready[0]

    async def ensure_package(self, script_path: Path) -> tuple[Path, bool]:
        """Return the script's package path, building it first if stale.

        Returns:
            The package path and whether a build ran

        Raises:
            QuickAppError: Any build failure, unchanged
        """
        script_path = Path(script_path)
        package_path = self.builder.package_path(script_path)
        if not is_stale(script_path, package_path):
            return package_path, False

        logger.info("Package missing or stale; building", script=str(script_path))
        return (await self.builder.build(script_path)).package_path, True

    async def deploy(self, script_path: Path, package_path: Path, rebuilt: bool = False) -> DeployOutput:
        """Install and launch an already built package.

        Raises:
            DeviceCountError: If not exactly one device is ready
            ExternalToolError: If adb is missing or install fails
        """
        package_name = PackageIdentity.from_filename(Path(script_path).name).package_name
        adb = resolve_adb(self.config.tools)
        device = await self.select_device(adb)
        logger.info("Installing package", serial=device.serial, package=str(package_path))

        await self._adb(
            adb, "-s", device.serial, "install", "-r", str(package_path),
            failure="Install failed",
        )
        launched = await self._adb(
            adb, "-s", device.serial, "shell", "am", "start", "-n",
            f"{package_name}/{LAUNCH_ACTIVITY}",
            failure="Launch failed",
        )

        logger.info("App launched", serial=device.serial, package=package_name)
        return DeployOutput(
            package_path=package_path,
            package_name=package_name,
            serial=device.serial,
            rebuilt=rebuilt,
            launch_output=launched.output,
        )

    async def run(self, script_path: Path) -> DeployOutput:
        """Install and launch the package built from a script.

        Args:
            script_path: Path to the script file

        Returns:
            DeployOutput naming the device and package
        """
        package_path, rebuilt = await self.ensure_package(script_path)
        return await self.deploy(script_path, package_path, rebuilt=rebuilt)
