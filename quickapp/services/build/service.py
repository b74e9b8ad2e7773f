"""
Build Service.

Compiles a script, materializes the generated Android project under the
build root and runs Gradle to produce a debug package, which is copied to
the working directory as ``<cleaned name>-debug.apk``.
"""

from __future__ import annotations

from pathlib import Path

import aiofiles
from pydantic import BaseModel, Field

from ...core.config import Config, get_config
from ...core.exceptions import ExternalToolError, ScriptReadError
from ...core.logging import get_logger
from ...models.package import PackageIdentity
from ...orchestration.pipeline import CompilationResult, compile_script
from ...storage import LocalStorageBackend, StorageBackend
from ..codegen import CodegenService
from ..toolchain import LineSink, ToolRunner, resolve_gradle, resolve_sdk_root

logger = get_logger(__name__)

BUILD_RECORD_KEY = "quickapp-build.json"
LOCAL_PROPERTIES_KEY = "local.properties"
SCRIPT_DIR = "app/src/main/quickapp"
ASSETS_DIR = "app/src/main/assets"


class BuildRecord(BaseModel):
    """Summary of a materialized project tree, written beside it."""

    app_name: str
    package_name: str
    script_name: str
    script_hash: str = Field(description="SHA-256 of the script bytes")
    files: dict[str, str] = Field(default_factory=dict, description="Storage key to SHA-256")


class BuildOutput(BaseModel):
    """Result of a successful build."""

    package_path: Path = Field(description="Copied package in the working directory")
    project_dir: Path = Field(description="Root of the generated project")
    package_name: str
    warnings: list[str] = Field(default_factory=list)


def local_properties(sdk_root: Path) -> str:
    """Render local.properties pointing Gradle at the SDK."""
    value = str(sdk_root).replace("\\", "\\\\").replace(":", "\\:")
    return f"sdk.dir={value}\n"


async def read_script(script_path: Path) -> tuple[bytes, str]:
    """Read a script as raw bytes and decoded text.

    Raises:
        ScriptReadError: If the file is missing, unreadable or not UTF-8
    """
    try:
        async with aiofiles.open(script_path, "rb") as f:
            data = await f.read()
    except OSError as e:
        raise ScriptReadError(
            message=f"Cannot read script '{script_path}': {e.strerror or e}",
            path=str(script_path),
            cause=e,
        ) from e
    try:
        return data, data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ScriptReadError(
            message=f"Script '{script_path}' is not valid UTF-8 text",
            path=str(script_path),
            cause=e,
        ) from e


class BuildService:
    """Service turning a script file into an installable package."""

    def __init__(
        self,
        config: Config | None = None,
        runner: ToolRunner | None = None,
        codegen: CodegenService | None = None,
        cwd: Path | None = None,
        sink: LineSink | None = None,
    ) -> None:
        """Initialize the build service.

        Args:
            config: Configuration; the cached environment config when omitted
            runner: External tool runner
            codegen: Project generator
            cwd: Directory receiving the package and holding the build root
            sink: Receives Gradle output line by line
        """
        self.config = config or get_config()
        self.runner = runner or ToolRunner()
        self.codegen = codegen or CodegenService()
        self.cwd = (cwd or Path.cwd()).resolve()
        self.sink = sink

    def project_dir(self, compilation: CompilationResult) -> Path:
        """Directory the project for a compilation is materialized in."""
        name = compilation.artifact.identity.cleaned_name or "app"
        return self.cwd / self.config.build.build_root / name

    def package_path(self, script_path: Path) -> Path:
        """Where the package for a script is copied to."""
        identity = PackageIdentity.from_filename(script_path.name)
        return self.cwd / identity.package_file_name(
            self.config.build.package_suffix, self.config.build.package_extension
        )

    async def _materialize(
        self,
        storage: StorageBackend,
        compilation: CompilationResult,
        script_path: Path,
        script_bytes: bytes,
    ) -> BuildRecord:
        sdk_root = resolve_sdk_root(self.config.tools)
        hashes: dict[str, str] = {}

        async def put(key: str, data: bytes) -> None:
            await storage.store_bytes(key, data)
            hashes[key] = storage.compute_hash(data)

        for key in await storage.list_keys(ASSETS_DIR):
            await storage.delete(key)

        for path, text in compilation.artifact.files():
            await put(path, text.encode("utf-8"))
        await put(LOCAL_PROPERTIES_KEY, local_properties(sdk_root).encode("utf-8"))
        await put(f"{SCRIPT_DIR}/{script_path.name}", script_bytes)

        assets = script_path.parent / "assets"
        if assets.is_dir():
            for key in await storage.copy_tree(assets, ASSETS_DIR):
                hashes[key] = storage.compute_hash(await storage.load_bytes(key))

        record = BuildRecord(
            app_name=compilation.app.name,
            package_name=compilation.package_name,
            script_name=script_path.name,
            script_hash=storage.compute_hash(script_bytes),
            files=dict(sorted(hashes.items())),
        )
        await storage.store_model(BUILD_RECORD_KEY, record)
        return record

    async def build(self, script_path: Path) -> BuildOutput:
        """Build the package for a script.

        Args:
            script_path: Path to the script file

        Returns:
            BuildOutput describing the copied package

        Raises:
            ScriptReadError: If the script cannot be read
            StructuralError: If the script is invalid; no tool is invoked
            ExternalToolError: If the SDK, Gradle or its output is missing, or Gradle fails
        """
        script_path = Path(script_path)
        script_bytes, source = await read_script(script_path)

        compilation = compile_script(source, script_path.name, self.codegen)
        project_dir = self.project_dir(compilation)
        storage = LocalStorageBackend(project_dir)

        record = await self._materialize(storage, compilation, script_path, script_bytes)
        logger.info("Project materialized", project_dir=str(project_dir), files=len(record.files))

        await storage.delete(self.config.build.apk_output_path)
        gradle = resolve_gradle(self.config.tools)
        command = [gradle, self.config.build.gradle_task, "--console=plain"]
        logger.info("Running Gradle", task=self.config.build.gradle_task)
        result = await self.runner.run(command, cwd=project_dir, sink=self.sink)
        if not result.ok:
            raise ExternalToolError(
                message=f"Gradle failed with exit code {result.returncode}",
                tool="gradle",
                command=command,
                returncode=result.returncode,
                output=result.output,
            )

        apk = project_dir / self.config.build.apk_output_path
        if not apk.is_file():
            raise ExternalToolError(
                message=f"Gradle reported success but no package was produced at {apk}",
                tool="gradle",
                command=command,
                returncode=result.returncode,
                output=result.output,
            )

        destination = self.package_path(script_path)
        async with aiofiles.open(apk, "rb") as src:
            data = await src.read()
        async with aiofiles.open(destination, "wb") as dst:
            await dst.write(data)

        logger.info("Package built", package=str(destination), size_bytes=len(data))
        return BuildOutput(
            package_path=destination,
            project_dir=project_dir,
            package_name=compilation.package_name,
            warnings=compilation.warnings,
        )
