"""
Compilation pipeline for QuickApp.

Runs the compile-time stages in order: front-end, validation, generation.
Each stage either returns its output or raises; nothing is written to disk.
"""

from __future__ import annotations

from pathlib import PurePath

from pydantic import BaseModel, Field

from ..core.logging import get_logger
from ..models.app import AppDeclaration
from ..models.codegen import BuildArtifact
from ..services.codegen import CodegenService
from ..services.frontend import parse_app
from ..services.validation import unknown_targets, validate_app

logger = get_logger(__name__)


class CompilationResult(BaseModel):
    """Result of compiling one script."""

    app: AppDeclaration
    artifact: BuildArtifact
    warnings: list[str] = Field(default_factory=list, description="Non-fatal findings")

    model_config = {"frozen": True}

    @property
    def package_name(self) -> str:
        return self.artifact.package_name


def check_script(source: str, filename: str) -> tuple[AppDeclaration, list[str]]:
    """Run the front-end and validator only.

    Returns:
        The validated app and any warnings about unknown navigation targets
    """
    name = PurePath(filename).name
    logger.debug("Stage 1/3: Parsing script", filename=name)
    app = parse_app(source, name)

    logger.debug("Stage 2/3: Validating app", app=app.name)
    validate_app(app)

    warnings = [
        f"Screen '{screen}' navigates to undeclared screen '{target}'"
        for screen, target in unknown_targets(app)
    ]
    for warning in warnings:
        logger.warning(warning)
    return app, warnings


def compile_script(
    source: str,
    filename: str,
    codegen: CodegenService | None = None,
) -> CompilationResult:
    """Compile script text into build artifacts.

    Args:
        source: Script text
        filename: Script file name or path; its base name drives package naming
        codegen: Generator to use; a default one is created when omitted

    Returns:
        CompilationResult with the app declaration and generated artifacts

    Raises:
        StructuralError: If the script is malformed or invalid
        GenerationError: If the generator is handed an inconsistent model
    """
    app, warnings = check_script(source, filename)

    logger.debug("Stage 3/3: Generating project", app=app.name)
    artifact = (codegen or CodegenService()).generate(app, PurePath(filename).name)

    logger.info(
        "Script compiled",
        app=app.name,
        package=artifact.package_name,
        screens=len(app.screens),
    )
    return CompilationResult(app=app, artifact=artifact, warnings=warnings)
