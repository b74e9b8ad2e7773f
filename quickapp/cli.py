"""
QuickApp CLI.

Command-line interface for compiling scripts into Android packages and
running them on a connected device.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.config import Config, get_config
from .core.exceptions import QuickAppError
from .core.logging import bind_context, clear_context, setup_logging

app = typer.Typer(
    name="quickapp",
    help="Compile a declarative app script into an Android package",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

BUILD_ERROR = "QuickApp Build Error"
RUN_ERROR = "QuickApp Run Error"


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        console.print(f"QuickApp v{__version__}")
        raise typer.Exit()


def _config(ctx: typer.Context) -> Config:
    return ctx.obj if isinstance(ctx.obj, Config) else get_config()


def _echo(line: str) -> None:
    # Tool output passes through untouched
    typer.echo(line)


def _fail(prefix: str, error: QuickAppError) -> NoReturn:
    err_console.print(
        f"[bold red]{prefix}:[/bold red] {escape(str(error))}", highlight=False, soft_wrap=True
    )
    raise typer.Exit(1)


def _print_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        err_console.print(
            f"[yellow]Warning:[/yellow] {escape(warning)}", highlight=False, soft_wrap=True
        )


@app.callback()
def callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """QuickApp: one script in, one installable app out."""
    config = get_config()
    if verbose:
        config = config.model_copy(update={"log_level": "DEBUG"})
    setup_logging(config)
    ctx.obj = config


@app.command()
def build(
    ctx: typer.Context,
    script: Path = typer.Argument(..., help="Path to the app script", dir_okay=False),
) -> None:
    """Compile a script and build its debug package into the current directory."""
    from .services.build import BuildService

    config = _config(ctx)
    bind_context(script=str(script))
    try:
        output = asyncio.run(BuildService(config=config, sink=_echo).build(script))
    except QuickAppError as e:
        _fail(BUILD_ERROR, e)
    finally:
        clear_context()

    _print_warnings(output.warnings)
    console.print(f"[bold green]✓ Built[/bold green] {escape(str(output.package_path))}")


@app.command()
def run(
    ctx: typer.Context,
    script: Path = typer.Argument(..., help="Path to the app script", dir_okay=False),
) -> None:
    """Build if needed, then install and launch on the single connected device."""
    from .services.deploy import DeployService

    config = _config(ctx)
    service = DeployService(config=config, sink=_echo)
    bind_context(script=str(script))
    try:
        try:
            package_path, rebuilt = asyncio.run(service.ensure_package(script))
        except QuickAppError as e:
            _fail(BUILD_ERROR, e)
        try:
            output = asyncio.run(service.deploy(script, package_path, rebuilt=rebuilt))
        except QuickAppError as e:
            _fail(RUN_ERROR, e)
    finally:
        clear_context()

    console.print(
        f"[bold green]✓ Launched[/bold green] {escape(output.package_name)} on {escape(output.serial)}"
    )


@app.command()
def check(
    script: Path = typer.Argument(..., help="Path to the app script", dir_okay=False),
) -> None:
    """Parse and validate a script without generating or building anything."""
    from .orchestration import check_script
    from .services.build import read_script

    try:
        _, source = asyncio.run(read_script(script))
        declaration, warnings = check_script(source, script.name)
    except QuickAppError as e:
        _fail(BUILD_ERROR, e)

    table = Table(title=f"App: {escape(declaration.name)}")
    table.add_column("Screen", style="cyan")
    table.add_column("Inputs", justify="right")
    table.add_column("Actions", justify="right")
    table.add_column("Home")

    for index, screen in enumerate(declaration.screens):
        table.add_row(
            escape(screen.name),
            str(len(screen.inputs)),
            str(len(screen.actions)),
            "✓" if index == 0 else "",
        )

    console.print(table)
    _print_warnings(warnings)


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    cfg = _config(ctx)

    table = Table(title="Current Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Log Level", cfg.log_level)
    table.add_row("Android SDK", str(cfg.tools.android_sdk_root or "(not set)"))
    table.add_row("Gradle", str(cfg.tools.gradle_path or "gradle on PATH"))
    table.add_row("adb", str(cfg.tools.adb_path or "SDK platform-tools or PATH"))
    table.add_row("Build Root", str(cfg.build.build_root))
    table.add_row("Gradle Task", cfg.build.gradle_task)
    table.add_row("APK Output", cfg.build.apk_output_path)

    console.print(table)

    console.print("\n[dim]Configure via environment variables:[/dim]")
    console.print("  ANDROID_SDK_ROOT, ANDROID_HOME")
    console.print("  QUICKAPP_LOG_LEVEL, QUICKAPP_GRADLE_PATH, QUICKAPP_ADB_PATH")
    console.print("  QUICKAPP_BUILD_ROOT, QUICKAPP_GRADLE_TASK")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
