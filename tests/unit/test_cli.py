"""Unit tests for the command-line interface."""

import os
import subprocess
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

import quickapp
from quickapp import __version__
from quickapp.cli import app
from quickapp.services.build import BuildService
from quickapp.services.deploy import DeployService
from quickapp.services.toolchain import ToolResult

runner = CliRunner()


def gradle_writes_apk(command, cwd):
    if "assembleDebug" in command:
        apk = cwd / "app/build/outputs/apk/debug/app-debug.apk"
        apk.parent.mkdir(parents=True, exist_ok=True)
        apk.write_bytes(b"PK")


@pytest.fixture
def cli_config(config, monkeypatch):
    """Make the CLI use the test configuration."""
    monkeypatch.setattr("quickapp.cli.get_config", lambda: config)
    return config


@pytest.fixture
def fake_tools(temp_dir, monkeypatch, make_runner):
    """Route the CLI's services through a FakeRunner rooted at temp_dir.

    Returns a setter taking the FakeRunner to use.
    """

    def install(fake):
        def build_service(config, sink=None):
            return BuildService(config=config, runner=fake, cwd=temp_dir, sink=sink)

        def deploy_service(config, sink=None):
            return DeployService(config=config, runner=fake, cwd=temp_dir, sink=sink)

        monkeypatch.setattr("quickapp.services.build.BuildService", build_service)
        monkeypatch.setattr("quickapp.services.deploy.DeployService", deploy_service)
        return fake

    return install


class TestGlobalOptions:
    """Tests for options shared by every command."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"QuickApp v{__version__}" in result.output

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("build", "run", "check", "config"):
            assert command in result.output


class TestCheckCommand:
    """Tests for `quickapp check`."""

    def test_check_prints_screens(self, cli_config, script_path):
        """A valid script prints a summary table of its screens."""
        result = runner.invoke(app, ["check", str(script_path)])

        assert result.exit_code == 0
        assert "App: Shopping List" in result.output
        assert "main" in result.output
        assert "details" in result.output

    def test_check_reports_warnings(self, cli_config, temp_dir):
        script = temp_dir / "Lost.kt"
        script.write_text('app("A") { screen("a") { button("x") { goTo("nowhere") } } }')

        result = runner.invoke(app, ["check", str(script)])

        assert result.exit_code == 0
        assert "Warning: Screen 'a' navigates to undeclared screen 'nowhere'" in result.output

    def test_check_structural_error(self, cli_config, temp_dir):
        """Structural errors use the build error prefix and exit 1."""
        script = temp_dir / "Dup.kt"
        script.write_text('app("A") {\n screen("home") { }\n screen("home") { }\n}')

        result = runner.invoke(app, ["check", str(script)])

        assert result.exit_code == 1
        assert "QuickApp Build Error: Screen 'home' is declared more than once (line 3" in result.output

    def test_check_in_fresh_interpreter(self, script_path, temp_dir):
        """`check` imports cleanly when it is the first command a process runs."""
        env = dict(os.environ)
        root = str(Path(quickapp.__file__).resolve().parent.parent)
        env["PYTHONPATH"] = os.pathsep.join(filter(None, [root, env.get("PYTHONPATH")]))

        result = subprocess.run(
            [sys.executable, "-m", "quickapp.cli", "check", str(script_path)],
            capture_output=True,
            text=True,
            cwd=temp_dir,
            env=env,
            timeout=60,
        )

        assert result.returncode == 0, result.stderr
        assert "App: Shopping List" in result.stdout


class TestBuildCommand:
    """Tests for `quickapp build`."""

    def test_build_success(self, cli_config, fake_tools, make_runner, script_path, temp_dir):
        """Gradle output passes through and the package lands in the working directory."""
        fake_tools(
            make_runner(
                responses={"assembleDebug": ToolResult(0, "BUILD SUCCESSFUL in 3s\n")},
                on_run=gradle_writes_apk,
            )
        )

        result = runner.invoke(app, ["build", str(script_path)])

        assert result.exit_code == 0
        assert "BUILD SUCCESSFUL in 3s" in result.output
        assert "✓ Built" in result.output
        assert (temp_dir / "shoppinglist-debug.apk").read_bytes() == b"PK"

    def test_build_gradle_failure(self, cli_config, fake_tools, make_runner, script_path):
        """A Gradle failure exits 1 with the build error prefix."""
        fake_tools(make_runner(responses={"assembleDebug": ToolResult(1, "FAILURE: Build failed\n")}))

        result = runner.invoke(app, ["build", str(script_path)])

        assert result.exit_code == 1
        assert "QuickApp Build Error: Gradle failed with exit code 1" in result.output
        assert "FAILURE: Build failed" in result.output

    def test_build_unreadable_script(self, cli_config, fake_tools, make_runner, temp_dir):
        fake = fake_tools(make_runner())

        result = runner.invoke(app, ["build", str(temp_dir / "Missing.kt")])

        assert result.exit_code == 1
        assert "QuickApp Build Error: Cannot read script" in result.output
        assert fake.calls == []


class TestRunCommand:
    """Tests for `quickapp run`."""

    def test_run_launches(self, cli_config, fake_tools, make_runner, script_path):
        fake_tools(
            make_runner(
                responses={"devices": ToolResult(0, "List of devices attached\nemulator-5554\tdevice\n")},
                on_run=gradle_writes_apk,
            )
        )

        result = runner.invoke(app, ["run", str(script_path)])

        assert result.exit_code == 0
        assert "✓ Launched com.quickapp.generated.shoppinglist on emulator-5554" in result.output

    def test_run_without_device(self, cli_config, fake_tools, make_runner, script_path):
        """No device exits 1 with the exact count message."""
        fake_tools(
            make_runner(
                responses={"devices": ToolResult(0, "List of devices attached\n\n")},
                on_run=gradle_writes_apk,
            )
        )

        result = runner.invoke(app, ["run", str(script_path)])

        assert result.exit_code == 1
        assert (
            "QuickApp Run Error: exactly one connected device or emulator is required. Found: 0."
            in result.output
        )

    def test_run_invalid_script_is_a_build_error(self, cli_config, fake_tools, make_runner, temp_dir):
        """A failed rebuild keeps the build prefix and never reaches adb."""
        fake = fake_tools(make_runner())
        script = temp_dir / "Dup.kt"
        script.write_text('app("A") {\n screen("home") { }\n screen("home") { }\n}')

        result = runner.invoke(app, ["run", str(script)])

        assert result.exit_code == 1
        assert "QuickApp Build Error: Screen 'home' is declared more than once (line 3" in result.output
        assert "QuickApp Run Error" not in result.output
        assert fake.calls == []

    def test_run_gradle_failure_is_a_build_error(self, cli_config, fake_tools, make_runner, script_path):
        fake = fake_tools(make_runner(responses={"assembleDebug": ToolResult(1, "FAILURE: Build failed\n")}))

        result = runner.invoke(app, ["run", str(script_path)])

        assert result.exit_code == 1
        assert "QuickApp Build Error: Gradle failed with exit code 1" in result.output
        assert fake.commands_with("devices") == []


class TestConfigCommand:
    """Tests for `quickapp config`."""

    def test_config_shows_settings(self, cli_config):
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "Current Configuration" in result.output
        assert "assembleDebug" in result.output
        assert "ANDROID_SDK_ROOT" in result.output
