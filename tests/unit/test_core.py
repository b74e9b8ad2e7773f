"""Unit tests for configuration, exceptions and logging."""

import json
from pathlib import Path

import pytest

from quickapp.core.config import Config, ToolsConfig
from quickapp.core.exceptions import (
    DeviceCountError,
    DuplicateScreenError,
    ExternalToolError,
    QuickAppError,
    StructuralError,
    ToolNotFoundError,
)
from quickapp.core.logging import bind_context, clear_context, get_logger, setup_logging

ENV_VARS = (
    "ANDROID_SDK_ROOT",
    "ANDROID_HOME",
    "QUICKAPP_GRADLE_PATH",
    "QUICKAPP_ADB_PATH",
    "QUICKAPP_BUILD_ROOT",
    "QUICKAPP_GRADLE_TASK",
    "QUICKAPP_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestConfig:
    """Tests for environment-driven configuration."""

    def test_defaults(self, clean_env):
        config = Config.from_env()

        assert config.log_level == "INFO"
        assert config.tools.android_sdk_root is None
        assert config.tools.gradle_path is None
        assert config.build.build_root == Path(".quickapp")
        assert config.build.gradle_task == "assembleDebug"
        assert config.build.apk_output_path == "app/build/outputs/apk/debug/app-debug.apk"

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("QUICKAPP_LOG_LEVEL", "DEBUG")
        clean_env.setenv("QUICKAPP_GRADLE_PATH", "/opt/gradle/bin/gradle")
        clean_env.setenv("QUICKAPP_BUILD_ROOT", "out")

        config = Config.from_env()

        assert config.log_level == "DEBUG"
        assert config.tools.gradle_path == Path("/opt/gradle/bin/gradle")
        assert config.build.build_root == Path("out")

    def test_sdk_root_prefers_android_sdk_root(self, clean_env):
        """ANDROID_SDK_ROOT wins over the legacy ANDROID_HOME."""
        clean_env.setenv("ANDROID_HOME", "/legacy/sdk")
        assert ToolsConfig().android_sdk_root == Path("/legacy/sdk")

        clean_env.setenv("ANDROID_SDK_ROOT", "/current/sdk")
        assert ToolsConfig().android_sdk_root == Path("/current/sdk")

    def test_invalid_log_level(self, clean_env):
        clean_env.setenv("QUICKAPP_LOG_LEVEL", "LOUD")

        with pytest.raises(ValueError):
            Config.from_env()


class TestExceptions:
    """Tests for the error hierarchy and its messages."""

    def test_base_includes_context_and_cause(self):
        error = QuickAppError(
            message="Something broke",
            context={"step": "build"},
            cause=OSError("disk full"),
        )

        assert str(error) == "Something broke | context: {'step': 'build'} | caused by: disk full"

    def test_structural_error_location(self):
        """Structural errors report where in the script they were found."""
        assert str(StructuralError(message="Bad", line=3)) == "Bad (line 3)"
        assert str(StructuralError(message="Bad", line=3, column=7)) == "Bad (line 3, column 7)"
        assert str(StructuralError(message="Bad")) == "Bad"

    def test_structural_subclasses(self):
        error = DuplicateScreenError(message="Duplicate", screen="home", line=2)

        assert isinstance(error, StructuralError)
        assert isinstance(error, QuickAppError)
        assert error.screen == "home"

    def test_external_tool_error_appends_output(self):
        error = ExternalToolError(
            message="Gradle failed with exit code 1",
            tool="gradle",
            command=["gradle", "assembleDebug"],
            returncode=1,
            output="FAILURE: Build failed\n\n",
        )

        assert str(error) == "Gradle failed with exit code 1\nFAILURE: Build failed"

    def test_tool_not_found(self):
        error = ToolNotFoundError(
            message="adb missing",
            tool_name="adb",
            expected_path="/sdk/platform-tools/adb",
            install_hint="Install the platform tools",
        )

        assert isinstance(error, ExternalToolError)
        assert str(error) == (
            "Tool 'adb' not found at '/sdk/platform-tools/adb'. Install hint: Install the platform tools"
        )

    def test_device_count_message_is_verbatim(self):
        error = DeviceCountError(
            message="exactly one connected device or emulator is required. Found: 2.",
            count=2,
        )

        assert str(error) == "exactly one connected device or emulator is required. Found: 2."


class TestLogging:
    """Tests for structured logging setup."""

    def test_json_lines_on_stderr(self, capsys):
        """Without a terminal, each event is one JSON document on stderr."""
        setup_logging(Config(log_level="INFO"))

        get_logger("quickapp.test").info("Build started", script="Notes.kt")

        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip().splitlines()[-1])
        assert event["event"] == "Build started"
        assert event["script"] == "Notes.kt"
        assert event["level"] == "info"

    def test_level_filtering(self, capsys):
        setup_logging(Config(log_level="WARNING"))

        logger = get_logger("quickapp.test")
        logger.info("quiet")
        logger.warning("loud")

        err = capsys.readouterr().err
        assert "quiet" not in err
        assert "loud" in err

    def test_bound_context(self, capsys):
        """Bound context is merged into every event until cleared."""
        setup_logging()
        logger = get_logger("quickapp.test")

        bind_context(script="Notes.kt")
        try:
            logger.info("with context")
        finally:
            clear_context()
        logger.info("without context")

        lines = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
        assert lines[0]["script"] == "Notes.kt"
        assert "script" not in lines[1]
