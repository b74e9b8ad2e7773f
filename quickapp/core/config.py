"""
Configuration management for QuickApp.

Provides centralized, type-safe configuration with environment variable overrides
and sensible defaults for the build and deploy commands.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load .env file if it exists (looks in cwd and parent directories)
load_dotenv()


def _env_path(*names: str) -> Path | None:
    for name in names:
        value = os.environ.get(name)
        if value:
            return Path(value).expanduser()
    return None


class ToolsConfig(BaseModel):
    """External tools configuration.

    Nothing here is validated upfront: a missing SDK root or tool binary is
    reported at the first point of use.
    """

    android_sdk_root: Path | None = Field(
        default_factory=lambda: _env_path("ANDROID_SDK_ROOT", "ANDROID_HOME"),
        description="Android SDK root path",
    )
    gradle_path: Path | None = Field(default=None, description="Custom gradle executable")
    adb_path: Path | None = Field(default=None, description="Custom adb executable")


class BuildConfig(BaseModel):
    """Generated project and build tool configuration."""

    build_root: Path = Field(
        default=Path(".quickapp"), description="Directory holding generated projects"
    )
    gradle_task: str = Field(default="assembleDebug", description="Gradle task producing the APK")
    apk_output_path: str = Field(
        default="app/build/outputs/apk/debug/app-debug.apk",
        description="APK location relative to the generated project root",
    )
    package_suffix: str = Field(default="-debug", description="Suffix of the copied package name")
    package_extension: str = Field(default="apk", description="Extension of the copied package")


class Config(BaseModel):
    """Root configuration for QuickApp."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_env(cls) -> Config:
        """Create configuration from environment variables."""
        return cls(
            log_level=os.environ.get("QUICKAPP_LOG_LEVEL", "INFO"),  # type: ignore
            tools=ToolsConfig(
                gradle_path=_env_path("QUICKAPP_GRADLE_PATH"),
                adb_path=_env_path("QUICKAPP_ADB_PATH"),
            ),
            build=BuildConfig(
                build_root=Path(os.environ.get("QUICKAPP_BUILD_ROOT", ".quickapp")),
                gradle_task=os.environ.get("QUICKAPP_GRADLE_TASK", "assembleDebug"),
            ),
        )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()
