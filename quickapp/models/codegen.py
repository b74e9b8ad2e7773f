"""
Code generation data models.

These models represent the structure of a generated Android project: the
fixed Gradle configuration every app is built with and the named text
artifacts the generator emits.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from .package import PackageIdentity


class DependencyScope(str, Enum):
    """Gradle dependency scopes."""

    IMPLEMENTATION = "implementation"


class GradleDependency(BaseModel):
    """A Gradle dependency declaration."""

    group: str = Field(description="Group ID")
    artifact: str = Field(description="Artifact ID")
    version: str = Field(default="", description="Version (empty for BOM-managed deps)")
    scope: DependencyScope = Field(default=DependencyScope.IMPLEMENTATION)

    model_config = {"frozen": True}

    @property
    def notation(self) -> str:
        """Get Gradle dependency notation.

        Returns:
            str: Dependency string in the format "group:artifact:version" or
                "group:artifact" if no version is specified.
        """
        if self.version:
            return f'"{self.group}:{self.artifact}:{self.version}"'
        return f'"{self.group}:{self.artifact}"'

    @property
    def declaration(self) -> str:
        """Get full Gradle declaration, e.g. ``implementation("a:b:1")``."""
        return f"{self.scope.value}({self.notation})"


class GradlePlugin(BaseModel):
    """A Gradle plugin declaration."""

    plugin_id: str = Field(description="Plugin ID")
    version: str | None = Field(default=None, description="Plugin version")
    apply: bool = Field(default=True, description="Whether to apply the plugin")

    model_config = {"frozen": True}

    @property
    def declaration(self) -> str:
        """Get plugin declaration for plugins block.

        Returns:
            str: Complete plugin declaration string suitable for use in a
                Gradle plugins block, including version and apply directives.
        """
        version_part = f' version "{self.version}"' if self.version else ""
        apply_part = " apply false" if not self.apply else ""
        return f'id("{self.plugin_id}"){version_part}{apply_part}'


class AndroidConfig(BaseModel):
    """Android Gradle configuration shared by every generated app."""

    compile_sdk: int = Field(default=34)
    min_sdk: int = Field(default=24)
    target_sdk: int = Field(default=34)
    version_code: int = Field(default=1)
    version_name: str = Field(default="1.0")
    jvm_target: str = Field(default="17")

    agp_version: str = Field(default="8.5.0")
    kotlin_version: str = Field(default="1.9.24")

    model_config = {"frozen": True}


class ArtifactName(str, Enum):
    """Names of the artifacts the generator emits."""

    MANIFEST = "manifest"
    ACTIVITY_SOURCE = "activity-source"
    BUILD_DESCRIPTOR = "build-descriptor"
    ROOT_BUILD_DESCRIPTOR = "root-build-descriptor"
    SETTINGS_DESCRIPTOR = "settings-descriptor"
    GRADLE_PROPERTIES = "gradle-properties"


class BuildArtifact(BaseModel):
    """Generator output for one app.

    Maps each artifact name to its text and to its path relative to the
    generated project root. Both mappings are filled in a fixed order.
    """

    identity: PackageIdentity
    artifacts: dict[str, str] = Field(default_factory=dict)
    paths: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def package_name(self) -> str:
        return self.identity.package_name

    def text(self, name: ArtifactName | str) -> str:
        """Get an artifact's text by name."""
        key = name.value if isinstance(name, ArtifactName) else name
        return self.artifacts[key]

    def files(self) -> list[tuple[str, str]]:
        """(relative path, text) pairs in generation order."""
        return [(self.paths[name], text) for name, text in self.artifacts.items()]
