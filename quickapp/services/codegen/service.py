"""
Code Generation Service.

Generates a buildable single-module Android project from a validated app
declaration. Generation is a pure function of its inputs: the same app and
file name always yield byte-identical artifacts.
"""

from __future__ import annotations

from xml.sax.saxutils import escape

from ...core.exceptions import GenerationError
from ...core.logging import get_logger
from ...models.app import AppDeclaration
from ...models.codegen import (
    AndroidConfig,
    ArtifactName,
    BuildArtifact,
    GradleDependency,
    GradlePlugin,
)
from ...models.package import PackageIdentity
from .kotlin import generate_activity_source

logger = get_logger(__name__)

APP_ICON = "@android:drawable/sym_def_app_icon"
APP_THEME = "@android:style/Theme.Material.Light.DarkActionBar"
ACTIVITY_NAME = "MainActivity"

APP_DEPENDENCIES = (
    GradleDependency(group="androidx.core", artifact="core-ktx", version="1.12.0"),
    GradleDependency(group="androidx.activity", artifact="activity-ktx", version="1.8.2"),
)


def escape_label(label: str) -> str:
    """Escape an application label for an XML attribute.

    A leading ``@`` or ``?`` is backslash-escaped so Android reads the label
    as literal text rather than a resource reference.
    """
    escaped = escape(label, {'"': "&quot;", "'": "&apos;", "\n": "&#10;", "\t": "&#9;"})
    if escaped[:1] in ("@", "?"):
        escaped = "\\" + escaped
    return escaped


class CodegenService:
    """Service for generating Android projects.

    Holds only the fixed Gradle configuration; no state is carried between
    calls to :meth:`generate`.
    """

    def __init__(self, android: AndroidConfig | None = None) -> None:
        self.android = android or AndroidConfig()

    def _root_plugins(self) -> list[GradlePlugin]:
        return [
            GradlePlugin(plugin_id="com.android.application", version=self.android.agp_version, apply=False),
            GradlePlugin(plugin_id="org.jetbrains.kotlin.android", version=self.android.kotlin_version, apply=False),
        ]

    def _create_root_build_gradle(self, app: AppDeclaration) -> str:
        """Generate root build.gradle.kts content."""
        plugins_block = "\n    ".join(p.declaration for p in self._root_plugins())
        return f"""// Top-level build file for {" ".join(app.name.splitlines())}
plugins {{
    {plugins_block}
}}
"""

    def _create_settings_gradle(self, identity: PackageIdentity) -> str:
        """Generate settings.gradle.kts content."""
        project_name = identity.cleaned_name or "app"
        return f"""pluginManagement {{
    repositories {{
        google()
        mavenCentral()
        gradlePluginPortal()
    }}
}}

dependencyResolutionManagement {{
    repositoriesMode.set(RepositoriesMode.FAIL_ON_PROJECT_REPOS)
    repositories {{
        google()
        mavenCentral()
    }}
}}

rootProject.name = "{project_name}"

include(":app")
"""

    def _create_gradle_properties(self) -> str:
        """Generate gradle.properties content."""
        return """# Project-wide Gradle settings
org.gradle.jvmargs=-Xmx2048m -Dfile.encoding=UTF-8

# Android settings
android.useAndroidX=true
android.nonTransitiveRClass=true

# Kotlin settings
kotlin.code.style=official
"""

    def _create_app_build_gradle(self, package_name: str) -> str:
        """Generate app/build.gradle.kts content."""
        config = self.android
        deps_block = "\n    ".join(d.declaration for d in APP_DEPENDENCIES)
        return f"""plugins {{
    id("com.android.application")
    id("org.jetbrains.kotlin.android")
}}

android {{
    namespace = "{package_name}"
    compileSdk = {config.compile_sdk}

    defaultConfig {{
        applicationId = "{package_name}"
        minSdk = {config.min_sdk}
        targetSdk = {config.target_sdk}
        versionCode = {config.version_code}
        versionName = "{config.version_name}"
    }}

    buildTypes {{
        release {{
            isMinifyEnabled = false
        }}
    }}

    compileOptions {{
        sourceCompatibility = JavaVersion.VERSION_{config.jvm_target}
        targetCompatibility = JavaVersion.VERSION_{config.jvm_target}
    }}

    kotlinOptions {{
        jvmTarget = "{config.jvm_target}"
    }}
}}

dependencies {{
    {deps_block}
}}
"""

    def _generate_manifest(self, app: AppDeclaration) -> str:
        """Generate AndroidManifest.xml."""
        return f"""<?xml version="1.0" encoding="utf-8"?>
<manifest xmlns:android="http://schemas.android.com/apk/res/android">

    <uses-permission android:name="android.permission.INTERNET" />

    <application
        android:allowBackup="true"
        android:icon="{APP_ICON}"
        android:label="{escape_label(app.name)}"
        android:theme="{APP_THEME}">

        <activity
            android:name=".{ACTIVITY_NAME}"
            android:exported="true"
            android:screenOrientation="portrait">
            <intent-filter>
                <action android:name="android.intent.action.MAIN" />
                <category android:name="android.intent.category.LAUNCHER" />
            </intent-filter>
        </activity>

    </application>

</manifest>
"""

    def _check_invariants(self, app: AppDeclaration) -> None:
        if not app.screens:
            raise GenerationError(message=f"Cannot generate app '{app.name}' without screens")
        names = app.screen_names
        if len(set(names)) != len(names):
            raise GenerationError(
                message=f"Cannot generate app '{app.name}' with duplicate screen names",
                context={"screens": list(names)},
            )

    def generate(self, app: AppDeclaration, filename: str) -> BuildArtifact:
        """Generate the Android project for an app.

        Args:
            app: Validated app declaration
            filename: Name of the script file; determines the package identity

        Returns:
            BuildArtifact with every project file keyed by artifact name

        Raises:
            GenerationError: If the declaration violates validated invariants
        """
        self._check_invariants(app)
        identity = PackageIdentity.from_filename(filename)
        package_name = identity.package_name
        source_dir = "app/src/main/java/" + package_name.rstrip(".").replace(".", "/")

        generated = [
            (ArtifactName.MANIFEST, "app/src/main/AndroidManifest.xml", self._generate_manifest(app)),
            (
                ArtifactName.ACTIVITY_SOURCE,
                f"{source_dir}/{ACTIVITY_NAME}.kt",
                generate_activity_source(app, package_name),
            ),
            (ArtifactName.BUILD_DESCRIPTOR, "app/build.gradle.kts", self._create_app_build_gradle(package_name)),
            (ArtifactName.ROOT_BUILD_DESCRIPTOR, "build.gradle.kts", self._create_root_build_gradle(app)),
            (ArtifactName.SETTINGS_DESCRIPTOR, "settings.gradle.kts", self._create_settings_gradle(identity)),
            (ArtifactName.GRADLE_PROPERTIES, "gradle.properties", self._create_gradle_properties()),
        ]

        artifact = BuildArtifact(
            identity=identity,
            artifacts={name.value: text for name, _, text in generated},
            paths={name.value: path for name, path, _ in generated},
        )
        logger.debug(
            "Android project generated",
            package=package_name,
            screens=len(app.screens),
            files=len(generated),
        )
        return artifact
