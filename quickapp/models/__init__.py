"""
QuickApp Data Models.

This module contains the immutable Pydantic models used throughout the
compile, build and run pipeline.
"""

from .app import (
    Action,
    AppDeclaration,
    ButtonNode,
    ColumnNode,
    GoToAction,
    HttpGetAction,
    ImageNode,
    InputNode,
    LogAction,
    ReadFileAction,
    RowNode,
    ScreenDeclaration,
    TextNode,
    ToastAction,
    WidgetNode,
    WriteFileAction,
)
from .codegen import (
    AndroidConfig,
    ArtifactName,
    BuildArtifact,
    GradleDependency,
    GradlePlugin,
)
from .package import PackageIdentity, clean_filename

__all__ = [
    # App models
    "Action",
    "AppDeclaration",
    "ButtonNode",
    "ColumnNode",
    "GoToAction",
    "HttpGetAction",
    "ImageNode",
    "InputNode",
    "LogAction",
    "ReadFileAction",
    "RowNode",
    "ScreenDeclaration",
    "TextNode",
    "ToastAction",
    "WidgetNode",
    "WriteFileAction",
    # Codegen models
    "AndroidConfig",
    "ArtifactName",
    "BuildArtifact",
    "GradleDependency",
    "GradlePlugin",
    # Packaging
    "PackageIdentity",
    "clean_filename",
]
