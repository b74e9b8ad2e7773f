"""Services package for QuickApp.

The build and deploy services depend on the compilation pipeline, which in
turn imports the services below; import them from their own subpackages.
"""

from .codegen import CodegenService
from .frontend import parse_app
from .validation import validate_app
from .toolchain import ToolResult, ToolRunner

__all__ = [
    "CodegenService",
    "parse_app",
    "validate_app",
    "ToolResult",
    "ToolRunner",
]
