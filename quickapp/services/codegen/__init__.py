"""Android project generation."""

from .kotlin import generate_activity_source, kotlin_string
from .service import CodegenService, escape_label

__all__ = ["CodegenService", "escape_label", "generate_activity_source", "kotlin_string"]
