"""Build orchestration: script to installable package."""

from .service import BuildOutput, BuildRecord, BuildService, local_properties, read_script

__all__ = ["BuildOutput", "BuildRecord", "BuildService", "local_properties", "read_script"]
