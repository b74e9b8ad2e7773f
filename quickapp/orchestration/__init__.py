"""Orchestration module for QuickApp."""

from .pipeline import CompilationResult, check_script, compile_script

__all__ = ["CompilationResult", "check_script", "compile_script"]
