"""Structural validation of app declarations."""

from .service import unknown_targets, validate_app

__all__ = ["unknown_targets", "validate_app"]
