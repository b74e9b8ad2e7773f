"""Deploy orchestration: install and launch on one device."""

from .service import Device, DeployOutput, DeployService, is_stale, parse_devices

__all__ = ["Device", "DeployOutput", "DeployService", "is_stale", "parse_devices"]
