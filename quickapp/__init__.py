"""
QuickApp: single-script declarative Android apps.

Compiles one declarative script describing an app's screens and widgets into a
Gradle project, builds it into a debug APK and runs it on a connected device.
"""

__version__ = "1.0.0"
__author__ = "QuickApp Team"
