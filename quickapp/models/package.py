"""
Package identity derived from a script's file name.
"""

from __future__ import annotations

from pathlib import PurePath

from pydantic import BaseModel, Field

PACKAGE_PREFIX = "com.quickapp.generated."


def clean_filename(file_name: str) -> str:
    """Reduce a file name to the lowercase alphanumeric core used for packaging.

    Directories are dropped, the last extension is stripped, every character that
    is not a letter or digit is removed and the rest is lowercased:
    ``"My-Awesome_File.txt"`` becomes ``"myawesomefile"``. The result may be empty.
    """
    base = PurePath(file_name).name
    stem = base.rsplit(".", 1)[0] if "." in base else base
    return "".join(ch for ch in stem.lower() if ch.isalnum())


class PackageIdentity(BaseModel):
    """Naming derived from the source file.

    Two file names that clean to the same value share an identity; collisions are
    not deduplicated.
    """

    cleaned_name: str = Field(description="Lowercase alphanumeric file name core")
    package_name: str = Field(description="Android application id")

    model_config = {"frozen": True}

    @classmethod
    def from_filename(cls, file_name: str) -> PackageIdentity:
        cleaned = clean_filename(file_name)
        return cls(cleaned_name=cleaned, package_name=PACKAGE_PREFIX + cleaned)

    def package_file_name(self, suffix: str = "-debug", extension: str = "apk") -> str:
        """Name of the copied package, e.g. ``shoppinglist-debug.apk``."""
        return f"{self.cleaned_name}{suffix}.{extension}"
