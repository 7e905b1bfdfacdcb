"""Installed package inventory: models and tool output parsing."""

from brewdeck.inventory.models import InstalledPackage, PackageKind
from brewdeck.inventory.parser import parse_list_output, parse_version_output

__all__ = [
    "InstalledPackage",
    "PackageKind",
    "parse_list_output",
    "parse_version_output",
]
