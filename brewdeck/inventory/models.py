"""
Domain models for the locally installed package inventory.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum


class PackageKind(str, Enum):
    """The two package classes Homebrew manages."""
    FORMULA = "formula"
    CASK = "cask"

    @property
    def flags(self) -> list[str]:
        """Extra arguments selecting this kind on the brew command line."""
        if self is PackageKind.CASK:
            return ["--cask"]
        return []


@dataclass(frozen=True)
class InstalledPackage:
    """A package reported as installed by the last inventory refresh.

    Attributes:
        name: Formula name or cask token
        version: Installed version string as printed by brew
        kind: Formula or cask
        id: Opaque storage key, generated per refresh
    """

    name: str
    version: str
    kind: PackageKind
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def identity(self) -> tuple[str, PackageKind]:
        """The (name, kind) pair that is unique within an inventory."""
        return (self.name, self.kind)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization and storage."""
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "kind": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "InstalledPackage":
        return cls(
            id=data["id"],
            name=data["name"],
            version=data["version"],
            kind=PackageKind(data["kind"]),
        )
