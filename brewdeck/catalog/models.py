"""
Remote catalog records as published by formulae.brew.sh.

Only the fields brewdeck uses are declared; everything else in the
payload is ignored.
"""

from datetime import UTC, datetime
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Versions(BaseModel):
    """Version information of a formula."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    stable: Optional[str] = None
    head: Optional[str] = None
    bottle: bool = False


class Formula(BaseModel):
    """A formula from the remote catalog."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    full_name: Optional[str] = None
    desc: Optional[str] = None
    homepage: str
    versions: Versions
    dependencies: list[str] = Field(default_factory=list)

    @property
    def search_key(self) -> str:
        return self.name


class Cask(BaseModel):
    """A cask from the remote catalog."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    token: str
    name: list[str] = Field(default_factory=list)
    desc: Optional[str] = None
    homepage: str
    version: str
    url: str

    @property
    def search_key(self) -> str:
        return self.token


@dataclass(frozen=True)
class CatalogSnapshot:
    """Both catalogs as of one fetch. Replaced wholesale, never mutated."""
    formulae: tuple[Formula, ...] = ()
    casks: tuple[Cask, ...] = ()
    fetched_at: Optional[datetime] = None

    @classmethod
    def from_lists(cls, formulae: list[Formula], casks: list[Cask]) -> "CatalogSnapshot":
        return cls(
            formulae=tuple(formulae),
            casks=tuple(casks),
            fetched_at=datetime.now(UTC),
        )

    @property
    def is_empty(self) -> bool:
        return not self.formulae and not self.casks
