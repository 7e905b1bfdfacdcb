"""
Inventory API routes: tool status, installed packages, and package actions.
"""

import logging
from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from brewdeck.dependencies import get_synchronizer
from brewdeck.inventory.models import InstalledPackage, PackageKind
from brewdeck.services.synchronizer import InventorySynchronizer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["packages"])


class PackageAction(str, Enum):
    """Actions that change what is installed."""
    INSTALL = "install"
    UNINSTALL = "uninstall"
    UPGRADE = "upgrade"


class PackageResponse(BaseModel):
    """Response model for an installed package."""
    id: str
    name: str
    version: str
    kind: PackageKind

    @classmethod
    def from_package(cls, package: InstalledPackage) -> "PackageResponse":
        return cls(id=package.id, name=package.name, version=package.version, kind=package.kind)


class InventoryResponse(BaseModel):
    """Response model for the persisted inventory."""
    count: int
    packages: list[PackageResponse] = Field(default_factory=list)

    @classmethod
    def from_packages(cls, packages: list[InstalledPackage]) -> "InventoryResponse":
        return cls(
            count=len(packages),
            packages=[PackageResponse.from_package(p) for p in packages],
        )


class ActionResponse(BaseModel):
    """Response model for install, uninstall and upgrade."""
    action: PackageAction
    name: str
    kind: PackageKind
    output: str = Field(..., description="brew's combined output")
    inventory: InventoryResponse


class StatusResponse(BaseModel):
    """Response model for the brew status check."""
    found: bool
    path: Optional[str] = None
    version: str


@router.get("/status", response_model=StatusResponse)
async def tool_status(synchronizer: InventorySynchronizer = Depends(get_synchronizer)):
    """Report whether brew is installed and which version."""
    status = await synchronizer.status()
    return StatusResponse(**status.to_dict())


@router.get("/packages", response_model=InventoryResponse)
async def list_packages(
    kind: Optional[PackageKind] = Query(None, description="Only list this kind"),
    synchronizer: InventorySynchronizer = Depends(get_synchronizer),
):
    """List the persisted inventory, sorted by name then version."""
    return InventoryResponse.from_packages(await synchronizer.installed(kind))


@router.post("/packages/refresh", response_model=InventoryResponse)
async def refresh_packages(synchronizer: InventorySynchronizer = Depends(get_synchronizer)):
    """Rebuild the inventory from brew's listings."""
    packages = await synchronizer.refresh()
    return InventoryResponse.from_packages(packages)


@router.post("/packages/{kind}/{name}/{action}", response_model=ActionResponse)
async def package_action(
    kind: PackageKind,
    name: str,
    action: PackageAction,
    synchronizer: InventorySynchronizer = Depends(get_synchronizer),
):
    """
    Install, uninstall or upgrade a package, then refresh the inventory.

    Failures are rendered by the global exception handler, e.g. a nonzero
    brew exit becomes a 502 with error code COMMAND_FAILED and brew's
    output as the message.
    """
    handler = {
        PackageAction.INSTALL: synchronizer.install,
        PackageAction.UNINSTALL: synchronizer.uninstall,
        PackageAction.UPGRADE: synchronizer.upgrade,
    }[action]

    output = await handler(name, kind)
    packages = await synchronizer.installed()
    return ActionResponse(
        action=action,
        name=name,
        kind=kind,
        output=output,
        inventory=InventoryResponse.from_packages(packages),
    )
