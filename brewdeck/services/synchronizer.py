"""
Inventory synchronization.

Runs brew to list, install, remove and upgrade packages, and rebuilds the
persisted inventory from brew's listings after every change.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from brewdeck.exceptions import ExecutableNotFoundException, ValidationException
from brewdeck.interfaces.runner import ICommandRunner, IStreamingRunner
from brewdeck.inventory.models import InstalledPackage, PackageKind
from brewdeck.inventory.parser import parse_list_output
from brewdeck.repositories.inventory_repository import InventoryRepository
from brewdeck.runner.locator import ExecutableLocator
from brewdeck.runner.progress import (
    COMPLETE_PROGRESS,
    INITIAL_PROGRESS,
    ProgressPhaseMapper,
    install_phase_table,
)

logger = logging.getLogger(__name__)

NOT_INSTALLED = "Not Installed"


@dataclass(frozen=True)
class ToolStatus:
    """Whether brew is available, and which version."""
    found: bool
    path: Optional[Path] = None
    version: str = NOT_INSTALLED

    def to_dict(self) -> dict:
        return {
            "found": self.found,
            "path": str(self.path) if self.path else None,
            "version": self.version,
        }


def validate_package_name(name: str) -> str:
    """
    Reject names brew would misread.

    Raises:
        ValidationException: If the name is empty or looks like an option
    """
    name = name.strip()
    if not name:
        raise ValidationException("Package name must not be empty")
    if name.startswith("-"):
        raise ValidationException(
            f"Invalid package name '{name}'",
            details={"name": name},
        )
    return name


def action_args(action: str, name: str, kind: PackageKind) -> list[str]:
    """Build e.g. ["install", "--cask", "firefox"]."""
    return [action, *kind.flags, name]


def list_args(kind: PackageKind) -> list[str]:
    return ["list", *kind.flags, "--versions"]


class InventorySynchronizer:
    """
    Keeps the persisted inventory in line with what brew reports.

    Refreshes are serialized: two concurrent refresh() calls run one after
    the other, and each replaces the whole inventory.
    """

    def __init__(
        self,
        runner: ICommandRunner,
        streaming_runner: IStreamingRunner,
        repository: InventoryRepository,
        locator: Optional[ExecutableLocator] = None,
    ):
        """
        Args:
            runner: Runs blocking brew commands
            streaming_runner: Runs brew commands with line streaming
            repository: The persisted inventory
            locator: Used by status() to report the brew path
        """
        self.runner = runner
        self.streaming_runner = streaming_runner
        self.repository = repository
        self.locator = locator
        self._refresh_lock = asyncio.Lock()

    async def list_installed(self, kind: PackageKind) -> List[InstalledPackage]:
        """Ask brew which packages of one kind are installed."""
        output = await self.runner.run(list_args(kind))
        return parse_list_output(output, kind)

    async def refresh(self) -> List[InstalledPackage]:
        """
        Rebuild the inventory from brew's current listings.

        Both kinds are listed concurrently. If either listing fails the
        inventory is left untouched.

        Returns:
            The new inventory, sorted by name then version

        Raises:
            ExecutionException: A listing failed
            SyncException: The new inventory could not be committed
        """
        async with self._refresh_lock:
            results = await asyncio.gather(
                self.list_installed(PackageKind.FORMULA),
                self.list_installed(PackageKind.CASK),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, BaseException):
                    logger.error(f"Listing failed, inventory left unchanged: {result}")
                    raise result

            formulae, casks = results
            logger.info(f"brew reports {len(formulae)} formulae and {len(casks)} casks")
            return await self.repository.replace_all(formulae + casks)

    async def installed(self, kind: Optional[PackageKind] = None) -> List[InstalledPackage]:
        """Return the persisted inventory, sorted by name then version."""
        packages = await self.repository.get_all()
        if kind is not None:
            packages = [p for p in packages if p.kind is kind]
        return packages

    async def is_installed(self, name: str, kind: Optional[PackageKind] = None) -> bool:
        return bool(await self.repository.find(name, kind))

    async def _run_action(self, action: str, name: str, kind: PackageKind) -> str:
        name = validate_package_name(name)
        logger.info(f"Running brew {action} for {kind.value} {name}")
        output = await self.runner.run(action_args(action, name, kind))
        await self.refresh()
        return output

    async def install(self, name: str, kind: PackageKind) -> str:
        """Install a package, then refresh. Returns brew's output."""
        return await self._run_action("install", name, kind)

    async def uninstall(self, name: str, kind: PackageKind) -> str:
        """Uninstall a package, then refresh. Returns brew's output."""
        return await self._run_action("uninstall", name, kind)

    async def upgrade(self, name: str, kind: PackageKind) -> str:
        """Upgrade a package, then refresh. Returns brew's output."""
        return await self._run_action("upgrade", name, kind)

    async def install_with_progress(
        self,
        name: str,
        kind: PackageKind,
        on_progress: Callable[[float], None],
    ) -> str:
        """
        Install a package while reporting coarse progress.

        on_progress receives INITIAL_PROGRESS before brew starts, a fraction
        for each output line matching a known phase, and COMPLETE_PROGRESS
        once brew exits successfully. The inventory is not refreshed; the
        caller decides when to call refresh().

        Returns:
            brew's stdout
        """
        name = validate_package_name(name)
        mapper = ProgressPhaseMapper(install_phase_table(name), on_progress)

        on_progress(INITIAL_PROGRESS)
        output = await self.streaming_runner.run_streaming(
            action_args("install", name, kind),
            mapper,
        )
        on_progress(COMPLETE_PROGRESS)
        return output

    async def status(self) -> ToolStatus:
        """
        Report whether brew is installed and its version.

        A missing executable is reported, not raised. Other failures of
        `brew --version` propagate.
        """
        path = self.locator.locate() if self.locator else None
        if self.locator and path is None:
            return ToolStatus(found=False)
        try:
            version = await self.runner.version()
        except ExecutableNotFoundException:
            return ToolStatus(found=False)
        return ToolStatus(found=True, path=path, version=version)
