"""
Command runner for the brew executable.
Spawns brew with an argument vector and captures its combined output.
"""

import asyncio
import contextlib
import logging
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from brewdeck.exceptions import (
    CommandFailedException,
    ExecutableNotFoundException,
    ExecutionException,
    SpawnException,
)
from brewdeck.interfaces.runner import ICommandRunner
from brewdeck.inventory.parser import parse_version_output
from brewdeck.runner.locator import ExecutableLocator

logger = logging.getLogger(__name__)


# Keep brew quiet and its output parseable
BREW_ENVIRONMENT = {
    "HOMEBREW_NO_AUTO_UPDATE": "1",
    "HOMEBREW_NO_ENV_HINTS": "1",
    "HOMEBREW_NO_COLOR": "1",
}

EXIT_POLL_INTERVAL = 0.05  # seconds


def brew_environment() -> dict[str, str]:
    """Inherited environment with the brew overrides applied."""
    return {**os.environ, **BREW_ENVIRONMENT}


def decode_output(data: bytes) -> str:
    """Decode process output; invalid bytes are replaced, never fatal."""
    return data.decode("utf-8", errors="replace")


async def wait_for_exit(process: asyncio.subprocess.Process) -> int:
    """
    Wait until the process itself has exited and return its status.

    Process.wait() can stay pending while a descendant still holds the
    output pipes open; the return code is set as soon as the child is reaped.
    """
    while process.returncode is None:
        await asyncio.sleep(EXIT_POLL_INTERVAL)
    return process.returncode


async def terminate(process: asyncio.subprocess.Process) -> None:
    """Kill the process if it is still running and wait until it is reaped."""
    if process.returncode is None:
        with contextlib.suppress(ProcessLookupError):
            process.kill()
    await wait_for_exit(process)


@dataclass(frozen=True)
class ExecutionResult:
    """Result of a single brew invocation: either output or a typed failure."""
    command: str
    output: str = ""
    error: Optional[ExecutionException] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        """Return the output, or raise the failure this result carries."""
        if self.error is not None:
            raise self.error
        return self.output

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "command": self.command,
            "output": self.output,
            "error": self.error.error_code if self.error else None,
            "message": self.error.message if self.error else None,
        }


class CommandRunner(ICommandRunner):
    """
    Runs brew and waits for it to exit.

    Standard output and standard error are merged into one stream. There
    is no timeout: a hung brew process suspends the caller until it exits.
    """

    def __init__(self, locator: ExecutableLocator):
        """
        Initialize the command runner.

        Args:
            locator: Finds the brew executable before each invocation
        """
        self.locator = locator

    def resolve_executable(self) -> Path:
        """
        Locate brew or fail.

        Raises:
            ExecutableNotFoundException: If no candidate location holds brew
        """
        path = self.locator.locate()
        if path is None:
            raise ExecutableNotFoundException(
                "Homebrew executable not found",
                details={"searched": [str(p) for p in self.locator.candidates]},
            )
        return path

    async def _spawn(self, executable: Path, args: Sequence[str], **streams) -> asyncio.subprocess.Process:
        command_str = shlex.join([executable.name, *args])
        logger.debug(f"Spawning {command_str}")
        try:
            return await asyncio.create_subprocess_exec(
                str(executable),
                *args,
                env=brew_environment(),
                **streams,
            )
        except OSError as e:
            raise SpawnException(
                f"Failed to launch {executable}: {e}",
                underlying=e,
                details={"command": command_str},
            ) from e

    async def run(self, args: Sequence[str]) -> str:
        """
        Run brew and return its combined output.

        Args:
            args: Arguments passed to brew (e.g. ["list", "--versions"])

        Returns:
            The captured output, decoded

        Raises:
            ExecutableNotFoundException: brew is not installed; nothing is spawned
            SpawnException: The process could not be launched
            CommandFailedException: brew exited with a nonzero status
        """
        executable = self.resolve_executable()
        process = await self._spawn(
            executable,
            args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )

        try:
            stdout, _ = await process.communicate()
        except BaseException:
            await terminate(process)
            raise
        output = decode_output(stdout)
        command_str = shlex.join(["brew", *args])
        logger.info(f"{command_str} returned with code {process.returncode}")

        if process.returncode != 0:
            raise CommandFailedException(
                output,
                return_code=process.returncode,
                details={"command": command_str, "return_code": process.returncode},
            )
        return output

    async def execute(self, args: Sequence[str]) -> ExecutionResult:
        """
        Run brew and capture any execution failure in the result.

        Args:
            args: Arguments passed to brew

        Returns:
            ExecutionResult with either the output or the failure
        """
        command_str = shlex.join(["brew", *args])
        try:
            output = await self.run(args)
        except ExecutionException as e:
            return ExecutionResult(command=command_str, error=e)
        return ExecutionResult(command=command_str, output=output)

    async def version(self) -> str:
        """Return the version reported by `brew --version`."""
        result = await self.execute(["--version"])
        return parse_version_output(result.unwrap())
