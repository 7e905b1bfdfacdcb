"""
Runner interfaces for brew command execution.

This module defines the contracts for invoking the package manager,
enabling fake implementations for tests and alternative execution
environments.
"""

from abc import ABC, abstractmethod
from typing import Callable, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from brewdeck.runner.executor import ExecutionResult


class ICommandRunner(ABC):
    """
    Abstract interface for blocking brew invocations.

    Implementations:
        - CommandRunner: Spawns the real executable

    Example:
        ```python
        class FakeRunner(ICommandRunner):
            def __init__(self, outputs: dict[tuple, str]):
                self.outputs = outputs

            async def run(self, args):
                return self.outputs[tuple(args)]

            async def execute(self, args):
                return ExecutionResult(command=" ".join(args), output=await self.run(args))

            async def version(self):
                return "4.2.0"
        ```
    """

    @abstractmethod
    async def run(self, args: Sequence[str]) -> str:
        """
        Run brew and return its combined output.

        Args:
            args: The argument vector, without the executable

        Returns:
            Decoded stdout and stderr, merged

        Raises:
            ExecutableNotFoundException: If brew cannot be located
            SpawnException: If the process cannot be launched
            CommandFailedException: If brew exits nonzero
        """
        pass

    @abstractmethod
    async def execute(self, args: Sequence[str]) -> "ExecutionResult":
        """
        Run brew, returning failures inside the result instead of raising.

        Args:
            args: The argument vector, without the executable

        Returns:
            ExecutionResult carrying the output or the typed failure
        """
        pass

    @abstractmethod
    async def version(self) -> str:
        """Return the installed brew version string."""
        pass


class IStreamingRunner(ABC):
    """
    Abstract interface for brew invocations that report output as it arrives.

    Implementations:
        - StreamingCommandRunner: Reads stdout and stderr concurrently
    """

    @abstractmethod
    async def run_streaming(
        self,
        args: Sequence[str],
        on_line: Callable[[str], None],
    ) -> str:
        """
        Run brew, passing each output line to on_line as soon as it is read.

        Args:
            args: The argument vector, without the executable
            on_line: Called with each non-empty line from either stream.
                Calls from the two streams may interleave in any order.

        Returns:
            The accumulated stdout

        Raises:
            ExecutableNotFoundException: If brew cannot be located
            SpawnException: If the process cannot be launched
            CommandFailedException: If brew exits nonzero; carries the
                accumulated stderr
        """
        pass
