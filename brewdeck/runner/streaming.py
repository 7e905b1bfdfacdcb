"""
Streaming command runner.

Runs brew with separate stdout and stderr pipes, hands every output line
to a callback as soon as it is read, and accumulates both streams for the
final result.
"""

import asyncio
import logging
import shlex
import threading
from typing import Callable, Sequence

from brewdeck.exceptions import CommandFailedException
from brewdeck.interfaces.runner import IStreamingRunner
from brewdeck.runner.executor import CommandRunner, decode_output, terminate, wait_for_exit
from brewdeck.runner.locator import ExecutableLocator

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4096  # bytes per read
DEFAULT_DRAIN_TIMEOUT = 0.5  # seconds of reading after brew exits


class OutputAccumulator:
    """
    Byte buffer filled by one stream reader and read once it is done.

    Appends and the final read are serialized by a lock, so reading while
    an append is in flight never observes a torn buffer.
    """

    def __init__(self):
        self._buffer = bytearray()
        self._lock = threading.Lock()

    def append(self, data: bytes) -> None:
        with self._lock:
            self._buffer.extend(data)

    def getvalue(self) -> bytes:
        with self._lock:
            return bytes(self._buffer)

    def text(self) -> str:
        return decode_output(self.getvalue())

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)


def split_fragments(text: str) -> list[str]:
    """Split decoded output into its non-empty lines."""
    return [line for line in text.splitlines() if line]


class StreamingCommandRunner(CommandRunner, IStreamingRunner):
    """
    Runs brew while delivering its output line by line.

    Each stream gets its own reader task and accumulator. Lines of one
    stream reach the callback in order; lines of the two streams may
    interleave arbitrarily. A line split across two reads may be delivered
    as two fragments.

    Completion follows process exit, not pipe end-of-file. Once brew has
    exited the readers get drain_timeout seconds to consume what is left
    and are then stopped, so output written afterwards by a lingering child
    is not part of the result.

    The callback is not synchronized here: if it mutates shared state from
    both streams, the caller provides its own serialization.
    """

    def __init__(
        self,
        locator: ExecutableLocator,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        drain_timeout: float = DEFAULT_DRAIN_TIMEOUT,
    ):
        """
        Args:
            locator: Finds the brew executable before each invocation
            chunk_size: Maximum bytes read from a pipe at a time
            drain_timeout: Seconds the pipes are still read after brew exits
        """
        super().__init__(locator)
        self.chunk_size = chunk_size
        self.drain_timeout = drain_timeout

    async def _pump(
        self,
        stream: asyncio.StreamReader,
        accumulator: OutputAccumulator,
        on_line: Callable[[str], None],
    ) -> None:
        """Read one stream until end-of-file, accumulating and forwarding lines."""
        while True:
            chunk = await stream.read(self.chunk_size)
            if not chunk:
                break
            accumulator.append(chunk)
            for fragment in split_fragments(decode_output(chunk)):
                on_line(fragment)

    async def _await_exit(self, exit_task: asyncio.Task, readers: list[asyncio.Task]) -> int:
        """Wait for brew to exit, surfacing a reader failure as soon as it happens."""
        pending = {exit_task, *readers}
        while not exit_task.done():
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                if task is not exit_task:
                    task.result()
        return exit_task.result()

    async def _drain(self, readers: list[asyncio.Task]) -> None:
        """
        Give the readers a bounded window to consume what the pipes still hold.

        A descendant of brew may keep a pipe open long after brew exited; its
        reader is cancelled once the window closes.
        """
        done, pending = await asyncio.wait(readers, timeout=self.drain_timeout)
        for reader in pending:
            reader.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        if pending:
            logger.warning("Output pipe still open after brew exited; a child process inherited it")
        for reader in done:
            reader.result()

    async def run_streaming(
        self,
        args: Sequence[str],
        on_line: Callable[[str], None],
    ) -> str:
        """
        Run brew and stream its output to on_line.

        The call resolves when brew exits, after a short drain of its pipes;
        it does not wait for pipe end-of-file.

        Args:
            args: Arguments passed to brew
            on_line: Receives each non-empty output line from either stream

        Returns:
            The accumulated stdout

        Raises:
            ExecutableNotFoundException: brew is not installed; nothing is spawned
            SpawnException: The process could not be launched
            CommandFailedException: brew exited nonzero; carries the accumulated stderr
        """
        executable = self.resolve_executable()
        process = await self._spawn(
            executable,
            args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

        stdout_acc = OutputAccumulator()
        stderr_acc = OutputAccumulator()
        readers = [
            asyncio.create_task(self._pump(process.stdout, stdout_acc, on_line)),
            asyncio.create_task(self._pump(process.stderr, stderr_acc, on_line)),
        ]
        exit_task = asyncio.create_task(wait_for_exit(process))

        try:
            return_code = await self._await_exit(exit_task, readers)
            await self._drain(readers)
        except BaseException:
            for task in (exit_task, *readers):
                task.cancel()
            await asyncio.gather(exit_task, *readers, return_exceptions=True)
            await terminate(process)
            raise

        command_str = shlex.join(["brew", *args])
        logger.info(
            f"{command_str} returned with code {return_code} "
            f"(stdout {len(stdout_acc)} bytes, stderr {len(stderr_acc)} bytes)"
        )

        if return_code != 0:
            raise CommandFailedException(
                stderr_acc.text(),
                return_code=return_code,
                details={"command": command_str, "return_code": return_code},
            )
        return stdout_acc.text()
