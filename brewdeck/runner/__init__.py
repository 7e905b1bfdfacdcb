"""brew process execution: locating, running, streaming, progress mapping."""

from brewdeck.runner.locator import ExecutableLocator
from brewdeck.runner.executor import CommandRunner, ExecutionResult
from brewdeck.runner.streaming import StreamingCommandRunner, OutputAccumulator
from brewdeck.runner.progress import (
    COMPLETE_PROGRESS,
    INITIAL_PROGRESS,
    ProgressPhaseMapper,
    install_phase_table,
    match_phase,
)

__all__ = [
    "ExecutableLocator",
    "CommandRunner",
    "ExecutionResult",
    "StreamingCommandRunner",
    "OutputAccumulator",
    "ProgressPhaseMapper",
    "install_phase_table",
    "match_phase",
    "INITIAL_PROGRESS",
    "COMPLETE_PROGRESS",
]
