"""
Maps brew install output to coarse progress fractions.

Markers are English substrings of brew's human-readable output, so the
fractions are hints: brew may skip phases or print them out of order.
"""

from typing import Callable, Optional

PhaseTable = tuple[tuple[str, float], ...]

INITIAL_PROGRESS = 0.01
COMPLETE_PROGRESS = 1.0


def install_phase_table(name: str) -> PhaseTable:
    """Phase markers for `brew install <name>`, in match priority order."""
    return (
        ("==> Downloading", 0.1),
        ("==> Fetching dependencies", 0.2),
        ("==> Installing dependencies", 0.4),
        (f"==> Installing {name}", 0.6),
        ("==> Summary", 0.8),
    )


def match_phase(line: str, table: PhaseTable) -> Optional[float]:
    """Return the fraction of the first marker in table order found in line."""
    for marker, fraction in table:
        if marker in line:
            return fraction
    return None


class ProgressPhaseMapper:
    """
    Output line callback that reports matched phases.

    Used as the on_line callback of a streaming install. Every matching
    line is reported, so the same fraction may be emitted more than once.
    """

    def __init__(self, table: PhaseTable, on_progress: Callable[[float], None]):
        for marker, fraction in table:
            if not 0.0 <= fraction <= 1.0:
                raise ValueError(f"Fraction for {marker!r} outside [0, 1]: {fraction}")
        self.table = table
        self.on_progress = on_progress

    def match(self, line: str) -> Optional[float]:
        return match_phase(line, self.table)

    def __call__(self, line: str) -> None:
        fraction = self.match(line)
        if fraction is not None:
            self.on_progress(fraction)
