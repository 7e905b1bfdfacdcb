"""
Locates the brew executable among its well-known install locations.
"""

import os
from pathlib import Path
from typing import Iterable, Optional

from brewdeck.config import DEFAULT_BREW_PATHS


class ExecutableLocator:
    """
    Finds the package manager executable.

    Candidates are checked in order on every call; nothing is cached
    because brew can be installed or removed while the process runs.
    """

    def __init__(self, candidates: Optional[Iterable[str | Path]] = None):
        """
        Args:
            candidates: Ordered paths to check (default: standard brew prefixes)
        """
        self.candidates = [Path(p) for p in (candidates or DEFAULT_BREW_PATHS)]

    def locate(self) -> Optional[Path]:
        """Return the first candidate that is an executable regular file, or None."""
        for path in self.candidates:
            if path.is_file() and os.access(path, os.X_OK):
                return path
        return None
