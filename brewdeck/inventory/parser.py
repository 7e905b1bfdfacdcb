"""
Parsers for brew's plain-text output.

brew's text output is not a stable format, so these parsers are lenient:
lines they cannot interpret are skipped rather than reported.
"""

import logging

from brewdeck.inventory.models import InstalledPackage, PackageKind

logger = logging.getLogger(__name__)

UNKNOWN_VERSION = "Unknown"


def parse_list_output(output: str, kind: PackageKind) -> list[InstalledPackage]:
    """
    Parse `brew list --versions` output.

    Each line looks like "wget 1.21.1" or "openssl@3 3.1.0 3.2.1"; the first
    token is the name and the second the version. Lines with fewer than two
    tokens are skipped.

    Args:
        output: Raw command output
        kind: The kind the listing was requested for

    Returns:
        One InstalledPackage per well-formed line, in output order
    """
    packages = []
    skipped = 0

    for line in output.splitlines():
        tokens = line.split()
        if len(tokens) < 2:
            if tokens:
                skipped += 1
            continue
        packages.append(InstalledPackage(name=tokens[0], version=tokens[1], kind=kind))

    if skipped:
        logger.debug(f"Skipped {skipped} malformed {kind.value} list lines")

    return packages


def parse_version_output(output: str) -> str:
    """Return the last token of the first line of `brew --version` output."""
    lines = output.splitlines()
    tokens = lines[0].split() if lines else []
    return tokens[-1] if tokens else UNKNOWN_VERSION
