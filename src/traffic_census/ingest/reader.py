"""
Input Reader
============

Loads the raw traffic log for the coordinator.

Lines are kept as undecoded bytes; decoding happens inside the worker
that owns the partition. Blank lines (whitespace only) are discarded
so that partition sizes reflect real records.
"""

import logging
from pathlib import Path
from typing import List, Union


logger = logging.getLogger(__name__)


class InputFileError(OSError):
    """Input file missing or unreadable. Fatal before any dispatch."""


def load_lines(path: Union[str, Path]) -> List[bytes]:
    """
    Read all non-blank lines of `path`.

    Args:
        path: Traffic log file

    Returns:
        Raw lines without trailing line terminators

    Raises:
        InputFileError: File cannot be opened or read
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise InputFileError(f"Failed to open input file {path}: {e.strerror or e}") from e

    lines = raw.splitlines()
    kept = [line for line in lines if line.strip()]

    logger.info(f"Loaded {len(kept)} records from {path} ({len(lines) - len(kept)} blank lines skipped)")
    return kept
