"""
Retention Policy

Keeps at most N snapshot files in a directory by deleting the oldest ones.
"Oldest" is decided by file name alone: snapshot names start with a
fixed-width timestamp, so lexicographic order is creation order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .utils.file_utils import list_snapshot_files

logger = logging.getLogger(__name__)


def select_for_deletion(files: Iterable[str], max_keep: int) -> list[str]:
    """Return the file names to delete so that at most max_keep remain.

    Names are returned oldest first. A negative max_keep disables retention.
    """
    if max_keep < 0:
        return []
    ordered = sorted(files, reverse=True)  # newest first
    surplus = ordered[max_keep:]
    surplus.reverse()
    return surplus


def enforce_retention(directory: str | Path, max_keep: int) -> int:
    """Delete the oldest snapshot files in directory beyond max_keep.

    Stops at the first file that cannot be deleted and returns the number of
    files deleted so far. Deletion errors are logged, never raised.
    """
    directory = Path(directory)
    try:
        names = [p.name for p in list_snapshot_files(directory)]
    except OSError as e:
        logger.error(f"Could not list folder: {directory}: {e}")
        return 0
    logger.debug(
        f"Cleaning up folder: {directory} to keep only {max_keep} files. "
        f"Found {len(names)} files in the folder."
    )

    deleted_count = 0
    for name in select_for_deletion(names, max_keep):
        logger.debug(f"Deleting file: {name}")
        try:
            (directory / name).unlink()
        except OSError as e:
            # No retry; the remaining surplus is left for the next run
            logger.error(f"Error deleting file: {name}: {e}")
            return deleted_count
        deleted_count += 1
    return deleted_count
