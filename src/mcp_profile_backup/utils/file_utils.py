from __future__ import annotations

import shutil
from pathlib import Path

from ..naming import SNAPSHOT_EXTENSION


def is_snapshot_file(path: Path) -> bool:
    """Return True for regular files whose suffix is exactly ".json".

    The match is case-sensitive: "profile.JSON" and "profile.json.bak" are
    not snapshot files.
    """
    return path.suffix == SNAPSHOT_EXTENSION and path.is_file()


def list_snapshot_files(directory: Path) -> list[Path]:
    """List snapshot files directly under directory (non-recursive), sorted by name."""
    return sorted(
        (p for p in directory.iterdir() if is_snapshot_file(p)),
        key=lambda p: p.name,
    )


def atomic_write_text(path: Path, text: str) -> None:
    """Write text to path through a temporary file, replacing any existing file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp = path.with_suffix(path.suffix + ".tmp")
    try:
        temp.write_text(text, encoding="utf-8")
        temp.replace(path)
    except OSError:
        temp.unlink(missing_ok=True)
        raise


def move_by_copy(source: Path, target: Path) -> None:
    """Copy source over target, then delete source.

    If the copy fails, source is left untouched.
    """
    shutil.copy2(source, target)
    source.unlink()
