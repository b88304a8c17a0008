"""
Directory Layout

Resolves and creates the three directories the service works in:
backups/, restore-staging/ and restore-archive/ under the configured root.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

BACKUPS_DIR = "backups"
RESTORE_STAGING_DIR = "restore-staging"
RESTORE_ARCHIVE_DIR = "restore-archive"


@dataclass(frozen=True)
class DirectoryLayout:
    """Resolved paths of the service directories."""

    root: Path
    backups: Path
    restore_staging: Path
    restore_archive: Path

    @classmethod
    def from_root(cls, root: str | Path) -> DirectoryLayout:
        root = Path(root)
        return cls(
            root=root,
            backups=root / BACKUPS_DIR,
            restore_staging=root / RESTORE_STAGING_DIR,
            restore_archive=root / RESTORE_ARCHIVE_DIR,
        )

    def session_backup_dir(self, session_id: str, username: str) -> Path:
        """Return backups/<sessionId>-<username>.

        Raises:
            ValueError: If either part could place the folder outside backups/
        """
        for part in (session_id, username):
            if not part or "/" in part or "\\" in part or "\0" in part or part in {".", ".."}:
                raise ValueError(f"Unsafe path component: {part!r}")
        path = self.backups / f"{session_id}-{username}"
        if path.resolve().parent != self.backups.resolve():
            raise ValueError(f"Backup folder {path} is outside {self.backups}")
        return path

    def ensure(self) -> None:
        """Create all directories; existing ones are left alone."""
        for path in (self.backups, self.restore_staging, self.restore_archive):
            path.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Directory layout ready under {self.root}")


def ensure_layout(root: str | Path) -> DirectoryLayout:
    """Create the directory layout under root and return it.

    Safe to call repeatedly. Raises OSError if a directory cannot be created.
    """
    layout = DirectoryLayout.from_root(root)
    layout.ensure()
    return layout
