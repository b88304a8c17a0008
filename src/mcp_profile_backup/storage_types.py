"""
Storage Types and Data Classes

This module contains the core data structures and enums shared by the profile
store, the backup writer and the restore importer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class BackupOutcome(Enum):
    """Result of a single backup attempt."""

    SAVED = "saved"
    PROFILE_NOT_FOUND = "profile_not_found"
    HEADLESS_SKIPPED = "headless_skipped"
    INVALID_USERNAME = "invalid_username"
    SERIALIZATION_FAILED = "serialization_failed"
    WRITE_FAILED = "write_failed"


class RestoreOutcome(Enum):
    """Result of importing a single staged snapshot."""

    RESTORED = "restored"
    INVALID_SNAPSHOT = "invalid_snapshot"
    PERSIST_FAILED = "persist_failed"
    ARCHIVE_FAILED = "archive_failed"


@dataclass
class BackupResult:
    """Outcome of BackupWriter.backup, with the file written (if any)."""

    outcome: BackupOutcome
    session_id: str
    path: Path | None = None
    deleted_count: int = 0


@dataclass
class RestoreResult:
    """Outcome of RestoreImporter.restore_one for one staged file."""

    outcome: RestoreOutcome
    source: Path
    session_id: str | None = None
    archived_path: Path | None = None
    deleted_count: int = 0


@dataclass
class StorageStats:
    """Storage statistics for monitoring."""

    total_profiles: int
    persisted_profiles: int
    persisted_size_bytes: int
    disk_usage_percent: float
