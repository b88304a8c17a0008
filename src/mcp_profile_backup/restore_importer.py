"""
Restore Importer

Imports profile snapshots that were dropped into restore-staging/ into the
live profile store, then moves each imported file to restore-archive/ and
trims the archive to the configured maximum.

A restore always replaces the live profile with the same id; it never merges.
A file is only moved out of staging once the restored profile is persisted,
so any file still in staging after a run has not been imported.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .base_profile_store import ProfileStore
from .config import BackupSettings
from .layout import DirectoryLayout
from .profile_info import parse_profile_info
from .retention import enforce_retention
from .storage_types import RestoreOutcome, RestoreResult
from .utils.file_utils import list_snapshot_files, move_by_copy
from .utils.json_utils import load_snapshot_file

logger = logging.getLogger(__name__)


class RestoreImporter:
    """Imports staged profile snapshots into the live store."""

    def __init__(
        self,
        store: ProfileStore,
        layout: DirectoryLayout,
        settings: BackupSettings,
    ) -> None:
        self._store = store
        self._layout = layout
        self._settings = settings

    async def restore_all(self) -> list[RestoreResult]:
        """Restore every snapshot file in the staging folder, in name order.

        Files are processed one at a time; a failed file does not stop the batch.
        """
        try:
            profile_files = await asyncio.to_thread(
                list_snapshot_files, self._layout.restore_staging
            )
        except OSError as e:
            logger.error(f"Could not list {self._layout.restore_staging}: {e}")
            return []

        results = []
        for profile_file in profile_files:
            results.append(await self.restore_one(profile_file))
        return results

    async def restore_one(self, profile_file: Path) -> RestoreResult:
        """Restore a single staged snapshot file."""
        profile_file = Path(profile_file)
        file_name = profile_file.name
        logger.info(f"Restoring {file_name}")

        try:
            profile = await asyncio.to_thread(load_snapshot_file, profile_file)
        except (OSError, ValueError) as e:
            logger.warning(f"Invalid snapshot file: {file_name}. Could not read it: {e}")
            return RestoreResult(RestoreOutcome.INVALID_SNAPSHOT, profile_file)

        info = parse_profile_info(profile)
        if info is None:
            logger.warning(
                f"Invalid snapshot file: {file_name}. Profile or Profile ID is null/invalid"
            )
            return RestoreResult(RestoreOutcome.INVALID_SNAPSHOT, profile_file)

        profile_id = info.profile_id
        try:
            await asyncio.to_thread(self._replace_profile, profile_id, profile)
        except Exception as e:
            logger.error(f"Could not save restored profile {file_name} with ID: {profile_id}: {e}")
            return RestoreResult(RestoreOutcome.PERSIST_FAILED, profile_file, session_id=profile_id)
        logger.info(f"Restored {file_name} for user: {info.username} with ID: {profile_id}")

        archived_path = self._layout.restore_archive / file_name
        try:
            await asyncio.to_thread(move_by_copy, profile_file, archived_path)
        except OSError as e:
            logger.error(f"Could not move {file_name} to the restore archive: {e}")
            return RestoreResult(RestoreOutcome.ARCHIVE_FAILED, profile_file, session_id=profile_id)
        logger.debug(f"Moved restored profile file to {self._layout.restore_archive}.")

        deleted_count = await self._clean_up()
        return RestoreResult(
            RestoreOutcome.RESTORED,
            profile_file,
            session_id=profile_id,
            archived_path=archived_path,
            deleted_count=deleted_count,
        )

    def _replace_profile(self, profile_id: str, profile: dict) -> None:
        if self._store.has_profile(profile_id):
            logger.debug(
                f"Profile with ID: {profile_id} already exists. "
                "Deleting existing profile before restore."
            )
            self._store.delete_profile(profile_id)
            self._store.remove_profile(profile_id)

        self._store.add_profile(profile_id, profile)
        self._store.save_profile(profile_id)

    async def _clean_up(self) -> int:
        max_keep = self._settings.maximum_restored_files
        if max_keep < 0:
            logger.warning(
                f"MaximumRestoredFiles is set to {max_keep}. Restored files will never be "
                "deleted and the folder may grow indefinitely"
            )
            return 0
        if max_keep == 0:
            logger.warning(
                "MaximumRestoredFiles is set to 0. Every restored file is deleted from "
                "the archive right after it is moved there"
            )

        deleted_count = await asyncio.to_thread(
            enforce_retention, self._layout.restore_archive, max_keep
        )
        if deleted_count > 0:
            if self._settings.maximum_restored_delete_log:
                logger.info(
                    "Maximum restored profiles reached. "
                    f"Deleted {deleted_count} old restored profile files"
                )
        else:
            logger.debug(
                "No cleanup needed for the restore archive. "
                "Current restored profiles are within the limit."
            )
        return deleted_count
