"""
Backup Writer

Writes a timestamped JSON copy of a live profile into the profile's backup
folder and trims that folder to the configured maximum.

backups/<sessionId>-<username>/<YYYY-MM-DD_HH-mm-ss>_<event>.json

A backup never raises: every failure is logged and returned as an outcome,
because backups run detached from the event that triggered them.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from .base_profile_store import ProfileStore
from .config import BackupSettings
from .layout import DirectoryLayout
from .naming import backup_file_name
from .profile_info import get_username, is_headless_username
from .retention import enforce_retention
from .storage_types import BackupOutcome, BackupResult
from .utils.file_utils import atomic_write_text
from .utils.json_utils import serialize_profile

logger = logging.getLogger(__name__)


class BackupWriter:
    """Backs up live profiles on demand."""

    def __init__(
        self,
        store: ProfileStore,
        layout: DirectoryLayout,
        settings: BackupSettings,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._layout = layout
        self._settings = settings
        self._clock = clock

    async def backup(self, event_name: str, session_id: str) -> BackupResult:
        """Back up the profile of session_id, labelled with event_name."""
        logger.debug(f"Backing up profile for session: {session_id}")

        profile = self._store.get_profile(session_id)
        username = get_username(profile)
        if profile is None or not username:
            logger.warning(f"Could not find profile for session: {session_id}. Backup aborted.")
            return BackupResult(BackupOutcome.PROFILE_NOT_FOUND, session_id)

        if is_headless_username(username):
            logger.debug(f"Skipping backup for headless client profile: {session_id}({username})")
            return BackupResult(BackupOutcome.HEADLESS_SKIPPED, session_id)

        profile_json = serialize_profile(profile, compress=self._settings.compress_profile)
        if not profile_json:
            logger.error(
                f"Could not get and serialize profile for user: {session_id}({username}). "
                "Backup aborted."
            )
            return BackupResult(BackupOutcome.SERIALIZATION_FAILED, session_id)

        try:
            user_backup_dir = self._layout.session_backup_dir(session_id, username)
        except ValueError as e:
            logger.warning(f"Refusing to back up profile for session: {session_id}. {e}")
            return BackupResult(BackupOutcome.INVALID_USERNAME, session_id)

        backup_path = user_backup_dir / backup_file_name(event_name, self._clock())

        try:
            await asyncio.to_thread(atomic_write_text, backup_path, profile_json)
        except OSError as e:
            logger.error(f"Could not write backup {backup_path} for user: {username}: {e}")
            return BackupResult(BackupOutcome.WRITE_FAILED, session_id)

        if self._settings.backup_saved_log:
            logger.info(f"Backed up profile for user: {username} to {backup_path}")

        deleted_count = await self._clean_up(user_backup_dir, username)
        return BackupResult(
            BackupOutcome.SAVED, session_id, path=backup_path, deleted_count=deleted_count
        )

    async def _clean_up(self, user_backup_dir, username: str) -> int:
        max_keep = self._settings.maximum_backup_per_profile
        if max_keep < 0:
            logger.warning(
                f"MaximumBackupPerProfile is set to {max_keep}. Backups will never be "
                "deleted and the folder may grow indefinitely"
            )
            return 0
        if max_keep == 0:
            logger.warning(
                "MaximumBackupPerProfile is set to 0. Every backup is deleted right "
                "after it is written"
            )

        deleted_count = await asyncio.to_thread(enforce_retention, user_backup_dir, max_keep)
        if deleted_count > 0:
            if self._settings.maximum_backup_delete_log:
                logger.info(
                    f"Maximum backups for user: {username} reached. "
                    f"Deleted {deleted_count} old backup files"
                )
        else:
            logger.debug(
                f"No cleanup needed for user: {username}. Current backups are within the limit."
            )
        return deleted_count
