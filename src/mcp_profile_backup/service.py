"""
Profile Backup Service

Wires the settings, the live profile store, the directory layout, the backup
writer, the restore importer and the event router together, and runs the
startup sequence: create directories, then import staged snapshots.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from .backup_writer import BackupWriter
from .base_profile_store import ProfileStore
from .config import BackupSettings
from .events import EventRoute, EventRouter
from .layout import DirectoryLayout
from .restore_importer import RestoreImporter
from .storage_types import RestoreResult
from .system_utils import log_system_status

logger = logging.getLogger(__name__)


class ProfileBackupService:
    """Owns the backup components for one run of the host."""

    def __init__(
        self,
        settings: BackupSettings,
        store: ProfileStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings
        self.store = store
        self.layout = DirectoryLayout.from_root(settings.directory)
        self.writer = BackupWriter(store, self.layout, settings, clock=clock)
        self.importer = RestoreImporter(store, self.layout, settings)
        self.router = EventRouter(self.writer, settings)
        self.active = False
        self.restore_results: list[RestoreResult] = []

    async def start(self) -> bool:
        """Prepare directories and restore staged profiles.

        Returns True when the service is active. A disabled service, by
        configuration or because its directories cannot be created, logs one
        warning and does nothing else for this run.
        """
        if not self.settings.enabled:
            logger.warning("Profile backup is disabled. Backups will not be made.")
            return False

        try:
            self.layout.ensure()
        except OSError as e:
            logger.error(f"Could not create backup directories under {self.layout.root}: {e}")
            logger.warning("Profile backup is disabled. Backups will not be made.")
            return False

        self.active = True
        logger.info("Profile backup loaded successfully.")
        log_system_status(self.layout.root, self.store.__class__.__name__)

        self.restore_results = await self.importer.restore_all()
        return True

    def get_routes(self) -> list[EventRoute]:
        """Routes to register with the host; empty unless start() succeeded."""
        if not self.active:
            return []
        return self.router.get_routes()

    async def stop(self) -> None:
        """Let in-flight backups run to completion before the host exits."""
        pending = self.router.pending_count
        if pending:
            logger.info(f"Waiting for {pending} pending backup(s) to finish")
        await self.router.wait_idle()
