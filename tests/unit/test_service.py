"""
Unit tests for ProfileBackupService startup.
"""

import asyncio
import logging
from unittest.mock import patch

from mcp_profile_backup.in_memory_profile_store import InMemoryProfileStore
from mcp_profile_backup.service import ProfileBackupService

from tests.utils.profile_fixtures import make_profile, make_session_id, write_snapshot


def warnings(caplog):
    return [r for r in caplog.records if r.levelno == logging.WARNING]


class TestProfileBackupService:
    def test_start_creates_layout_and_restores(self, tmp_path, settings):
        settings = settings.model_copy(update={"directory": str(tmp_path / "fresh")})
        store = InMemoryProfileStore()
        service = ProfileBackupService(settings, store)
        service.layout.restore_staging.mkdir(parents=True)
        profile_id = make_session_id(9)
        write_snapshot(service.layout.restore_staging, "x.json", make_profile(profile_id, "x"))

        with patch("mcp_profile_backup.service.log_system_status") as mock_status:
            assert asyncio.run(service.start()) is True

        mock_status.assert_called_once()
        assert service.active
        assert service.layout.backups.is_dir()
        assert service.layout.restore_archive.is_dir()
        assert store.has_profile(profile_id)
        assert len(service.restore_results) == 1
        assert len(service.get_routes()) == 2

    def test_disabled_does_nothing(self, tmp_path, settings, caplog):
        root = tmp_path / "disabled"
        settings = settings.model_copy(update={"enabled": False, "directory": str(root)})
        service = ProfileBackupService(settings, InMemoryProfileStore())

        with patch.object(service.importer, "restore_all") as mock_restore:
            assert asyncio.run(service.start()) is False

        mock_restore.assert_not_called()
        assert not root.exists()
        assert service.get_routes() == []
        assert len(warnings(caplog)) == 1

    def test_layout_failure_disables_service(self, settings, caplog):
        service = ProfileBackupService(settings, InMemoryProfileStore())

        with (
            patch.object(service.layout.__class__, "ensure", side_effect=PermissionError("denied")),
            patch.object(service.importer, "restore_all") as mock_restore,
        ):
            assert asyncio.run(service.start()) is False

        mock_restore.assert_not_called()
        assert service.get_routes() == []
        assert len(warnings(caplog)) == 1
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_routes_empty_before_start(self, settings):
        service = ProfileBackupService(settings, InMemoryProfileStore())
        assert service.get_routes() == []

    def test_stop_waits_for_pending_backups(self, settings, store, session_id, caplog):
        service = ProfileBackupService(settings, store)
        finished = []

        async def slow_backup(event_name, session_id):
            await asyncio.sleep(0.01)
            finished.append((event_name, session_id))

        async def scenario():
            with patch.object(service.writer, "backup", slow_backup):
                service.router.on_event("GameEnd", session_id, None)
                with caplog.at_level(logging.INFO):
                    await service.stop()

        asyncio.run(scenario())

        assert finished == [("GameEnd", session_id)]
        assert service.router.pending_count == 0
        assert any("1 pending backup" in r.getMessage() for r in caplog.records)
