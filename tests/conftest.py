"""Shared pytest fixtures for profile backup tests."""

import pytest

from mcp_profile_backup.config import AutoBackupEvent, BackupSettings
from mcp_profile_backup.in_memory_profile_store import InMemoryProfileStore
from mcp_profile_backup.layout import ensure_layout

from tests.utils.profile_fixtures import StepClock, make_profile, make_session_id


@pytest.fixture
def session_id():
    return make_session_id(1)


@pytest.fixture
def profile(session_id):
    return make_profile(session_id, "alice")


@pytest.fixture
def store(session_id, profile):
    """An in-memory store holding one live profile for "alice"."""
    return InMemoryProfileStore({session_id: profile})


@pytest.fixture
def layout(tmp_path):
    """The backups/restore-staging/restore-archive layout under a temp root."""
    return ensure_layout(tmp_path / "AutoProfileBackups")


@pytest.fixture
def settings(layout):
    """Settings pointing at the temp layout, with all delete logs on."""
    return BackupSettings(
        directory=str(layout.root),
        maximum_backup_delete_log=True,
        maximum_restored_delete_log=True,
        auto_backup_events=(
            AutoBackupEvent(name="GameStart", route="/client/match/local/start"),
            AutoBackupEvent(name="GameEnd", route="/client/match/local/end"),
        ),
    )


@pytest.fixture
def clock():
    return StepClock()
