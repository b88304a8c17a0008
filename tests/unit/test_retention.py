"""
Unit tests for the retention policy.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from mcp_profile_backup.retention import enforce_retention, select_for_deletion


NAMES = [
    "2024-05-01_13-02-09_GameStart.json",
    "2024-05-01_13-02-10_GameEnd.json",
    "2024-04-30_08-00-00_Logout.json",
    "2024-05-02_00-00-00_GameStart.json",
    "2023-12-31_23-59-59_GameEnd.json",
]


def populate(directory: Path, names) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_text("{}", encoding="utf-8")


class TestSelectForDeletion:
    """Pure selection of the surplus files."""

    @pytest.mark.parametrize("max_keep", range(0, len(NAMES) + 1))
    def test_keeps_the_largest_names(self, max_keep):
        to_delete = select_for_deletion(NAMES, max_keep)

        assert len(to_delete) == len(NAMES) - max_keep
        remaining = sorted(set(NAMES) - set(to_delete))
        assert remaining == sorted(NAMES)[len(NAMES) - max_keep :]

    def test_returns_oldest_first(self):
        to_delete = select_for_deletion(NAMES, 2)
        assert to_delete == [
            "2023-12-31_23-59-59_GameEnd.json",
            "2024-04-30_08-00-00_Logout.json",
            "2024-05-01_13-02-09_GameStart.json",
        ]

    def test_max_keep_above_count_deletes_nothing(self):
        assert select_for_deletion(NAMES, 10) == []

    def test_negative_max_keep_deletes_nothing(self):
        assert select_for_deletion(NAMES, -1) == []

    def test_does_not_mutate_input(self):
        names = list(NAMES)
        select_for_deletion(names, 1)
        assert names == NAMES


class TestEnforceRetention:
    """Retention against a real directory."""

    def test_deletes_down_to_max_keep(self, tmp_path):
        populate(tmp_path, NAMES)

        deleted = enforce_retention(tmp_path, 3)

        assert deleted == 2
        assert sorted(p.name for p in tmp_path.iterdir()) == sorted(NAMES)[2:]

    def test_zero_deletes_everything(self, tmp_path):
        populate(tmp_path, NAMES)

        assert enforce_retention(tmp_path, 0) == len(NAMES)
        assert list(tmp_path.iterdir()) == []

    def test_ignores_non_snapshot_files(self, tmp_path):
        populate(tmp_path, NAMES[:2])
        (tmp_path / "0000-notes.txt").write_text("keep me")
        (tmp_path / "0000-upper.JSON").write_text("{}")
        (tmp_path / "0000-sub.json").mkdir()

        deleted = enforce_retention(tmp_path, 0)

        assert deleted == 2
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "0000-notes.txt",
            "0000-sub.json",
            "0000-upper.JSON",
        ]

    def test_stops_at_first_failed_deletion(self, tmp_path):
        populate(tmp_path, NAMES)
        original_unlink = Path.unlink
        calls = []

        def failing_unlink(self, *args, **kwargs):
            calls.append(self.name)
            if len(calls) == 2:
                raise PermissionError("denied")
            return original_unlink(self, *args, **kwargs)

        with patch.object(Path, "unlink", failing_unlink):
            deleted = enforce_retention(tmp_path, 1)

        assert deleted == 1
        assert len(calls) == 2  # no further attempts after the failure
        assert len(list(tmp_path.iterdir())) == len(NAMES) - 1

    def test_vanished_file_counts_as_failure(self, tmp_path, caplog):
        populate(tmp_path, NAMES)

        with patch.object(Path, "unlink", side_effect=FileNotFoundError("gone")):
            deleted = enforce_retention(tmp_path, 0)

        assert deleted == 0
        assert any(r.levelname == "ERROR" for r in caplog.records)

    def test_missing_directory_returns_zero(self, tmp_path):
        assert enforce_retention(tmp_path / "missing", 0) == 0
