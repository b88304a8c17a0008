from __future__ import annotations

from datetime import datetime

BACKUP_DATE_FORMAT = "%Y-%m-%d_%H-%M-%S"
SNAPSHOT_EXTENSION = ".json"


def generate_backup_date(when: datetime | None = None) -> str:
    """Format a timestamp as YYYY-MM-DD_HH-mm-ss in local time.

    Fixed width and zero-padded, so names sort by creation time.
    """
    if when is None:
        when = datetime.now()
    elif when.tzinfo is not None:
        when = when.astimezone()
    return when.strftime(BACKUP_DATE_FORMAT)


def backup_file_name(event_name: str, when: datetime | None = None) -> str:
    """Return the backup file name for an event, e.g. 2024-05-01_13-02-09_Raid.json.

    The event name is used verbatim. Two backups of the same event within one
    second get the same name and the later one overwrites the earlier.
    """
    return f"{generate_backup_date(when)}_{event_name}{SNAPSHOT_EXTENSION}"
