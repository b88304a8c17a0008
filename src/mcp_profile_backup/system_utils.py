import logging
import sys
from pathlib import Path

import psutil

logger = logging.getLogger(__name__)


def log_system_status(backup_root: str | Path, store_name: str) -> None:
    """Log disk usage of the backup root and the size of its snapshot tree."""
    try:
        du = psutil.disk_usage(str(backup_root))
        backup_files = 0
        backup_bytes = 0
        for path in Path(backup_root).rglob("*.json"):
            try:
                backup_bytes += path.stat().st_size
                backup_files += 1
            except OSError:
                continue

        msg = (
            f"ProfileStore={store_name} | Disk used={du.percent:.1f}% "
            f"({du.used // (1024**3)}GB/{du.total // (1024**3)}GB) | "
            f"Snapshot files={backup_files} ({backup_bytes // 1024}KB)"
        )
        logger.info(msg)
        print(f"[ProfileBackup] {msg}", file=sys.stderr, flush=True)
    except Exception as exc:  # pragma: no cover
        logger.debug(f"Failed to log system status: {exc}")
