from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def serialize_profile(profile: dict[str, Any], compress: bool = False) -> str | None:
    """Serialize a profile to JSON text.

    Compressed output has no whitespace; otherwise it is indented by 4 spaces.
    Returns None if the profile cannot be serialized.
    """
    try:
        if compress:
            return json.dumps(profile, ensure_ascii=False, separators=(",", ":"))
        return json.dumps(profile, ensure_ascii=False, indent=4)
    except (TypeError, ValueError):
        return None


def load_snapshot_file(path: Path) -> Any:
    """Read and parse a snapshot file.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the content is not valid JSON or UTF-8
    """
    return json.loads(path.read_text(encoding="utf-8"))
