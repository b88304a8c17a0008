from __future__ import annotations


def validate_session_id(session_id: str | None) -> str:
    """Validate that session_id is a non-empty string and return the stripped value.

    Session ids become path components of backup directories, so path
    separators are rejected as well.
    """
    if session_id is None:
        raise ValueError("session_id is required")
    if not isinstance(session_id, str):
        raise ValueError("session_id must be a non-empty string")
    cleaned = session_id.strip()
    if not cleaned:
        raise ValueError("session_id must be a non-empty string")
    if "/" in cleaned or "\\" in cleaned or cleaned in {".", ".."}:
        raise ValueError("session_id must not contain path separators")
    return cleaned
