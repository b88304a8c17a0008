"""
Profile Info

This module contains the ProfileInfo class describing the identity block of a
profile snapshot, plus the predicates used to validate and classify it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

# Reserved username prefix of automated (headless client) profiles
HEADLESS_PREFIX = "headless_"

_PROFILE_ID_RE = re.compile(r"[0-9a-fA-F]{24}")


@dataclass(frozen=True)
class ProfileInfo:
    """Identity block (``info``) of a profile snapshot."""

    profile_id: str
    username: str


def is_valid_profile_id(value: Any) -> bool:
    """Return True when value is a 24-character hexadecimal object id."""
    return isinstance(value, str) and _PROFILE_ID_RE.fullmatch(value) is not None


def is_headless_username(username: str) -> bool:
    """Return True for usernames owned by automated headless clients."""
    return username.startswith(HEADLESS_PREFIX)


def get_username(profile: dict[str, Any] | None) -> str:
    """Return the username of a live profile, or "" when it has none."""
    if not isinstance(profile, dict):
        return ""
    info = profile.get("info")
    if not isinstance(info, dict):
        return ""
    username = info.get("username")
    return username if isinstance(username, str) else ""


def parse_profile_info(snapshot: Any) -> ProfileInfo | None:
    """Parse the identity block of a snapshot.

    Returns None when the snapshot is not an object, has no ``info`` object,
    or its ``info.id`` is missing or not a well-formed profile id.
    """
    if not isinstance(snapshot, dict):
        return None
    info = snapshot.get("info")
    if not isinstance(info, dict):
        return None
    profile_id = info.get("id")
    if not is_valid_profile_id(profile_id):
        return None
    username = info.get("username")
    return ProfileInfo(
        profile_id=profile_id,
        username=username if isinstance(username, str) else "",
    )
