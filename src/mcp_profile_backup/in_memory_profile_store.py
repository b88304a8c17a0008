"""
In-Memory Profile Store Implementation

This module provides an in-memory implementation of the ProfileStore interface.
The "on-disk" representation is a second dictionary holding the last persisted
copy of each profile, which keeps durability observable without a filesystem.
"""

from __future__ import annotations

import json
from typing import Any

from .base_profile_store import ProfileStore
from .storage_types import StorageStats


class InMemoryProfileStore(ProfileStore):
    """
    In-memory implementation of ProfileStore.

    Live profiles: {session_id: profile}
    Persisted profiles: {session_id: JSON text}
    """

    def __init__(self, profiles: dict[str, dict[str, Any]] | None = None) -> None:
        """Initialize the store, optionally with pre-persisted profiles."""
        self._profiles: dict[str, dict[str, Any]] = {}
        self._persisted: dict[str, str] = {}
        for session_id, profile in (profiles or {}).items():
            self._profiles[session_id] = profile
            self._persisted[session_id] = json.dumps(profile)

    def get_profile(self, session_id: str) -> dict[str, Any] | None:
        return self._profiles.get(session_id)

    def has_profile(self, session_id: str) -> bool:
        return session_id in self._profiles

    def add_profile(self, session_id: str, profile: dict[str, Any]) -> None:
        self._profiles[session_id] = profile

    def delete_profile(self, session_id: str) -> None:
        self._profiles.pop(session_id, None)

    def remove_profile(self, session_id: str) -> None:
        self._persisted.pop(session_id, None)

    def save_profile(self, session_id: str) -> None:
        profile = self._profiles[session_id]
        self._persisted[session_id] = json.dumps(profile)

    def get_persisted_profile(self, session_id: str) -> dict[str, Any] | None:
        """Return a copy of the last persisted profile, or None."""
        text = self._persisted.get(session_id)
        if text is None:
            return None
        return json.loads(text)

    def get_profile_ids(self) -> list[str]:
        return sorted(self._profiles)

    def get_storage_stats(self) -> StorageStats:
        return StorageStats(
            total_profiles=len(self._profiles),
            persisted_profiles=len(self._persisted),
            persisted_size_bytes=sum(len(t.encode("utf-8")) for t in self._persisted.values()),
            disk_usage_percent=0.0,  # Not applicable in memory
        )
