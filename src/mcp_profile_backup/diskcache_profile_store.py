"""
DiskCache-based Profile Store Implementation

A profile store that keeps the live profiles in memory and their durable
representation in a diskcache.Cache, one JSON text entry per session id.

Key properties:
- Persisted profiles are loaded into memory on construction
- save_profile writes synchronously; the write is durable once it returns
- delete_profile and remove_profile act on memory and disk separately
- Context manager support for proper cleanup
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import diskcache

from .base_profile_store import ProfileStore
from .storage_types import StorageStats

logger = logging.getLogger(__name__)


class DiskCacheProfileStore(ProfileStore):
    """
    Filesystem-backed ProfileStore using the diskcache library.
    """

    def __init__(self, cache_dir: str = "/tmp/mcp_profiles") -> None:
        """
        Initialize DiskCacheProfileStore.

        Args:
            cache_dir: Directory for the persisted profiles
        """
        self._cache_dir = Path(cache_dir)
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        self._cache = diskcache.Cache(directory=str(self._cache_dir))
        self._profiles: dict[str, dict[str, Any]] = {}
        self._load_persisted_profiles()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - automatic cleanup."""
        self.close()

    def close(self) -> None:
        """Close the cache and cleanup resources."""
        if hasattr(self, "_cache"):
            self._cache.close()

    def _get_profile_key(self, session_id: str) -> str:
        """Get cache key for a persisted profile."""
        return f"profile:{session_id}"

    def _load_persisted_profiles(self) -> None:
        """Load every persisted profile into the in-memory working set."""
        for key in list(self._cache):
            if not isinstance(key, str) or not key.startswith("profile:"):
                continue
            session_id = key[len("profile:") :]
            try:
                self._profiles[session_id] = json.loads(self._cache[key])
            except (KeyError, ValueError) as e:
                # Leave the entry on disk; it is reported and skipped
                logger.error(f"Could not load persisted profile {session_id}: {e}")

    # ProfileStore interface implementation
    def get_profile(self, session_id: str) -> dict[str, Any] | None:
        return self._profiles.get(session_id)

    def has_profile(self, session_id: str) -> bool:
        return session_id in self._profiles

    def add_profile(self, session_id: str, profile: dict[str, Any]) -> None:
        self._profiles[session_id] = profile

    def delete_profile(self, session_id: str) -> None:
        self._profiles.pop(session_id, None)

    def remove_profile(self, session_id: str) -> None:
        self._cache.delete(self._get_profile_key(session_id))

    def save_profile(self, session_id: str) -> None:
        profile = self._profiles[session_id]
        # diskcache commits each set before returning
        self._cache.set(self._get_profile_key(session_id), json.dumps(profile))

    def is_persisted(self, session_id: str) -> bool:
        """Check if a profile has an on-disk representation."""
        return self._get_profile_key(session_id) in self._cache

    def get_profile_ids(self) -> list[str]:
        return sorted(self._profiles)

    def get_storage_stats(self) -> StorageStats:
        persisted_profiles = 0
        persisted_size_bytes = 0
        for key in self._cache:
            if isinstance(key, str) and key.startswith("profile:"):
                persisted_profiles += 1
                text = self._cache.get(key, default="")
                persisted_size_bytes += len(text.encode("utf-8"))

        return StorageStats(
            total_profiles=len(self._profiles),
            persisted_profiles=persisted_profiles,
            persisted_size_bytes=persisted_size_bytes,
            disk_usage_percent=self._get_disk_usage_percent(),
        )

    def _get_disk_usage_percent(self) -> float:
        """Get current disk usage percentage."""
        try:
            import psutil

            disk_usage = psutil.disk_usage(str(self._cache_dir))
            return float((disk_usage.used / disk_usage.total) * 100)
        except Exception:
            return 0.0
