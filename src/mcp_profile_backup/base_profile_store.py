"""
Abstract Base Profile Store

This module contains the abstract base class that defines the interface
for the live profile store consumed by the backup and restore components.
"""

from abc import ABC, abstractmethod
from typing import Any

from .storage_types import StorageStats


class ProfileStore(ABC):
    """
    Abstract base class for the live profile store.

    Profiles are keyed by session id. The store keeps an in-memory working
    set and an on-disk representation; the two are managed separately so a
    restore can drop both before replacing an entry and then persist the
    replacement explicitly.

    Implementations are expected to make each call atomic for a single
    profile. No locking is done by callers.
    """

    @abstractmethod
    def get_profile(self, session_id: str) -> dict[str, Any] | None:
        """
        Get the live profile for a session.

        Args:
            session_id: The session identifier

        Returns:
            The full profile object, or None if not found
        """
        pass

    @abstractmethod
    def has_profile(self, session_id: str) -> bool:
        """
        Check if a live profile exists.

        Args:
            session_id: The session identifier

        Returns:
            True if the profile exists, False otherwise
        """
        pass

    @abstractmethod
    def add_profile(self, session_id: str, profile: dict[str, Any]) -> None:
        """
        Add a profile to the in-memory working set.

        Args:
            session_id: The session identifier
            profile: The full profile object
        """
        pass

    @abstractmethod
    def delete_profile(self, session_id: str) -> None:
        """
        Remove a profile from the in-memory working set.

        Args:
            session_id: The session identifier
        """
        pass

    @abstractmethod
    def remove_profile(self, session_id: str) -> None:
        """
        Remove the on-disk representation of a profile.

        Args:
            session_id: The session identifier
        """
        pass

    @abstractmethod
    def save_profile(self, session_id: str) -> None:
        """
        Persist the in-memory profile to its on-disk representation.

        Args:
            session_id: The session identifier

        Raises:
            KeyError: If no in-memory profile exists for session_id
            OSError: If the on-disk write fails
        """
        pass

    @abstractmethod
    def get_profile_ids(self) -> list[str]:
        """
        Get the ids of all live profiles.

        Returns:
            Sorted list of session identifiers
        """
        pass

    @abstractmethod
    def get_storage_stats(self) -> StorageStats:
        """
        Get storage statistics.

        Returns:
            StorageStats object with counts and sizes
        """
        pass

    def close(self) -> None:
        """Release resources held by the store. Nothing to do by default."""
