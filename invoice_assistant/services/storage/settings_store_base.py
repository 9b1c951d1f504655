"""
Abstract base class for user preference storage.

Holds the two settings the assistant remembers between requests: the
Gemini API credential and the UI theme. Both are plain key/value strings
that are either present or absent.
"""

from abc import ABC, abstractmethod
from typing import Optional

CREDENTIAL_KEY = "gemini_api_key"
THEME_KEY = "theme"


class SettingsStoreBase(ABC):
    """
    Abstract key/value settings store.

    Implementations can use:
    - In-memory storage (for testing/demo)
    - SQLite (for single-instance deployments)
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Get a stored value.

        Args:
            key: Setting name

        Returns:
            The stored string, or None if the setting is absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous one.

        Args:
            key: Setting name
            value: Setting value
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a setting.

        Returns:
            True if the setting existed, False otherwise
        """
        pass
