"""
In-memory settings store (default backend).
Values live for the lifetime of the process.
"""
from typing import Dict, Optional

from .settings_store_base import SettingsStoreBase


class InMemorySettingsStore(SettingsStoreBase):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> bool:
        return self._values.pop(key, None) is not None
