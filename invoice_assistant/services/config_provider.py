from loguru import logger

from ..core.config import Settings
from .storage.settings_store import InMemorySettingsStore
from .storage.settings_store_base import CREDENTIAL_KEY, THEME_KEY, SettingsStoreBase
from .storage.settings_store_sqlite import SQLiteSettingsStore

THEMES = ("light", "dark")


class ConfigProvider:
    """
    Explicit access to the user's credential and theme.

    Orchestrators never read configuration themselves; callers fetch the
    credential here and pass it in.
    """

    def __init__(
        self,
        store: SettingsStoreBase,
        default_credential: str | None = None,
        default_theme: str = "light",
    ):
        self.store = store
        self._default_credential = default_credential or None
        self._default_theme = default_theme

    def get_credential(self) -> str | None:
        return self.store.get(CREDENTIAL_KEY) or self._default_credential

    def has_credential(self) -> bool:
        return bool(self.get_credential())

    def set_credential(self, credential: str) -> None:
        credential = credential.strip()
        if not credential:
            raise ValueError("Credential must not be empty")
        self.store.set(CREDENTIAL_KEY, credential)
        logger.info("API credential updated")

    def clear_credential(self) -> None:
        self.store.delete(CREDENTIAL_KEY)
        self._default_credential = None
        logger.info("API credential cleared")

    def get_theme(self) -> str:
        return self.store.get(THEME_KEY) or self._default_theme

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme '{theme}' (expected one of {', '.join(THEMES)})")
        self.store.set(THEME_KEY, theme)


def create_config_provider(settings: Settings) -> ConfigProvider:
    """Build the provider for the configured storage backend"""
    if settings.settings_backend == "sqlite":
        store: SettingsStoreBase = SQLiteSettingsStore(settings.settings_db_path)
    else:
        store = InMemorySettingsStore()
    return ConfigProvider(
        store,
        default_credential=settings.gemini_api_key,
        default_theme=settings.default_theme,
    )
