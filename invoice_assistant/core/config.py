from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = Field("invoice-assistant", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Gemini (generateContent REST endpoint)
    gemini_api_key: str | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_base_url: str = Field("https://generativelanguage.googleapis.com/v1beta", alias="GEMINI_BASE_URL")
    gemini_model: str = Field("gemini-2.0-flash", alias="GEMINI_MODEL")
    gemini_timeout_seconds: float = Field(120.0, alias="GEMINI_TIMEOUT_SECONDS")

    # User preferences (credential + theme)
    default_theme: Literal["light", "dark"] = Field("light", alias="DEFAULT_THEME")
    settings_backend: Literal["memory", "sqlite"] = Field("memory", alias="SETTINGS_BACKEND")
    settings_db_path: str = Field("invoice_assistant_settings.db", alias="SETTINGS_DB_PATH")

    # CORS allowed origins (comma-separated list for production deployment)
    cors_origins: str = Field("http://localhost:3000,http://127.0.0.1:3000", alias="CORS_ORIGINS")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "populate_by_name": True}

settings = Settings()
