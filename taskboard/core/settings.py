"""Application settings and lazy settings loaders."""

from __future__ import annotations

from functools import lru_cache

from pydantic import AnyUrl, TypeAdapter, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "http://localhost:3000"

_URL = TypeAdapter(AnyUrl)

# Load `.env` if present; always allow `env.example` for local defaults.
_ENV_CONFIG = SettingsConfigDict(
    env_file=(".env", "env.example"),
    env_file_encoding="utf-8",
    extra="ignore",
)


class Settings(BaseSettings):
    """Server runtime configuration."""

    model_config = _ENV_CONFIG

    MONGODB_URL: str
    MONGODB_DB: str = "taskboard"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # Optional API key for /v1 routes
    API_KEY: str | None = None
    API_KEY_HEADER: str = "X-API-Key"


class ClientSettings(BaseSettings):
    """Client-side configuration: where the task API lives.

    `VITE_API_URL` falls back to the local dev server; a value that is set
    but is not an absolute URL fails validation at load time.
    """

    model_config = _ENV_CONFIG

    VITE_API_URL: str = DEFAULT_API_URL

    @field_validator("VITE_API_URL")
    @classmethod
    def _check_url(cls, value: str) -> str:
        value = value.strip()
        try:
            _URL.validate_python(value)
        except ValidationError as e:
            raise ValueError(f"VITE_API_URL must be a valid URL, got {value!r}") from e
        # Keep the caller's spelling; AnyUrl would append a trailing slash.
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance (lazy-loaded)."""
    # Lazy-load to avoid import-time crashes in tooling/tests when env isn't set yet.
    return Settings()


@lru_cache(maxsize=1)
def get_client_settings() -> ClientSettings:
    """Return cached client settings; raises `pydantic.ValidationError` on a malformed URL."""
    return ClientSettings()
