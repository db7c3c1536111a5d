"""Scriptguard configuration via pydantic-settings."""

import warnings
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_DEFAULTS = {
    "secret_key": "insecure-dev-key-change-me",
    "api_key": "insecure-admin-key-change-me",
}


class ScriptguardSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SCRIPTGUARD_")

    environment: str = "development"
    secret_key: str = "insecure-dev-key-change-me"

    # Database
    db_url: str = "sqlite+aiosqlite:///./data/scriptguard.db"

    # API
    api_title: str = "Scriptguard"
    api_version: str = "0.1.0"
    api_key: str = "insecure-admin-key-change-me"
    host: str = "0.0.0.0"
    port: int = 8080
    api_prefix: str = ""
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]
    log_level: str = "INFO"

    # Admin sessions
    session_max_age: int = 8 * 3600  # seconds

    # Script delivery
    script_brand: str = "scriptguard"
    key_header: str = "user-scriptguard-key"
    # Empty means "serve the oldest project"
    active_project_id: str = ""
    bind_max_attempts: int = 3

    # Asset source
    github_api_url: str = "https://api.github.com"
    github_token: str = ""
    fetch_timeout: float = 10.0  # seconds

    def validate_for_production(self) -> None:
        """Raise if insecure defaults are used in non-development environments."""
        insecure_fields = [
            field
            for field, default in _INSECURE_DEFAULTS.items()
            if getattr(self, field) == default
        ]

        if self.environment != "development" and insecure_fields:
            env_vars = ", ".join(f"SCRIPTGUARD_{f.upper()}" for f in insecure_fields)
            raise RuntimeError(
                f"Insecure default values detected in '{self.environment}' environment. "
                f"Set these environment variables to secure values: {env_vars}. "
                "Generate secrets with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
            )

        if insecure_fields:
            warnings.warn(
                "Using insecure default keys, set SCRIPTGUARD_SECRET_KEY and "
                "SCRIPTGUARD_API_KEY for production",
                UserWarning,
                stacklevel=2,
            )


@lru_cache
def get_settings() -> ScriptguardSettings:
    settings = ScriptguardSettings()
    settings.validate_for_production()
    return settings
