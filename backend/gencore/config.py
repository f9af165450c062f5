"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - Every setting has a default: the service starts with no environment at all

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Graph limits live here (not in graph definitions): definitions stay pure and
      callers pass limits through compute extras
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Generation graphs
    # Strict mode logs resolvers that read context keys they did not declare
    graph_strict_dependencies: bool = False
    default_max_resources: int | None = 9

    @field_validator("default_max_resources", mode="before")
    @classmethod
    def empty_means_unlimited(cls, v):
        """DEFAULT_MAX_RESOURCES= (empty) disables the resource limit."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
