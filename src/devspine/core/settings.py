"""Environment-driven settings for devspine.

Values come from ``DEVSPINE_*`` environment variables or a local ``.env``
file; CLI flags override them per invocation.

Examples:
    >>> from devspine.core.settings import get_settings
    >>> get_settings().stop_timeout_seconds
    10
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from devspine.core.errors import ConfigError


class DevspineSettings(BaseSettings):
    """Settings shared by the CLI and the lifecycle client.

    Fields
    ──────
    docker_binary           : Name or path of the docker CLI
    command_timeout_seconds : Upper bound on a single docker subprocess call
    stop_timeout_seconds    : Default grace period for ``container stop``
    max_concurrency         : Bound on in-flight units per batch (None = one per id)
    log_level               : Structlog log level
    json_logs               : Force JSON (True) or console (False) logs; None = auto
    """

    model_config = SettingsConfigDict(
        env_prefix="DEVSPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Runtime ──────────────────────────────────────────────────
    docker_binary: str = "docker"
    command_timeout_seconds: int = Field(default=60, gt=0)
    stop_timeout_seconds: int = Field(default=10, ge=0)
    max_concurrency: int | None = Field(default=None, gt=0)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "WARNING"
    json_logs: bool | None = None

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return value


@lru_cache(maxsize=1)
def get_settings() -> DevspineSettings:
    """Load settings once per process.

    Raises:
        ConfigError: a ``DEVSPINE_*`` value (or ``.env`` entry) is invalid.
    """
    try:
        return DevspineSettings()
    except ValidationError as exc:
        problems = "; ".join(
            f"DEVSPINE_{'.'.join(map(str, err['loc'])).upper()}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigError(f"invalid configuration: {problems}", cause=exc) from exc


__all__ = ["DevspineSettings", "get_settings"]
