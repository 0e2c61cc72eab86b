"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
CacheBackend = Literal["memory", "diskcache"]
JsonProbeKind = Literal["none", "player_config"]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class ProviderConfig(BaseModel):
    """Identity and target site of the provider."""

    id: str = Field(default="a111477", description="Provider tag used in ids.")
    name: str = Field(default="A111477", description="Display name.")
    base_url: str = Field(
        default="https://a.111477.xyz",
        description="Single origin all candidate pages are built on.",
    )
    enabled: bool = Field(default=True, description="Host-side toggle.")
    json_probe: JsonProbeKind = Field(
        default="none",
        description="Player JSON probe: 'none' or 'player_config'.",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v

    @field_validator("id")
    @classmethod
    def _validate_id(cls, v: str) -> str:
        v = v.strip()
        if not v or ":" in v:
            raise ValueError("provider id must be non-empty and contain no ':'")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (provider/http/cache/logging).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow
      strict precedence control (defaults < YAML < ENV < overrides) in load.py.
    """

    app_name: str = Field(default="streamscout", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    provider: ProviderConfig = Field(default_factory=ProviderConfig)

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Per-request timeout in seconds.",
    )
    http_max_redirects: int = Field(
        default=5,
        validation_alias=AliasChoices(
            "http_max_redirects",
            AliasPath("http", "max_redirects"),
        ),
        description="Maximum redirects followed per request.",
    )
    http_user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="Browser-like User-Agent for outgoing requests.",
    )

    # Cache (YAML section: cache.*)
    cache_backend: CacheBackend = Field(
        default="memory",
        validation_alias=AliasChoices(
            "cache_backend",
            AliasPath("cache", "backend"),
        ),
        description="Cache backend: 'memory' or 'diskcache'.",
    )
    cache_ttl_seconds: int = Field(
        default=300,
        validation_alias=AliasChoices(
            "cache_ttl_seconds",
            AliasPath("cache", "ttl_seconds"),
        ),
        description="TTL of cached page bodies in seconds.",
    )
    cache_check_period_seconds: int = Field(
        default=120,
        validation_alias=AliasChoices(
            "cache_check_period_seconds",
            AliasPath("cache", "check_period_seconds"),
        ),
        description="Interval between expiry sweeps (memory backend).",
    )
    cache_dir: Path = Field(
        default=Path("./.cache/streamscout"),
        validation_alias=AliasChoices(
            "cache_dir",
            AliasPath("cache", "dir"),
        ),
        description="Diskcache directory (diskcache backend).",
    )
    cache_max_concurrent: int = Field(
        default=10,
        validation_alias=AliasChoices(
            "cache_max_concurrent",
            AliasPath("cache", "max_concurrent"),
        ),
        description="Max parallel disk ops (diskcache backend).",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="WARNING",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )
    debug: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "debug",
            AliasPath("logging", "debug"),
        ),
        description="Verbose provider logging (forces DEBUG level).",
    )

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("http_max_redirects")
    @classmethod
    def _validate_max_redirects(cls, v: int) -> int:
        if v < 0:
            raise ValueError("http_max_redirects must be >= 0")
        return v

    @field_validator("cache_ttl_seconds", "cache_check_period_seconds")
    @classmethod
    def _validate_cache_seconds(cls, v: int) -> int:
        if v < 0:
            raise ValueError("cache durations must be >= 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    @property
    def effective_log_level(self) -> LogLevel:
        return "DEBUG" if self.debug else self.log_level

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "provider": self.provider.model_dump(),
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "max_redirects": self.http_max_redirects,
                "user_agent": self.http_user_agent,
            },
            "cache": {
                "backend": self.cache_backend,
                "ttl_seconds": self.cache_ttl_seconds,
                "check_period_seconds": self.cache_check_period_seconds,
                "dir": str(self.cache_dir),
                "max_concurrent": self.cache_max_concurrent,
            },
            "logging": {
                "level": self.log_level,
                "format": self.log_format,
                "debug": self.debug,
            },
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Supported env var examples (flat, explicit):
    - STREAMSCOUT_BASE_URL
    - STREAMSCOUT_HTTP_TIMEOUT_SECONDS
    - STREAMSCOUT_CACHE_BACKEND
    - STREAMSCOUT_LOG_LEVEL
    - STREAMSCOUT_DEBUG (or PROVIDER_DEBUG)
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMSCOUT_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    base_url: Optional[str] = None
    json_probe: Optional[JsonProbeKind] = None

    http_timeout_seconds: Optional[float] = None
    http_max_redirects: Optional[int] = None
    http_user_agent: Optional[str] = None

    cache_backend: Optional[CacheBackend] = None
    cache_ttl_seconds: Optional[int] = None
    cache_dir: Optional[Path] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None
    debug: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices("streamscout_debug", "provider_debug"),
    )

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
