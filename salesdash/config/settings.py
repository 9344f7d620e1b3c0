"""
Sales Dashboard Service
Centralized Configuration Management

Each subsystem reads its own prefixed environment variables; Settings
aggregates them together with the application and API server options.
"""

from functools import lru_cache
from typing import List, Literal, Optional
from pydantic import Field, field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """Redis connection used by the report store (REDIS_*)"""

    model_config = SettingsConfigDict(env_prefix="REDIS_")

    url: Optional[str] = Field(default=None, description="Full connection URL, wins over host/port/db")
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[SecretStr] = None
    max_connections: int = Field(default=20, ge=1)
    socket_timeout: int = Field(default=5, description="Seconds")

    def get_url(self) -> str:
        if self.url:
            return self.url
        auth = f":{self.password.get_secret_value()}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


class StoreSettings(BaseSettings):
    """Report Store Configuration (STORE_*)"""

    model_config = SettingsConfigDict(env_prefix="STORE_")

    backend: str = Field(default="redis", description="redis or memory")
    report_key: str = Field(default="dashboard_data", description="Key holding the live report")

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        backend = v.lower()
        if backend not in ("redis", "memory"):
            raise ValueError(f"Unknown store backend '{v}', expected redis or memory")
        return backend


class DecoderSettings(BaseSettings):
    """Positional Report Decoder Configuration (DECODER_*)"""

    model_config = SettingsConfigDict(env_prefix="DECODER_")

    schema_version: str = Field(default="pdf-v1", description="Registered decoding schema version")
    min_tokens: int = Field(default=10, ge=0, description="Minimum numeric tokens for a viable decode")
    branch_names: Optional[List[str]] = Field(
        default=None,
        description="Overrides the schema's branch display names, in schema order",
    )
    localized_names: Optional[List[str]] = Field(
        default=None,
        description="Overrides the schema's localized branch names, in schema order",
    )
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, description="Largest accepted document")


class QualitySettings(BaseSettings):
    """Report Validation Configuration (QUALITY_*)"""

    model_config = SettingsConfigDict(env_prefix="QUALITY_")

    enable_validation: bool = Field(default=True, description="Run the validation pass before saving")
    enforce_website_order_balance: bool = Field(
        default=False,
        description="Treat completed + cancelled > total website orders as an error",
    )
    tolerance: float = Field(default=1e-6, description="Absolute tolerance for derived field checks")


class MonitoringSettings(BaseSettings):
    """Logging Configuration (LOG_LEVEL, LOG_FORMAT)"""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    format: Literal["json", "text"] = "json"

    @property
    def log_level(self) -> str:
        return self.level

    @property
    def log_format(self) -> str:
        return self.format


class Settings(BaseSettings):
    """
    Application settings.

    Reads the environment and an optional .env file. Subsystem sections are
    built from their own prefixed variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "sales-dashboard"
    app_env: str = Field(default="development", description="development, staging, production or testing")
    debug: bool = False
    version: str = "1.0.0"

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    redis: RedisSettings = Field(default_factory=RedisSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    decoder: DecoderSettings = Field(default_factory=DecoderSettings)
    quality: QualitySettings = Field(default_factory=QualitySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        env = v.lower()
        if env not in ("development", "staging", "production", "testing"):
            raise ValueError(f"Unknown environment '{v}'")
        return env

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache()
def get_settings() -> Settings:
    """Settings loaded once per process"""
    return Settings()
