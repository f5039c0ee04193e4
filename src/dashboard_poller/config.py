"""Application configuration loading.

Config is split into sections (polling, log, metrics). AppConfig composes
them.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
)

_FLAT_KEYS = {
    "polling": [
        "POLL_BASE_INTERVAL_MS",
        "POLL_MAX_BACKOFF_MULTIPLIER",
        "POLL_VISIBILITY_HANDLING",
    ],
    "log": ["LOG_LEVEL", "LOG_FORMAT"],
    "metrics": ["METRICS_ENABLED"],
}


def _is_flat_dict(obj: Any) -> bool:
    if not isinstance(obj, dict):
        return False
    # Flat: has env-style keys and no nested section
    flat_keys = {key for keys in _FLAT_KEYS.values() for key in keys}
    return bool(flat_keys & set(obj.keys())) or obj == {}


def _flat_to_nested(flat: dict[str, Any]) -> dict[str, dict[str, Any]]:
    return {
        section: {k: flat[k] for k in keys if k in flat}
        for section, keys in _FLAT_KEYS.items()
    }


# --- Section configs (each reads from env via BaseSettings) ---


class PollingConfig(BaseSettings):
    model_config = _ENV

    base_interval_ms: int = Field(default=60000, alias="POLL_BASE_INTERVAL_MS")
    max_backoff_multiplier: int = Field(
        default=8, alias="POLL_MAX_BACKOFF_MULTIPLIER"
    )
    visibility_handling: bool = Field(
        default=True, alias="POLL_VISIBILITY_HANDLING"
    )

    @field_validator("base_interval_ms")
    @classmethod
    def validate_base_interval(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("POLL_BASE_INTERVAL_MS must be positive.")
        return v

    @field_validator("max_backoff_multiplier")
    @classmethod
    def validate_max_backoff_multiplier(cls, v: int) -> int:
        if v <= 0 or v & (v - 1):
            raise ValueError(
                "POLL_MAX_BACKOFF_MULTIPLIER must be a power of two."
            )
        return v


class LogConfig(BaseSettings):
    model_config = _ENV

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="text", alias="LOG_FORMAT")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("log_format")
    @classmethod
    def normalize_log_format(cls, v: str) -> str:
        value = v.strip().lower()
        if value not in {"text", "json"}:
            raise ValueError("LOG_FORMAT must be 'text' or 'json'.")
        return value


class MetricsConfig(BaseSettings):
    model_config = _ENV

    metrics_enabled: bool = Field(default=True, alias="METRICS_ENABLED")


# --- Composite ---


class AppConfig(BaseModel):
    """Application configuration."""

    model_config = {"extra": "forbid"}

    polling: PollingConfig
    log: LogConfig
    metrics: MetricsConfig

    @model_validator(mode="before")
    @classmethod
    def _handle_flat_dict(cls, data: Any) -> Any:
        if not _is_flat_dict(data):
            return data
        nested = _flat_to_nested(data if isinstance(data, dict) else {})
        return {
            "polling": PollingConfig(**nested["polling"]),
            "log": LogConfig(**nested["log"]),
            "metrics": MetricsConfig(**nested["metrics"]),
        }

    @property
    def log_level(self) -> str:
        return self.log.log_level


def load_config() -> AppConfig:
    """Load config from env (.env)."""
    return AppConfig.model_validate({})
