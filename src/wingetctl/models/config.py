"""Configuration data models for wingetctl."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_PROBE_TIMEOUT = 5.0


class WingetConfig(BaseModel):
    """How the winget executable is located and waited on."""

    # Empty means: per-user WindowsApps install, then PATH lookup
    executable: str | None = None
    # Seconds; read queries only. install/update/uninstall are never timed out.
    query_timeout: float | None = 300.0
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT

    @field_validator("executable", mode="before")
    @classmethod
    def blank_executable_is_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("query_timeout", mode="before")
    @classmethod
    def non_positive_timeout_is_none(cls, v: float | str | None) -> float | None:
        if v is None:
            return None
        value = float(v)
        return value if value > 0 else None

    @field_validator("probe_timeout", mode="before")
    @classmethod
    def non_positive_probe_timeout_is_default(cls, v: float | str) -> float:
        value = float(v)
        return value if value > 0 else DEFAULT_PROBE_TIMEOUT


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["INFO", "DEBUG", "TRACE"] = "INFO"
    format: Literal["json", "console"] = "json"


class ClassifierConfig(BaseModel):
    """Extra output phrases that count as success, keyed by operation name.

    Operation names: install, update, uninstall, source_add, source_remove,
    source_update, source_reset.
    """

    extra_success_phrases: dict[str, list[str]] = Field(default_factory=dict)


class AppConfig(BaseModel):
    """Root configuration."""

    winget: WingetConfig = Field(default_factory=WingetConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
