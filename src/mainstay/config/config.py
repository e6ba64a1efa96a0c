"""
Configuration management for Mainstay using Pydantic.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, ClassVar, Literal, Optional, cast

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mainstay.extractor.models import ExtractionConfig

# --- Setup Logging ---
log = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "MainstayBot/0.1 (+https://github.com/mainstay-extract/mainstay)"
LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"})

# --- Nested Configuration Models ---


class ExtractionSettings(BaseModel):
    """Defaults for the per-call extraction options."""

    include_comments: bool = Field(default=False, description="Keep comment nodes as [Comment] markers.")
    include_tables: bool = Field(default=True, description="Keep <table> elements.")
    include_links: bool = Field(default=True, description="Append link targets after anchor text.")
    include_images: bool = Field(default=False, description="Emit [Image: ...] markers.")
    min_extracted_size: int = Field(default=250, ge=0, description="Minimum accepted content length.")
    extract_metadata: bool = Field(default=False, description="Attach document metadata to results.")
    favor_precision: bool = Field(default=False, description="Use the stricter paragraph-only text variant.")
    emission_order: Literal["document", "block"] = Field(
        default="document", description="Structural engine output order."
    )
    readability_prepare: bool = Field(default=True, description="Drop unlikely candidates before scoring.")
    readability_min_words: Optional[int] = Field(
        default=None, ge=1, description="Qualify readability paragraphs by word count instead of length."
    )

    def to_extraction_config(self, **overrides: Any) -> ExtractionConfig:
        """Build the frozen per-call value, applying ``overrides`` that are not None."""
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        return ExtractionConfig(**values)


class HttpConfig(BaseModel):
    """Configuration for the fetch client."""

    timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds.")
    max_retries: int = Field(default=3, ge=0, description="Maximum retry attempts for retryable failures.")
    backoff_base: float = Field(default=0.5, ge=0, description="Base delay for exponential backoff.")
    backoff_max: float = Field(default=10.0, ge=0, description="Upper bound for a single backoff delay.")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent string for HTTP requests.")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates.")


class MonitoringConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(default="WARNING", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs to the console.",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "Mainstay"
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    http: HttpConfig = Field(default_factory=HttpConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="MAINSTAY_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls()
        return cls(**yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for name in ("mainstay.yaml", "mainstay.yml"):
        path = current_dir / name
        if path.is_file():
            return path
    return None


# --- Lazy Configuration Loader ---


class LazyConfig:
    """
    A proxy for the Config object that delays its loading and validation
    until an attribute is first accessed. This prevents configuration errors
    from crashing the application on import.
    """

    _config: ClassVar[Config | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __getattr__(self, name: str) -> Any:
        if self.__class__._config is None:
            with self.__class__._lock:
                if self.__class__._config is None:
                    self.__class__._config = self._load_config_with_fallback()
        return getattr(self.__class__._config, name)

    @classmethod
    def reset(cls) -> None:
        """Forget the loaded configuration; the next access reloads it."""
        with cls._lock:
            cls._config = None

    def _load_config_with_fallback(self) -> Config:
        """Load configuration from file or fall back to defaults."""
        config_path = find_config_file()
        if config_path:
            try:
                log.info("Lazy loading configuration from: %s", config_path)
                return Config.from_yaml(config_path)
            except (ValidationError, OSError, yaml.YAMLError) as e:
                log.error(
                    "Failed to load or validate configuration from '%s': %s. "
                    "Falling back to default settings. Please check your config file.",
                    config_path,
                    e,
                    exc_info=log.getEffectiveLevel() <= logging.DEBUG,
                )
        else:
            log.info("No config file found. Using default settings for lazy load.")

        try:
            return Config()
        except ValidationError as e:
            log.critical("FATAL: Default configuration is invalid: %s", e, exc_info=True)
            raise RuntimeError(f"Default configuration is invalid, cannot start: {e}") from e


# --- Global Settings Instance ---
settings: "Config" = cast("Config", LazyConfig())
