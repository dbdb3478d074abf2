"""
Configuration management for contentextract using Pydantic.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, ClassVar, List, cast

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from contentextract.security.validation import URLValidationRules

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class FetchConfig(BaseModel):
    """Outbound HTTP settings shared by every extraction strategy."""

    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; HistoryMapBot/1.0)",
        description="User-Agent string for outbound requests.",
    )
    html_accept: str = Field(
        default="text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        description="Accept header sent when fetching articles.",
    )
    feed_accept: str = Field(
        default="application/rss+xml,application/xml,text/xml,*/*;q=0.8",
        description="Accept header sent when fetching feeds.",
    )
    article_timeout: float = Field(default=25.0, description="Article fetch timeout in seconds.")
    feed_timeout: float = Field(default=25.0, description="Feed fetch timeout in seconds.")
    oembed_timeout: float = Field(default=10.0, description="oEmbed metadata fetch timeout in seconds.")
    oembed_endpoint: str = Field(
        default="https://www.youtube.com/oembed",
        description="oEmbed endpoint used for video title/author lookup.",
    )

    @field_validator("article_timeout", "feed_timeout", "oembed_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v


class ExtractionSettings(BaseModel):
    """Limits applied while turning fetched payloads into plain text."""

    max_chars: int = Field(default=48000, description="Maximum content characters before truncation.")
    paragraph_break_ratio: float = Field(
        default=0.8,
        description="Earliest position (as a fraction of max_chars) a paragraph break may be used as the cut point.",
    )
    min_content_chars: int = Field(
        default=200, description="Minimum extracted characters for articles and feeds."
    )
    max_article_bytes: int = Field(default=5 * 1024 * 1024, description="Article payload ceiling in bytes.")
    max_feed_items: int = Field(default=20, description="Number of feed entries included in the content.")
    transcript_languages: List[str] = Field(
        default_factory=lambda: ["en"], description="Caption languages to request, in priority order."
    )

    @field_validator("max_chars", "max_article_bytes", "max_feed_items")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("limits must be positive")
        return v

    @field_validator("min_content_chars")
    @classmethod
    def validate_min_content(cls, v: int) -> int:
        if v < 0:
            raise ValueError("min_content_chars cannot be negative")
        return v

    @field_validator("paragraph_break_ratio")
    @classmethod
    def validate_ratio(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError("paragraph_break_ratio must be in (0.0, 1.0]")
        return v

    @field_validator("transcript_languages")
    @classmethod
    def validate_languages(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("transcript_languages must contain at least one language code")
        return v


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")
    json_logs: bool = Field(default=False, description="Render console logs as JSON.")

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
    project_name: str = "contentextract"
    version: str = "0.1.0"
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    security: URLValidationRules = Field(default_factory=URLValidationRules)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="CONTENTEXTRACT_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        """Build a Config from a YAML file; missing sections keep their defaults."""
        if not path.is_file():
            raise FileNotFoundError(f"No config file at {path}")
        log.debug("Reading config file %s", path)
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping at the top level")
        return cls.model_validate(data)


CONFIG_FILE_NAMES = ("contentextract.yaml", "contentextract.yml")


def find_config_file() -> Path | None:
    """First config file found in the working directory, if any."""
    cwd = Path.cwd()
    return next((cwd / name for name in CONFIG_FILE_NAMES if (cwd / name).exists()), None)


# --- Lazy Configuration Loader ---


class LazyConfig:
    """
    Stand-in for ``Config`` that reads the config file on first attribute
    access. Importing the package never fails on a bad config file; the
    defaults are used instead and the problem is logged.
    """

    _config: ClassVar[Config | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._get(), name)

    @classmethod
    def _get(cls) -> Config:
        if cls._config is None:
            with cls._lock:
                if cls._config is None:
                    cls._config = cls._load()
        return cls._config

    @classmethod
    def reset(cls) -> None:
        """Forget the loaded configuration; the next access reloads it."""
        with cls._lock:
            cls._config = None

    @staticmethod
    def _load() -> Config:
        path = find_config_file()
        if path is not None:
            try:
                config = Config.from_yaml(path)
                log.info("Loaded config from %s", path)
                return config
            except (ValidationError, ValueError, yaml.YAMLError) as e:
                log.error("Ignoring invalid config file %s, using defaults: %s", path, e)

        try:
            return Config()
        except ValidationError as e:
            raise RuntimeError(f"Configuration from environment is invalid: {e}") from e


settings: "Config" = cast("Config", LazyConfig())
