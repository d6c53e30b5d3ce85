"""
Settings models for fetching, scoring and logging, loadable from env vars or YAML.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional, cast

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class FetchConfig(BaseModel):
    """HTTP fetch configuration shared by every request on a client."""

    timeout: float = Field(default=30.0, gt=0, description="Total request timeout in seconds.")
    connect_timeout: float = Field(default=10.0, gt=0, description="Connection timeout in seconds.")
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; CruxBot/1.0; +https://github.com/crux-extract/crux)",
        description="User-Agent string for HTTP requests.",
    )
    max_retries: int = Field(default=2, ge=0, description="Retries on 429/5xx responses and network errors.")
    backoff_base: float = Field(default=0.5, ge=0, description="First retry delay in seconds; doubles per attempt.")
    max_connections: int = Field(default=100, ge=1, description="Size of the pooled connection limit.")
    max_concurrency_per_domain: int = Field(default=4, ge=1, description="Concurrent requests per host.")
    accepted_content_types: List[str] = Field(
        default=["text/html", "application/xhtml+xml"],
        description="Content types treated as HTML documents.",
    )
    max_body_bytes: int = Field(default=10 * 1024 * 1024, ge=1, description="Largest body read before failing.")


class ScoringSettings(BaseModel):
    """Heuristic constants for main-content scoring."""

    tag_weights: Dict[str, int] = Field(
        default_factory=lambda: {
            "article": 25,
            "main": 20,
            "p": 10,
            "section": 8,
            "div": 5,
            "pre": 3,
            "td": 3,
            "blockquote": 3,
            "body": 0,
            "address": -3,
            "ol": -3,
            "ul": -3,
            "li": -3,
            "dl": -3,
            "dd": -3,
            "dt": -3,
            "table": -3,
            "th": -5,
            "h1": -5,
            "h2": -5,
            "h3": -5,
            "h4": -5,
            "h5": -5,
            "h6": -5,
        },
        description="Base weight per tag name; unlisted block tags get default_tag_weight.",
    )
    default_tag_weight: int = 0
    class_weight: int = Field(default=25, ge=0, description="Bonus/penalty for positive/negative class or id.")
    length_divisor: float = Field(default=25.0, gt=0, description="Characters of own text per weight point.")
    length_cap: float = Field(default=60.0, ge=0)
    punctuation_weight: float = Field(default=1.0, ge=0, description="Weight per punctuation mark in own text.")
    punctuation_cap: float = Field(default=40.0, ge=0)
    min_own_text_length: int = Field(default=25, ge=0, description="Own text shorter than this scores no prose.")
    link_density_threshold: float = Field(default=0.33, ge=0.0, le=1.0)
    link_density_penalty: float = Field(default=50.0, ge=0, description="Penalty scaled by link density.")
    parent_fraction: float = Field(default=0.5, gt=0.0, lt=1.0, description="Share of a weight passed to parent.")
    min_candidate_text_length: int = Field(default=25, ge=0, description="Candidates need this much text.")
    min_weight: int = Field(default=20, description="Best match must reach this weight.")
    early_exit_weight: int = Field(default=200, description="Ancestors of a candidate past this are not scored.")


class PostprocessSettings(BaseModel):
    """Cleanup applied to the selected article node."""

    min_paragraph_length: int = Field(default=20, ge=0, description="Shorter text blocks are dropped.")
    allowed_attributes: List[str] = Field(
        default=["href", "src", "srcset", "alt", "title", "datetime", "colspan", "rowspan", "allowfullscreen"]
    )
    unwrap_tags: List[str] = Field(default=["span", "font", "center"])
    remove_tags: List[str] = Field(
        default=["form", "button", "input", "select", "textarea", "object", "embed", "canvas"]
    )
    video_iframe_hosts: str = Field(
        default=r"(^|\.)(youtube\.com|youtube-nocookie\.com|youtu\.be|vimeo\.com|dailymotion\.com)$",
        description="Regex for iframe hosts kept in the article.",
    )


class ExtractionSettings(BaseModel):
    """Configuration for the plugin pipeline and article extraction."""

    parser: str = Field(default="lxml", description="BeautifulSoup tree builder for documents.")
    reading_speed_wpm: int = Field(default=200, gt=0, description="Words per minute for reading time.")
    refetch_canonical: bool = Field(default=True, description="AMP plugin re-fetches the canonical page.")
    max_canonical_hops: int = Field(default=3, ge=1, description="Canonical links followed before stopping.")
    rewrite_urls: bool = Field(default=True, description="Unwrap redirectors and strip tracking parameters.")
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    postprocess: PostprocessSettings = Field(default_factory=PostprocessSettings)

    @field_validator("parser")
    @classmethod
    def validate_parser(cls, v: str) -> str:
        """Ensure the parser name is one BeautifulSoup understands."""
        if v not in {"lxml", "html.parser", "html5lib", "lxml-xml"}:
            raise ValueError(f"Unsupported parser: {v}")
        return v


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: Optional[str] = Field(default=None, description="Path to a JSON log file. If None, logs to console.")
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics.")

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
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="CRUX_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for path in (current_dir / "crux.yaml", current_dir / "crux.yml"):
        if path.exists():
            return path
    return None


# --- Lazy Configuration Loader ---


class LazyConfig:
    """
    A proxy for the Config object that delays its loading and validation
    until an attribute is first accessed, so a broken config file cannot
    break ``import crux``.
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
            except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
                log.error(
                    "Failed to load or validate configuration from '%s': %s. "
                    "Falling back to default settings. Please check your config file.",
                    config_path,
                    e,
                    exc_info=log.getEffectiveLevel() <= logging.DEBUG,
                )
        else:
            log.debug("No config file found. Using default settings for lazy load.")

        try:
            return Config()
        except ValidationError as e:
            log.critical("FATAL: Default configuration is invalid: %s", e, exc_info=True)
            raise RuntimeError(f"Default configuration is invalid, cannot start: {e}") from e


# --- Global Settings Instance ---
# Typed as Config for callers; the actual object is the LazyConfig proxy.
settings: "Config" = cast("Config", LazyConfig())
