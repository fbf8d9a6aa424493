"""
Configuration management for clipcore using Pydantic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

# Kept in step with clipcore.extractor.patterns; not imported to avoid a cycle.
CLASSES_TO_PRESERVE = ("page",)

# --- Nested Configuration Models ---


class ExtractionOptions(BaseModel):
    """Per-run options for the article extraction engine."""

    max_elements_to_parse: int = Field(
        default=0,
        ge=0,
        description="Abort when the document has more elements than this. 0 disables the check.",
    )
    candidate_count: int = Field(
        default=5,
        gt=0,
        description="Number of top candidates kept while scoring.",
    )
    char_threshold: int = Field(
        default=500,
        ge=0,
        description="Minimum article text length before heuristics are relaxed.",
    )
    preserved_classes: List[str] = Field(
        default_factory=lambda: list(CLASSES_TO_PRESERVE),
        description="Class names kept when classes are stripped from the article.",
    )
    keep_classes: bool = Field(default=False, description="Keep all class attributes in the article.")
    debug_logging: bool = Field(default=False, description="Emit per-node debug events.")
    disable_json_ld: bool = Field(default=False, description="Skip schema.org JSON-LD metadata.")
    parser: Literal["lxml", "html.parser"] = Field(
        default="lxml",
        description="BeautifulSoup tree builder used for HTML strings.",
    )

    @field_validator("preserved_classes")
    @classmethod
    def include_default_classes(cls, v: List[str]) -> List[str]:
        """The page wrapper class is always preserved."""
        missing = [name for name in CLASSES_TO_PRESERVE if name not in v]
        return missing + list(v)


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs to console.",
    )
    metrics_enabled: bool = Field(default=True, description="Record Prometheus extraction metrics.")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
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
    project_name: str = "clipcore"
    extraction: ExtractionOptions = Field(default_factory=ExtractionOptions)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="CLIPCORE_", env_nested_delimiter="__", case_sensitive=False)

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
    paths_to_check = [
        current_dir / "clipcore.yaml",
        current_dir / "clipcore.yml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path
    return None


def load_config(path: Path | None = None) -> Config:
    """Load configuration from ``path``, a discovered file, or defaults."""
    config_path = path or find_config_file()
    if config_path is None:
        log.debug("No config file found. Using default settings.")
        return Config()
    log.info("Loading configuration from: %s", config_path)
    return Config.from_yaml(config_path)
