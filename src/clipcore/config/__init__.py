"""Configuration models and loaders."""

from .config import Config, ExtractionOptions, MonitoringConfig, find_config_file, load_config

__all__ = ["Config", "ExtractionOptions", "MonitoringConfig", "find_config_file", "load_config"]
