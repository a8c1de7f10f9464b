"""Configuration models and loaders."""

from .config import Config, ExtractionConfig, LoggingConfig, find_config_file, load_config

__all__ = ["Config", "ExtractionConfig", "LoggingConfig", "find_config_file", "load_config"]
