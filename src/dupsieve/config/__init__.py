"""Configuration models for DupSieve."""

from .config import DedupConfig, HashAlgorithm, MonitoringConfig, Settings, find_config_file, load_settings

__all__ = ["DedupConfig", "HashAlgorithm", "MonitoringConfig", "Settings", "find_config_file", "load_settings"]
