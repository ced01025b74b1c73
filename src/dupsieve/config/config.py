"""
Configuration management for DupSieve using Pydantic.
"""

from __future__ import annotations

import hashlib
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class HashAlgorithm(str, Enum):
    """Pinned cryptographic hash primitives for fingerprints and token hashes."""

    SHA256 = "sha256"
    SHA512 = "sha512"
    BLAKE2B = "blake2b"
    SHA3_256 = "sha3_256"

    @property
    def digest_bits(self) -> int:
        return hashlib.new(self.value).digest_size * 8


class DedupConfig(BaseModel):
    """Options recognized by the deduplication engine."""

    exact_index_unbounded: bool = Field(
        default=True,
        description="Keep every accepted fingerprint. If False, exact_index_capacity applies.",
    )
    exact_index_capacity: int = Field(
        default=1_000_000,
        ge=1,
        description="Max fingerprints retained when the exact index is bounded (FIFO eviction).",
    )
    window_capacity: int = Field(default=5000, ge=1, description="Number of recent sketches retained.")
    hamming_threshold: int = Field(
        default=5,
        ge=0,
        description="Max differing sketch bits for a near-duplicate match.",
    )
    sketch_width_bits: int = Field(default=64, ge=8, description="Sketch width in bits.")
    hash_algorithm: HashAlgorithm = Field(
        default=HashAlgorithm.SHA256,
        description="hashlib algorithm used for fingerprints and per-token sketch hashes.",
    )
    band_count: Optional[int] = Field(
        default=None,
        description="Split sketches into this many bands for candidate lookup. None = linear scan.",
    )
    engine_name: str = Field(
        default="default",
        min_length=1,
        description=(
            "Label used in logs and metrics. Must be unique per engine in a process: "
            "engines sharing a name share one metric series and overwrite each other's size gauges."
        ),
    )

    @field_validator("sketch_width_bits")
    @classmethod
    def validate_width(cls, v: int) -> int:
        """Sketch width must be a whole number of bytes."""
        if v % 8 != 0:
            raise ValueError("sketch_width_bits must be a multiple of 8")
        return v

    @model_validator(mode="after")
    def validate_cross_fields(self) -> "DedupConfig":
        if self.hamming_threshold > self.sketch_width_bits:
            raise ValueError("hamming_threshold must not exceed sketch_width_bits")
        if self.sketch_width_bits > self.hash_algorithm.digest_bits:
            raise ValueError(
                f"sketch_width_bits={self.sketch_width_bits} is wider than the "
                f"{self.hash_algorithm.value} digest ({self.hash_algorithm.digest_bits} bits)"
            )
        if self.band_count is not None:
            # Fewer bands than threshold + 1 could miss matches within the threshold.
            if not self.hamming_threshold < self.band_count <= self.sketch_width_bits:
                raise ValueError("band_count must be greater than hamming_threshold and at most sketch_width_bits")
        return self


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")
    json_logs: bool = Field(default=False, description="Render console logs as JSON.")
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics for engine calls.")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
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


class Settings(BaseSettings):
    project_name: str = "DupSieve"
    dedup: DedupConfig = Field(default_factory=DedupConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="DUPSIEVE_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Settings:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
        return cls(**(yaml_data or {}))


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for path in (current_dir / "dupsieve.yaml", current_dir / "dupsieve.yml"):
        if path.exists():
            return path
    return None


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from an explicit YAML file, a discovered one, or defaults."""
    config_path = path or find_config_file()
    if config_path is not None:
        log.info("Loading configuration from: %s", config_path)
        return Settings.from_yaml(config_path)
    log.info("No config file found. Using default settings.")
    return Settings()
