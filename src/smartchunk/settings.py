"""
Centralized chunking settings.

Values come from ``SMARTCHUNK_*`` environment variables, optionally seeded
from a TOML file so the CLI and library callers share one configuration.
"""
from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Project-wide settings loaded from env or .env files."""

    model_config = SettingsConfigDict(
        env_prefix="SMARTCHUNK_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    max_chunk_size: int = 4000
    chunk_overlap: int = 200
    min_chunk_size: int = 500
    preserve_signatures: bool = True
    calculate_complexity: bool = True
    log_level: str = "INFO"

    @property
    def log_level_value(self) -> int:
        """Numeric logging level, falling back to INFO for unknown names."""
        value = logging.getLevelName(self.log_level.upper())
        return value if isinstance(value, int) else logging.INFO


_CONFIG_ENV_VAR = "SMARTCHUNK_CONFIG_PATH"
_DEFAULT_CONFIG_FILE = Path("smartchunk_settings.toml")


def _load_toml_config() -> Dict[str, Any]:
    """Load configuration from the primary TOML file on disk."""
    candidates: List[Path] = []
    config_override = os.getenv(_CONFIG_ENV_VAR)
    if config_override:
        candidates.append(Path(config_override))
    candidates.append(_DEFAULT_CONFIG_FILE)

    for candidate in candidates:
        if candidate.is_file():
            with candidate.open("rb") as handle:
                return tomllib.load(handle)
    return {}


def _flatten_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Translate grouped TOML sections into AppSettings keyword arguments."""
    data: Dict[str, Any] = {}

    chunking = raw.get("chunking", {})
    if "max_chunk_size" in chunking:
        data["max_chunk_size"] = int(chunking["max_chunk_size"])
    if "overlap" in chunking:
        data["chunk_overlap"] = int(chunking["overlap"])
    if "min_chunk_size" in chunking:
        data["min_chunk_size"] = int(chunking["min_chunk_size"])
    if "preserve_signatures" in chunking:
        data["preserve_signatures"] = bool(chunking["preserve_signatures"])
    if "calculate_complexity" in chunking:
        data["calculate_complexity"] = bool(chunking["calculate_complexity"])

    logging_section = raw.get("logging", {})
    if "level" in logging_section:
        data["log_level"] = str(logging_section["level"])

    return data


def load_settings() -> AppSettings:
    raw = _load_toml_config()
    flattened = _flatten_config(raw)
    return AppSettings(**flattened)


settings = load_settings()
