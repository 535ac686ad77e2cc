"""Pydantic model for validated cache settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from imgcache.config.defaults import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CREATE_PARENTS,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_DIMENSION,
    DEFAULT_MAX_WORKERS,
)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class CacheSettings(BaseModel):
    source_dir: Path | None = None
    cache_dir: Path | None = None
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)
    create_parents: bool = DEFAULT_CREATE_PARENTS
    jpeg_quality: int = Field(default=DEFAULT_JPEG_QUALITY, ge=1, le=95)
    max_dimension: int = Field(default=DEFAULT_MAX_DIMENSION, gt=0)
    max_workers: int = Field(default=DEFAULT_MAX_WORKERS, gt=0)
    log_level: str = DEFAULT_LOG_LEVEL

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def from_mapping(cls, config: dict[str, Any]) -> CacheSettings:
        """Build settings from a merged config dict, ignoring unknown keys."""
        known = {k: v for k, v in config.items() if k in cls.model_fields}
        return cls(**known)
