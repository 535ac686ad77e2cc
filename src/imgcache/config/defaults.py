"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Default streaming settings
DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_CREATE_PARENTS = True

# Default transform engine settings
DEFAULT_JPEG_QUALITY = 85
DEFAULT_MAX_DIMENSION = 10_000

# Default concurrency settings
DEFAULT_MAX_WORKERS = 5

# Format every request is validated against
DEFAULT_IMAGE_FORMAT = "jpeg"

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "source_dir": None,
        "cache_dir": None,
        "chunk_size": DEFAULT_CHUNK_SIZE,
        "create_parents": DEFAULT_CREATE_PARENTS,
        "jpeg_quality": DEFAULT_JPEG_QUALITY,
        "max_dimension": DEFAULT_MAX_DIMENSION,
        "max_workers": DEFAULT_MAX_WORKERS,
        "log_level": DEFAULT_LOG_LEVEL,
    }
