"""Configuration — defaults, YAML/env hierarchy and validated settings."""

from imgcache.config.hierarchy import load_config_hierarchy
from imgcache.config.schema import CacheSettings

__all__ = ["CacheSettings", "load_config_hierarchy"]
