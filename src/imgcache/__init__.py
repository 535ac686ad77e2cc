"""imgcache — materialize cropped/resized JPEGs into a cache directory on demand."""

from imgcache.core import CacheOrchestrator, cache_image, submit_cache_image
from imgcache.naming.decoder import decode_filename
from imgcache.types import Operation, Outcome, PassthroughRequest, TransformSpec

__all__ = [
    "CacheOrchestrator",
    "cache_image",
    "submit_cache_image",
    "decode_filename",
    "Operation",
    "Outcome",
    "PassthroughRequest",
    "TransformSpec",
]
