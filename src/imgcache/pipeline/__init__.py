"""Streaming pipeline — one terminal result per copy."""

from imgcache.pipeline.stream import iter_file, iter_stream, stream_to_file

__all__ = ["iter_file", "iter_stream", "stream_to_file"]
