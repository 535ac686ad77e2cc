"""Filename-as-protocol: cache keys that carry their own transform."""

from imgcache.naming.decoder import decode_filename, encode_filename

__all__ = ["decode_filename", "encode_filename"]
