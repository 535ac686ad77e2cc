"""Concurrency — bounded async batch processing."""

from imgcache.concurrency.pool import ConcurrencyPool

__all__ = ["ConcurrencyPool"]
