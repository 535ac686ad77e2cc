"""Crop/resize transforms — engine protocol, Pillow engine and invoker."""

from imgcache.transforms.engine import PillowTransformEngine, TransformEngine
from imgcache.transforms.invoker import TransformInvoker

__all__ = ["PillowTransformEngine", "TransformEngine", "TransformInvoker"]
