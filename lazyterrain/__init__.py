"""Lazily evaluated diamond-square heightfields."""

from .config import MAX_SIZE, MIN_SIZE, HeightFieldConfig, InitBy
from .heightfield import HeightField
from .resolver import DependencyCycleError, ResolutionError, UnsetCornerError

__all__ = [
    "MIN_SIZE",
    "MAX_SIZE",
    "HeightField",
    "HeightFieldConfig",
    "InitBy",
    "ResolutionError",
    "UnsetCornerError",
    "DependencyCycleError",
]
