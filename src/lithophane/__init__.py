"""Public API for the cylindrical lithophane generator."""

from lithophane.contracts import (
    ImageLoadError,
    LithophaneConfig,
    LithophaneResult,
    LithophaneValidationError,
    RoughFace,
)
from lithophane.pipeline import build_lithophane_mesh, generate_lithophane

__all__ = [
    "ImageLoadError",
    "LithophaneConfig",
    "LithophaneResult",
    "LithophaneValidationError",
    "RoughFace",
    "build_lithophane_mesh",
    "generate_lithophane",
]
