"""Contracts for the cylindrical lithophane pipeline."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Dict, List, Optional

import numpy as np


class LithophaneValidationError(ValueError):
    """Raised for bad configuration before any geometry or output work."""


class ImageLoadError(OSError):
    """Raised when the source image cannot be decoded."""


class RoughFace(Enum):
    """Which side of the wall carries the relief."""
    INSIDE = "inside"
    OUTSIDE = "outside"
    BOTH = "both"


@dataclass(frozen=True)
class LithophaneConfig:
    """Configuration for image -> cylindrical lithophane STL.

    All lengths are in millimetres. A border height of 0 disables that
    border; its thickness and transition are then ignored.
    """

    image_path: Optional[str] = None
    output_path: Optional[str] = None
    diameter: float = 150.0  # measured on the flat face
    min_thickness: float = 0.6  # lightest pixels
    max_thickness: float = 3.0  # darkest pixels
    top_border_height: float = 3.0
    top_border_thickness: float = 3.0
    top_border_transition: float = 2.0
    bottom_border_height: float = 3.0
    bottom_border_thickness: float = 3.0
    bottom_border_transition: float = 2.0
    rough_face: RoughFace = RoughFace.INSIDE
    ascii: bool = False

    @property
    def radius(self) -> float:
        return self.diameter / 2.0

    def validation_issues(self) -> List[str]:
        """Check the numeric parameters.

        Returns list of error strings (empty = ok).
        """
        issues = []
        if not self.diameter > 0.0:
            issues.append("Diameter must be greater than zero")
        if not self.min_thickness > 0.0:
            issues.append("Minimum thickness must be greater than zero")
        if not self.max_thickness > self.min_thickness:
            issues.append("Maximum thickness must be greater than minimum thickness")
        for f in fields(self):
            if not f.name.startswith(("top_border_", "bottom_border_")):
                continue
            value = getattr(self, f.name)
            if not value >= 0.0:
                issues.append(f"{f.name} must be zero or positive (got {value})")
        if not isinstance(self.rough_face, RoughFace):
            issues.append(f"Unknown rough face: {self.rough_face!r}")
        return issues

    def validate(self) -> None:
        issues = self.validation_issues()
        if issues:
            raise LithophaneValidationError(issues[0])


@dataclass(frozen=True, eq=False)
class CylinderGeometry:
    """Derived per-model constants shared by every layer."""

    width: int
    height: int
    radius: float
    angle_step: float   # radians per image column
    pixel_step: float   # mm per image column and per image row
    total_height: float
    cos: np.ndarray     # (width,) precomputed per column
    sin: np.ndarray     # (width,)


@dataclass(frozen=True, eq=False)
class Layer:
    """One ring of the model: outer and inner perimeter at the same height.

    Both arrays are (N, 3) float64, indexed by image column; the ring is
    closed (index N-1 connects back to 0).
    """

    outer: np.ndarray
    inner: np.ndarray

    def __len__(self) -> int:
        return len(self.outer)

    @property
    def z(self) -> float:
        return float(self.outer[0, 2])


@dataclass
class LithophaneResult:
    output_path: str
    triangle_count: int
    image_width: int
    image_height: int
    model_height_mm: float
    pixel_step_mm: float
    degenerate_triangles: int = 0
    report: Optional[Dict[str, object]] = None
