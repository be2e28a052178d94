"""Ring (layer) construction by revolving thickness around the cylinder axis."""

import logging
import math
from typing import Callable, Dict, Tuple

import numpy as np

from lithophane.contracts import (
    CylinderGeometry,
    Layer,
    LithophaneConfig,
    LithophaneValidationError,
    RoughFace,
)
from lithophane.thickness import ThicknessPolicy

logger = logging.getLogger(__name__)

MIN_IMAGE_WIDTH = 3


def build_geometry(config: LithophaneConfig, width: int, height: int) -> CylinderGeometry:
    """Derive steps and the cos/sin tables for a *width* x *height* image."""
    if width < MIN_IMAGE_WIDTH:
        raise LithophaneValidationError(
            f"Image must be at least {MIN_IMAGE_WIDTH} pixels wide (got {width})"
        )
    if height < 1:
        raise LithophaneValidationError("Image has no rows")
    _warn_if_inner_wall_crosses_axis(config)

    angle_step = 2.0 * math.pi / width
    pixel_step = math.pi * config.diameter / width
    angles = np.arange(width, dtype=np.float64) * angle_step
    return CylinderGeometry(
        width=width,
        height=height,
        radius=config.radius,
        angle_step=angle_step,
        pixel_step=pixel_step,
        total_height=height * pixel_step,
        cos=np.cos(angles),
        sin=np.sin(angles),
    )


def inward_thickness(config: LithophaneConfig) -> float:
    """Largest distance any ring reaches inward from the flat-face radius."""
    thicknesses = [config.max_thickness]
    if config.top_border_height > 0:
        thicknesses.append(config.top_border_thickness)
    if config.bottom_border_height > 0:
        thicknesses.append(config.bottom_border_thickness)
    deepest = max(thicknesses)
    if config.rough_face is RoughFace.INSIDE:
        return deepest
    if config.rough_face is RoughFace.BOTH:
        return deepest / 2.0
    return 0.0


def _warn_if_inner_wall_crosses_axis(config: LithophaneConfig) -> None:
    inward = inward_thickness(config)
    if inward >= config.radius:
        logger.warning(
            "Inner wall reaches the cylinder axis (radius %.2f mm, inward thickness %.2f mm); "
            "the mesh will self-intersect",
            config.radius, inward,
        )


# ─── Radii per rough-face variant ───────────────────────────────────────────

def _radii_outside(radius: float, thickness) -> Tuple[np.ndarray, np.ndarray]:
    return radius + thickness, np.full_like(thickness, radius)


def _radii_inside(radius: float, thickness) -> Tuple[np.ndarray, np.ndarray]:
    return np.full_like(thickness, radius), radius - thickness


def _radii_both(radius: float, thickness) -> Tuple[np.ndarray, np.ndarray]:
    half = thickness / 2.0
    return radius + half, radius - half


_RADII: Dict[RoughFace, Callable] = {
    RoughFace.OUTSIDE: _radii_outside,
    RoughFace.INSIDE: _radii_inside,
    RoughFace.BOTH: _radii_both,
}


def ring_radii(
    rough_face: RoughFace, radius: float, thickness: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """Return (outer_radii, inner_radii) for per-column thickness."""
    thickness = np.asarray(thickness, dtype=np.float64)
    return _RADII[rough_face](radius, thickness)


class LayerBuilder:
    """Builds lithophane and border rings for one model."""

    def __init__(self, config: LithophaneConfig, geometry: CylinderGeometry, policy: ThicknessPolicy):
        self.config = config
        self.geometry = geometry
        self.policy = policy

    def lithophane_layer(self, row: int, vertical_offset: float) -> Layer:
        """Ring for image *row*; *vertical_offset* is the z of row 0."""
        z = row * self.geometry.pixel_step + vertical_offset
        return self._ring(z, self.policy.row_thickness(row))

    def border_layer(self, z: float, thickness: float) -> Layer:
        """Fixed-thickness ring at absolute height *z*."""
        return self._ring(z, np.full(self.geometry.width, float(thickness)))

    def _ring(self, z: float, thickness: np.ndarray) -> Layer:
        g = self.geometry
        outer_r, inner_r = ring_radii(self.config.rough_face, g.radius, thickness)
        zs = np.full(g.width, float(z))
        outer = np.column_stack([g.cos * outer_r, g.sin * outer_r, zs])
        inner = np.column_stack([g.cos * inner_r, g.sin * inner_r, zs])
        return Layer(outer=outer, inner=inner)
