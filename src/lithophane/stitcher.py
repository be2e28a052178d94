"""
Ring stitching: caps and walls with outward-facing winding.

Every function returns an (M, 3, 3) array of triangles; vertex order gives
the normal direction by the right-hand rule. Per column ``i`` the
triangles are emitted in a fixed order so output is reproducible.
"""

import numpy as np

from lithophane.contracts import Layer


def orient(triangles: np.ndarray, invert: bool) -> np.ndarray:
    """Return *triangles* with vertex order (v0, v1, v2) -> (v2, v1, v0) if *invert*."""
    if not invert:
        return triangles
    return triangles[:, ::-1, :]


def _next_index(n: int) -> np.ndarray:
    # j = i + 1, wrapping the last column back to the first
    return np.roll(np.arange(n), -1)


def horizontal_surface(layer: Layer, is_top: bool) -> np.ndarray:
    """Cap between the inner and outer perimeter of *layer*, shape (2N, 3, 3).

    The default winding faces down (bottom cap); top caps are inverted.
    """
    n = len(layer)
    j = _next_index(n)
    inner, outer = layer.inner, layer.outer

    t1 = np.stack([inner, outer[j], outer], axis=1)
    t2 = np.stack([inner, inner[j], outer[j]], axis=1)
    triangles = np.stack([t1, t2], axis=1).reshape(-1, 3, 3)
    return orient(triangles, is_top)


def vertical_surface(lower: Layer, upper: Layer) -> np.ndarray:
    """Outer and inner walls between two rings, shape (4N, 3, 3).

    Each quad is split along the lower[i]-upper[j] diagonal. The inner wall
    uses the opposite winding so its normals point toward the axis.
    """
    if len(lower) != len(upper):
        raise ValueError(
            f"Layers differ in size: {len(lower)} vs {len(upper)}"
        )
    n = len(lower)
    j = _next_index(n)
    ol, ou = lower.outer, upper.outer
    il, iu = lower.inner, upper.inner

    outer_1 = np.stack([ol, ou[j], ou], axis=1)
    outer_2 = np.stack([ol, ol[j], ou[j]], axis=1)
    inner_1 = np.stack([il, iu, iu[j]], axis=1)
    inner_2 = np.stack([il, iu[j], il[j]], axis=1)
    return np.stack([outer_1, outer_2, inner_1, inner_2], axis=1).reshape(-1, 3, 3)
