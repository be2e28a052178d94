"""
Brightness -> wall thickness, with blending into the border rims.

Darker pixels give thicker walls. Near the top and bottom of the model the
thickness is blended linearly toward the border thickness over the
configured transition length, so the relief meets the rims without a step.
"""

from typing import Tuple

import numpy as np

from lithophane.contracts import CylinderGeometry, LithophaneConfig


class ThicknessPolicy:
    """Maps (col, row) to wall thickness for one model."""

    def __init__(self, config: LithophaneConfig, geometry: CylinderGeometry, sampler):
        self.config = config
        self.geometry = geometry
        self.sampler = sampler

    def raw_thickness(self, brightness):
        """Linear map: brightness 1 -> min thickness, 0 -> max thickness.

        Accepts a scalar or a numpy array.
        """
        cfg = self.config
        return (1.0 - brightness) * (cfg.max_thickness - cfg.min_thickness) + cfg.min_thickness

    def transition(self, row: int) -> Tuple[float, float]:
        """Return (proportion, border_thickness) for an image row.

        ``proportion`` is the weight of the brightness-driven thickness
        (1 = no blending). The bottom band is checked first and wins when
        the two bands overlap.
        """
        cfg = self.config
        height = row * self.geometry.pixel_step
        total = self.geometry.total_height

        if (
            cfg.bottom_border_height > 0
            and cfg.bottom_border_transition > 0
            and height < cfg.bottom_border_transition
        ):
            return height / cfg.bottom_border_transition, cfg.bottom_border_thickness

        if (
            cfg.top_border_height > 0
            and cfg.top_border_transition > 0
            and height > total - cfg.top_border_transition
        ):
            return (total - height) / cfg.top_border_transition, cfg.top_border_thickness

        return 1.0, 0.0

    def thickness(self, col: int, row: int) -> float:
        proportion, border = self.transition(row)
        raw = self.raw_thickness(self.sampler.brightness(col, row))
        return float(raw * proportion + border * (1.0 - proportion))

    def row_thickness(self, row: int) -> np.ndarray:
        """Thickness of every column of *row*, shape (width,)."""
        proportion, border = self.transition(row)
        if hasattr(self.sampler, "row"):
            brightness = np.asarray(self.sampler.row(row), dtype=np.float64)
        else:
            brightness = np.array(
                [self.sampler.brightness(col, row) for col in range(self.geometry.width)],
                dtype=np.float64,
            )
        return self.raw_thickness(brightness) * proportion + border * (1.0 - proportion)
