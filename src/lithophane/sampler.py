"""Image -> brightness field used to drive wall thickness."""

from __future__ import annotations

import logging
import os

import numpy as np
from PIL import Image, UnidentifiedImageError

from lithophane.contracts import ImageLoadError

logger = logging.getLogger(__name__)


class BrightnessSampler:
    """Brightness grid in [0, 1], addressed as (col, row).

    ``values`` is (height, width) with row 0 at the *bottom* of the model;
    image loaders are responsible for the vertical flip.
    """

    def __init__(self, values: np.ndarray):
        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 2:
            raise ValueError(f"Brightness grid must be 2D, got shape {values.shape}")
        self._values = np.clip(values, 0.0, 1.0)

    @property
    def width(self) -> int:
        return int(self._values.shape[1])

    @property
    def height(self) -> int:
        return int(self._values.shape[0])

    def brightness(self, col: int, row: int) -> float:
        return float(self._values[row, col])

    def row(self, row: int) -> np.ndarray:
        """All brightness values of one row, in column order."""
        return self._values[row]

    @classmethod
    def uniform(cls, width: int, height: int, brightness: float) -> "BrightnessSampler":
        return cls(np.full((height, width), float(brightness)))

    @classmethod
    def from_image(cls, img: Image.Image) -> "BrightnessSampler":
        """Brightness is the HSB value channel: max(r, g, b) / 255."""
        rgb = np.asarray(img.convert("RGB"), dtype=np.float64)
        value = rgb.max(axis=2) / 255.0
        # Image row 0 is the top; the model is built bottom-up.
        return cls(value[::-1])


def load_brightness_sampler(image_path: str) -> BrightnessSampler:
    """Decode *image_path* with Pillow and return its brightness field."""
    try:
        with Image.open(image_path) as img:
            sampler = BrightnessSampler.from_image(img)
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageLoadError(
            f"Cannot read image \"{image_path}\": {exc}"
        ) from exc
    logger.debug(
        "Loaded %s: %dx%d px", os.path.basename(image_path), sampler.width, sampler.height
    )
    return sampler
