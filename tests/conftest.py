"""
Shared test fixtures for the lithophane pipeline tests.
"""
import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lithophane.contracts import LithophaneConfig, RoughFace


@pytest.fixture
def no_border_config():
    """Diameter 150 mm, 0.6-3.0 mm, relief outside, no borders."""
    return LithophaneConfig(
        diameter=150.0,
        min_thickness=0.6,
        max_thickness=3.0,
        top_border_height=0.0,
        bottom_border_height=0.0,
        rough_face=RoughFace.OUTSIDE,
    )


@pytest.fixture
def gradient_values():
    """A 12x9 brightness grid with a deterministic pattern."""
    rng = np.random.default_rng(7)
    return rng.uniform(0.0, 1.0, size=(9, 12))


@pytest.fixture
def image_file(tmp_path: Path) -> str:
    """An 8x6 RGB PNG: dark top half, light bottom half."""
    pixels = np.zeros((6, 8, 3), dtype=np.uint8)
    pixels[3:, :, :] = 255
    pixels[0, 0] = (255, 0, 0)
    path = tmp_path / "photo.png"
    Image.fromarray(pixels).save(path)
    return str(path)
