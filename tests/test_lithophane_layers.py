"""Tests for ring construction around the cylinder axis."""
import logging
import math
from dataclasses import replace

import numpy as np
import pytest

from lithophane.contracts import Layer, LithophaneValidationError, RoughFace
from lithophane.layers import LayerBuilder, build_geometry, inward_thickness, ring_radii
from lithophane.sampler import BrightnessSampler
from lithophane.thickness import ThicknessPolicy


def _builder(config, sampler) -> LayerBuilder:
    geometry = build_geometry(config, sampler.width, sampler.height)
    return LayerBuilder(config, geometry, ThicknessPolicy(config, geometry, sampler))


def _radii(points: np.ndarray) -> np.ndarray:
    return np.hypot(points[:, 0], points[:, 1])


class TestGeometry:

    def test_steps_and_tables(self, no_border_config):
        g = build_geometry(no_border_config, 4, 2)
        assert g.angle_step == pytest.approx(math.pi / 2)
        assert g.pixel_step == pytest.approx(math.pi * 150.0 / 4)
        assert g.total_height == pytest.approx(2 * g.pixel_step)
        assert g.radius == 75.0
        np.testing.assert_allclose(g.cos, [1.0, 0.0, -1.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(g.sin, [0.0, 1.0, 0.0, -1.0], atol=1e-12)

    @pytest.mark.parametrize("width", [0, 1, 2])
    def test_rejects_narrow_images(self, no_border_config, width):
        with pytest.raises(LithophaneValidationError):
            build_geometry(no_border_config, width, 5)

    def test_rejects_empty_image(self, no_border_config):
        with pytest.raises(LithophaneValidationError):
            build_geometry(no_border_config, 5, 0)


class TestLithophaneLayer:

    @pytest.mark.parametrize("width", [3, 4, 12])
    def test_layer_shape_and_heights(self, no_border_config, gradient_values, width):
        sampler = BrightnessSampler(gradient_values[:, :width])
        builder = _builder(no_border_config, sampler)
        layer = builder.lithophane_layer(3, 1.5)

        assert layer.outer.shape == (width, 3)
        assert layer.inner.shape == (width, 3)
        np.testing.assert_array_equal(layer.outer[:, 2], layer.inner[:, 2])
        assert layer.z == pytest.approx(3 * builder.geometry.pixel_step + 1.5)

    def test_rough_outside(self, no_border_config):
        builder = _builder(no_border_config, BrightnessSampler.uniform(4, 2, 0.0))
        layer = builder.lithophane_layer(0, 0.0)
        np.testing.assert_allclose(_radii(layer.inner), 75.0)
        np.testing.assert_allclose(_radii(layer.outer), 78.0)

    def test_rough_inside(self, no_border_config):
        config = replace(no_border_config, rough_face=RoughFace.INSIDE)
        builder = _builder(config, BrightnessSampler.uniform(4, 2, 0.0))
        layer = builder.lithophane_layer(1, 0.0)
        np.testing.assert_allclose(_radii(layer.outer), 75.0)
        np.testing.assert_allclose(_radii(layer.inner), 72.0)

    def test_rough_both_splits_symmetrically(self, no_border_config):
        config = replace(no_border_config, rough_face=RoughFace.BOTH)
        builder = _builder(config, BrightnessSampler.uniform(4, 2, 0.0))
        layer = builder.lithophane_layer(1, 0.0)
        np.testing.assert_allclose(_radii(layer.outer), 76.5)
        np.testing.assert_allclose(_radii(layer.inner), 73.5)

    def test_points_follow_column_angle(self, no_border_config):
        builder = _builder(no_border_config, BrightnessSampler.uniform(4, 2, 1.0))
        layer = builder.lithophane_layer(0, 0.0)
        np.testing.assert_allclose(layer.outer[1], [0.0, 75.6, 0.0], atol=1e-9)
        np.testing.assert_allclose(layer.inner[2], [-75.0, 0.0, 0.0], atol=1e-9)

    def test_thickness_follows_brightness_per_column(self, no_border_config):
        values = np.array([[0.0, 1.0, 0.5, 0.0]])
        builder = _builder(no_border_config, BrightnessSampler(values))
        layer = builder.lithophane_layer(0, 0.0)
        np.testing.assert_allclose(
            _radii(layer.outer) - _radii(layer.inner), [3.0, 0.6, 1.8, 3.0]
        )


class TestBorderLayer:

    def test_fixed_thickness(self, no_border_config):
        builder = _builder(no_border_config, BrightnessSampler.uniform(6, 2, 0.3))
        layer = builder.border_layer(2.5, 1.25)
        assert len(layer) == 6
        np.testing.assert_allclose(layer.outer[:, 2], 2.5)
        np.testing.assert_allclose(_radii(layer.outer) - _radii(layer.inner), 1.25)

    def test_zero_thickness_collapses_ring(self, no_border_config):
        builder = _builder(no_border_config, BrightnessSampler.uniform(6, 2, 0.3))
        layer = builder.border_layer(0.0, 0.0)
        np.testing.assert_allclose(layer.outer, layer.inner)


def test_ring_radii_variants():
    thickness = np.array([1.0, 2.0])
    outer, inner = ring_radii(RoughFace.OUTSIDE, 10.0, thickness)
    np.testing.assert_allclose(outer, [11.0, 12.0])
    np.testing.assert_allclose(inner, [10.0, 10.0])
    outer, inner = ring_radii(RoughFace.INSIDE, 10.0, thickness)
    np.testing.assert_allclose(outer, [10.0, 10.0])
    np.testing.assert_allclose(inner, [9.0, 8.0])


class TestInnerWallWarning:

    def test_warns_when_inside_relief_reaches_axis(self, no_border_config, caplog):
        config = replace(no_border_config, diameter=4.0, rough_face=RoughFace.INSIDE)
        with caplog.at_level(logging.WARNING, logger="lithophane.layers"):
            build_geometry(config, 6, 2)
        assert "reaches the cylinder axis" in caplog.text

    def test_border_thickness_counts_when_border_enabled(self, no_border_config, caplog):
        config = replace(
            no_border_config,
            diameter=10.0,
            rough_face=RoughFace.INSIDE,
            top_border_height=1.0,
            top_border_thickness=5.0,
        )
        assert inward_thickness(config) == 5.0
        with caplog.at_level(logging.WARNING, logger="lithophane.layers"):
            build_geometry(config, 6, 2)
        assert "reaches the cylinder axis" in caplog.text

    def test_both_uses_half_thickness(self, no_border_config, caplog):
        config = replace(no_border_config, diameter=4.0, rough_face=RoughFace.BOTH)
        assert inward_thickness(config) == pytest.approx(1.5)
        with caplog.at_level(logging.WARNING, logger="lithophane.layers"):
            build_geometry(config, 6, 2)
        assert "reaches the cylinder axis" not in caplog.text

    def test_outside_relief_never_warns(self, no_border_config, caplog):
        config = replace(no_border_config, diameter=1.0, rough_face=RoughFace.OUTSIDE)
        assert inward_thickness(config) == 0.0
        with caplog.at_level(logging.WARNING, logger="lithophane.layers"):
            build_geometry(config, 6, 2)
        assert "reaches the cylinder axis" not in caplog.text


class TestValueTypes:

    def test_layer_compares_by_identity(self):
        outer = np.zeros((3, 3))
        layer = Layer(outer=outer, inner=outer.copy())
        twin = Layer(outer=outer, inner=outer.copy())
        assert layer == layer
        assert layer != twin
        assert len({layer, twin}) == 2

    def test_geometry_compares_by_identity(self, no_border_config):
        first = build_geometry(no_border_config, 6, 2)
        second = build_geometry(no_border_config, 6, 2)
        assert first != second
        assert len({first, second}) == 2
