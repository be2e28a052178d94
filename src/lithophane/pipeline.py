"""Image -> cylindrical lithophane STL, built ring by ring from bottom to top."""

from __future__ import annotations

import logging
import os
from typing import Optional

from lithophane.contracts import (
    CylinderGeometry,
    Layer,
    LithophaneConfig,
    LithophaneResult,
    LithophaneValidationError,
)
from lithophane.layers import LayerBuilder, build_geometry
from lithophane.sampler import load_brightness_sampler
from lithophane.stitcher import horizontal_surface, vertical_surface
from lithophane.stl_writer import (
    TriangleMesh,
    mesh_report,
    write_ascii_stl,
    write_binary_stl,
)
from lithophane.thickness import ThicknessPolicy

logger = logging.getLogger(__name__)

# Output buffer size in bytes
BUFFER_SIZE = 2 * 1024 * 1024


def generate_lithophane(config: LithophaneConfig, report: bool = False) -> LithophaneResult:
    """Validate, build the mesh and write the STL file.

    The output file is only opened once the whole mesh exists, so a
    validation or image error never leaves a partial file behind. With
    *report* the result also carries the trimesh topology summary.
    """
    _validate_paths(config)
    config.validate()

    sampler = load_brightness_sampler(config.image_path)
    name = f"Cylindrical lithophane from {os.path.basename(config.image_path)}"
    geometry = build_geometry(config, sampler.width, sampler.height)
    mesh = _assemble_mesh(sampler, config, geometry, name)

    logger.info("Writing %d triangles to %s", len(mesh), config.output_path)
    with open(config.output_path, "wb", buffering=BUFFER_SIZE) as stream:
        if config.ascii:
            write_ascii_stl(mesh, stream)
        else:
            write_binary_stl(mesh, stream)

    tris = mesh.triangles
    model_height = float(tris[:, :, 2].max()) if len(tris) else 0.0
    degenerate = mesh.degenerate_count()
    if degenerate:
        logger.debug("%d degenerate triangles written with undefined normals", degenerate)

    return LithophaneResult(
        output_path=str(config.output_path),
        triangle_count=len(mesh),
        image_width=sampler.width,
        image_height=sampler.height,
        model_height_mm=model_height,
        pixel_step_mm=geometry.pixel_step,
        degenerate_triangles=degenerate,
        report=mesh_report(mesh) if report else None,
    )


def build_lithophane_mesh(
    sampler,
    config: LithophaneConfig,
    name: Optional[str] = None,
) -> TriangleMesh:
    """Build the closed lithophane solid for *sampler* without touching disk.

    Stages run strictly bottom to top: bottom cap (optionally a border rim),
    one wall per image row, then the top cap (optionally a border rim).
    Only the previous and current ring are kept alive.
    """
    config.validate()
    geometry = build_geometry(config, sampler.width, sampler.height)
    return _assemble_mesh(sampler, config, geometry, name)


def _assemble_mesh(
    sampler,
    config: LithophaneConfig,
    geometry: CylinderGeometry,
    name: Optional[str],
) -> TriangleMesh:
    policy = ThicknessPolicy(config, geometry, sampler)
    builder = LayerBuilder(config, geometry, policy)
    mesh = TriangleMesh(name or "Cylindrical lithophane")

    logger.info(
        "Diameter: %.1f mm; Height: %.1f mm; Pixel size: %.2f mm",
        config.diameter, geometry.total_height, geometry.pixel_step,
    )

    # bottom cap
    if config.bottom_border_height > 0:
        rim_bottom = builder.border_layer(0.0, config.bottom_border_thickness)
        rim_top = builder.border_layer(config.bottom_border_height, config.bottom_border_thickness)
        mesh.add(horizontal_surface(rim_bottom, is_top=False))
        mesh.add(vertical_surface(rim_bottom, rim_top))
        previous = rim_top
        vertical_offset = config.bottom_border_height
    else:
        previous = builder.lithophane_layer(0, 0.0)
        mesh.add(horizontal_surface(previous, is_top=False))
        vertical_offset = 0.0
    logger.debug("Bottom cap done: %d triangles", len(mesh))

    # body; with a top border the border rim supplies the final ring
    last_row = geometry.height - 1
    if config.top_border_height > 0:
        last_row -= 1
    previous = _build_body(mesh, builder, previous, 1, last_row, vertical_offset)
    logger.debug("Body rows 1..%d done: %d triangles", last_row, len(mesh))

    # top cap
    if config.top_border_height > 0:
        z = previous.z + geometry.pixel_step
        rim_bottom = builder.border_layer(z, config.top_border_thickness)
        rim_top = builder.border_layer(z + config.top_border_height, config.top_border_thickness)
        mesh.add(vertical_surface(previous, rim_bottom))
        mesh.add(vertical_surface(rim_bottom, rim_top))
        previous = rim_top
    mesh.add(horizontal_surface(previous, is_top=True))
    logger.debug("Top cap done: %d triangles", len(mesh))

    return mesh


def _build_body(
    mesh: TriangleMesh,
    builder: LayerBuilder,
    previous: Layer,
    first_row: int,
    last_row: int,
    vertical_offset: float,
) -> Layer:
    """Add walls for image rows first_row..last_row (inclusive); return the last ring."""
    for row in range(first_row, last_row + 1):
        current = builder.lithophane_layer(row, vertical_offset)
        mesh.add(vertical_surface(previous, current))
        previous = current
    return previous


def _validate_paths(config: LithophaneConfig) -> None:
    if not config.image_path:
        raise LithophaneValidationError("No image path given.")
    if not os.path.exists(config.image_path):
        raise LithophaneValidationError(f"Image path \"{config.image_path}\" not found.")
    if not os.path.isfile(config.image_path):
        raise LithophaneValidationError(f"Image path \"{config.image_path}\" is not a file.")
    if not config.output_path:
        raise LithophaneValidationError("No output path given.")
