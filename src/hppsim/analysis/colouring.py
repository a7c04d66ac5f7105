"""
Turn block counts into RGB8 pixels.

Two policies:
- density:  grey level round(scale · particles / b²), scale 63 by default
- velocity: hue = flow direction, saturation = value = speed, where
            speed = (|flux| / √2)^(1/3). The cube root lifts slow regions
            into a visible range; it is a display transform only.

Wall blocks (any boundary cell) always render as BOUNDARY_COLOUR so that
obstacles stay solid instead of blending into the flow.

Output images are block-row-major. Image row 0 is the block row with the
highest y, so UP particles move towards the top of the picture.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

import numpy as np

from hppsim.analysis.blocks import (
    BOUNDARY_INDEX,
    DOWN_INDEX,
    LEFT_INDEX,
    RIGHT_INDEX,
    UP_INDEX,
    Block,
    block_counts,
)

if TYPE_CHECKING:
    from hppsim.core.config import SimulationConfig
    from hppsim.core.grid import Grid


BOUNDARY_COLOUR = (0, 0, 0)
DEFAULT_DENSITY_SCALE = 63.0


def _round_to_uint8(values: np.ndarray) -> np.ndarray:
    """Round half up and clip into [0, 255]."""
    return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)


def hsv_to_rgb(hue, saturation, value) -> np.ndarray:
    """
    HSV → RGB8 using the six 60° sectors.

    Args:
        hue: Degrees, wrapped into [0, 360)
        saturation, value: In [0, 1]

    Returns:
        uint8 array with a trailing axis of 3 (R, G, B); scalar inputs give
        shape (3,).
    """
    hue = np.mod(np.asarray(hue, dtype=np.float64), 360.0)
    saturation = np.asarray(saturation, dtype=np.float64)
    value = np.asarray(value, dtype=np.float64)

    chroma = saturation * value
    h_prime = hue / 60.0
    x = chroma * (1.0 - np.abs(np.mod(h_prime, 2.0) - 1.0))
    sector = np.clip(np.floor(h_prime).astype(np.int64), 0, 5)

    zero = np.zeros_like(chroma)
    red = np.choose(sector, [chroma, x, zero, zero, x, chroma])
    green = np.choose(sector, [x, chroma, chroma, x, zero, zero])
    blue = np.choose(sector, [zero, zero, x, chroma, chroma, x])

    m = value - chroma
    rgb = np.stack([red + m, green + m, blue + m], axis=-1)
    return _round_to_uint8(rgb * 255.0)


def _apply_boundary(rgb: np.ndarray, counts: np.ndarray) -> np.ndarray:
    rgb[counts[..., BOUNDARY_INDEX] > 0] = BOUNDARY_COLOUR
    return rgb


def density_colours(
    counts: np.ndarray,
    block_size: int,
    scale: float = DEFAULT_DENSITY_SCALE,
) -> np.ndarray:
    """
    Greyscale pixels from block counts.

    Args:
        counts: Output of block_counts(), shape [nby, nbx, 5]
        block_size: Block edge length b
        scale: Grey level per mean particle per cell

    Returns:
        uint8 array [nby, nbx, 3], rows in increasing block y
    """
    total = counts[..., [UP_INDEX, RIGHT_INDEX, DOWN_INDEX, LEFT_INDEX]].sum(axis=-1)
    intensity = _round_to_uint8(scale * total / (block_size * block_size))
    rgb = np.repeat(intensity[..., np.newaxis], 3, axis=-1)
    return _apply_boundary(rgb, counts)


def flux(counts: np.ndarray, block_size: int) -> tuple[np.ndarray, np.ndarray]:
    """Net particle flux per cell (fx, fy) for every block."""
    n_cells = block_size * block_size
    fx = (counts[..., RIGHT_INDEX] - counts[..., LEFT_INDEX]) / n_cells
    fy = (counts[..., UP_INDEX] - counts[..., DOWN_INDEX]) / n_cells
    return fx, fy


def velocity_colours(counts: np.ndarray, block_size: int) -> np.ndarray:
    """
    Hue/value pixels from block counts.

    Hue is the flow direction measured from +y towards +x (up = 0°,
    right = 90°); saturation and value are both the stretched speed.
    """
    fx, fy = flux(counts, block_size)
    speed = np.cbrt(np.sqrt(fx * fx + fy * fy) / np.sqrt(2.0))
    angle = np.arctan2(fx, fy)
    angle = np.where(angle < 0.0, angle + 2.0 * np.pi, angle)
    rgb = hsv_to_rgb(np.degrees(angle), speed, speed)
    return _apply_boundary(rgb, counts)


def colour_counts(
    counts: np.ndarray,
    block_size: int,
    colouring: str = "density",
    density_scale: float = DEFAULT_DENSITY_SCALE,
) -> np.ndarray:
    """Dispatch to the colouring policy. Rows in increasing block y."""
    if colouring == "density":
        return density_colours(counts, block_size, density_scale)
    elif colouring == "velocity":
        return velocity_colours(counts, block_size)
    else:
        raise ValueError(f"Unknown colouring: {colouring}")


def block_colour(
    block: Block,
    colouring: str = "density",
    density_scale: float = DEFAULT_DENSITY_SCALE,
) -> tuple[int, int, int]:
    """Colour of a single aggregated block."""
    counts = np.array(
        [[[block.up, block.right, block.down, block.left, block.boundary]]],
        dtype=np.int64,
    )
    rgb = colour_counts(counts, block.block_size, colouring, density_scale)[0, 0]
    return int(rgb[0]), int(rgb[1]), int(rgb[2])


def colour_blocks(grid: "Grid", config: "SimulationConfig") -> np.ndarray:
    """
    Render a grid as an RGB8 image.

    Returns:
        uint8 array [image_height, image_width, 3], row 0 at the top
        (highest y)
    """
    counts = block_counts(grid.cells, config.downscale)
    rgb = colour_counts(counts, config.downscale, config.colouring, config.density_scale)
    return np.ascontiguousarray(rgb[::-1])


def rgb_bytes(grid: "Grid", config: "SimulationConfig") -> bytes:
    """Packed RGB8 buffer, exactly image_width × image_height × 3 bytes."""
    return colour_blocks(grid, config).tobytes()


def density_field(grid: "Grid", block_size: int) -> np.ndarray:
    """Mean particles per cell for each block, [nby, nbx], rows in increasing y."""
    counts = block_counts(grid.cells, block_size)
    total = counts[..., [UP_INDEX, RIGHT_INDEX, DOWN_INDEX, LEFT_INDEX]].sum(axis=-1)
    return total / (block_size * block_size)


def velocity_field(grid: "Grid", block_size: int) -> tuple[np.ndarray, np.ndarray]:
    """(fx, fy) flux per block, each [nby, nbx], rows in increasing y."""
    return flux(block_counts(grid.cells, block_size), block_size)
