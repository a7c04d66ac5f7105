"""
Analysis layer: derived quantities for rendering.

IMPORTANT: This is NOT seen by the engine. One-way derivation only.

- Block / block_counts: per-tile counts of each direction and of walls
- density_colours / velocity_colours: the two colouring policies
- colour_blocks / rgb_bytes: a grid rendered as an RGB8 image
"""

from hppsim.analysis.blocks import Block, block_counts
from hppsim.analysis.colouring import (
    BOUNDARY_COLOUR,
    block_colour,
    colour_blocks,
    colour_counts,
    density_colours,
    density_field,
    flux,
    hsv_to_rgb,
    rgb_bytes,
    velocity_colours,
    velocity_field,
)

__all__ = [
    "Block",
    "block_counts",
    "BOUNDARY_COLOUR",
    "block_colour",
    "colour_blocks",
    "colour_counts",
    "density_colours",
    "density_field",
    "flux",
    "hsv_to_rgb",
    "rgb_bytes",
    "velocity_colours",
    "velocity_field",
]
