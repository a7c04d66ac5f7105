"""
Source: a rectangle held at a fixed occupation probability.

Sources are reapplied to the current grid at the start of every step,
before streaming. Every flag in the rectangle is redrawn each time, so a
source acts as a continuously forced inflow (density > 0) or outflow
(density 0) region rather than a one-off seed. Injected particles take
part in the same step's streaming and collision.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

import numpy as np

if TYPE_CHECKING:
    from hppsim.core.grid import Grid


@dataclass(frozen=True)
class Source:
    """Rectangular region with a per-direction occupation probability."""

    x: int
    y: int
    width: int
    height: int
    density: float  # Probability in [0, 1] that each directional flag is set

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Source size must be positive, got {self.width}x{self.height}")
        if not 0.0 <= self.density <= 1.0:
            raise ValueError(f"Source density must be in [0, 1], got {self.density}")

    def apply(self, grid: "Grid", rng: np.random.Generator | None = None):
        """Redraw every cell in the source rectangle."""
        grid.fill_region(self.x, self.y, self.width, self.height, self.density, rng)


def apply_sources(
    grid: "Grid",
    sources: Iterable[Source],
    rng: np.random.Generator | None = None,
):
    """Apply sources in order; later sources win where rectangles overlap."""
    for source in sources:
        source.apply(grid, rng)
