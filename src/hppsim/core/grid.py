"""
Grid: the 2D array of lattice-gas cells.

The grid stores ONLY cell values (see hppsim.core.cell). Densities,
velocities and colours are derived in the analysis layer.

Reads are total: any coordinate outside the grid reads as a bare
BOUNDARY cell. Streaming relies on this, so the domain edge needs no
special case in the update loop. Writes outside the grid are a logic
error and raise.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Iterator

import numpy as np

from hppsim.core.cell import BOUNDARY, CELL_DTYPE, DOWN, EMPTY, FULL, LEFT, RIGHT, UP

if TYPE_CHECKING:
    from hppsim.core.config import SimulationConfig


class Grid:
    """
    Owned, contiguous block of cells indexed as cells[y, x].

    Two grids of the same size form the double buffer of a simulation;
    see hppsim.core.simulation.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.cells = np.full((height, width), EMPTY, dtype=CELL_DTYPE)

    @classmethod
    def from_array(cls, cells: np.ndarray) -> Grid:
        """Build a grid holding a copy of a 2D [height, width] array of cell values."""
        cells = np.asarray(cells)
        if cells.ndim != 2:
            raise ValueError(f"Expected a 2D array, got shape {cells.shape}")
        height, width = cells.shape
        grid = cls(width, height)
        grid.cells[...] = cells
        return grid

    @property
    def shape(self) -> tuple[int, int]:
        """Return (height, width) grid dimensions."""
        return self.height, self.width

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> int:
        """Cell at (x, y), or BOUNDARY for any coordinate outside the grid."""
        if not self.in_bounds(x, y):
            return BOUNDARY
        return int(self.cells[y, x])

    def set(self, x: int, y: int, value: int):
        """Write one cell. Out-of-range coordinates raise IndexError."""
        if not self.in_bounds(x, y):
            raise IndexError(
                f"Cell ({x}, {y}) is outside the {self.width}x{self.height} grid"
            )
        self.cells[y, x] = value

    def _region(self, x_min: int, y_min: int, width: int, height: int) -> tuple[slice, slice]:
        """Index for a rectangle that must lie entirely inside the grid."""
        if width < 0 or height < 0:
            raise ValueError(f"Region size must be non-negative, got {width}x{height}")
        x_max = x_min + width
        y_max = y_min + height
        if x_min < 0 or y_min < 0 or x_max > self.width or y_max > self.height:
            raise IndexError(
                f"Region ({x_min}, {y_min}, {width}, {height}) exceeds the "
                f"{self.width}x{self.height} grid"
            )
        return slice(y_min, y_max), slice(x_min, x_max)

    def fill_region(
        self,
        x_min: int,
        y_min: int,
        width: int,
        height: int,
        probability: float,
        rng: np.random.Generator | None = None,
    ):
        """
        Randomly occupy a rectangle.

        Each of the four directional flags of each cell is an independent
        Bernoulli trial with the given probability. Whatever the cells held
        before, boundary flag included, is overwritten.

        Args:
            x_min, y_min: Lower-left corner of the rectangle
            width, height: Rectangle size in cells
            probability: Per-direction occupation probability in [0, 1]
            rng: Random generator (a fresh default_rng() if None)
        """
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"probability must be in [0, 1], got {probability}")
        rows, cols = self._region(x_min, y_min, width, height)
        if rng is None:
            rng = np.random.default_rng()

        draws = rng.random((height, width, 4)) < probability
        value = (
            draws[..., 0] * UP
            | draws[..., 1] * RIGHT
            | draws[..., 2] * DOWN
            | draws[..., 3] * LEFT
        )
        self.cells[rows, cols] = value.astype(CELL_DTYPE)

    def fill(self, x_min: int, y_min: int, width: int, height: int, value: int):
        """Write the same cell value over a rectangle."""
        rows, cols = self._region(x_min, y_min, width, height)
        self.cells[rows, cols] = value

    def fill_boundary(self, x_min: int, y_min: int, width: int, height: int):
        """Paint a solid wall over a rectangle."""
        self.fill(x_min, y_min, width, height, BOUNDARY)

    def set_boundary_at_edge(self, config: SimulationConfig):
        """Paint the four one-cell-thick domain edges as wall, closing the box."""
        if config.shape != self.shape:
            raise ValueError(
                f"Config size {config.width}x{config.height} does not match "
                f"grid {self.width}x{self.height}"
            )
        self.fill_boundary(0, 0, 1, config.height)
        self.fill_boundary(0, 0, config.width, 1)
        self.fill_boundary(0, config.height - 1, config.width, 1)
        self.fill_boundary(config.width - 1, 0, 1, config.height)

    def clear(self):
        self.cells.fill(EMPTY)

    def copy(self) -> Grid:
        return Grid.from_array(self.cells)

    def iter_cells(self) -> Iterator[tuple[int, int]]:
        """Iterate over all (x, y) cell coordinates."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    def particle_count(self) -> int:
        """Total number of particles (directional flags) on the grid."""
        directional = self.cells & FULL
        return int(np.unpackbits(directional[..., np.newaxis], axis=-1).sum())

    def boundary_count(self) -> int:
        """Number of wall cells."""
        return int(np.count_nonzero(self.cells & BOUNDARY))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self.cells, other.cells))

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height})"
