"""
Block aggregation: reduce b×b tiles of cells to five counters.

A block is the unit that becomes one output pixel. For each tile we count
UP, RIGHT, DOWN and LEFT particles and the number of wall cells. The
reduction reads the grid only, so it can run on any finished buffer.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from hppsim.core.cell import BOUNDARY, DOWN, LEFT, RIGHT, UP

if TYPE_CHECKING:
    from hppsim.core.grid import Grid


# Order of the last axis of block_counts()
COUNTED_FLAGS = (UP, RIGHT, DOWN, LEFT, BOUNDARY)
UP_INDEX, RIGHT_INDEX, DOWN_INDEX, LEFT_INDEX, BOUNDARY_INDEX = range(len(COUNTED_FLAGS))


def block_counts(cells: np.ndarray, block_size: int) -> np.ndarray:
    """
    Per-block flag counts.

    Args:
        cells: Cell array, shape [height, width]
        block_size: Block edge length b; must divide both dimensions

    Returns:
        Integer array [height // b, width // b, 5] holding, per block, the
        counts of UP, RIGHT, DOWN, LEFT flags and of boundary cells.
    """
    height, width = cells.shape
    b = block_size
    if b <= 0 or height % b or width % b:
        raise ValueError(f"Block size {b} must divide grid shape {cells.shape}")

    nby, nbx = height // b, width // b
    counts = np.empty((nby, nbx, len(COUNTED_FLAGS)), dtype=np.int64)
    for i, flag in enumerate(COUNTED_FLAGS):
        present = (cells & flag) != 0
        counts[..., i] = present.reshape(nby, b, nbx, b).sum(axis=(1, 3))
    return counts


@dataclass(frozen=True)
class Block:
    """Aggregated counts for one b×b tile at block coordinates (x, y)."""

    up: int
    right: int
    down: int
    left: int
    boundary: int
    x: int
    y: int
    block_size: int

    @classmethod
    def from_grid(cls, grid: "Grid", block_x: int, block_y: int, block_size: int) -> Block:
        """Aggregate the tile covering cells [b·x, b·x + b) × [b·y, b·y + b)."""
        b = block_size
        if not (0 <= block_x < grid.width // b and 0 <= block_y < grid.height // b):
            raise IndexError(f"Block ({block_x}, {block_y}) is outside the grid")
        tile = grid.cells[b * block_y:b * block_y + b, b * block_x:b * block_x + b]
        up, right, down, left, boundary = (int(c) for c in block_counts(tile, b)[0, 0])
        return cls(up, right, down, left, boundary, block_x, block_y, b)

    @property
    def n_cells(self) -> int:
        return self.block_size * self.block_size

    @property
    def total_particles(self) -> int:
        return self.up + self.right + self.down + self.left

    @property
    def is_boundary(self) -> bool:
        """Any wall cell makes the whole block a wall block."""
        return self.boundary > 0

    @property
    def flux(self) -> tuple[float, float]:
        """Net (fx, fy) particle flux per cell."""
        return (
            (self.right - self.left) / self.n_cells,
            (self.up - self.down) / self.n_cells,
        )
