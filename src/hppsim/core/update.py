"""
Update engine: one HPP step from the current grid into the next grid.

Each step is:
1. Streaming. Every particle moves one cell along its direction. Written
   as a gather: a cell takes DOWN from the neighbour above (x, y+1), LEFT
   from the right (x+1, y), UP from below (x, y-1) and RIGHT from the left
   (x-1, y), then ORs in its own BOUNDARY flag (walls never move).
2. Collision. COLLISION_TABLE is applied to the streamed value: head-on
   pairs turn by 90° in fluid cells, wall cells bounce everything back.

The step reads only the current buffer and writes only the next one, so
every cell is independent. Neighbours outside the grid read as the
BOUNDARY sentinel, which carries no particles: nothing streams in through
the domain edge. The vectorised path realises the sentinel by padding
the array with BOUNDARY, the same value Grid.get returns off-grid.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import numpy as np

from hppsim.core.cell import BOUNDARY, COLLISION_TABLE, DOWN, LEFT, RIGHT, UP, resolve_collisions

if TYPE_CHECKING:
    from hppsim.core.grid import Grid


def _pad(cells: np.ndarray) -> np.ndarray:
    """Surround the array with a one-cell ring of BOUNDARY sentinels."""
    return np.pad(cells, 1, mode="constant", constant_values=BOUNDARY)


def _stream_rows(padded: np.ndarray, cells: np.ndarray, y_min: int, y_max: int) -> np.ndarray:
    """Streamed (pre-collision) values for grid rows [y_min, y_max)."""
    # padded[y + 1, x + 1] == cells[y, x]
    from_above = padded[y_min + 2:y_max + 2, 1:-1] & DOWN
    from_right = padded[y_min + 1:y_max + 1, 2:] & LEFT
    from_below = padded[y_min:y_max, 1:-1] & UP
    from_left = padded[y_min + 1:y_max + 1, :-2] & RIGHT
    own_boundary = cells[y_min:y_max] & BOUNDARY
    return from_above | from_right | from_below | from_left | own_boundary


def stream(cells: np.ndarray) -> np.ndarray:
    """
    Streaming sub-step over a whole [height, width] cell array.

    Returns a new array; the input is not modified.
    """
    return _stream_rows(_pad(cells), cells, 0, cells.shape[0])


def collide(cells: np.ndarray) -> np.ndarray:
    """Collision sub-step: apply the HPP rule table to every cell."""
    return COLLISION_TABLE[cells]


def _row_ranges(height: int, workers: int) -> list[tuple[int, int]]:
    """Split [0, height) into at most `workers` contiguous non-empty ranges."""
    n_chunks = max(1, min(workers, height))
    bounds = np.linspace(0, height, n_chunks + 1).astype(int)
    return [(int(lo), int(hi)) for lo, hi in zip(bounds[:-1], bounds[1:]) if hi > lo]


def propagate(grid: "Grid", next_grid: "Grid", workers: int = 1):
    """
    Compute the next grid from the current one (streaming then collision).

    Args:
        grid: Current state, read only
        next_grid: Destination buffer, fully overwritten
        workers: Number of threads; rows are split into contiguous ranges.
            The pass has no cross-row writes, so the executor join is the
            only synchronisation needed.
    """
    if grid is next_grid or np.shares_memory(grid.cells, next_grid.cells):
        raise ValueError("propagate needs two distinct buffers")
    if grid.shape != next_grid.shape:
        raise ValueError(f"Grid shapes differ: {grid.shape} vs {next_grid.shape}")
    if workers <= 0:
        raise ValueError(f"workers must be positive, got {workers}")

    cells = grid.cells
    padded = _pad(cells)
    out = next_grid.cells

    def update_rows(y_range: tuple[int, int]):
        y_min, y_max = y_range
        out[y_min:y_max] = COLLISION_TABLE[_stream_rows(padded, cells, y_min, y_max)]

    ranges = _row_ranges(grid.height, workers)
    if len(ranges) == 1:
        update_rows(ranges[0])
        return

    with ThreadPoolExecutor(max_workers=len(ranges)) as executor:
        # list() re-raises any worker exception here
        list(executor.map(update_rows, ranges))


def propagate_cell(grid: "Grid", x: int, y: int) -> int:
    """
    Next value of a single cell, computed with Grid.get.

    Slow scalar form of propagate(), useful for checking the vectorised
    path and for inspecting individual cells.
    """
    streamed = (
        (grid.get(x, y + 1) & DOWN)
        | (grid.get(x + 1, y) & LEFT)
        | (grid.get(x, y - 1) & UP)
        | (grid.get(x - 1, y) & RIGHT)
        | (grid.get(x, y) & BOUNDARY)
    )
    return resolve_collisions(streamed)
