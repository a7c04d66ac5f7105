"""
Cell encoding for the HPP lattice gas.

A cell is a single uint8 holding five independent flags:

    bit 3  UP        particle moving towards +y
    bit 2  RIGHT     particle moving towards +x
    bit 1  DOWN      particle moving towards -y
    bit 0  LEFT      particle moving towards -x
    bit 4  BOUNDARY  solid wall (reflects instead of passing through)

At most one particle per direction per cell. The collision rule is a pure
function of the cell value, so it is tabulated once (COLLISION_TABLE) and
applied to whole grids by fancy indexing.
"""

from __future__ import annotations

import numpy as np


CELL_DTYPE = np.uint8

EMPTY = 0b0000_0000
LEFT = 0b0000_0001
DOWN = 0b0000_0010
RIGHT = 0b0000_0100
UP = 0b0000_1000
BOUNDARY = 0b0001_0000

FULL = UP | RIGHT | DOWN | LEFT

# Direction name → flag
DIRECTIONS = {
    "up": UP,
    "right": RIGHT,
    "down": DOWN,
    "left": LEFT,
}

OPPOSITE_DIRECTION = {
    UP: DOWN,
    DOWN: UP,
    RIGHT: LEFT,
    LEFT: RIGHT,
}

# Movement per step; y grows upwards
DIRECTION_DELTAS = {
    UP: (0, 1),
    RIGHT: (1, 0),
    DOWN: (0, -1),
    LEFT: (-1, 0),
}


def is_boundary(cell: int) -> bool:
    """True if the boundary flag is set."""
    return bool(cell & BOUNDARY)


def count_particles(cell: int) -> int:
    """Number of directional flags set (boundary flag ignored)."""
    return bin(int(cell) & FULL).count("1")


def reflect(cell: int) -> int:
    """
    Swap every directional flag with its opposite (UP↔DOWN, RIGHT↔LEFT).

    Only the directional bits are returned; the caller decides what
    happens to the boundary flag.
    """
    up = cell & UP
    right = cell & RIGHT
    down = cell & DOWN
    left = cell & LEFT
    return (up >> 2) | (right >> 2) | (down << 2) | (left << 2)


def resolve_collisions(cell: int) -> int:
    """
    Apply the HPP collision rule to one streamed cell value.

    Fluid cell: the head-on pairs UP|DOWN and LEFT|RIGHT turn into each
    other; every other occupation pattern passes through unchanged.

    Wall cell: all particles bounce back (each direction reflected to its
    opposite) and the boundary flag stays set.
    """
    cell = int(cell)
    if cell & BOUNDARY == 0:
        if cell == UP | DOWN:
            return LEFT | RIGHT
        if cell == LEFT | RIGHT:
            return UP | DOWN
        return cell
    return reflect(cell) | BOUNDARY


def _build_collision_table() -> np.ndarray:
    table = np.array(
        [resolve_collisions(value) for value in range(2 * BOUNDARY)],
        dtype=CELL_DTYPE,
    )
    table.flags.writeable = False
    return table


# Indexed by any 5-bit cell value
COLLISION_TABLE = _build_collision_table()
