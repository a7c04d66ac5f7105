"""Unit tests for block aggregation."""

import numpy as np
import pytest

from hppsim.analysis.blocks import (
    BOUNDARY_INDEX,
    DOWN_INDEX,
    LEFT_INDEX,
    RIGHT_INDEX,
    UP_INDEX,
    Block,
    block_counts,
)
from hppsim.core.cell import BOUNDARY, DOWN, FULL, LEFT, RIGHT, UP
from hppsim.core.grid import Grid


class TestBlockCounts:

    def test_shape(self):
        counts = block_counts(np.zeros((12, 8), dtype=np.uint8), 4)
        assert counts.shape == (3, 2, 5)
        assert np.all(counts == 0)

    def test_each_flag_counted_in_its_slot(self):
        cells = np.array([[UP, RIGHT], [DOWN | LEFT, BOUNDARY | UP]], dtype=np.uint8)
        counts = block_counts(cells, 2)[0, 0]
        assert counts[UP_INDEX] == 2
        assert counts[RIGHT_INDEX] == 1
        assert counts[DOWN_INDEX] == 1
        assert counts[LEFT_INDEX] == 1
        assert counts[BOUNDARY_INDEX] == 1

    def test_blocks_do_not_overlap(self):
        grid = Grid(6, 4)
        grid.fill(0, 0, 3, 4, FULL)
        counts = block_counts(grid.cells, 2)
        # Columns 0-1 full, column 2 straddles blocks 1, columns 3-5 empty
        assert counts[0, 0, UP_INDEX] == 4
        assert counts[0, 1, UP_INDEX] == 2
        assert counts[0, 2, UP_INDEX] == 0
        assert counts[..., :4].sum() == 4 * 3 * 4

    def test_block_size_must_divide(self):
        with pytest.raises(ValueError):
            block_counts(np.zeros((10, 8), dtype=np.uint8), 4)

    def test_block_size_one_is_identity_of_flags(self, rng):
        grid = Grid(5, 3)
        grid.fill_region(0, 0, 5, 3, 0.5, rng)
        counts = block_counts(grid.cells, 1)
        assert np.array_equal(counts[..., UP_INDEX], (grid.cells & UP) != 0)
        assert np.array_equal(counts[..., LEFT_INDEX], (grid.cells & LEFT) != 0)


class TestBlock:

    def test_from_grid(self):
        grid = Grid(8, 8)
        grid.fill(4, 0, 4, 4, RIGHT | UP)
        grid.set(5, 1, BOUNDARY)
        block = Block.from_grid(grid, 1, 0, 4)
        assert (block.x, block.y, block.block_size) == (1, 0, 4)
        assert block.right == 15
        assert block.up == 15
        assert block.down == 0
        assert block.left == 0
        assert block.boundary == 1
        assert block.is_boundary

    def test_from_grid_matches_block_counts(self, rng):
        grid = Grid(8, 12)
        grid.fill_region(0, 0, 8, 12, 0.3, rng)
        counts = block_counts(grid.cells, 4)
        for by in range(3):
            for bx in range(2):
                block = Block.from_grid(grid, bx, by, 4)
                assert [block.up, block.right, block.down, block.left, block.boundary] == list(
                    counts[by, bx]
                )

    def test_from_grid_out_of_range(self):
        with pytest.raises(IndexError):
            Block.from_grid(Grid(8, 8), 2, 0, 4)

    def test_total_and_flux(self):
        block = Block(up=3, right=5, down=1, left=1, boundary=0, x=0, y=0, block_size=2)
        assert block.total_particles == 10
        assert block.n_cells == 4
        assert not block.is_boundary
        assert block.flux == (1.0, 0.5)
