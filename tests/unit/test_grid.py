"""Unit tests for Grid and SimulationConfig."""

import numpy as np
import pytest

from hppsim.core.cell import BOUNDARY, EMPTY, FULL, LEFT, RIGHT, UP
from hppsim.core.config import SimulationConfig
from hppsim.core.grid import Grid


class TestSimulationConfig:
    """Tests for SimulationConfig."""

    def test_default_config(self):
        cfg = SimulationConfig(width=64, height=32)
        assert cfg.downscale == 1
        assert cfg.colouring == "density"
        assert cfg.density_scale == 63.0
        assert cfg.edge_boundary is True
        assert cfg.workers == 1
        assert cfg.shape == (32, 64)

    def test_image_size(self):
        cfg = SimulationConfig(width=64, height=32, downscale=8)
        assert cfg.image_width == 8
        assert cfg.image_height == 4

    def test_downscale_must_divide(self):
        with pytest.raises(ValueError, match="downscale"):
            SimulationConfig(width=30, height=32, downscale=4)

    @pytest.mark.parametrize(
        "field", ["width", "height", "downscale", "iterations", "frame_interval", "workers"]
    )
    def test_non_positive_rejected(self, field):
        kwargs = dict(width=8, height=8)
        kwargs[field] = 0
        with pytest.raises(ValueError, match=field):
            SimulationConfig(**kwargs)

    def test_unknown_colouring(self):
        with pytest.raises(ValueError, match="colouring"):
            SimulationConfig(width=8, height=8, colouring="rainbow")

    def test_density_scale_must_fit_a_byte(self):
        SimulationConfig(width=8, height=8, density_scale=63.75)
        with pytest.raises(ValueError):
            SimulationConfig(width=8, height=8, density_scale=64.0)
        with pytest.raises(ValueError):
            SimulationConfig(width=8, height=8, density_scale=0.0)

    def test_frozen(self):
        cfg = SimulationConfig(width=8, height=8)
        with pytest.raises(AttributeError):
            cfg.width = 16


class TestGridAccess:
    """Tests for get/set."""

    def test_creation(self):
        grid = Grid(10, 6)
        assert grid.shape == (6, 10)
        assert grid.cells.dtype == np.uint8
        assert np.all(grid.cells == EMPTY)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            Grid(0, 5)

    def test_set_and_get(self):
        grid = Grid(10, 6)
        grid.set(3, 4, UP | LEFT)
        assert grid.get(3, 4) == UP | LEFT
        assert grid.cells[4, 3] == UP | LEFT

    @pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (10, 0), (0, 6), (-100, 100)])
    def test_out_of_range_reads_are_boundary(self, x, y):
        grid = Grid(10, 6)
        grid.cells.fill(FULL)
        assert grid.get(x, y) == BOUNDARY

    @pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (10, 0), (0, 6)])
    def test_out_of_range_writes_raise(self, x, y):
        grid = Grid(10, 6)
        with pytest.raises(IndexError):
            grid.set(x, y, FULL)
        assert np.all(grid.cells == EMPTY)

    def test_from_array_copies(self):
        cells = np.zeros((3, 4), dtype=np.uint8)
        grid = Grid.from_array(cells)
        cells[0, 0] = FULL
        assert grid.width == 4 and grid.height == 3
        assert grid.get(0, 0) == EMPTY

    def test_copy_and_equality(self):
        grid = Grid(5, 5)
        grid.set(2, 2, RIGHT)
        clone = grid.copy()
        assert clone == grid
        clone.set(2, 2, LEFT)
        assert clone != grid

    def test_iter_cells_coverage(self):
        grid = Grid(5, 4)
        assert set(grid.iter_cells()) == {(x, y) for x in range(5) for y in range(4)}


class TestFillRegion:
    """Tests for random fills."""

    def test_probability_one_gives_full(self, rng):
        grid = Grid(8, 8)
        grid.fill_region(2, 3, 4, 2, 1.0, rng)
        assert np.all(grid.cells[3:5, 2:6] == FULL)
        assert grid.particle_count() == 4 * 4 * 2

    def test_probability_zero_gives_empty(self, rng):
        grid = Grid(8, 8)
        grid.cells.fill(FULL)
        grid.fill_region(0, 0, 8, 8, 0.0, rng)
        assert np.all(grid.cells == EMPTY)

    def test_clears_boundary(self, rng):
        grid = Grid(8, 8)
        grid.fill_boundary(0, 0, 8, 8)
        grid.fill_region(0, 0, 8, 8, 0.5, rng)
        assert grid.boundary_count() == 0

    def test_leaves_outside_untouched(self, rng):
        grid = Grid(8, 8)
        grid.fill_region(2, 2, 2, 2, 1.0, rng)
        assert grid.particle_count() == 16
        assert grid.get(1, 1) == EMPTY

    def test_flags_drawn_independently(self, rng):
        grid = Grid(200, 200)
        grid.fill_region(0, 0, 200, 200, 0.5, rng)
        # Joint draws would only give EMPTY or FULL cells
        mixed = (grid.cells != EMPTY) & (grid.cells != FULL)
        assert mixed.mean() > 0.8
        for flag in (UP, RIGHT, LEFT):
            assert abs(np.mean((grid.cells & flag) != 0) - 0.5) < 0.02

    def test_mean_occupancy_matches_probability(self, rng):
        grid = Grid(100, 100)
        grid.fill_region(0, 0, 100, 100, 0.25, rng)
        assert np.isclose(grid.particle_count() / (4 * 100 * 100), 0.25, atol=0.02)

    @pytest.mark.parametrize("p", [-0.1, 1.5])
    def test_invalid_probability(self, p, rng):
        with pytest.raises(ValueError):
            Grid(4, 4).fill_region(0, 0, 4, 4, p, rng)

    def test_region_outside_grid_raises(self, rng):
        with pytest.raises(IndexError):
            Grid(4, 4).fill_region(2, 2, 4, 4, 0.5, rng)


class TestBoundaryPainting:
    """Tests for wall painting."""

    def test_fill_boundary(self):
        grid = Grid(6, 6)
        grid.fill_boundary(1, 1, 2, 3)
        assert grid.boundary_count() == 6
        assert grid.get(1, 1) == BOUNDARY
        assert grid.get(2, 3) == BOUNDARY
        assert grid.get(3, 3) == EMPTY

    def test_fill_boundary_outside_grid_raises(self):
        with pytest.raises(IndexError):
            Grid(4, 4).fill_boundary(-1, 0, 2, 2)

    def test_edge_boundary_closes_box(self):
        cfg = SimulationConfig(width=6, height=5)
        grid = Grid(6, 5)
        grid.set_boundary_at_edge(cfg)

        edge = np.ones((5, 6), dtype=bool)
        edge[1:-1, 1:-1] = False
        assert np.all(grid.cells[edge] == BOUNDARY)
        assert np.all(grid.cells[~edge] == EMPTY)
        assert grid.boundary_count() == 2 * 6 + 2 * 3

    def test_edge_boundary_size_mismatch(self):
        cfg = SimulationConfig(width=8, height=8)
        with pytest.raises(ValueError):
            Grid(6, 6).set_boundary_at_edge(cfg)
