"""
Simulation: owns the two grid buffers and advances them step by step.

Each step:
1. Reapply sources to the current buffer
2. propagate(current → next)
3. Swap the references, so the freshly written buffer becomes current and
   the old one becomes the destination for the following step

No cell is copied during the swap, and no buffer is read and written in
the same step.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from hppsim.core.grid import Grid
from hppsim.core.source import Source, apply_sources
from hppsim.core.update import propagate

if TYPE_CHECKING:
    from hppsim.core.config import SimulationConfig


@dataclass
class Simulation:
    """Double-buffered HPP lattice gas."""

    config: "SimulationConfig"
    sources: list[Source] = field(default_factory=list)
    rng: np.random.Generator | None = None

    current_tick: int = field(default=0, init=False)
    current: Grid = field(default=None, init=False)
    next: Grid = field(default=None, init=False)

    def __post_init__(self):
        if self.rng is None:
            self.rng = np.random.default_rng(self.config.seed)
        self.sources = list(self.sources)
        self.current = Grid(self.config.width, self.config.height)
        self.next = Grid(self.config.width, self.config.height)

    def fill_random(self, density: float):
        """Randomly occupy the whole current grid (walls included) at the given density."""
        self.current.fill_region(0, 0, self.config.width, self.config.height, density, self.rng)

    def add_edge_boundary(self):
        self.current.set_boundary_at_edge(self.config)

    def add_obstacle(self, x: int, y: int, width: int, height: int):
        """Paint a wall rectangle once; walls persist because boundary flags never move."""
        self.current.fill_boundary(x, y, width, height)

    def step(self):
        """Advance the simulation by one tick."""
        apply_sources(self.current, self.sources, self.rng)
        propagate(self.current, self.next, workers=self.config.workers)
        self.current, self.next = self.next, self.current
        self.current_tick += 1

    def run(self, n_ticks: int) -> dict:
        """
        Run simulation for n ticks.

        Returns:
            Statistics dictionary
        """
        for _ in range(n_ticks):
            self.step()

        return {
            "n_ticks": n_ticks,
            "current_tick": self.current_tick,
            "particle_count": self.current.particle_count(),
            "boundary_count": self.current.boundary_count(),
        }

    def frame(self) -> np.ndarray:
        """RGB8 image of the current buffer, [image_height, image_width, 3]."""
        from hppsim.analysis.colouring import colour_blocks
        return colour_blocks(self.current, self.config)
