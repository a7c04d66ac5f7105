"""
Core engine primitives.

This layer knows NOTHING about colours, images or files.
It only knows:
- Cells: four direction flags plus a boundary flag
- The grid, with off-grid reads acting as walls
- Sources that keep a region at a fixed occupation probability
- The update rule: streaming, then HPP collision
- The double buffer that advances a run
"""

from hppsim.core.cell import (
    BOUNDARY,
    COLLISION_TABLE,
    DOWN,
    EMPTY,
    FULL,
    LEFT,
    RIGHT,
    UP,
    count_particles,
    reflect,
    resolve_collisions,
)
from hppsim.core.config import SimulationConfig
from hppsim.core.grid import Grid
from hppsim.core.source import Source, apply_sources
from hppsim.core.update import collide, propagate, propagate_cell, stream
from hppsim.core.simulation import Simulation

__all__ = [
    "BOUNDARY",
    "COLLISION_TABLE",
    "DOWN",
    "EMPTY",
    "FULL",
    "LEFT",
    "RIGHT",
    "UP",
    "count_particles",
    "reflect",
    "resolve_collisions",
    "SimulationConfig",
    "Grid",
    "Source",
    "apply_sources",
    "collide",
    "propagate",
    "propagate_cell",
    "stream",
    "Simulation",
]
