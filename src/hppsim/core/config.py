"""
Run parameters for a lattice-gas simulation.

A SimulationConfig is fixed for the lifetime of a run. Misconfiguration
(block size not dividing the grid, non-positive counts, unknown colouring)
is rejected at construction rather than surfacing later as a corrupt frame.
"""

from dataclasses import dataclass
from typing import Literal, get_args


Colouring = Literal["density", "velocity"]

# 4 particles per cell × 63.75 = 255
MAX_DENSITY_SCALE = 63.75


@dataclass(frozen=True)
class SimulationConfig:
    """Configuration for a 2D HPP lattice-gas run."""

    width: int  # Grid width in cells
    height: int  # Grid height in cells
    downscale: int = 1  # Block edge length, cells per output pixel
    iterations: int = 1000
    frame_interval: int = 1  # Write a frame every N steps
    colouring: Colouring = "density"

    # Grey level per mean particle per cell. 63 keeps a FULL block at 252,
    # just below clipping.
    density_scale: float = 63.0

    edge_boundary: bool = True  # Close the domain with one-cell walls
    workers: int = 1  # Threads for the streaming/collision pass
    seed: int | None = None

    def __post_init__(self):
        for name in ("width", "height", "downscale", "iterations", "frame_interval", "workers"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        if self.width % self.downscale or self.height % self.downscale:
            raise ValueError(
                f"downscale {self.downscale} must divide grid size "
                f"{self.width}x{self.height}"
            )

        if self.colouring not in get_args(Colouring):
            raise ValueError(f"Unknown colouring: {self.colouring}")

        if not 0.0 < self.density_scale <= MAX_DENSITY_SCALE:
            raise ValueError(
                f"density_scale must be in (0, {MAX_DENSITY_SCALE}], got {self.density_scale}"
            )

    @property
    def shape(self) -> tuple[int, int]:
        """Return (height, width) grid dimensions."""
        return self.height, self.width

    @property
    def image_width(self) -> int:
        return self.width // self.downscale

    @property
    def image_height(self) -> int:
        return self.height // self.downscale
