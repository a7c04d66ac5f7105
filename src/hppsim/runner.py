"""
Runner: set up a simulation and write frames to disk.

Frames are named image0.png (initial state), image1.png, ... with one
frame every `frame_interval` steps. A frame that fails to encode is
logged and skipped; the grids are never touched by the encoder, so the
run continues unaffected. There is no retry.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Callable, Iterable

import numpy as np

from hppsim.analysis.colouring import rgb_bytes
from hppsim.core.config import SimulationConfig
from hppsim.core.simulation import Simulation
from hppsim.core.source import Source, apply_sources
from hppsim.viz.frames import save_rgb_image

logger = logging.getLogger(__name__)

# encoder(buffer, width, height, path)
Encoder = Callable[[bytes, int, int, Path], object]

PROGRESS_INTERVAL = 100


def build_simulation(
    config: SimulationConfig,
    sources: Iterable[Source] = (),
    initial_density: float | None = None,
    initial_regions: Iterable[Source] = (),
    obstacles: Iterable[tuple[int, int, int, int]] = (),
    rng: np.random.Generator | None = None,
) -> Simulation:
    """
    Create a Simulation and paint its initial state.

    Order: uniform random fill, one-off seed regions, edge walls,
    obstacles. Walls go last so no fill overwrites them.

    Args:
        config: Run parameters
        sources: Regions reapplied every step
        initial_density: If set, fill the whole grid at this probability
        initial_regions: Regions applied once before the first step
        obstacles: (x, y, width, height) wall rectangles
        rng: Random generator (seeded from config.seed if None)
    """
    sim = Simulation(config=config, sources=list(sources), rng=rng)
    if initial_density is not None:
        sim.fill_random(initial_density)
    apply_sources(sim.current, initial_regions, sim.rng)
    if config.edge_boundary:
        sim.add_edge_boundary()
    for x, y, width, height in obstacles:
        sim.add_obstacle(x, y, width, height)
    return sim


def _write_frame(sim: Simulation, encoder: Encoder, path: Path) -> bool:
    config = sim.config
    buffer = rgb_bytes(sim.current, config)
    try:
        encoder(buffer, config.image_width, config.image_height, path)
    except OSError as e:
        logger.warning("Frame %s at tick %d not written: %s", path, sim.current_tick, e)
        return False
    return True


def run_frames(
    sim: Simulation,
    output_dir: str | Path = "output",
    encoder: Encoder = save_rgb_image,
    n_ticks: int | None = None,
) -> dict:
    """
    Step a prepared simulation, writing a frame every frame_interval ticks.

    Args:
        sim: Simulation with its initial state painted
        output_dir: Directory for image{n}.png files
        encoder: Image encoder, called as encoder(buffer, width, height, path)
        n_ticks: Steps to run (config.iterations if None)

    Returns:
        Statistics dictionary
    """
    config = sim.config
    output_dir = Path(output_dir)
    n_ticks = config.iterations if n_ticks is None else n_ticks

    frames_written = 0
    failed_frames = 0

    if _write_frame(sim, encoder, output_dir / "image0.png"):
        frames_written += 1
    else:
        failed_frames += 1

    logger.info(
        "Running %d steps on %dx%d grid, frame every %d steps",
        n_ticks, config.width, config.height, config.frame_interval,
    )
    for i in range(1, n_ticks + 1):
        sim.step()
        if i % config.frame_interval == 0:
            path = output_dir / f"image{i // config.frame_interval}.png"
            if _write_frame(sim, encoder, path):
                frames_written += 1
            else:
                failed_frames += 1
        if i % PROGRESS_INTERVAL == 0:
            logger.debug("step %d/%d", i, n_ticks)

    return {
        "n_ticks": n_ticks,
        "current_tick": sim.current_tick,
        "frames_written": frames_written,
        "failed_frames": failed_frames,
        "particle_count": sim.current.particle_count(),
        "boundary_count": sim.current.boundary_count(),
    }


def run_simulation(
    config: SimulationConfig,
    sources: Iterable[Source] = (),
    output_dir: str | Path = "output",
    encoder: Encoder = save_rgb_image,
    initial_density: float | None = None,
    initial_regions: Iterable[Source] = (),
    obstacles: Iterable[tuple[int, int, int, int]] = (),
) -> dict:
    """Build a simulation from config and run it for config.iterations steps."""
    sim = build_simulation(
        config,
        sources=sources,
        initial_density=initial_density,
        initial_regions=initial_regions,
        obstacles=obstacles,
    )
    return run_frames(sim, output_dir=output_dir, encoder=encoder)
