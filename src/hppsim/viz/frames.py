"""
Frame output and plots.

- save_rgb_image: the image encoder used by the runner. Takes a packed
  RGB8 buffer (row-major, 3 bytes per pixel, no padding) and writes a PNG.
- plot_frame / plot_density / plot_velocity: matplotlib figures for
  interactive inspection of a run.
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import matplotlib.image as mimage
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes

from hppsim.analysis.colouring import density_field, velocity_field

if TYPE_CHECKING:
    from hppsim.core.grid import Grid


CMAP_DENSITY = "gray"


class ImageWriteError(OSError):
    """A frame could not be written. Grid state is unaffected."""

    def __init__(self, path: str | Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to write {self.path}: {reason}")


def buffer_to_image(buffer: bytes | np.ndarray, width: int, height: int) -> np.ndarray:
    """View a packed RGB8 buffer as a [height, width, 3] uint8 array."""
    if isinstance(buffer, np.ndarray):
        data = np.asarray(buffer, dtype=np.uint8).ravel()
    else:
        data = np.frombuffer(bytes(buffer), dtype=np.uint8)
    expected = width * height * 3
    if data.size != expected:
        raise ValueError(
            f"RGB buffer has {data.size} bytes, expected {expected} for {width}x{height}"
        )
    return data.reshape(height, width, 3)


def save_rgb_image(buffer: bytes | np.ndarray, width: int, height: int, path: str | Path) -> Path:
    """
    Encode an RGB8 buffer as a PNG file.

    Args:
        buffer: width × height × 3 bytes, row-major, top row first
        width, height: Image size in pixels
        path: Destination file; parent directories are created

    Returns:
        The path written

    Raises:
        ValueError: buffer size does not match width × height × 3
        ImageWriteError: the file could not be written
    """
    image = buffer_to_image(buffer, width, height)
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        mimage.imsave(path, image, format="png")
    except OSError as e:
        raise ImageWriteError(path, str(e)) from e
    return path


def plot_frame(
    rgb: np.ndarray,
    title: str = "",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 8),
) -> tuple[Figure, Axes]:
    """
    Show a rendered frame.

    Args:
        rgb: [height, width, 3] uint8 image, row 0 at the top
        title: Plot title
        ax: Existing axes to plot on (creates new figure if None)

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    ax.imshow(rgb, origin="upper", interpolation="nearest")
    ax.set_title(title)
    ax.set_axis_off()
    return fig, ax


def plot_density(
    grid: "Grid",
    block_size: int,
    title: str = "Particles per cell",
    ax: Axes | None = None,
    colorbar: bool = True,
    figsize: tuple[float, float] = (8, 6),
) -> tuple[Figure, Axes]:
    """Heatmap of mean particles per cell (0 to 4) per block."""
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    im = ax.imshow(
        density_field(grid, block_size),
        origin="lower",
        cmap=CMAP_DENSITY,
        vmin=0,
        vmax=4,
        aspect="equal",
    )
    if colorbar:
        plt.colorbar(im, ax=ax, fraction=0.046, pad=0.04)

    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    return fig, ax


def plot_velocity(
    grid: "Grid",
    block_size: int,
    title: str = "Flux",
    ax: Axes | None = None,
    stride: int = 1,
    figsize: tuple[float, float] = (8, 6),
) -> tuple[Figure, Axes]:
    """Quiver plot of the per-block flux, every `stride` blocks."""
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    fx, fy = velocity_field(grid, block_size)
    yy, xx = np.mgrid[:fx.shape[0], :fx.shape[1]]
    s = slice(None, None, stride)
    ax.quiver(xx[s, s], yy[s, s], fx[s, s], fy[s, s], np.hypot(fx, fy)[s, s], cmap="viridis")
    ax.set_aspect("equal")
    ax.set_title(title)
    ax.set_xlabel("block x")
    ax.set_ylabel("block y")
    return fig, ax


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
