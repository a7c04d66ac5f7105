"""
Visualization utilities.

- PNG frames from packed RGB8 buffers
- Density heatmaps and flux quiver plots
"""

from hppsim.viz.frames import (
    ImageWriteError,
    buffer_to_image,
    plot_density,
    plot_frame,
    plot_velocity,
    save_figure,
    save_rgb_image,
)

__all__ = [
    "ImageWriteError",
    "buffer_to_image",
    "plot_density",
    "plot_frame",
    "plot_velocity",
    "save_figure",
    "save_rgb_image",
]
