"""Unit tests for frame encoding and plots."""

import matplotlib.image as mimage
import matplotlib.pyplot as plt
import numpy as np
import pytest

from hppsim.core.cell import FULL, RIGHT
from hppsim.core.grid import Grid
from hppsim.viz.frames import (
    ImageWriteError,
    buffer_to_image,
    plot_density,
    plot_frame,
    plot_velocity,
    save_figure,
    save_rgb_image,
)


class TestBufferToImage:

    def test_bytes(self):
        image = buffer_to_image(bytes(range(12)), 2, 2)
        assert image.shape == (2, 2, 3)
        assert tuple(image[0, 1]) == (3, 4, 5)

    def test_wrong_size(self):
        with pytest.raises(ValueError, match="expected 12"):
            buffer_to_image(bytes(11), 2, 2)

    def test_array_input(self):
        arr = np.arange(18, dtype=np.uint8).reshape(2, 3, 3)
        assert np.array_equal(buffer_to_image(arr, 3, 2), arr)


class TestSaveRgbImage:

    def test_writes_png(self, tmp_path):
        rgb = np.zeros((3, 4, 3), dtype=np.uint8)
        rgb[0, 3] = (252, 10, 20)
        path = save_rgb_image(rgb.tobytes(), 4, 3, tmp_path / "frames" / "image0.png")

        assert path.exists()
        loaded = mimage.imread(path)
        assert loaded.shape[:2] == (3, 4)
        # PNGs read back as floats in [0, 1]
        assert np.allclose(loaded[0, 3, :3] * 255, (252, 10, 20), atol=0.5)
        assert np.allclose(loaded[2, 0, :3], 0.0)

    def test_size_mismatch(self, tmp_path):
        with pytest.raises(ValueError):
            save_rgb_image(bytes(10), 4, 3, tmp_path / "bad.png")

    def test_unwritable_destination(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(ImageWriteError) as exc:
            save_rgb_image(bytes(12), 2, 2, blocker / "image0.png")
        assert exc.value.path == blocker / "image0.png"
        assert isinstance(exc.value, OSError)


class TestPlots:

    def test_plot_frame(self):
        fig, ax = plot_frame(np.zeros((4, 4, 3), dtype=np.uint8), title="frame")
        assert ax.get_title() == "frame"
        plt.close(fig)

    def test_plot_density_and_velocity(self, tmp_path):
        grid = Grid(8, 8)
        grid.fill(0, 0, 4, 4, FULL)
        grid.fill(4, 4, 4, 4, RIGHT)

        fig, axes = plt.subplots(1, 2)
        plot_density(grid, 2, ax=axes[0])
        plot_velocity(grid, 2, ax=axes[1])
        save_figure(fig, tmp_path / "fields.png")
        assert (tmp_path / "fields.png").exists()
        plt.close(fig)
