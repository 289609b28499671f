"""Tests for utils.py"""

import numpy as np
import pytest

from errors import ImageLoadError
from grid import make_mask
from labeling import label
from utils import colorize_labels, component_stats, draw_components, load_image


def scenario_label_map():
    arr = np.zeros((5, 5), dtype=bool)
    arr[0, 0] = True
    arr[2:5, 2:5] = True
    return label(make_mask(arr), 8)


class TestComponentStats:
    def test_scenario_stats(self):
        label_map, count = scenario_label_map()
        first, second = component_stats(label_map, count)

        assert (first.label, first.area, first.bbox, first.centroid) == (1, 1, (0, 0, 1, 1), (0.0, 0.0))
        assert (second.label, second.area, second.bbox) == (2, 9, (2, 2, 3, 3))
        assert second.centroid == pytest.approx((3.0, 3.0))

    def test_no_components(self):
        assert component_stats(np.zeros((3, 3), dtype=np.int32), 0) == []


class TestDiagnostics:
    def test_colorize_keeps_background_black(self):
        label_map, _ = scenario_label_map()
        bgr = colorize_labels(label_map)
        assert bgr.shape == (5, 5, 3)
        assert not bgr[label_map == 0].any()
        assert bgr[label_map > 0].any(axis=1).all()

    def test_draw_components_copies_input(self):
        label_map, count = scenario_label_map()
        img = np.zeros((5, 5, 3), dtype=np.uint8)
        overlay = draw_components(img, component_stats(label_map, count))
        assert overlay.shape == (5, 5, 3)
        assert not img.any()


class TestLoadImage:
    def test_loaded_grid_is_read_only(self, scene_file):
        grid = load_image(scene_file)
        assert grid.shape == (30, 30, 3)
        assert not grid.pixels.flags.writeable

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImageLoadError, match="missing.png"):
            load_image(str(tmp_path / "missing.png"))
