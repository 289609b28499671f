"""Tests for counting.py"""

import dataclasses

import cv2
import numpy as np
import pytest

from color import ColorSpace
from config import PipelineConfig
from counting import count_batch, count_objects, count_objects_in_file
from errors import (
    ChannelCountMismatch,
    DegenerateElement,
    EmptyGrid,
    ImageLoadError,
    InvalidChannelCount,
    InvalidConnectivity,
    InvalidIterationCount,
)
from grid import ColorRange, PixelGrid, StructuringElement


@pytest.fixture
def config() -> PipelineConfig:
    element = StructuringElement.square(3)
    return dataclasses.replace(
        PipelineConfig.default(),
        erode_element=element,
        erode_iterations=1,
        dilate_element=element,
        dilate_iterations=1,
    )


def mask_config(connectivity: int = 8) -> PipelineConfig:
    """Máscara cinza 0/255 entra direto: GRAY -> GRAY, intervalo [255, 255], sem morfologia."""
    return PipelineConfig(
        source_space=ColorSpace.GRAY,
        target_space=ColorSpace.GRAY,
        color_range=ColorRange((255,), (255,)),
        erode_element=StructuringElement.square(1),
        erode_iterations=0,
        dilate_element=StructuringElement.square(1),
        dilate_iterations=0,
        connectivity=connectivity,
    )


class TestCountObjects:
    def test_noise_removed_by_opening(self, scene, config):
        result, arts = count_objects(PixelGrid(scene), config, expected=2)
        assert result.count == 2
        assert result.accuracy_percent == pytest.approx(100.0)
        assert arts is None

    def test_noise_counted_without_morphology(self, scene, config):
        config = dataclasses.replace(config, erode_iterations=0, dilate_iterations=0)
        result, _ = count_objects(PixelGrid(scene), config)
        assert result.count == 3
        assert result.accuracy_percent is None

    def test_mask_scenario(self):
        arr = np.zeros((5, 5), dtype=np.uint8)
        arr[0, 0] = 255
        arr[2:5, 2:5] = 255
        result, _ = count_objects(PixelGrid(arr), mask_config(8))
        assert result.count == 2

    def test_artifacts(self, scene, config):
        result, arts = count_objects(PixelGrid(scene), config, collect_artifacts=True)
        assert arts is not None
        assert np.array_equal(arts.original, scene)
        assert arts.mask.shape == (30, 30)
        assert np.count_nonzero(arts.mask) == 2 * 64 + 1
        assert np.count_nonzero(arts.eroded) == 2 * 36
        assert np.count_nonzero(arts.dilated) == 2 * 64
        assert arts.label_map.max() == result.count
        assert [c.area for c in arts.components] == [64, 64]
        assert arts.components[0].bbox == (2, 2, 8, 8)

    def test_input_grid_untouched(self, scene, config):
        grid = PixelGrid(scene)
        before = grid.pixels.copy()
        count_objects(grid, config)
        assert np.array_equal(grid.pixels, before)


class TestValidation:
    def test_source_space_channels(self, config):
        gray = PixelGrid(np.zeros((4, 4), dtype=np.uint8))
        with pytest.raises(InvalidChannelCount, match="source_space"):
            count_objects(gray, config)

    def test_range_must_match_target_space(self, scene, config):
        config = dataclasses.replace(config, color_range=ColorRange((0,), (255,)))
        with pytest.raises(ChannelCountMismatch):
            count_objects(PixelGrid(scene), config)

    def test_negative_iterations(self, scene, config):
        config = dataclasses.replace(config, dilate_iterations=-1)
        with pytest.raises(InvalidIterationCount, match="dilate_iterations"):
            count_objects(PixelGrid(scene), config)

    def test_degenerate_element(self, scene, config):
        config = dataclasses.replace(config, erode_element=StructuringElement(0, 3))
        with pytest.raises(DegenerateElement):
            count_objects(PixelGrid(scene), config)

    def test_connectivity(self, scene, config):
        config = dataclasses.replace(config, connectivity=6)
        with pytest.raises(InvalidConnectivity):
            count_objects(PixelGrid(scene), config)

    def test_empty_grid(self, config):
        with pytest.raises(EmptyGrid, match="count_objects"):
            count_objects(PixelGrid(np.zeros((0, 0, 3), dtype=np.uint8)), config)


class TestFiles:
    def test_count_from_file(self, scene_file, config):
        result, arts = count_objects_in_file(scene_file, config, expected=4, collect_artifacts=True)
        assert result.count == 2
        assert result.accuracy_percent == pytest.approx(50.0)
        assert arts.original.shape == (30, 30, 3)

    def test_missing_file(self, tmp_path, config):
        with pytest.raises(ImageLoadError, match="nope.png"):
            count_objects_in_file(str(tmp_path / "nope.png"), config)

    def test_batch(self, tmp_path, scene, config):
        paths = []
        for n in range(1, 4):
            img = np.zeros((20, 40, 3), dtype=np.uint8)
            for i in range(n):
                img[5:12, 2 + i * 12 : 9 + i * 12] = scene[2, 2]
            path = str(tmp_path / f"img_{n}.png")
            cv2.imwrite(path, img)
            paths.append(path)

        results = count_batch(paths, config, expected_counts={paths[2]: 3}, max_workers=3)
        assert list(results) == paths
        assert [r.count for r in results.values()] == [1, 2, 3]
        assert results[paths[2]].accuracy_percent == pytest.approx(100.0)
        assert results[paths[0]].accuracy_percent is None

    def test_batch_failure_is_raised(self, tmp_path, scene_file, config):
        with pytest.raises(ImageLoadError):
            count_batch([scene_file, str(tmp_path / "missing.png")], config, max_workers=2)

    def test_batch_reraises_failure_in_input_order(self, tmp_path, scene_file, config):
        paths = [str(tmp_path / "zz_missing.png"), scene_file, str(tmp_path / "aa_missing.png")]
        for _ in range(5):
            with pytest.raises(ImageLoadError, match="zz_missing.png"):
                count_batch(paths, config, max_workers=3)

    def test_batch_empty(self, config):
        assert count_batch([], config) == {}
