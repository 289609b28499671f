import numpy as np
import pytest

# Marrom em BGR; em HSV (OpenCV) fica perto de (12, 178, 139)
BROWN_BGR = (42, 82, 139)


def paint_scene() -> np.ndarray:
    """30x30 preto com dois quadrados 8x8 marrons e um pixel de ruído marrom."""
    img = np.zeros((30, 30, 3), dtype=np.uint8)
    img[2:10, 2:10] = BROWN_BGR
    img[15:23, 15:23] = BROWN_BGR
    img[27, 2] = BROWN_BGR

    return img


@pytest.fixture
def scene() -> np.ndarray:
    return paint_scene()


@pytest.fixture
def scene_file(tmp_path) -> str:
    import cv2

    path = tmp_path / "scene.png"
    cv2.imwrite(str(path), paint_scene())

    return str(path)
