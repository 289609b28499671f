import logging
from enum import Enum
from typing import Dict, Tuple

import cv2
import numpy as np

from errors import ChannelCountMismatch, InvalidChannelCount
from grid import BACKGROUND, FOREGROUND, ColorRange, PixelGrid, check_not_empty

logger = logging.getLogger(__name__)


class ColorSpace(Enum):
    RGB = "rgb"
    BGR = "bgr"
    HSV = "hsv"  # convenção 8 bits do OpenCV: H 0-179, S e V 0-255
    GRAY = "gray"

    @property
    def channels(self) -> int:
        return 1 if self is ColorSpace.GRAY else 3


_CONVERSIONS: Dict[Tuple[ColorSpace, ColorSpace], int] = {
    (ColorSpace.RGB, ColorSpace.BGR): cv2.COLOR_RGB2BGR,
    (ColorSpace.BGR, ColorSpace.RGB): cv2.COLOR_BGR2RGB,
    (ColorSpace.RGB, ColorSpace.HSV): cv2.COLOR_RGB2HSV,
    (ColorSpace.BGR, ColorSpace.HSV): cv2.COLOR_BGR2HSV,
    (ColorSpace.HSV, ColorSpace.RGB): cv2.COLOR_HSV2RGB,
    (ColorSpace.HSV, ColorSpace.BGR): cv2.COLOR_HSV2BGR,
    (ColorSpace.RGB, ColorSpace.GRAY): cv2.COLOR_RGB2GRAY,
    (ColorSpace.BGR, ColorSpace.GRAY): cv2.COLOR_BGR2GRAY,
    (ColorSpace.GRAY, ColorSpace.RGB): cv2.COLOR_GRAY2RGB,
    (ColorSpace.GRAY, ColorSpace.BGR): cv2.COLOR_GRAY2BGR,
}


def _cvt(img: np.ndarray, source: ColorSpace, target: ColorSpace) -> np.ndarray:
    code = _CONVERSIONS.get((source, target))
    if code is not None:
        return cv2.cvtColor(img, code)

    # sem código direto (ex.: HSV -> GRAY): passa por RGB
    return _cvt(_cvt(img, source, ColorSpace.RGB), ColorSpace.RGB, target)


def convert(grid: PixelGrid, source: ColorSpace, target: ColorSpace) -> PixelGrid:
    """Converte a grade entre espaços de cor; sempre aloca uma grade nova."""
    check_not_empty(grid, "convert")

    if grid.channels != source.channels:
        raise InvalidChannelCount(
            "convert",
            "source_space",
            f"{source.name} espera {source.channels} canais, grade tem {grid.channels}",
            grid.channels,
        )

    if source is target:
        return PixelGrid(grid.pixels)

    out = _cvt(grid.as_image(), source, target)
    logger.debug("convert %s -> %s (%dx%d)", source.name, target.name, grid.height, grid.width)

    return PixelGrid._wrap_owned(out)


def threshold(grid: PixelGrid, color_range: ColorRange) -> PixelGrid:
    """Máscara 0/255: foreground só quando todos os canais estão dentro dos limites."""
    check_not_empty(grid, "threshold")

    if color_range.channels != grid.channels:
        raise ChannelCountMismatch(
            "threshold",
            "color_range",
            f"intervalo declara {color_range.channels} canais, grade tem {grid.channels}",
            color_range.channels,
        )

    lower = np.array(color_range.lower, dtype=np.uint8)
    upper = np.array(color_range.upper, dtype=np.uint8)
    px = grid.pixels

    inside = np.all((px >= lower) & (px <= upper), axis=2)
    mask = np.where(inside, FOREGROUND, BACKGROUND).astype(np.uint8)
    logger.debug("threshold: %d pixels no intervalo", int(np.count_nonzero(inside)))

    return PixelGrid._wrap_owned(mask)
