import logging
from typing import Callable

import numpy as np

from errors import InvalidIterationCount
from grid import BACKGROUND, FOREGROUND, PixelGrid, StructuringElement, check_mask, check_not_empty

logger = logging.getLogger(__name__)

Reducer = Callable[[np.ndarray, np.ndarray], np.ndarray]


def _window_pass(fg: np.ndarray, element: StructuringElement, reduce: Reducer, start: bool) -> np.ndarray:
    """Uma iteração: combina todas as posições cobertas pelo kernel ancorado em cada pixel."""
    h, w = fg.shape
    kh, kw = element.height, element.width
    ay, ax = element.anchor

    # fora da grade conta sempre como fundo
    padded = np.zeros((h + kh - 1, w + kw - 1), dtype=bool)
    padded[ay : ay + h, ax : ax + w] = fg

    acc = np.full((h, w), start, dtype=bool)
    for dy in range(kh):
        for dx in range(kw):
            acc = reduce(acc, padded[dy : dy + h, dx : dx + w])

    return acc


def _morph(
    stage: str,
    mask: PixelGrid,
    element: StructuringElement,
    iterations: int,
    reduce: Reducer,
    start: bool,
) -> PixelGrid:
    check_not_empty(mask, stage)
    check_mask(mask, stage)
    element.validate(stage)

    if iterations < 0:
        raise InvalidIterationCount(stage, "iterations", f"deve ser >= 0, recebido {iterations}", iterations)

    fg = mask.pixels[:, :, 0] == FOREGROUND

    # cada iteração consome a saída da anterior
    for _ in range(iterations):
        fg = _window_pass(fg, element, reduce, start)

    logger.debug(
        "%s %dx%d x%d: %d pixels de foreground",
        stage, element.height, element.width, iterations, int(np.count_nonzero(fg)),
    )

    return PixelGrid._wrap_owned(np.where(fg, FOREGROUND, BACKGROUND).astype(np.uint8))


def erode(mask: PixelGrid, element: StructuringElement, iterations: int = 1) -> PixelGrid:
    """Erosão: foreground só se todo o kernel cobrir foreground (borda = fundo)."""
    return _morph("erode", mask, element, iterations, np.logical_and, True)


def dilate(mask: PixelGrid, element: StructuringElement, iterations: int = 1) -> PixelGrid:
    """Dilatação: foreground se qualquer posição coberta for foreground."""
    return _morph("dilate", mask, element, iterations, np.logical_or, False)
