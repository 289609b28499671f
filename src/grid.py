from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from errors import DegenerateElement, EmptyGrid, InvalidChannelCount, InvalidColorRange, PipelineError

FOREGROUND: int = 255
BACKGROUND: int = 0


def _checked_samples(pixels: np.ndarray) -> np.ndarray:
    """Promove 2-D para H×W×1 e valida tipo e faixa das amostras (sem copiar)."""
    arr = np.asarray(pixels)

    if arr.ndim == 2:
        arr = arr[:, :, np.newaxis]
    if arr.ndim != 3:
        raise ValueError(f"PixelGrid espera array 2-D ou 3-D, recebido ndim={arr.ndim}")
    if arr.shape[2] == 0:
        raise ValueError("PixelGrid precisa de ao menos um canal")

    if arr.dtype != np.uint8:
        if arr.dtype.kind not in "iu":
            raise ValueError(f"Amostras devem ser inteiras sem sinal, recebido dtype={arr.dtype}")
        if arr.size and (arr.min() < 0 or arr.max() > 255):
            raise ValueError("Amostras fora do intervalo 0-255")

    return arr


class PixelGrid:
    """Grade H×W×C de amostras uint8. O buffer é copiado na entrada e exposto somente para leitura."""

    def __init__(self, pixels: np.ndarray):
        arr = np.array(_checked_samples(pixels), dtype=np.uint8, order="C")
        arr.flags.writeable = False
        self._pixels = arr

    @classmethod
    def _wrap_owned(cls, pixels: np.ndarray) -> "PixelGrid":
        """Adota sem cópia um array recém-alocado por um estágio (ninguém mais o referencia)."""
        arr = np.ascontiguousarray(_checked_samples(pixels), dtype=np.uint8)
        arr.flags.writeable = False
        grid = cls.__new__(cls)
        grid._pixels = arr

        return grid

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def channels(self) -> int:
        return self._pixels.shape[2]

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self._pixels.shape

    def is_empty(self) -> bool:
        return self.height == 0 or self.width == 0

    def at(self, row: int, col: int) -> Tuple[int, ...]:
        """Valores dos canais em (row, col), com verificação de limites."""
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(f"({row}, {col}) fora da grade {self.height}x{self.width}")

        return tuple(int(v) for v in self._pixels[row, col])

    def as_image(self) -> np.ndarray:
        """Cópia gravável no formato do OpenCV (2-D quando C=1)."""
        if self.channels == 1:
            return self._pixels[:, :, 0].copy()

        return self._pixels.copy()

    def __repr__(self) -> str:
        return f"PixelGrid(height={self.height}, width={self.width}, channels={self.channels})"


def make_mask(values: np.ndarray) -> PixelGrid:
    """Cria máscara C=1 a partir de um array booleano ou 0/255."""
    arr = np.asarray(values)

    if arr.dtype == bool:
        arr = np.where(arr, FOREGROUND, BACKGROUND).astype(np.uint8)
        return PixelGrid._wrap_owned(arr)

    mask = PixelGrid(arr)
    check_mask(mask, "mask")

    return mask


def is_mask(grid: PixelGrid) -> bool:
    if grid.channels != 1:
        return False

    return bool(np.isin(grid.pixels, (BACKGROUND, FOREGROUND)).all())


def foreground_count(mask: PixelGrid) -> int:
    return int(np.count_nonzero(mask.pixels))


def check_not_empty(grid: PixelGrid, stage: str) -> None:
    if grid.is_empty():
        raise EmptyGrid(stage, "grid", f"grade vazia {grid.height}x{grid.width}", grid.shape)


def check_mask(grid: PixelGrid, stage: str) -> None:
    if grid.channels != 1:
        raise InvalidChannelCount(
            stage, "mask", f"máscara deve ter 1 canal, recebido {grid.channels}", grid.channels
        )
    if not is_mask(grid):
        raise PipelineError(stage, "mask", "valores da máscara devem ser 0 ou 255")


@dataclass(frozen=True)
class ColorRange:
    """Limites inclusivos por canal: lower[i] <= v[i] <= upper[i]."""

    lower: Tuple[int, ...]
    upper: Tuple[int, ...]

    def __post_init__(self):
        lower = tuple(int(v) for v in self.lower)
        upper = tuple(int(v) for v in self.upper)

        if len(lower) != len(upper):
            raise InvalidColorRange(
                "color_range", "bounds", f"lower tem {len(lower)} canais e upper tem {len(upper)}"
            )
        if not lower:
            raise InvalidColorRange("color_range", "bounds", "intervalo sem canais")

        for i, (lo, hi) in enumerate(zip(lower, upper)):
            if not (0 <= lo <= 255 and 0 <= hi <= 255):
                raise InvalidColorRange("color_range", f"channel[{i}]", f"limites ({lo}, {hi}) fora de 0-255")
            if lo > hi:
                raise InvalidColorRange("color_range", f"channel[{i}]", f"lower {lo} > upper {hi}")

        object.__setattr__(self, "lower", lower)
        object.__setattr__(self, "upper", upper)

    @property
    def channels(self) -> int:
        return len(self.lower)


@dataclass(frozen=True)
class StructuringElement:
    """Kernel retangular kh×kw; âncora padrão no centro (arredondado para a origem)."""

    height: int
    width: int
    anchor: Optional[Tuple[int, int]] = field(default=None)

    def __post_init__(self):
        if self.anchor is None:
            object.__setattr__(self, "anchor", ((self.height - 1) // 2, (self.width - 1) // 2))
        else:
            object.__setattr__(self, "anchor", (int(self.anchor[0]), int(self.anchor[1])))

    @classmethod
    def square(cls, size: int) -> "StructuringElement":
        return cls(size, size)

    def validate(self, stage: str) -> None:
        if self.height <= 0 or self.width <= 0:
            raise DegenerateElement(
                stage, "element", f"dimensões inválidas {self.height}x{self.width}", (self.height, self.width)
            )

        ay, ax = self.anchor
        if not (0 <= ay < self.height and 0 <= ax < self.width):
            raise DegenerateElement(
                stage, "anchor", f"âncora {self.anchor} fora do kernel {self.height}x{self.width}", self.anchor
            )
