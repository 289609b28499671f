from dataclasses import dataclass
from typing import Tuple

from color import ColorSpace
from grid import ColorRange, StructuringElement

# Faixa HSV (convenção OpenCV, H 0-179) para objetos marrons
BROWN_HSV_LOWER: Tuple[int, int, int] = (5, 50, 20)
BROWN_HSV_UPPER: Tuple[int, int, int] = (25, 255, 200)

SOURCE_SPACE: ColorSpace = ColorSpace.BGR  # cv2.imread entrega BGR
TARGET_SPACE: ColorSpace = ColorSpace.HSV

KERNEL_SIZE: int = 5
ERODE_ITERATIONS: int = 2
DILATE_ITERATIONS: int = 2
CONNECTIVITY: int = 8

ARTIFACTS_DIR: str = "out_artifacts"
MAX_WORKERS: int = 4


@dataclass(frozen=True)
class PipelineConfig:
    source_space: ColorSpace
    target_space: ColorSpace
    color_range: ColorRange
    erode_element: StructuringElement
    erode_iterations: int
    dilate_element: StructuringElement
    dilate_iterations: int
    connectivity: int

    @classmethod
    def default(cls) -> "PipelineConfig":
        """Configuração padrão a partir das constantes deste módulo."""
        return cls(
            source_space=SOURCE_SPACE,
            target_space=TARGET_SPACE,
            color_range=ColorRange(BROWN_HSV_LOWER, BROWN_HSV_UPPER),
            erode_element=StructuringElement.square(KERNEL_SIZE),
            erode_iterations=ERODE_ITERATIONS,
            dilate_element=StructuringElement.square(KERNEL_SIZE),
            dilate_iterations=DILATE_ITERATIONS,
            connectivity=CONNECTIVITY,
        )
