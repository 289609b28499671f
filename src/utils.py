import os
import cv2
import numpy as np

from typing import List, Optional

from artifacts import ComponentArtifact, PipelineArtifacts
from errors import ImageLoadError
from grid import PixelGrid


def load_image(image_path: str) -> PixelGrid:
    """Lê a imagem colorida (BGR) do disco."""
    img = cv2.imread(image_path, cv2.IMREAD_COLOR)

    if img is None:
        raise ImageLoadError(image_path, "arquivo ausente ou formato não suportado")

    return PixelGrid._wrap_owned(img)


def colorize_labels(label_map: np.ndarray) -> np.ndarray:
    """Pseudo-cor BGR para o mapa de rótulos (fundo preto)."""
    hues = ((label_map.astype(np.int64) * 37) % 180).astype(np.uint8)
    full = np.full_like(hues, 255)
    hsv = np.dstack([hues, full, full])
    bgr = cv2.cvtColor(hsv, cv2.COLOR_HSV2BGR)
    bgr[label_map == 0] = 0

    return bgr


def draw_components(image_bgr: np.ndarray, components: List[ComponentArtifact]) -> np.ndarray:
    """Desenha caixas e centróides sobre uma cópia da imagem original."""
    overlay = image_bgr.copy()

    if overlay.ndim == 2:
        overlay = cv2.cvtColor(overlay, cv2.COLOR_GRAY2BGR)

    for comp in components:
        x, y, w, h = comp.bbox
        cx, cy = comp.centroid
        cv2.rectangle(overlay, (x, y), (x + w - 1, y + h - 1), (0, 255, 0), 1)
        cv2.circle(overlay, (int(round(cx)), int(round(cy))), 3, (0, 0, 255), -1)
        cv2.putText(overlay, str(comp.label), (x, max(y - 2, 0)), cv2.FONT_HERSHEY_SIMPLEX, 0.4, (255, 255, 255), 1)

    return overlay


def component_stats(label_map: np.ndarray, count: int) -> List[ComponentArtifact]:
    """Área, caixa (x, y, w, h) e centróide de cada componente 1..K."""
    if count == 0:
        return []

    ys, xs = np.nonzero(label_map)
    ids = label_map[ys, xs]
    n = count + 1

    areas = np.bincount(ids, minlength=n)
    sum_x = np.bincount(ids, weights=xs, minlength=n)
    sum_y = np.bincount(ids, weights=ys, minlength=n)

    min_x = np.full(n, label_map.shape[1], dtype=np.int64)
    min_y = np.full(n, label_map.shape[0], dtype=np.int64)
    max_x = np.full(n, -1, dtype=np.int64)
    max_y = np.full(n, -1, dtype=np.int64)
    np.minimum.at(min_x, ids, xs)
    np.minimum.at(min_y, ids, ys)
    np.maximum.at(max_x, ids, xs)
    np.maximum.at(max_y, ids, ys)

    stats = []
    for k in range(1, n):
        area = int(areas[k])
        stats.append(
            ComponentArtifact(
                label=k,
                area=area,
                bbox=(int(min_x[k]), int(min_y[k]), int(max_x[k] - min_x[k] + 1), int(max_y[k] - min_y[k] + 1)),
                centroid=(float(sum_x[k] / area), float(sum_y[k] / area)),
            )
        )

    return stats


def _stage_images(artifacts: PipelineArtifacts) -> List[tuple]:
    overlay = None
    if artifacts.original is not None:
        overlay = draw_components(artifacts.original, artifacts.components)

    labels = colorize_labels(artifacts.label_map) if artifacts.label_map is not None else None

    return [
        ("00_original", artifacts.original),
        ("01_converted", artifacts.converted),
        ("02_mask", artifacts.mask),
        ("03_eroded", artifacts.eroded),
        ("04_dilated", artifacts.dilated),
        ("05_labels", labels),
        ("06_overlay", overlay),
    ]


def save_artifacts(artifacts: PipelineArtifacts, out_dir: str) -> List[str]:
    """Salva as imagens intermediárias em `out_dir`; retorna os caminhos escritos."""
    os.makedirs(out_dir, exist_ok=True)
    written = []

    def _save(name: str, img: Optional[np.ndarray]):
        if img is not None:
            path = os.path.join(out_dir, f"{name}.png")
            cv2.imwrite(path, img)
            written.append(path)

    for name, img in _stage_images(artifacts):
        _save(name, img)

    return written


def show_debug_windows(artifacts: PipelineArtifacts) -> None:
    """Exibe janelas OpenCV das etapas (opcional para debug)."""
    for name, img in _stage_images(artifacts):
        if img is not None:
            cv2.imshow(name, img)

    cv2.waitKey(0)
    cv2.destroyAllWindows()
