import logging
from typing import Dict, Tuple

import numpy as np

from errors import InvalidConnectivity
from grid import FOREGROUND, PixelGrid, check_mask, check_not_empty
from union_find import UnionFind

logger = logging.getLogger(__name__)

# vizinhos já visitados na varredura linha a linha: (drow, dcol)
PRIOR_NEIGHBORS: Dict[int, Tuple[Tuple[int, int], ...]] = {
    4: ((-1, 0), (0, -1)),
    8: ((-1, -1), (-1, 0), (-1, 1), (0, -1)),
}


def label(mask: PixelGrid, connectivity: int = 8) -> Tuple[np.ndarray, int]:
    """Rotulação em duas passadas com union-find. Retorna (label_map int32 HxW, K)."""
    if connectivity not in PRIOR_NEIGHBORS:
        raise InvalidConnectivity("label", "connectivity", f"deve ser 4 ou 8, recebido {connectivity}", connectivity)

    check_not_empty(mask, "label")
    check_mask(mask, "label")

    fg = mask.pixels[:, :, 0] == FOREGROUND
    h, w = fg.shape
    offsets = PRIOR_NEIGHBORS[connectivity]

    provisional = np.zeros((h, w), dtype=np.int32)
    uf = UnionFind()
    uf.make_set()  # id 0 reservado ao fundo

    for r in range(h):
        for c in range(w):
            if not fg[r, c]:
                continue

            found = []
            for dr, dc in offsets:
                nr, nc = r + dr, c + dc
                if 0 <= nr and 0 <= nc < w and provisional[nr, nc] > 0:
                    found.append(int(provisional[nr, nc]))

            if not found:
                provisional[r, c] = uf.make_set()
                continue

            smallest = min(found)
            provisional[r, c] = smallest
            for other in found:
                if other != smallest:
                    uf.union(smallest, other)

    # renumeração densa em ordem de primeira aparição na varredura
    lut = np.zeros(len(uf), dtype=np.int32)
    dense: Dict[int, int] = {}
    for prov in range(1, len(uf)):
        root = uf.find(prov)
        if root not in dense:
            dense[root] = len(dense) + 1
        lut[prov] = dense[root]

    label_map = lut[provisional]
    count = len(dense)
    logger.debug("label: %d provisórios -> %d componentes (conectividade %d)", len(uf) - 1, count, connectivity)

    return label_map, count
