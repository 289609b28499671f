from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import numpy as np

@dataclass
class ComponentArtifact:
    label: int
    area: int
    bbox: Tuple[int, int, int, int]  # x, y, w, h
    centroid: Tuple[float, float]  # x, y

@dataclass
class PipelineArtifacts:
    """Imagens intermediárias do pipeline para depuração e visualização."""
    original: Optional[np.ndarray] = None
    converted: Optional[np.ndarray] = None
    mask: Optional[np.ndarray] = None
    eroded: Optional[np.ndarray] = None
    dilated: Optional[np.ndarray] = None
    label_map: Optional[np.ndarray] = None
    components: List[ComponentArtifact] = field(default_factory=list)
