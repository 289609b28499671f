import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Mapping, Optional, Sequence, Tuple

from artifacts import PipelineArtifacts
from color import convert, threshold
from config import MAX_WORKERS, PipelineConfig
from errors import ChannelCountMismatch, InvalidChannelCount, InvalidConnectivity, InvalidIterationCount
from grid import PixelGrid, check_not_empty
from labeling import PRIOR_NEIGHBORS, label
from morphology import dilate, erode
from report import CountReport, report
from utils import component_stats, load_image

logger = logging.getLogger(__name__)


def validate_config(grid: PixelGrid, config: PipelineConfig) -> None:
    """Valida grade e configuração antes de qualquer processamento."""
    stage = "count_objects"
    check_not_empty(grid, stage)

    if grid.channels != config.source_space.channels:
        raise InvalidChannelCount(
            stage,
            "source_space",
            f"{config.source_space.name} espera {config.source_space.channels} canais, grade tem {grid.channels}",
            grid.channels,
        )
    if config.color_range.channels != config.target_space.channels:
        raise ChannelCountMismatch(
            stage,
            "color_range",
            f"intervalo declara {config.color_range.channels} canais, "
            f"{config.target_space.name} tem {config.target_space.channels}",
            config.color_range.channels,
        )

    config.erode_element.validate(stage)
    config.dilate_element.validate(stage)

    for name in ("erode_iterations", "dilate_iterations"):
        value = getattr(config, name)
        if value < 0:
            raise InvalidIterationCount(stage, name, f"deve ser >= 0, recebido {value}", value)

    if config.connectivity not in PRIOR_NEIGHBORS:
        raise InvalidConnectivity(
            stage, "connectivity", f"deve ser 4 ou 8, recebido {config.connectivity}", config.connectivity
        )


def count_objects(
    grid: PixelGrid,
    config: PipelineConfig,
    expected: Optional[int] = None,
    collect_artifacts: bool = False,
) -> Tuple[CountReport, Optional[PipelineArtifacts]]:
    """Converte -> limiariza -> erode -> dilata -> rotula -> relata. Opcionalmente retorna os intermediários."""
    validate_config(grid, config)

    converted = convert(grid, config.source_space, config.target_space)
    mask = threshold(converted, config.color_range)
    eroded = erode(mask, config.erode_element, config.erode_iterations)
    dilated = dilate(eroded, config.dilate_element, config.dilate_iterations)
    label_map, count = label(dilated, config.connectivity)

    result = report(count, expected)
    logger.info("Contagem: %s", result)

    if not collect_artifacts:
        return result, None

    arts = PipelineArtifacts(
        original=grid.as_image(),
        converted=converted.as_image(),
        mask=mask.as_image(),
        eroded=eroded.as_image(),
        dilated=dilated.as_image(),
        label_map=label_map,
        components=component_stats(label_map, count),
    )

    return result, arts


def count_objects_in_file(
    image_path: str,
    config: PipelineConfig,
    expected: Optional[int] = None,
    collect_artifacts: bool = False,
) -> Tuple[CountReport, Optional[PipelineArtifacts]]:
    """Carrega a imagem do disco e executa o fluxo completo."""
    grid = load_image(image_path)
    logger.debug("Imagem %s carregada: %r", image_path, grid)

    return count_objects(grid, config, expected, collect_artifacts)


def count_batch(
    image_paths: Sequence[str],
    config: PipelineConfig,
    expected_counts: Optional[Mapping[str, int]] = None,
    max_workers: int = MAX_WORKERS,
) -> Dict[str, CountReport]:
    """Conta várias imagens em paralelo. Relança a falha da primeira imagem em `image_paths`."""
    expected_counts = expected_counts or {}
    results: Dict[str, CountReport] = {}
    failures: Dict[str, Exception] = {}

    if not image_paths:
        return results

    logger.info("Processando %d imagem(ns) com até %d worker(s)...", len(image_paths), max_workers)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(count_objects_in_file, path, config, expected_counts.get(path)): path
            for path in image_paths
        }
        for future in as_completed(futures):
            path = futures[future]
            try:
                results[path], _ = future.result()
            except Exception as e:
                logger.error("Falha ao processar %s: %s", path, e)
                failures[path] = e

    for path in image_paths:
        if path in failures:
            raise failures[path]

    return {path: results[path] for path in image_paths}
