import argparse
import dataclasses
import logging
import sys

from typing import List, Optional

from config import ARTIFACTS_DIR, PipelineConfig
from counting import count_objects_in_file
from errors import ImageLoadError, PipelineError
from grid import ColorRange, StructuringElement
from utils import save_artifacts, show_debug_windows

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    defaults = PipelineConfig.default()

    parser = argparse.ArgumentParser(description="Conta objetos de uma cor em uma imagem")
    parser.add_argument("image", help="Caminho da imagem")
    parser.add_argument("--expected", type=int, default=None, help="Contagem esperada (para acurácia)")
    parser.add_argument("--lower", type=int, nargs=3, metavar=("H", "S", "V"), default=list(defaults.color_range.lower))
    parser.add_argument("--upper", type=int, nargs=3, metavar=("H", "S", "V"), default=list(defaults.color_range.upper))
    parser.add_argument("--kernel", type=int, default=defaults.erode_element.height, help="Lado do kernel quadrado")
    parser.add_argument("--erode", type=int, default=defaults.erode_iterations, help="Iterações de erosão")
    parser.add_argument("--dilate", type=int, default=defaults.dilate_iterations, help="Iterações de dilatação")
    parser.add_argument("--connectivity", type=int, choices=[4, 8], default=defaults.connectivity)
    parser.add_argument(
        "--save-artifacts", nargs="?", const=ARTIFACTS_DIR, default=None, metavar="DIR",
        help="Salva as imagens intermediárias",
    )
    parser.add_argument("--show", action="store_true", help="Exibe janelas de depuração")
    parser.add_argument("--debug", action="store_true", help="Ativa log de depuração")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Função principal: executa o fluxo de contagem para uma imagem."""
    args = build_parser().parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        element = StructuringElement.square(args.kernel)
        config = dataclasses.replace(
            PipelineConfig.default(),
            color_range=ColorRange(tuple(args.lower), tuple(args.upper)),
            erode_element=element,
            erode_iterations=args.erode,
            dilate_element=element,
            dilate_iterations=args.dilate,
            connectivity=args.connectivity,
        )
        collect = bool(args.save_artifacts) or args.show
        result, arts = count_objects_in_file(args.image, config, args.expected, collect_artifacts=collect)
    except (PipelineError, ImageLoadError) as e:
        print(f"Erro: {e}")
        return 1

    print("Objetos contados:", result.count)
    if result.accuracy_percent is not None:
        print(f"Acurácia: {result.accuracy_percent:.2f}% (esperado {result.expected})")

    if arts and args.save_artifacts:
        save_artifacts(arts, args.save_artifacts)
    if arts and args.show:
        show_debug_windows(arts)

    return 0


if __name__ == "__main__":
    sys.exit(main())
