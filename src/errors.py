from typing import Any, Optional


class PipelineError(ValueError):
    """Erro de validação de um estágio do pipeline (estágio + parâmetro ofensor)."""

    def __init__(self, stage: str, parameter: str, detail: str, value: Any = None):
        self.stage = stage
        self.parameter = parameter
        self.value = value
        super().__init__(f"[{stage}] {parameter}: {detail}")


class InvalidChannelCount(PipelineError):
    pass


class ChannelCountMismatch(PipelineError):
    pass


class InvalidIterationCount(PipelineError):
    pass


class DegenerateElement(PipelineError):
    pass


class InvalidConnectivity(PipelineError):
    pass


class EmptyGrid(PipelineError):
    pass


class InvalidColorRange(PipelineError):
    pass


class ImageLoadError(OSError):
    """Falha ao decodificar a imagem de entrada."""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        msg = f"Não foi possível carregar a imagem em {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
