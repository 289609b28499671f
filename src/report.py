from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CountReport:
    count: int
    expected: Optional[int] = None
    accuracy_percent: Optional[float] = None

    def __str__(self) -> str:
        if self.accuracy_percent is None:
            return f"{self.count} objetos"

        return f"{self.count} objetos (esperado {self.expected}, {self.accuracy_percent:.2f}%)"


def report(count: int, expected: Optional[int] = None) -> CountReport:
    """Contagem final; acurácia = 100 * count / expected apenas quando expected > 0."""
    if expected is None or expected <= 0:
        return CountReport(count=count)

    return CountReport(count=count, expected=expected, accuracy_percent=100.0 * count / expected)
