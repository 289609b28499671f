"""
Union-Find (conjuntos disjuntos) sobre ids inteiros densos.

Os rótulos provisórios da rotulação são índices em uma lista de pais.
O representante de cada conjunto é sempre o menor id do conjunto, o que
mantém o desempate "menor rótulo vence" estável após as uniões.
"""

from typing import List


class UnionFind:
    """Floresta de pais indexada por inteiro, com compressão de caminho."""

    def __init__(self) -> None:
        self._parent: List[int] = []

    def __len__(self) -> int:
        return len(self._parent)

    def make_set(self) -> int:
        """Cria um conjunto unitário e retorna seu id (0, 1, 2, ...)."""
        new_id = len(self._parent)
        self._parent.append(new_id)

        return new_id

    def find(self, element: int) -> int:
        """Representante do conjunto de `element`; achata o caminho percorrido."""
        if not (0 <= element < len(self._parent)):
            raise IndexError(f"id {element} desconhecido")

        root = element
        while self._parent[root] != root:
            root = self._parent[root]

        current = element
        while self._parent[current] != root:
            next_node = self._parent[current]
            self._parent[current] = root
            current = next_node

        return root

    def union(self, x: int, y: int) -> int:
        """Une os conjuntos de x e y; a raiz maior passa a apontar para a menor."""
        root_x = self.find(x)
        root_y = self.find(y)

        if root_x == root_y:
            return root_x

        if root_x < root_y:
            self._parent[root_y] = root_x
            return root_x

        self._parent[root_x] = root_y
        return root_y
