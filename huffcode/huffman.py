from __future__ import annotations

import itertools
from dataclasses import dataclass
from heapq import heapify, heappop, heappush
from typing import Dict, List, Optional, Union

from .table import InvalidInput, ProbabilityTable, Symbol


@dataclass(frozen=True)
class Leaf:
    symbol: Symbol
    weight: float


@dataclass(frozen=True)
class Internal:
    weight: float
    left: "HuffNode"
    right: "HuffNode"


HuffNode = Union[Leaf, Internal]


@dataclass(frozen=True)
class TreeStats:
    leaves: int
    internal: int
    depth: int


def build_tree(table) -> HuffNode:
    """
    Construye el árbol de Huffman para una tabla de probabilidades.

    Cola de prioridad (heapq) con clave (peso, orden): ante pesos iguales
    sale primero el nodo más antiguo; las hojas se numeran en el orden de
    la tabla y cada fusión recibe el siguiente número. El primer nodo
    extraído queda a la izquierda. O(n log n).
    """
    table = ProbabilityTable.coerce(table)
    if len(table) == 0:
        raise InvalidInput("la tabla de probabilidades está vacía")

    counter = itertools.count()
    heap = [(p, next(counter), Leaf(sym, p)) for sym, p in table]
    heapify(heap)

    while len(heap) > 1:
        wa, _, a = heappop(heap)
        wb, _, b = heappop(heap)
        heappush(heap, (wa + wb, next(counter), Internal(wa + wb, left=a, right=b)))

    return heap[0][2]


def generate_codes(root: Optional[HuffNode]) -> Dict[Symbol, str]:
    """
    Recorre el árbol en profundidad: '0' a la izquierda, '1' a la derecha.
    Caso degenerado: si la raíz es una hoja (un solo símbolo) su código es '0'.
    """
    code: Dict[Symbol, str] = {}
    if root is None:
        return code
    if isinstance(root, Leaf):
        code[root.symbol] = "0"
        return code

    # Pila explícita: la profundidad puede llegar a n-1
    stack = [(root, "")]
    while stack:
        n, prefix = stack.pop()
        if isinstance(n, Leaf):
            code[n.symbol] = prefix
            continue
        stack.append((n.right, prefix + "1"))
        stack.append((n.left, prefix + "0"))
    return code


def build_code(table) -> Dict[Symbol, str]:
    """Árbol + códigos, devueltos en el orden de la tabla."""
    table = ProbabilityTable.coerce(table)
    codes = generate_codes(build_tree(table))
    return {sym: codes[sym] for sym in table.symbols}


def tree_stats(root: Optional[HuffNode]) -> TreeStats:
    if root is None:
        return TreeStats(0, 0, 0)
    leaves = internal = depth = 0
    stack = [(root, 0)]
    while stack:
        n, d = stack.pop()
        if isinstance(n, Leaf):
            leaves += 1
            depth = max(depth, d)
        else:
            internal += 1
            stack.append((n.left, d + 1))
            stack.append((n.right, d + 1))
    return TreeStats(leaves, internal, depth)


def tree_to_nodes(root: Optional[HuffNode]) -> List[dict]:
    """
    Árbol como lista plana en preorden (para JSON a cualquier profundidad).
    Los nodos internos referencian a sus hijos por índice en la lista.
    """
    nodes: List[dict] = []
    if root is None:
        return nodes
    # (nodo, índice del padre, lado)
    stack = [(root, None, None)]
    while stack:
        n, parent, side = stack.pop()
        idx = len(nodes)
        if isinstance(n, Leaf):
            nodes.append({"symbol": n.symbol, "weight": n.weight})
        else:
            nodes.append({"weight": n.weight, "left": None, "right": None})
            stack.append((n.right, idx, "right"))
            stack.append((n.left, idx, "left"))
        if parent is not None:
            nodes[parent][side] = idx
    return nodes
