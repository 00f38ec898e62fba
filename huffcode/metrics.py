from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Mapping

import numpy as np

from .table import InvalidInput, ProbabilityTable, Symbol


@dataclass(frozen=True)
class Metrics:
    entropy: float          # H [bits/símbolo]
    average_length: float   # L [bits/símbolo]
    redundancy: float       # L - H
    efficiency: float       # H / L
    kraft_sum: float
    max_entropy: float      # log2(n)


def entropy(table) -> float:
    """
    H = -sum(p * log2 p).
    Las probabilidades nulas o negativas se rechazan al construir la tabla
    (InvalidInput), así que aquí nunca aparece log2(0).
    """
    p = ProbabilityTable.coerce(table).probabilities
    if p.size == 0:
        return 0.0
    # log2(p) y no log2(1/p): 1/p desborda para p subnormal
    h = -float(np.dot(p, np.log2(p)))
    # -0.0 con un único símbolo de probabilidad 1
    return max(0.0, h)


def max_entropy(table) -> float:
    n = len(ProbabilityTable.coerce(table))
    return math.log2(n) if n > 0 else 0.0


def average_code_length(table, codes: Mapping[Symbol, str]) -> float:
    """L = sum(p * len(code[s])). Falla si un símbolo de la tabla no tiene código."""
    table = ProbabilityTable.coerce(table)
    missing = [s for s in table.symbols if s not in codes]
    if missing:
        raise InvalidInput(f"símbolos sin código: {missing!r}")
    lengths = np.array([len(codes[s]) for s in table.symbols], dtype=np.float64)
    return float(np.dot(table.probabilities, lengths))


def redundancy(avg_length: float, h: float) -> float:
    return avg_length - h


def efficiency(avg_length: float, h: float) -> float:
    if avg_length == 0:
        return 1.0
    return h / avg_length


def kraft_sum(codes: Mapping[Symbol, str]) -> float:
    """Suma de Kraft: sum(2^-len). <= 1 para todo código prefijo."""
    if not codes:
        return 0.0
    lengths = np.array(list(code_lengths(codes).values()), dtype=np.float64)
    return float(np.sum(np.exp2(-lengths)))


def is_prefix_free(codes: Mapping[Symbol, str]) -> bool:
    # Tras ordenar, si un código es prefijo de otro lo es de su sucesor inmediato
    words = sorted(codes.values())
    if len(set(words)) != len(words):
        return False
    return not any(b.startswith(a) for a, b in zip(words, words[1:]))


def compute_metrics(table, codes: Mapping[Symbol, str]) -> Metrics:
    table = ProbabilityTable.coerce(table)
    h = entropy(table)
    lavg = average_code_length(table, codes)
    return Metrics(
        entropy=h,
        average_length=lavg,
        redundancy=redundancy(lavg, h),
        efficiency=efficiency(lavg, h),
        kraft_sum=kraft_sum(codes),
        max_entropy=max_entropy(table),
    )


def code_lengths(codes: Mapping[Symbol, str]) -> Dict[Symbol, int]:
    return {s: len(c) for s, c in codes.items()}
