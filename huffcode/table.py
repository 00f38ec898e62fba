from __future__ import annotations

import math
from collections import Counter
from typing import Hashable, Iterable, Iterator, List, Mapping, Tuple, Union

import numpy as np

Symbol = Hashable
Pairs = Union[Mapping[Symbol, float], Iterable[Tuple[Symbol, float]]]


class InvalidInput(ValueError):
    """Entrada que viola el contrato (tabla vacía, probabilidad inválida, símbolo sin código)."""


class ProbabilityTable:
    """
    Secuencia ordenada y de solo lectura de pares (símbolo, probabilidad).

    Se valida al construirla: símbolos únicos y cada probabilidad finita en (0, 1].
    No se exige que la suma sea exactamente 1 (ver is_normalized).
    """

    __slots__ = ("_symbols", "_probs")

    def __init__(self, pairs: Pairs = ()):
        if isinstance(pairs, Mapping):
            pairs = pairs.items()
        symbols: List[Symbol] = []
        probs: List[float] = []
        seen = set()
        for sym, p in pairs:
            try:
                hash(sym)
            except TypeError:
                raise InvalidInput(f"símbolo no hashable: {sym!r}") from None
            if sym in seen:
                raise InvalidInput(f"símbolo repetido: {sym!r}")
            try:
                p = float(p)
            except (TypeError, ValueError):
                raise InvalidInput(f"probabilidad no numérica para {sym!r}: {p!r}") from None
            if not math.isfinite(p) or not (0.0 < p <= 1.0):
                raise InvalidInput(f"probabilidad fuera de (0, 1] para {sym!r}: {p}")
            seen.add(sym)
            symbols.append(sym)
            probs.append(p)
        self._symbols = tuple(symbols)
        self._probs = tuple(probs)

    @classmethod
    def from_counts(cls, counts: Pairs) -> "ProbabilityTable":
        """Normaliza conteos no negativos; los conteos nulos se descartan."""
        if isinstance(counts, Mapping):
            counts = counts.items()
        items = [(s, c) for s, c in counts]
        for s, c in items:
            if c < 0:
                raise InvalidInput(f"conteo negativo para {s!r}: {c}")
        items = [(s, c) for s, c in items if c > 0]
        total = sum(c for _, c in items)
        if total <= 0:
            raise InvalidInput("no hay conteos positivos")
        return cls((s, c / total) for s, c in items)

    @classmethod
    def from_symbols(cls, symbols: Iterable[Symbol]) -> "ProbabilityTable":
        """Estima probabilidades a partir de una muestra (orden de primera aparición)."""
        counts = Counter(symbols)
        if not counts:
            raise InvalidInput("la muestra de símbolos está vacía")
        return cls.from_counts(counts)

    @classmethod
    def coerce(cls, table: Union["ProbabilityTable", Pairs]) -> "ProbabilityTable":
        if isinstance(table, cls):
            return table
        return cls(table)

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Tuple[Symbol, float]]:
        return iter(zip(self._symbols, self._probs))

    def __contains__(self, sym) -> bool:
        return sym in self._symbols

    def __eq__(self, other):
        if not isinstance(other, ProbabilityTable):
            return NotImplemented
        return self._symbols == other._symbols and self._probs == other._probs

    def __repr__(self):
        body = ", ".join(f"{s!r}: {p:g}" for s, p in self)
        return f"ProbabilityTable({{{body}}})"

    @property
    def symbols(self) -> Tuple[Symbol, ...]:
        return self._symbols

    @property
    def probabilities(self) -> np.ndarray:
        return np.array(self._probs, dtype=np.float64)

    @property
    def total(self) -> float:
        return math.fsum(self._probs)

    def probability(self, sym: Symbol) -> float:
        try:
            return self._probs[self._symbols.index(sym)]
        except ValueError:
            raise KeyError(sym) from None

    def is_normalized(self, tol: float = 1e-9) -> bool:
        return abs(self.total - 1.0) <= tol


def parse_table(text: str) -> ProbabilityTable:
    """
    Parsea el formato de línea de comandos 'A=0.5,B=0.25,C=0.25'.
    Los símbolos se toman como cadenas tal cual (sin espacios alrededor).
    """
    pairs = []
    for item in text.split(","):
        item = item.strip()
        if not item:
            continue
        sym, sep, p = item.rpartition("=")
        if not sep or not sym.strip():
            raise InvalidInput(f"entrada mal formada (se esperaba SIMBOLO=PROB): {item!r}")
        pairs.append((sym.strip(), p.strip()))
    return ProbabilityTable(pairs)


# Alfabeto de ejemplo de 8 símbolos
DEMO_TABLE = ProbabilityTable([
    ("A", 0.28), ("B", 0.22), ("C", 0.15), ("D", 0.11),
    ("E", 0.11), ("F", 0.07), ("G", 0.04), ("H", 0.02),
])
