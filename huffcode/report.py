import os
from typing import Dict, Mapping

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .metrics import Metrics, code_lengths
from .table import ProbabilityTable


def codes_frame(table: ProbabilityTable, codes: Mapping) -> pd.DataFrame:
    rows = [(str(s), p, codes[s], len(codes[s])) for s, p in table]
    return pd.DataFrame(rows, columns=["Símbolo", "Probabilidad", "Código", "Longitud"])


def metrics_frame(m: Metrics) -> pd.DataFrame:
    rows = [
        ("Entropía [bits/símbolo]", m.entropy),
        ("Longitud media [bits/símbolo]", m.average_length),
        ("Redundancia [bits/símbolo]", m.redundancy),
        ("Eficiencia H/L", m.efficiency),
        ("Suma de Kraft", m.kraft_sum),
        ("Entropía máxima log2(n)", m.max_entropy),
    ]
    return pd.DataFrame(rows, columns=["Métrica", "Valor"])


def save_codes_csv(out_dir: str, table: ProbabilityTable, codes: Mapping) -> pd.DataFrame:
    df = codes_frame(table, codes)
    df.to_csv(os.path.join(out_dir, "codes.csv"), index=False)
    return df


def save_metrics_csv(out_dir: str, m: Metrics) -> pd.DataFrame:
    df = metrics_frame(m)
    df.to_csv(os.path.join(out_dir, "metrics.csv"), index=False)
    return df


def plot_code_lengths(table: ProbabilityTable, codes: Mapping, fname: str):
    """Longitud de código por símbolo frente a -log2(p) (una figura)."""
    labels = [str(s) for s in table.symbols]
    by_symbol = code_lengths(codes)
    lengths = [by_symbol[s] for s in table.symbols]
    ideal = -np.log2(table.probabilities)
    x = range(len(labels))
    plt.figure()
    plt.bar(x, lengths, label="Longitud Huffman")
    plt.plot(list(x), ideal.tolist(), "o--", color="gray", label="-log2(p)")
    plt.xticks(list(x), labels)
    plt.xlabel('Símbolo')
    plt.ylabel('Bits')
    plt.title('Longitud de código por símbolo')
    plt.legend()
    plt.tight_layout()
    plt.savefig(fname, dpi=140)
    plt.close()


def write_markdown(out_dir: str, table: ProbabilityTable, codes: Mapping, m: Metrics,
                   figures: Dict[str, str] = None):
    lines = [
        "# Código de Huffman",
        "",
        "## 1) Tabla de códigos",
        "",
        "| Símbolo | p | Código | Longitud |",
        "|---|---|---|---|",
    ]
    for s, p in table:
        lines.append(f"| {s} | {p:g} | `{codes[s]}` | {len(codes[s])} |")
    lines += [
        "",
        "## 2) Métricas",
        "",
        f"- Entropía H = {m.entropy:.4f} bits/símbolo",
        f"- Longitud media L = {m.average_length:.4f} bits/símbolo",
        f"- Redundancia L - H = {m.redundancy:.4f} bits/símbolo",
        f"- Eficiencia H/L = {m.efficiency:.4f}",
        f"- Suma de Kraft = {m.kraft_sum:.4f}",
        "",
        "Ver **codes.csv** y **metrics.csv**.",
    ]
    for title, rel in (figures or {}).items():
        lines += ["", f"![{title}]({rel})"]
    with open(os.path.join(out_dir, "informe.md"), "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
