from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import dataclass, asdict
from typing import Optional

from .huffman import build_tree, generate_codes, tree_stats
from .metrics import compute_metrics, is_prefix_free
from .report import save_codes_csv, save_metrics_csv, plot_code_lengths, write_markdown
from .table import DEMO_TABLE, InvalidInput, ProbabilityTable, parse_table


@dataclass
class RunParams:
    out_dir: str = "outputs"
    table: Optional[str] = None
    text: Optional[str] = None
    plot: bool = True


def ensure_dirs(out_dir: str) -> str:
    os.makedirs(out_dir, exist_ok=True)
    figdir = os.path.join(out_dir, "figures")
    os.makedirs(figdir, exist_ok=True)
    return figdir


def _append_log(path: str, line: str):
    with open(path, "a", encoding="utf-8") as f:
        f.write(line.rstrip() + "\n")


def load_table(params: RunParams) -> ProbabilityTable:
    if params.table is not None and params.text is not None:
        raise InvalidInput("use --table o --text, no ambos")
    if params.table is not None:
        return parse_table(params.table)
    if params.text is not None:
        with open(params.text, "r", encoding="utf-8") as f:
            return ProbabilityTable.from_symbols(f.read())
    return DEMO_TABLE


def run(params: RunParams) -> dict:
    """Ejecuta tabla -> árbol -> códigos -> métricas y escribe el informe."""
    table = load_table(params)
    figdir = ensure_dirs(params.out_dir)
    log_path = os.path.join(params.out_dir, "run_log.txt")
    _append_log(log_path, f"start: n_symbols={len(table)}, total_p={table.total:.6f}")

    root = build_tree(table)
    stats = tree_stats(root)
    _append_log(log_path, f"tree: leaves={stats.leaves}, internal={stats.internal}, depth={stats.depth}")

    codes = generate_codes(root)
    codes = {s: codes[s] for s in table.symbols}
    if not is_prefix_free(codes):
        # No debería ocurrir: los códigos salen de hojas distintas
        _append_log(log_path, "[WARN] el código generado no es libre de prefijos")
    if not table.is_normalized(1e-6):
        _append_log(log_path, f"[WARN] las probabilidades suman {table.total:.6f}, no 1")

    m = compute_metrics(table, codes)
    _append_log(log_path, f"metrics: H={m.entropy:.6f}, L={m.average_length:.6f}, R={m.redundancy:.6f}")

    save_codes_csv(params.out_dir, table, codes)
    save_metrics_csv(params.out_dir, m)
    figures = {}
    if params.plot:
        plot_code_lengths(table, codes, os.path.join(figdir, "code_lengths.png"))
        figures["Longitud de código por símbolo"] = "figures/code_lengths.png"
    write_markdown(params.out_dir, table, codes, m, figures)

    with open(os.path.join(params.out_dir, "params.json"), "w", encoding="utf-8") as f:
        json.dump(asdict(params), f, indent=2, ensure_ascii=False)
    _append_log(log_path, "done")

    return {"table": table, "codes": codes, "metrics": m, "stats": stats}


def main(argv=None):
    ap = argparse.ArgumentParser(description="Código de Huffman: códigos, entropía, longitud media y redundancia")
    ap.add_argument("--table", help="Tabla SIMBOLO=PROB separada por comas, p.ej. 'A=0.5,B=0.25,C=0.25'")
    ap.add_argument("--text", help="Archivo de texto (UTF-8) para estimar las probabilidades")
    ap.add_argument("--out", default="outputs", help="Directorio de salida")
    ap.add_argument("--no-plot", action="store_true", help="No generar la figura de longitudes")
    args = ap.parse_args(argv)

    params = RunParams(out_dir=args.out, table=args.table, text=args.text, plot=not args.no_plot)
    try:
        res = run(params)
    except InvalidInput as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    m = res["metrics"]
    print("Código de Huffman:")
    for s, c in res["codes"].items():
        print(f"{s}: {c}")
    print(f"entropía = {m.entropy:.4f}")
    print(f"longitud media del código = {m.average_length:.4f}")
    print(f"redundancia = {m.redundancy:.4f}")
    print(f"Listo. Salidas en: {params.out_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
