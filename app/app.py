from __future__ import annotations

import os
from pathlib import Path
import sys

from flask import Flask, jsonify, request

ROOT = Path(__file__).resolve().parent.parent
# Asegurar que la raíz del repo esté en sys.path al ejecutar `python app/app.py`
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from huffcode.huffman import build_tree, generate_codes, tree_stats, tree_to_nodes
from huffcode.metrics import compute_metrics
from huffcode.table import DEMO_TABLE, InvalidInput, ProbabilityTable


def create_app(log_dir: str | None = None) -> Flask:
    app = Flask(__name__)
    app.json.sort_keys = False

    LOG_PATH = Path(log_dir or (ROOT / "outputs_ui")) / "run_log.txt"

    def _append_log(line: str):
        LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
        with open(LOG_PATH, "a", encoding="utf-8") as f:
            f.write(line.rstrip() + "\n")

    def _table_from_payload(data) -> ProbabilityTable:
        if not isinstance(data, dict):
            raise InvalidInput("se esperaba un objeto JSON")
        if "table" in data and "text" in data:
            raise InvalidInput("use 'table' o 'text', no ambos")
        if "text" in data:
            text = data["text"]
            if not isinstance(text, str):
                raise InvalidInput("'text' debe ser una cadena")
            return ProbabilityTable.from_symbols(text)
        if "table" in data:
            raw = data["table"]
            if isinstance(raw, dict):
                raw = list(raw.items())
            if isinstance(raw, list):
                pairs = []
                for item in raw:
                    if not isinstance(item, (list, tuple)) or len(item) != 2:
                        raise InvalidInput(f"par mal formado: {item!r}")
                    sym, p = item
                    # JSON true/false y cadenas no son probabilidades
                    if isinstance(p, bool) or not isinstance(p, (int, float)):
                        raise InvalidInput(f"probabilidad no numérica para {sym!r}: {p!r}")
                    pairs.append((sym, p))
                return ProbabilityTable(pairs)
            raise InvalidInput("'table' debe ser un objeto o una lista de pares")
        raise InvalidInput("falta 'table' o 'text'")

    def _run(table: ProbabilityTable) -> dict:
        root = build_tree(table)
        codes = generate_codes(root)
        codes = {s: codes[s] for s in table.symbols}
        m = compute_metrics(table, codes)
        stats = tree_stats(root)
        _append_log(f"run: n_symbols={len(table)}, H={m.entropy:.6f}, L={m.average_length:.6f}")
        return {
            "codes": codes,
            "metrics": {
                "entropy": m.entropy,
                "average_length": m.average_length,
                "redundancy": m.redundancy,
                "efficiency": m.efficiency,
                "kraft_sum": m.kraft_sum,
                "max_entropy": m.max_entropy,
            },
            "tree": {
                "leaves": stats.leaves,
                "internal": stats.internal,
                "depth": stats.depth,
                "nodes": tree_to_nodes(root),
            },
        }

    @app.get("/")
    def index():
        return jsonify({
            "endpoints": {
                "demo": "/api/demo",
                "huffman": "/api/huffman",
            },
        })

    @app.get("/api/demo")
    def demo():
        return jsonify(_run(DEMO_TABLE))

    @app.post("/api/huffman")
    def huffman():
        data = request.get_json(silent=True)
        try:
            table = _table_from_payload(data)
            return jsonify(_run(table))
        except InvalidInput as e:
            _append_log(f"[WARN] entrada inválida: {e}")
            return jsonify({"error": str(e)}), 400

    return app


if __name__ == "__main__":
    port = int(os.environ.get("PORT", "5000"))
    create_app().run(debug=True, port=port)
