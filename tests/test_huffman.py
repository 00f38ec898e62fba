import random

import pytest

from huffcode.huffman import (
	Internal,
	Leaf,
	build_code,
	build_tree,
	generate_codes,
	tree_stats,
	tree_to_nodes,
)
from huffcode.metrics import is_prefix_free, kraft_sum
from huffcode.table import DEMO_TABLE, InvalidInput, ProbabilityTable


def _random_table(n, seed):
	rng = random.Random(seed)
	counts = {f"s{i}": rng.randint(1, 1000) for i in range(n)}
	return ProbabilityTable.from_counts(counts)


def test_empty_table_fails():
	with pytest.raises(InvalidInput):
		build_tree(ProbabilityTable())
	with pytest.raises(InvalidInput):
		build_tree([])


def test_single_symbol_is_lone_leaf():
	root = build_tree([("A", 1.0)])
	assert root == Leaf("A", 1.0)
	assert tree_stats(root).internal == 0
	assert generate_codes(root) == {"A": "0"}


def test_three_symbols_lengths():
	codes = build_code({"A": 0.5, "B": 0.25, "C": 0.25})
	assert list(codes) == ["A", "B", "C"]
	assert len(codes["A"]) == 1
	assert len(codes["B"]) == 2
	assert len(codes["C"]) == 2


def test_tie_break_is_fixed():
	# B y C empatan: B (más antiguo) sale primero y queda a la izquierda
	root = build_tree({"A": 0.5, "B": 0.25, "C": 0.25})
	assert isinstance(root, Internal)
	assert root.left == Leaf("A", 0.5)
	assert root.right == Internal(0.5, Leaf("B", 0.25), Leaf("C", 0.25))
	assert generate_codes(root) == {"A": "0", "B": "10", "C": "11"}


def test_root_weight_is_total():
	root = build_tree(DEMO_TABLE)
	assert root.weight == pytest.approx(1.0)


@pytest.mark.parametrize("n", [1, 2, 3, 8, 57, 300])
def test_leaf_and_internal_counts(n):
	root = build_tree(_random_table(n, seed=n))
	stats = tree_stats(root)
	assert stats.leaves == n
	assert stats.internal == n - 1


@pytest.mark.parametrize("n", [2, 5, 8, 64, 256])
def test_codes_prefix_free_and_kraft(n):
	table = _random_table(n, seed=100 + n)
	codes = build_code(table)
	assert set(codes) == set(table.symbols)
	assert is_prefix_free(codes)
	for a in codes.values():
		for b in codes.values():
			if a != b:
				assert not b.startswith(a)
	assert kraft_sum(codes) <= 1.0 + 1e-12


def test_huffman_tree_is_full():
	# Árbol binario completo: la suma de Kraft es exactamente 1
	codes = build_code(DEMO_TABLE)
	assert kraft_sum(codes) == pytest.approx(1.0)


def test_demo_lengths():
	codes = build_code(DEMO_TABLE)
	assert len(set(codes.values())) == 8
	lengths = {s: len(c) for s, c in codes.items()}
	assert lengths == {"A": 2, "B": 2, "C": 3, "D": 3, "E": 3, "F": 4, "G": 5, "H": 5}


def test_deterministic():
	t = _random_table(40, seed=7)
	assert build_code(t) == build_code(t)
	assert build_tree(t) == build_tree(t)


def test_generate_codes_none_root():
	assert generate_codes(None) == {}
	assert tree_stats(None).leaves == 0


def test_generate_codes_manual_tree():
	root = Internal(1.0, Internal(0.5, Leaf("x", 0.25), Leaf("y", 0.25)), Leaf("z", 0.5))
	assert generate_codes(root) == {"x": "00", "y": "01", "z": "1"}
	assert tree_stats(root).depth == 2


def test_skewed_tree_depth():
	# Pesos dyádicos: árbol en forma de peine de profundidad n-1
	n = 30
	pairs = [(i, 2.0 ** -(i + 1)) for i in range(n - 1)] + [(n - 1, 2.0 ** -(n - 1))]
	root = build_tree(pairs)
	assert tree_stats(root).depth == n - 1
	codes = generate_codes(root)
	assert len(codes[0]) == 1
	assert len(codes[n - 1]) == n - 1


def test_tree_to_nodes():
	nodes = tree_to_nodes(build_tree({"A": 0.5, "B": 0.5}))
	assert nodes == [
		{"weight": 1.0, "left": 1, "right": 2},
		{"symbol": "A", "weight": 0.5},
		{"symbol": "B", "weight": 0.5},
	]
	assert tree_to_nodes(None) == []


def test_tree_to_nodes_deep_tree():
	# 2^-1049 sigue siendo representable (subnormal)
	n = 1050
	pairs = [(i, 2.0 ** -(i + 1)) for i in range(n - 1)] + [(n - 1, 2.0 ** -(n - 1))]
	nodes = tree_to_nodes(build_tree(pairs))
	assert len(nodes) == 2 * n - 1
	leaves = [d["symbol"] for d in nodes if "symbol" in d]
	assert sorted(leaves) == list(range(n))
	# Cada índice de hijo apunta a un nodo posterior
	for i, d in enumerate(nodes):
		if "left" in d:
			assert i < d["left"] < len(nodes)
			assert i < d["right"] < len(nodes)
