__version__ = "0.1.0"

from .table import DEMO_TABLE, InvalidInput, ProbabilityTable, parse_table
from .huffman import Internal, Leaf, TreeStats, build_code, build_tree, generate_codes, tree_stats
from .metrics import (
    Metrics,
    average_code_length,
    compute_metrics,
    efficiency,
    entropy,
    is_prefix_free,
    kraft_sum,
    max_entropy,
    redundancy,
)
