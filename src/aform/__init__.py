"""aform: structure and clustering analysis for Stockholm RNA alignments.

Provides the two analytical overlays of the alignment editor:

* **Secondary structure** — dot-bracket parsing with helix grouping,
  an O(1) per-column pair/helix cache, and compensatory-mutation
  classification of paired columns against a reference sequence.

* **Clustering** — gap-aware mismatch distances, UPGMA (average
  linkage) via scipy, depth-first leaf ordering, an ASCII dendrogram
  gutter, and duplicate collapsing for alignments with many identical
  rows.
"""
from .structure import (
    BasePair, StructureError, UnmatchedOpen, UnmatchedClose, BracketMismatch,
    parse_structure, is_valid_structure,
    is_open_bracket, is_close_bracket, matching_open, matching_close,
    find_pair, get_helix_id, count_helices,
)
from .cache import StructureCache
from .compensatory import (
    CompensatoryChange, is_valid_pair,
    analyze_compensatory, summarize_compensatory,
)
from .distance import (
    hamming_distance, compute_distance_matrix, square_distance_matrix,
    column_conservation, consensus_char,
)
from .dendrogram import Step, Dendrogram, upgma, dendrogram_order
from .tree import render_tree
from .clustering import ClusterResult, cluster_sequences, cluster_sequences_with_tree
from .collapse import (
    CollapseGroup, compute_collapse_groups, cluster_sequences_with_collapse,
)
from .settings import SettingsRegistry, DEFAULT_SETTINGS, default_gap_chars

__all__ = [
    # Structure parsing
    "BasePair", "StructureError", "UnmatchedOpen", "UnmatchedClose",
    "BracketMismatch", "parse_structure", "is_valid_structure",
    "is_open_bracket", "is_close_bracket", "matching_open", "matching_close",
    "find_pair", "get_helix_id", "count_helices",
    # Pair cache
    "StructureCache",
    # Compensatory analysis
    "CompensatoryChange", "is_valid_pair",
    "analyze_compensatory", "summarize_compensatory",
    # Distances
    "hamming_distance", "compute_distance_matrix", "square_distance_matrix",
    "column_conservation", "consensus_char",
    # Clustering
    "Step", "Dendrogram", "upgma", "dendrogram_order",
    "render_tree",
    "ClusterResult", "cluster_sequences", "cluster_sequences_with_tree",
    "CollapseGroup", "compute_collapse_groups", "cluster_sequences_with_collapse",
    # Settings
    "SettingsRegistry", "DEFAULT_SETTINGS", "default_gap_chars",
]
