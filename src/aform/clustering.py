"""Sequence clustering — similar sequences adjacent, with a tree gutter.

Pipeline: mismatch distances (:mod:`aform.distance`) → UPGMA
(:mod:`aform.dendrogram`) → depth-first leaf order → ASCII tree
(:mod:`aform.tree`).  The result is a :class:`ClusterResult` the
display layer uses to reorder rows and draw the dendrogram beside the
sequence ids.

Usage
-----
>>> from aform.clustering import cluster_sequences_with_tree
>>> result = cluster_sequences_with_tree(["AAAA", "UUUU", "AAAA"])
>>> result.order        # rows 0 and 2 (both AAAA) end up adjacent
>>> print("\\n".join(result.tree_lines))

Clustering is O(n²) pairwise distances plus the linkage step; it runs
only when asked for.  For alignments with many exact duplicates use
:func:`aform.collapse.cluster_sequences_with_collapse`.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence

from .dendrogram import Dendrogram, Step, dendrogram_order, upgma
from .distance import compute_distance_matrix
from .settings import DEFAULT_SETTINGS, SettingsRegistry, resolve_gap_chars
from .tree import render_tree

__all__ = [
    "ClusterResult",
    "cluster_sequences",
    "cluster_sequences_with_tree",
    "group_identical_rows",
]

logger = logging.getLogger(__name__)


@dataclass
class ClusterResult:
    """Leaf order plus tree gutter for a clustered alignment.

    Attributes
    ----------
    order : list[int]
        Original row indices in display order (a permutation of
        ``0 .. n-1``).
    tree_lines : list[str]
        One tree string per display row, aligned with ``order``.
    tree_width : int
        Width of every string in ``tree_lines``.
    group_order : list[int] or None
        Collapse-group index per collapsed display row; set by
        :func:`aform.collapse.cluster_sequences_with_collapse`.
    collapsed_tree_lines : list[str] or None
        One tree string per collapse group, aligned with ``group_order``.
    """

    order: List[int]
    tree_lines: List[str]
    tree_width: int
    group_order: Optional[List[int]] = None
    collapsed_tree_lines: Optional[List[str]] = None

    @property
    def num_rows(self) -> int:
        return len(self.order)

    @property
    def is_collapsed(self) -> bool:
        """True if collapse-group information is attached."""
        return self.group_order is not None

    def summary(self) -> str:
        groups = (f", {len(self.group_order)} groups"
                  if self.group_order is not None else "")
        return (f"ClusterResult({self.num_rows} rows{groups}, "
                f"tree_width={self.tree_width})")


def group_identical_rows(sequences: Sequence[Sequence[str]]) -> List[List[int]]:
    """Row indices grouped by exact content, in first-occurrence order.

    Case and gap glyphs both distinguish groups.
    """
    by_content: Dict[str, List[int]] = {}
    for row, seq in enumerate(sequences):
        key = seq if isinstance(seq, str) else "".join(seq)
        by_content.setdefault(key, []).append(row)
    return list(by_content.values())


def _build_dendrogram(
    sequences: Sequence[Sequence[str]],
    groups: List[List[int]],
    gaps: FrozenSet[str],
) -> Dendrogram:
    """UPGMA over one row per group, with each group pre-merged at 0.

    Case and gap-glyph variants also sit at distance 0 from a group, so
    identical rows are chained into their own subtree first; the linkage
    then only ever sees one row of each.  Merges follow scipy's labelling
    (smaller node id as ``cluster1``).
    """
    n = len(sequences)
    steps: List[Step] = []
    group_node: List[int] = []
    for members in groups:
        node = members[0]
        for size, row in enumerate(members[1:], start=2):
            steps.append(Step(min(node, row), max(node, row), 0.0, size))
            node = n + len(steps) - 1
        group_node.append(node)

    m = len(groups)
    reps = [sequences[members[0]] for members in groups]
    rep_tree = upgma(compute_distance_matrix(reps, gaps), m)

    # rep node m + j becomes n + len(chain steps) + j
    offset = n + len(steps) - m
    sizes = [len(members) for members in groups]
    for step in rep_tree.steps:
        a = group_node[step.cluster1] if step.cluster1 < m else step.cluster1 + offset
        b = group_node[step.cluster2] if step.cluster2 < m else step.cluster2 + offset
        size = sizes[step.cluster1] + sizes[step.cluster2]
        sizes.append(size)
        steps.append(Step(min(a, b), max(a, b), step.distance, size))
    return Dendrogram(n=n, steps=tuple(steps))


def cluster_sequences_with_tree(
    sequences: Sequence[Sequence[str]],
    gap_chars: Optional[Iterable[str]] = None,
    settings: Optional[SettingsRegistry] = None,
) -> ClusterResult:
    """Cluster *sequences* with UPGMA and render the dendrogram.

    Parameters
    ----------
    sequences : sequence of str (or of character lists)
        Aligned sequences, all the same width.
    gap_chars : iterable of str, optional
        Gap alphabet; defaults to ``alignment.gap_chars`` of *settings*.
    settings : SettingsRegistry, optional
        Defaults to :data:`~aform.settings.DEFAULT_SETTINGS`.

    Zero or one sequence skips the linkage step entirely: the order is
    the identity and the single row (if any) gets a placeholder glyph.
    """
    reg = settings if settings is not None else DEFAULT_SETTINGS
    n = len(sequences)
    if n <= 1:
        return ClusterResult(
            order=list(range(n)),
            tree_lines=[reg["tree.placeholder"]] * n,
            tree_width=n,
        )

    gaps = resolve_gap_chars(gap_chars, reg)
    t0 = time.perf_counter()
    groups = group_identical_rows(sequences)
    dendrogram = _build_dendrogram(sequences, groups, gaps)
    order = dendrogram_order(dendrogram, n)
    tree_lines, tree_width = render_tree(dendrogram, order, reg)
    logger.debug("clustered %d sequences (%d unique) in %.3fs (tree_width=%d)",
                 n, len(groups), time.perf_counter() - t0, tree_width)

    return ClusterResult(order=order, tree_lines=tree_lines, tree_width=tree_width)


def cluster_sequences(
    sequences: Sequence[Sequence[str]],
    gap_chars: Optional[Iterable[str]] = None,
) -> List[int]:
    """Display order only; see :func:`cluster_sequences_with_tree`."""
    return cluster_sequences_with_tree(sequences, gap_chars).order
