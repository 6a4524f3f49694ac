"""UPGMA merge trees and leaf ordering.

Wraps :func:`scipy.cluster.hierarchy.linkage` with ``method="average"``
(UPGMA) and records its output as a :class:`Dendrogram`: a list of
merge :class:`Step` objects using the usual agglomerative numbering:

* ids ``0 .. n-1`` are the original items (leaves);
* step *i* creates internal node ``n + i``;
* the root is ``n + len(steps) - 1``.

:func:`dendrogram_order` walks the tree depth-first from the root,
visiting ``cluster1`` before ``cluster2``, so items merged early end up
adjacent in the returned order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
from scipy.cluster.hierarchy import linkage

__all__ = [
    "Step",
    "Dendrogram",
    "upgma",
    "dendrogram_order",
]


@dataclass(frozen=True)
class Step:
    """One agglomeration: ``cluster1`` and ``cluster2`` merged.

    Attributes
    ----------
    cluster1, cluster2 : int
        Node ids (leaf if ``< n``, otherwise an earlier step's node).
    distance : float
        Average-linkage dissimilarity at which the merge happened.
    size : int
        Number of leaves under the new node.
    """

    cluster1: int
    cluster2: int
    distance: float = 0.0
    size: int = 2


@dataclass(frozen=True)
class Dendrogram:
    """Merge record for ``n`` leaves (``n - 1`` steps once complete)."""

    n: int
    steps: Tuple[Step, ...]

    @property
    def root(self) -> int:
        """Id of the final merge (or the single leaf when ``n == 1``)."""
        return self.n + len(self.steps) - 1

    def is_leaf(self, node: int) -> bool:
        return node < self.n

    def children(self, node: int) -> Tuple[int, int]:
        step = self.steps[node - self.n]
        return step.cluster1, step.cluster2

    @classmethod
    def from_linkage(cls, Z: np.ndarray, n: int) -> "Dendrogram":
        """Build from a scipy linkage matrix of shape ``(n-1, 4)``."""
        steps = tuple(
            Step(
                cluster1=int(row[0]),
                cluster2=int(row[1]),
                distance=float(row[2]),
                size=int(row[3]),
            )
            for row in np.asarray(Z)
        )
        return cls(n=n, steps=steps)


def upgma(condensed: np.ndarray, n: int) -> Dendrogram:
    """Average-linkage clustering of ``n`` items.

    Parameters
    ----------
    condensed : np.ndarray
        Condensed distances of length ``n*(n-1)/2``
        (see :func:`aform.distance.compute_distance_matrix`).
    n : int
        Number of items.

    Returns
    -------
    Dendrogram
        With ``n - 1`` steps; no steps at all when ``n <= 1``.
    """
    if n <= 1:
        return Dendrogram(n=n, steps=())
    condensed = np.asarray(condensed, dtype=np.float64)
    expected = n * (n - 1) // 2
    if condensed.shape != (expected,):
        raise ValueError(
            f"Condensed matrix for {n} items needs {expected} entries, "
            f"got shape {condensed.shape}")
    Z = linkage(condensed, method="average")
    return Dendrogram.from_linkage(Z, n)


def dendrogram_order(dendrogram: Dendrogram, n: int) -> List[int]:
    """Leaf ids in depth-first pre-order from the root.

    Uses an explicit stack; deeply unbalanced trees (one item added per
    step) would otherwise exhaust the interpreter's recursion limit.
    """
    if not dendrogram.steps:
        return list(range(n))

    order: List[int] = []
    stack = [dendrogram.root]
    while stack:
        node = stack.pop()
        if dendrogram.is_leaf(node):
            order.append(node)
            continue
        first, second = dendrogram.children(node)
        # second pushed first so first is visited first
        stack.append(second)
        stack.append(first)
    return order
