"""Gap-aware sequence distances and per-column statistics.

The distance used for clustering is a plain mismatch count over
aligned columns:

* gap vs gap            → 0 (treated as a match)
* gap vs residue        → 1
* residue vs residue    → 0 if equal ignoring case, else 1

The count is not normalised by length or by the number of non-gap
columns, so sequences with very different gap densities sit further
apart than their shared residues alone would suggest.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence

import numpy as np
from scipy.spatial.distance import squareform

from .settings import resolve_gap_chars

__all__ = [
    "hamming_distance",
    "compute_distance_matrix",
    "square_distance_matrix",
    "column_conservation",
    "consensus_char",
]


def hamming_distance(
    seq1: Sequence[str],
    seq2: Sequence[str],
    gap_chars: Optional[Iterable[str]] = None,
) -> int:
    """Number of mismatching columns between two aligned sequences.

    Columns beyond the shorter sequence are not compared.
    """
    gaps = resolve_gap_chars(gap_chars)
    mismatches = 0
    for a, b in zip(seq1, seq2):
        if a in gaps and b in gaps:
            continue
        if a.upper() != b.upper():
            mismatches += 1
    return mismatches


def compute_distance_matrix(
    sequences: Sequence[Sequence[str]],
    gap_chars: Optional[Iterable[str]] = None,
) -> np.ndarray:
    """Condensed pairwise distance matrix.

    Returns
    -------
    np.ndarray
        Float64 vector of length ``n*(n-1)/2`` in the order
        ``(0,1), (0,2), …, (0,n-1), (1,2), …``, the layout
        :func:`scipy.cluster.hierarchy.linkage` expects.
    """
    gaps = resolve_gap_chars(gap_chars)
    n = len(sequences)
    out = np.empty(n * (n - 1) // 2, dtype=np.float64)
    k = 0
    for i in range(n):
        for j in range(i + 1, n):
            out[k] = hamming_distance(sequences[i], sequences[j], gaps)
            k += 1
    return out


def square_distance_matrix(
    sequences: Sequence[Sequence[str]],
    gap_chars: Optional[Iterable[str]] = None,
) -> np.ndarray:
    """Symmetric ``(n, n)`` form of :func:`compute_distance_matrix`."""
    n = len(sequences)
    if n < 2:
        return np.zeros((n, n), dtype=np.float64)
    return squareform(compute_distance_matrix(sequences, gap_chars))


# ═══════════════════════════════════════════════════════════════════
# Column statistics
# ═══════════════════════════════════════════════════════════════════

def _column_counts(
    sequences: Sequence[Sequence[str]],
    col: int,
    gap_chars: Optional[Iterable[str]],
) -> Counter:
    gaps = resolve_gap_chars(gap_chars)
    counts: Counter = Counter()
    for seq in sequences:
        if 0 <= col < len(seq) and seq[col] not in gaps:
            counts[seq[col].upper()] += 1
    return counts


def column_conservation(
    sequences: Sequence[Sequence[str]],
    col: int,
    gap_chars: Optional[Iterable[str]] = None,
) -> float:
    """Frequency of the most common residue among non-gap residues at *col*.

    Returns 0.0 for an empty alignment or an all-gap column.
    """
    counts = _column_counts(sequences, col, gap_chars)
    total = sum(counts.values())
    if total == 0:
        return 0.0
    return max(counts.values()) / total


def consensus_char(
    sequences: Sequence[Sequence[str]],
    col: int,
    gap_chars: Optional[Iterable[str]] = None,
) -> str:
    """Most common residue at *col*, uppercased.

    ``' '`` when there are no sequences, ``'.'`` when the column holds
    only gaps.  Ties go to the residue seen first.
    """
    if not sequences:
        return " "
    counts = _column_counts(sequences, col, gap_chars)
    if not counts:
        return "."
    return counts.most_common(1)[0][0]
