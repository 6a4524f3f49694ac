"""Compensatory mutation analysis at base-paired columns.

Given a reference sequence and a query sequence from the same
alignment, classify what happened to the base pair at a column and, when either
base changed, whether the query can still form a canonical or wobble
pair.
A double change that keeps pairing is the classic signature of
conserved structure under sequence drift.

Classification table (``left``/``right`` = base changed vs reference,
``valid`` = query bases still pair):

======  =======  =====  ====================
left    right    valid  result
======  =======  =====  ====================
no      no       –      UNCHANGED
yes     yes      yes    DOUBLE_COMPATIBLE
yes     yes      no     DOUBLE_INCOMPATIBLE
one of the two   yes    SINGLE_COMPATIBLE
one of the two   no     SINGLE_INCOMPATIBLE
======  =======  =====  ====================

Gaps in the query at either column give INVOLVES_GAP; columns with no
partner (or outside either sequence) give UNPAIRED.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Iterable, Optional, Sequence

from .cache import StructureCache
from .settings import resolve_gap_chars

__all__ = [
    "CompensatoryChange",
    "VALID_PAIRS",
    "is_valid_pair",
    "analyze_compensatory",
    "summarize_compensatory",
]


class CompensatoryChange(Enum):
    """Outcome of comparing one base pair between reference and query."""

    UNCHANGED = "unchanged"
    SINGLE_COMPATIBLE = "single_compatible"
    DOUBLE_COMPATIBLE = "double_compatible"
    SINGLE_INCOMPATIBLE = "single_incompatible"
    DOUBLE_INCOMPATIBLE = "double_incompatible"
    INVOLVES_GAP = "involves_gap"
    UNPAIRED = "unpaired"


# Watson-Crick and G·U wobble, both orientations, RNA and DNA alphabets.
VALID_PAIRS = frozenset({
    ("A", "U"), ("U", "A"),
    ("A", "T"), ("T", "A"),
    ("G", "C"), ("C", "G"),
    ("G", "U"), ("U", "G"),
    ("G", "T"), ("T", "G"),
})


def is_valid_pair(base1: str, base2: str) -> bool:
    """True if the two bases form a canonical or wobble pair (any case)."""
    return (base1.upper(), base2.upper()) in VALID_PAIRS


def analyze_compensatory(
    ref_seq: Sequence[str],
    query_seq: Sequence[str],
    col: int,
    cache: StructureCache,
    gap_chars: Optional[Iterable[str]] = None,
) -> CompensatoryChange:
    """Classify the base pair at *col* in *query_seq* against *ref_seq*.

    Parameters
    ----------
    ref_seq, query_seq : str or sequence of single characters
        Aligned sequences (gaps included).
    col : int
        Column to inspect; its partner comes from *cache*.
    cache : StructureCache
        Structure the pair lookup is taken from.
    gap_chars : iterable of str, optional
        Gap alphabet; defaults to ``alignment.gap_chars`` from
        :data:`~aform.settings.DEFAULT_SETTINGS`.

    Never raises: unpaired, out-of-range and length-mismatched input all
    classify as ``UNPAIRED``.
    """
    paired = cache.get_pair(col)
    if paired is None:
        return CompensatoryChange.UNPAIRED

    if col < 0 or max(col, paired) >= min(len(ref_seq), len(query_seq)):
        return CompensatoryChange.UNPAIRED

    gaps = resolve_gap_chars(gap_chars)
    query_left = query_seq[col]
    query_right = query_seq[paired]
    if query_left in gaps or query_right in gaps:
        return CompensatoryChange.INVOLVES_GAP

    left_changed = ref_seq[col].upper() != query_left.upper()
    right_changed = ref_seq[paired].upper() != query_right.upper()
    if not left_changed and not right_changed:
        return CompensatoryChange.UNCHANGED

    still_valid = is_valid_pair(query_left, query_right)
    if left_changed and right_changed:
        if still_valid:
            return CompensatoryChange.DOUBLE_COMPATIBLE
        return CompensatoryChange.DOUBLE_INCOMPATIBLE
    if still_valid:
        return CompensatoryChange.SINGLE_COMPATIBLE
    return CompensatoryChange.SINGLE_INCOMPATIBLE


def summarize_compensatory(
    ref_seq: Sequence[str],
    query_seq: Sequence[str],
    cache: StructureCache,
    gap_chars: Optional[Iterable[str]] = None,
    per_pair: bool = False,
) -> Counter:
    """Count each :class:`CompensatoryChange` over all paired columns.

    By default both columns of a pair are classified, so every pair
    contributes two counts (one per coloured cell).  With
    ``per_pair=True`` each pair is counted once, from its 5' column.
    """
    gaps = resolve_gap_chars(gap_chars)
    counts: Counter = Counter()
    for p in cache.pairs:
        cols = (p.left,) if per_pair else (p.left, p.right)
        for col in cols:
            counts[analyze_compensatory(ref_seq, query_seq, col, cache, gaps)] += 1
    return counts
