"""Duplicate collapsing — cluster each distinct sequence once.

Deep alignments often carry many byte-identical rows.  They all sit at
distance 0 from each other, so clustering them individually only adds
O(n²) work and a stack of zero-height merges to the tree.  Instead:

1. group rows by exact content (:func:`compute_collapse_groups`);
2. cluster one representative per group;
3. expand the representative order back to every member row, with
   members keeping their original relative order and sharing their
   representative's tree line.

The result carries two tree renderings: ``tree_lines`` (one per row,
duplicates repeated) for the expanded display, and
``collapsed_tree_lines`` (one per group, in ``group_order``) for a
display that shows each group once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .clustering import ClusterResult, cluster_sequences_with_tree, group_identical_rows
from .settings import DEFAULT_SETTINGS, SettingsRegistry, resolve_gap_chars

__all__ = [
    "CollapseGroup",
    "compute_collapse_groups",
    "cluster_sequences_with_collapse",
]

logger = logging.getLogger(__name__)


@dataclass
class CollapseGroup:
    """Rows sharing one exact sequence.

    Attributes
    ----------
    representative_row_index : int
        Row clustered on behalf of the group (its first member).
    members : list[int]
        All rows in the group, in original order.
    """

    representative_row_index: int
    members: List[int] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.members)


def compute_collapse_groups(sequences: Sequence[Sequence[str]]) -> List[CollapseGroup]:
    """Group rows by identical content, ordered by first occurrence.

    Comparison is exact: case and gap glyphs both matter.
    """
    return [
        CollapseGroup(representative_row_index=members[0], members=members)
        for members in group_identical_rows(sequences)
    ]


def _check_groups(groups: Sequence[CollapseGroup], n: int) -> None:
    rows = sorted(r for g in groups for r in g.members)
    if rows != list(range(n)):
        raise ValueError(
            f"Collapse groups must partition rows 0..{n - 1}; "
            f"got {len(rows)} member entries over {len(groups)} groups")
    for i, g in enumerate(groups):
        if g.representative_row_index not in g.members:
            raise ValueError(
                f"Group {i}: representative {g.representative_row_index} "
                f"is not one of its members")


def cluster_sequences_with_collapse(
    sequences: Sequence[Sequence[str]],
    gap_chars: Optional[Iterable[str]] = None,
    collapse_groups: Optional[Sequence[CollapseGroup]] = None,
    settings: Optional[SettingsRegistry] = None,
) -> ClusterResult:
    """Cluster *sequences*, clustering duplicate groups only once.

    Parameters
    ----------
    sequences : sequence of str (or of character lists)
        Aligned sequences.
    gap_chars : iterable of str, optional
        Gap alphabet; defaults to ``alignment.gap_chars``.
    collapse_groups : sequence of CollapseGroup, optional
        Precomputed groups (as from :func:`compute_collapse_groups`).
        Computed here when omitted.
    settings : SettingsRegistry, optional
        Defaults to :data:`~aform.settings.DEFAULT_SETTINGS`.

    Returns
    -------
    ClusterResult
        Always with ``group_order`` and ``collapsed_tree_lines`` set.

    Raises
    ------
    ValueError
        If *collapse_groups* does not partition the rows.
    """
    reg = settings if settings is not None else DEFAULT_SETTINGS
    gaps = resolve_gap_chars(gap_chars, reg)
    n = len(sequences)
    groups = (list(collapse_groups) if collapse_groups is not None
              else compute_collapse_groups(sequences))
    _check_groups(groups, n)
    num_unique = len(groups)
    logger.debug("collapse: %d sequences, %d unique", n, num_unique)

    if n <= 1 or num_unique == n:
        result = cluster_sequences_with_tree(sequences, gaps, reg)
        group_of = [0] * n
        for i, g in enumerate(groups):
            for row in g.members:
                group_of[row] = i
        result.group_order = [group_of[row] for row in result.order]
        result.collapsed_tree_lines = list(result.tree_lines)
        return result

    placeholder = reg["tree.placeholder"]
    if num_unique == 1:
        return ClusterResult(
            order=list(groups[0].members),
            tree_lines=[placeholder] * n,
            tree_width=1,
            group_order=[0],
            collapsed_tree_lines=[placeholder],
        )

    reps = [sequences[g.representative_row_index] for g in groups]
    rep_result = cluster_sequences_with_tree(reps, gaps, reg)

    order: List[int] = []
    tree_lines: List[str] = []
    for group_idx, line in zip(rep_result.order, rep_result.tree_lines):
        members = groups[group_idx].members
        order.extend(members)
        tree_lines.extend([line] * len(members))

    return ClusterResult(
        order=order,
        tree_lines=tree_lines,
        tree_width=rep_result.tree_width,
        group_order=list(rep_result.order),
        collapsed_tree_lines=list(rep_result.tree_lines),
    )
