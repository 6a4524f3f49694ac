"""ASCII dendrogram rendering — one glyph string per display row.

Each internal node of the merge tree becomes a vertical bracket in
one column of a fixed-width gutter, drawn from the first to the last
display row its leaves occupy::

    ┬┬      rows 0-1 merged first (column 0),
    ┘│      rows 2-3 merged first (column 0),
    ┬│      then everything joined at the root (column 1)
    ┘┘

Column choice
-------------
A node's *depth* is 0 for leaves and ``1 + max(child depths)`` above.
While the deepest node fits within ``tree.depth_cap`` columns, a node
sits in column ``depth - 1``.  Taller trees are squeezed into the cap
with square-root scaling of the normalised depth, which keeps the
shallow branch points apart and lets the many deep ones share the far
columns.  Nodes are drawn shallowest first, so when compression puts
an ancestor and a descendant in one column the ancestor's glyph wins.

Horizontal fill
---------------
After the brackets are placed, each row is scanned left to right:
blank cells are filled with ``─`` until a ``│`` or ``┘`` is met, and
filling resumes right after a ``┬``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .dendrogram import Dendrogram
from .settings import DEFAULT_SETTINGS, SettingsRegistry

__all__ = [
    "NodeSpan",
    "node_spans",
    "assign_columns",
    "render_tree",
]


@dataclass(frozen=True)
class NodeSpan:
    """Display-row extent and height of one dendrogram node."""

    row_min: int
    row_max: int
    depth: int


def node_spans(
    dendrogram: Dendrogram,
    order: Sequence[int],
) -> List[NodeSpan]:
    """Span and depth for every node id ``0 .. n + len(steps) - 1``.

    Steps are in merge order, so children are always computed before
    their parent.
    """
    n = dendrogram.n
    row_of = [0] * n
    for row, leaf in enumerate(order):
        row_of[leaf] = row

    spans: List[NodeSpan] = [NodeSpan(row_of[i], row_of[i], 0) for i in range(n)]
    for step in dendrogram.steps:
        a = spans[step.cluster1]
        b = spans[step.cluster2]
        spans.append(NodeSpan(
            row_min=min(a.row_min, b.row_min),
            row_max=max(a.row_max, b.row_max),
            depth=max(a.depth, b.depth) + 1,
        ))
    return spans


def assign_columns(depths: Sequence[int], depth_cap: int) -> Tuple[List[int], int]:
    """Map internal-node depths (each ``>= 1``) to gutter columns.

    Returns
    -------
    (columns, tree_width)
    """
    if depth_cap < 1:
        raise ValueError(f"depth_cap must be at least 1, got {depth_cap}")
    if not depths:
        return [], 0

    max_depth = max(depths)
    if max_depth <= depth_cap:
        return [d - 1 for d in depths], max_depth

    columns = []
    for d in depths:
        scaled = math.sqrt((d - 1) / (max_depth - 1)) * (depth_cap - 1)
        columns.append(min(int(scaled + 0.5), depth_cap - 1))
    return columns, depth_cap


def render_tree(
    dendrogram: Dendrogram,
    order: Sequence[int],
    settings: Optional[SettingsRegistry] = None,
) -> Tuple[List[str], int]:
    """Render *dendrogram* as one string per row of *order*.

    Parameters
    ----------
    dendrogram : Dendrogram
        Merge tree over ``dendrogram.n`` leaves.
    order : sequence of int
        Display order of the leaves (usually from
        :func:`~aform.dendrogram.dendrogram_order`).
    settings : SettingsRegistry, optional
        Source of ``tree.*`` glyphs and the depth cap.

    Returns
    -------
    (tree_lines, tree_width)
        ``tree_lines[row]`` is exactly ``tree_width`` characters.
        Without any merges every row gets the one-glyph placeholder.
    """
    reg = settings if settings is not None else DEFAULT_SETTINGS
    n = dendrogram.n
    if n == 0:
        return [], 0
    if not dendrogram.steps:
        return [reg["tree.placeholder"]] * n, 1

    horizontal = reg["tree.glyph_horizontal"]
    top = reg["tree.glyph_top"]
    bottom = reg["tree.glyph_bottom"]
    vertical = reg["tree.glyph_vertical"]

    spans = node_spans(dendrogram, order)
    internal = sorted(
        range(n, len(spans)),
        key=lambda node: (spans[node].depth, spans[node].row_min),
    )
    columns, width = assign_columns(
        [spans[node].depth for node in internal], int(reg["tree.depth_cap"]))

    lines: List[str] = []
    for row in range(len(order)):
        cells = [" "] * width
        for node, col in zip(internal, columns):
            span = spans[node]
            if row < span.row_min or row > span.row_max:
                continue
            if row == span.row_min:
                cells[col] = top
            elif row == span.row_max:
                cells[col] = bottom
            else:
                cells[col] = vertical

        fill = True
        for i, ch in enumerate(cells):
            if ch == " ":
                if fill:
                    cells[i] = horizontal
            elif ch == vertical or ch == bottom:
                fill = False
            elif ch == top:
                fill = True
        lines.append("".join(cells))

    return lines, width
