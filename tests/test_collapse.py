"""Tests for aform.collapse — clustering with duplicate groups."""

import random

import pytest

from aform.clustering import cluster_sequences_with_tree
from aform.collapse import (
    CollapseGroup,
    cluster_sequences_with_collapse,
    compute_collapse_groups,
)

GAPS = ["-", "."]


@pytest.fixture
def duplicate_heavy():
    # groups: AAAA {0,2,5}, UUUU {1,4}, AAAG {3}
    return ["AAAA", "UUUU", "AAAA", "AAAG", "UUUU", "AAAA"]


# ═══════════════════════════════════════════════════════════════════
# compute_collapse_groups
# ═══════════════════════════════════════════════════════════════════

class TestComputeGroups:

    def test_first_occurrence_order(self):
        groups = compute_collapse_groups(["AA", "CC", "AA", "GG", "CC"])
        assert [(g.representative_row_index, g.members) for g in groups] == [
            (0, [0, 2]), (1, [1, 4]), (3, [3]),
        ]
        assert [g.count for g in groups] == [2, 2, 1]

    def test_exact_content(self):
        # case and gap glyph both distinguish groups
        groups = compute_collapse_groups(["ac-u", "AC-U", "AC.U"])
        assert len(groups) == 3

    def test_char_lists(self):
        groups = compute_collapse_groups([list("ACGU"), list("ACGU")])
        assert len(groups) == 1
        assert groups[0].members == [0, 1]

    def test_empty(self):
        assert compute_collapse_groups([]) == []


# ═══════════════════════════════════════════════════════════════════
# cluster_sequences_with_collapse
# ═══════════════════════════════════════════════════════════════════

class TestClusterWithCollapse:

    def test_expanded_order(self, duplicate_heavy):
        groups = compute_collapse_groups(duplicate_heavy)
        result = cluster_sequences_with_collapse(duplicate_heavy, GAPS, groups)

        assert sorted(result.order) == list(range(6))
        expanded = [row for g in result.group_order for row in groups[g].members]
        assert result.order == expanded

    def test_members_keep_original_order(self, duplicate_heavy):
        result = cluster_sequences_with_collapse(duplicate_heavy, GAPS)
        positions = [result.order.index(r) for r in (0, 2, 5)]
        assert positions == sorted(positions)
        assert positions[2] - positions[0] == 2

    def test_duplicates_share_tree_line(self, duplicate_heavy):
        result = cluster_sequences_with_collapse(duplicate_heavy, GAPS)
        line_of = dict(zip(result.order, result.tree_lines))
        assert line_of[0] == line_of[2] == line_of[5]
        assert line_of[1] == line_of[4]
        assert len(result.tree_lines) == 6

    def test_collapsed_lines_one_per_group(self, duplicate_heavy):
        result = cluster_sequences_with_collapse(duplicate_heavy, GAPS)
        assert sorted(result.group_order) == [0, 1, 2]
        assert len(result.collapsed_tree_lines) == 3
        reps = ["AAAA", "UUUU", "AAAG"]
        plain = cluster_sequences_with_tree(reps, GAPS)
        assert result.group_order == plain.order
        assert result.collapsed_tree_lines == plain.tree_lines
        assert result.tree_width == plain.tree_width

    def test_two_groups_exact(self):
        result = cluster_sequences_with_collapse(["AA", "CC", "AA"], GAPS)
        assert result.order == [0, 2, 1]
        assert result.tree_lines == ["┬", "┬", "┘"]
        assert result.collapsed_tree_lines == ["┬", "┘"]
        assert result.group_order == [0, 1]
        assert result.tree_width == 1

    def test_all_identical(self):
        result = cluster_sequences_with_collapse(["ACGU"] * 4, GAPS)
        assert result.order == [0, 1, 2, 3]
        assert result.tree_lines == ["─"] * 4
        assert result.tree_width == 1
        assert result.group_order == [0]
        assert result.collapsed_tree_lines == ["─"]
        assert result.is_collapsed

    def test_all_unique_matches_plain_path(self):
        rng = random.Random(5)
        seqs = ["".join(rng.choice("ACGU") for _ in range(16)) for _ in range(9)]
        assert len(set(seqs)) == 9

        collapsed = cluster_sequences_with_collapse(seqs, GAPS)
        plain = cluster_sequences_with_tree(seqs, GAPS)
        assert set(collapsed.order) == set(plain.order)
        assert collapsed.order == plain.order
        assert collapsed.tree_lines == plain.tree_lines
        # one row per group, groups numbered by first occurrence
        assert collapsed.group_order == collapsed.order
        assert collapsed.collapsed_tree_lines == collapsed.tree_lines

    def test_empty(self):
        result = cluster_sequences_with_collapse([], GAPS, [])
        assert result.order == []
        assert result.tree_lines == []
        assert result.group_order == []
        assert result.collapsed_tree_lines == []

    def test_single(self):
        result = cluster_sequences_with_collapse(["ACGU"], GAPS)
        assert result.order == [0]
        assert result.tree_lines == ["─"]
        assert result.group_order == [0]

    def test_default_gap_set(self, duplicate_heavy):
        result = cluster_sequences_with_collapse(duplicate_heavy)
        assert sorted(result.order) == list(range(6))


class TestGroupValidation:

    def test_missing_rows(self):
        groups = [CollapseGroup(0, [0]), CollapseGroup(1, [1])]
        with pytest.raises(ValueError, match="partition"):
            cluster_sequences_with_collapse(["AA", "CC", "GG"], GAPS, groups)

    def test_duplicated_rows(self):
        groups = [CollapseGroup(0, [0, 1]), CollapseGroup(1, [1])]
        with pytest.raises(ValueError):
            cluster_sequences_with_collapse(["AA", "AA"], GAPS, groups)

    def test_representative_outside_group(self):
        groups = [CollapseGroup(1, [0]), CollapseGroup(0, [1])]
        with pytest.raises(ValueError, match="representative"):
            cluster_sequences_with_collapse(["AA", "CC"], GAPS, groups)
