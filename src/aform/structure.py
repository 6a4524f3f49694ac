"""Secondary-structure bracket notation parser.

Turns a dot-bracket annotation (typically the ``#=GC SS_cons`` line of a
Stockholm alignment) into a list of :class:`BasePair` records, each
tagged with the helix it belongs to.

Four bracket types are recognised (``<>``, ``()``, ``[]`` and ``{}``),
each with its own stack, so annotations of different types may
interleave.  Pairs only ever form within one type; crossing brackets of
different types are accepted as-is and no pseudoknot resolution is
attempted.  Every other character is unpaired.

Usage
-----
>>> from aform.structure import parse_structure
>>> pairs = parse_structure("<<..<<..>>..>>")
>>> [(p.left, p.right, p.helix_id) for p in pairs]
[(0, 13, 0), (1, 12, 0), (4, 9, 1), (5, 8, 1)]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

__all__ = [
    "BasePair",
    "StructureError",
    "UnmatchedOpen",
    "UnmatchedClose",
    "BracketMismatch",
    "OPEN_BRACKETS",
    "CLOSE_BRACKETS",
    "parse_structure",
    "is_valid_structure",
    "is_open_bracket",
    "is_close_bracket",
    "matching_close",
    "matching_open",
    "find_pair",
    "get_helix_id",
    "count_helices",
]


OPEN_BRACKETS: Tuple[str, ...] = ("<", "(", "[", "{")
CLOSE_BRACKETS: Tuple[str, ...] = (">", ")", "]", "}")


# ═══════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════

class StructureError(ValueError):
    """A structure annotation could not be parsed.

    Attributes
    ----------
    position : int
        0-indexed column of the offending bracket.
    """

    message = "Invalid structure at position {}"

    def __init__(self, position: int):
        self.position = position
        super().__init__(self.message.format(position))


class UnmatchedOpen(StructureError):
    message = "Unmatched opening bracket at position {}"


class UnmatchedClose(StructureError):
    message = "Unmatched closing bracket at position {}"


class BracketMismatch(StructureError):
    """Reserved for cross-type validation; the parser never raises it."""

    message = "Bracket type mismatch at position {}"


# ═══════════════════════════════════════════════════════════════════
# BasePair
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BasePair:
    """A base pair between two alignment columns.

    Attributes
    ----------
    left : int
        5' column (opening bracket), 0-indexed.
    right : int
        3' column (closing bracket), always ``> left``.
    helix_id : int
        Helix the pair belongs to, numbered from 0 in order of ``left``.
    """

    left: int
    right: int
    helix_id: int = 0

    def partner(self, col: int) -> Optional[int]:
        """The other column of this pair, or ``None`` if *col* is not in it."""
        if col == self.left:
            return self.right
        if col == self.right:
            return self.left
        return None


# ═══════════════════════════════════════════════════════════════════
# Bracket helpers
# ═══════════════════════════════════════════════════════════════════

def is_open_bracket(c: str) -> bool:
    return c in OPEN_BRACKETS


def is_close_bracket(c: str) -> bool:
    return c in CLOSE_BRACKETS


def matching_close(open_bracket: str) -> Optional[str]:
    """Closing bracket for *open_bracket*, or ``None`` if it is not one."""
    if open_bracket not in OPEN_BRACKETS:
        return None
    return CLOSE_BRACKETS[OPEN_BRACKETS.index(open_bracket)]


def matching_open(close_bracket: str) -> Optional[str]:
    """Opening bracket for *close_bracket*, or ``None`` if it is not one."""
    if close_bracket not in CLOSE_BRACKETS:
        return None
    return OPEN_BRACKETS[CLOSE_BRACKETS.index(close_bracket)]


# ═══════════════════════════════════════════════════════════════════
# Parsing
# ═══════════════════════════════════════════════════════════════════

def parse_structure(ss: str) -> List[BasePair]:
    """Parse a dot-bracket string into base pairs.

    Parameters
    ----------
    ss : str
        Structure annotation.  Characters other than the four bracket
        types are treated as unpaired.

    Returns
    -------
    list[BasePair]
        Sorted by ``left``, with helix ids assigned.

    Raises
    ------
    UnmatchedClose
        A closing bracket has no open partner of the same type.
    UnmatchedOpen
        An opening bracket is still open at the end of the string.  The
        reported position is the outermost leftover bracket of the first
        bracket type (in ``OPEN_BRACKETS`` order) that has one.
    """
    stacks: List[List[int]] = [[] for _ in OPEN_BRACKETS]
    pairs: List[BasePair] = []

    for pos, ch in enumerate(ss):
        if ch in OPEN_BRACKETS:
            stacks[OPEN_BRACKETS.index(ch)].append(pos)
        elif ch in CLOSE_BRACKETS:
            stack = stacks[CLOSE_BRACKETS.index(ch)]
            if not stack:
                raise UnmatchedClose(pos)
            pairs.append(BasePair(left=stack.pop(), right=pos))

    for stack in stacks:
        if stack:
            raise UnmatchedOpen(stack[0])

    pairs.sort(key=lambda p: p.left)
    return _assign_helix_ids(pairs)


def _assign_helix_ids(pairs: List[BasePair]) -> List[BasePair]:
    """Group pairs into helices.

    A pair continues the previous pair's helix iff it is immediately
    nested inside it: ``left`` one higher and ``right`` one lower.
    """
    result: List[BasePair] = []
    helix = 0
    prev: Optional[BasePair] = None
    for p in pairs:
        if prev is not None and not (
            p.left == prev.left + 1 and p.right + 1 == prev.right
        ):
            helix += 1
        result.append(BasePair(left=p.left, right=p.right, helix_id=helix))
        prev = p
    return result


def is_valid_structure(ss: str) -> bool:
    """True if *ss* parses without error."""
    try:
        parse_structure(ss)
    except StructureError:
        return False
    return True


# ═══════════════════════════════════════════════════════════════════
# Linear-scan queries over a pair list
# ═══════════════════════════════════════════════════════════════════
#
# O(n) in the number of pairs.  Per-cell lookups during rendering go
# through StructureCache instead.

def find_pair(pairs: Sequence[BasePair], col: int) -> Optional[int]:
    """Column paired with *col*, or ``None``."""
    for p in pairs:
        other = p.partner(col)
        if other is not None:
            return other
    return None


def get_helix_id(pairs: Sequence[BasePair], col: int) -> Optional[int]:
    """Helix id of the pair containing *col*, or ``None``."""
    for p in pairs:
        if col in (p.left, p.right):
            return p.helix_id
    return None


def count_helices(pairs: Sequence[BasePair]) -> int:
    """Number of distinct helices (``max helix_id + 1``, 0 if no pairs)."""
    if not pairs:
        return 0
    return max(p.helix_id for p in pairs) + 1
