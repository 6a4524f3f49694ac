"""Structure caching — O(1) pair and helix lookup per alignment column.

Rendering asks "what is column *c* paired with?" once per visible cell
per redraw, and compensatory colouring asks it again.  Re-parsing the
SS_cons line each time would be quadratic in the alignment width, so
this module provides a :class:`StructureCache` that parses once and
serves lookups from two flat tables.

The cache is an ordinary value owned by the application state; there is
no module-level instance.

Workflow
--------
>>> cache = StructureCache()
>>> cache.update("<<..>>")          # parses, builds lookup tables
>>> cache.get_pair(0)
5
>>> cache.update("<<..>>")          # same string: returns immediately
>>> cache.is_valid_for("<<..>>")    # caller-side check, no update call
True
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .structure import BasePair, count_helices, parse_structure

__all__ = [
    "StructureCache",
]

logger = logging.getLogger(__name__)


class StructureCache:
    """Parsed base pairs plus per-column lookup tables.

    Invariants (whenever the cache holds a structure):

    * ``get_pair(get_pair(c)) == c`` for every paired column ``c``;
    * ``get_helix(c) == get_helix(get_pair(c))``.

    A failed :meth:`update` leaves the previous contents untouched.
    """

    def __init__(self):
        self._cached_structure: str = ""
        self._pairs: Tuple[BasePair, ...] = ()
        self._pair_lookup: List[Optional[int]] = []
        self._helix_lookup: List[Optional[int]] = []

    # ── update / clear ──────────────────────────────────────────

    def update(self, structure: str) -> None:
        """Rebuild the cache from *structure* unless it is already cached.

        Raises
        ------
        StructureError
            If *structure* does not parse.  The cache is not modified.
        """
        if structure == self._cached_structure:
            logger.debug("structure unchanged, keeping %d pairs",
                         len(self._pairs))
            return

        pairs = parse_structure(structure)

        pair_lookup: List[Optional[int]] = [None] * len(structure)
        helix_lookup: List[Optional[int]] = [None] * len(structure)
        for p in pairs:
            pair_lookup[p.left] = p.right
            pair_lookup[p.right] = p.left
            helix_lookup[p.left] = p.helix_id
            helix_lookup[p.right] = p.helix_id

        self._cached_structure = structure
        self._pairs = tuple(pairs)
        self._pair_lookup = pair_lookup
        self._helix_lookup = helix_lookup
        logger.debug("rebuilt structure cache: width=%d, %d pairs, %d helices",
                     len(structure), len(pairs), count_helices(pairs))

    def clear(self) -> None:
        """Drop the cached structure and both lookup tables."""
        self._cached_structure = ""
        self._pairs = ()
        self._pair_lookup = []
        self._helix_lookup = []

    def is_valid_for(self, structure: str) -> bool:
        """True if the cache already reflects *structure*."""
        return self._cached_structure == structure

    # ── lookups ─────────────────────────────────────────────────

    def get_pair(self, col: int) -> Optional[int]:
        """Column paired with *col*; ``None`` if unpaired or out of range."""
        if 0 <= col < len(self._pair_lookup):
            return self._pair_lookup[col]
        return None

    def get_helix(self, col: int) -> Optional[int]:
        """Helix id at *col*; ``None`` if unpaired or out of range."""
        if 0 <= col < len(self._helix_lookup):
            return self._helix_lookup[col]
        return None

    def is_paired(self, col: int) -> bool:
        return self.get_pair(col) is not None

    # ── introspection ───────────────────────────────────────────

    @property
    def cached_structure(self) -> str:
        return self._cached_structure

    @property
    def pairs(self) -> Tuple[BasePair, ...]:
        """All parsed pairs, sorted by ``left``."""
        return self._pairs

    @property
    def num_helices(self) -> int:
        return count_helices(self._pairs)

    def __len__(self) -> int:
        return len(self._pair_lookup)

    def __repr__(self) -> str:
        return (f"StructureCache(width={len(self)}, "
                f"{len(self._pairs)} pairs, {self.num_helices} helices)")
