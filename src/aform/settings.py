"""SettingsRegistry — the gap alphabet and tree-gutter layout values.

An immutable mapping of dotted keys (``"tree.depth_cap"``) to values.
Overrides go through :meth:`SettingsRegistry.replace`, which returns a
new registry and checks the values the tree renderer relies on: the
depth cap must be a positive integer and every glyph a single
character, so each rendered row is exactly ``tree_width`` wide.

Usage
-----
>>> from aform.settings import DEFAULT_SETTINGS
>>> DEFAULT_SETTINGS["alignment.gap_chars"]     # '.-_~:'
>>> wide = DEFAULT_SETTINGS.replace({"tree.depth_cap": 16})
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Iterable, Optional

__all__ = [
    "SettingsRegistry",
    "DEFAULT_SETTINGS",
    "default_gap_chars",
    "resolve_gap_chars",
]


GLYPH_KEYS = (
    "tree.placeholder",
    "tree.glyph_horizontal",
    "tree.glyph_top",
    "tree.glyph_bottom",
    "tree.glyph_vertical",
)


def _check_values(data: Dict[str, Any]) -> None:
    cap = data.get("tree.depth_cap", 1)
    if isinstance(cap, bool) or not isinstance(cap, int) or cap < 1:
        raise ValueError(
            f"tree.depth_cap must be an integer >= 1, got {cap!r}")
    for key in GLYPH_KEYS:
        if key not in data:
            continue
        glyph = data[key]
        if not isinstance(glyph, str) or len(glyph) != 1:
            raise ValueError(f"{key} must be a single character, got {glyph!r}")


class SettingsRegistry:
    """Immutable mapping of dotted setting keys → values.

    Parameters
    ----------
    data : dict[str, Any]
        ``{"section.name": value, ...}``.
    name : str, optional
        Label shown in ``repr`` (e.g. ``"default"``, ``"wide-tree"``).

    Raises
    ------
    ValueError
        If ``tree.depth_cap`` or a tree glyph is out of range.
    """

    def __init__(self, data: Dict[str, Any], *, name: str = "custom"):
        _check_values(data)
        self._data: Dict[str, Any] = dict(data)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"SettingsRegistry({self._name!r}, {len(self._data)} keys)"

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def __setitem__(self, key: str, value: Any):
        raise TypeError("settings are read-only; build a new registry with .replace()")

    def replace(
        self,
        overrides: Dict[str, Any],
        *,
        name: Optional[str] = None,
    ) -> "SettingsRegistry":
        """Return a new registry with selected keys overridden.

        Raises
        ------
        KeyError
            If a key in *overrides* is not a known setting.
        ValueError
            If an overridden value fails the layout checks.
        """
        unknown = sorted(k for k in overrides if k not in self._data)
        if unknown:
            raise KeyError(f"Unknown setting key(s) {unknown}")
        merged = dict(self._data)
        merged.update(overrides)
        return SettingsRegistry(merged, name=name or (self._name + "+"))


DEFAULT_SETTINGS: SettingsRegistry = SettingsRegistry(
    {
        "alignment.gap_chars": ".-_~:",
        "tree.depth_cap": 8,                # widest tree before sqrt compression
        "tree.placeholder": "─",            # tree line for n <= 1 / all-identical
        "tree.glyph_horizontal": "─",
        "tree.glyph_top": "┬",
        "tree.glyph_bottom": "┘",
        "tree.glyph_vertical": "│",
    },
    name="default",
)


def default_gap_chars(
    settings: Optional[SettingsRegistry] = None,
) -> FrozenSet[str]:
    """Gap alphabet from *settings* (``DEFAULT_SETTINGS`` if omitted)."""
    reg = settings if settings is not None else DEFAULT_SETTINGS
    return frozenset(reg["alignment.gap_chars"])


def resolve_gap_chars(
    gap_chars: Optional[Iterable[str]],
    settings: Optional[SettingsRegistry] = None,
) -> FrozenSet[str]:
    """Normalise a caller-supplied gap set; ``None`` means the default."""
    if gap_chars is None:
        return default_gap_chars(settings)
    return frozenset(gap_chars)
