"""Tests for aform.settings — registry overrides, layout checks, gap sets."""

import pytest

from aform.settings import (
    DEFAULT_SETTINGS,
    SettingsRegistry,
    default_gap_chars,
    resolve_gap_chars,
)


# ═══════════════════════════════════════════════════════════════════
# Defaults
# ═══════════════════════════════════════════════════════════════════

class TestDefaults:

    def test_tree_values(self):
        assert DEFAULT_SETTINGS["tree.depth_cap"] == 8
        assert DEFAULT_SETTINGS["tree.placeholder"] == "─"
        glyphs = [DEFAULT_SETTINGS[k] for k in (
            "tree.glyph_horizontal", "tree.glyph_top",
            "tree.glyph_bottom", "tree.glyph_vertical")]
        assert glyphs == ["─", "┬", "┘", "│"]

    def test_lookup(self):
        assert "tree.depth_cap" in DEFAULT_SETTINGS
        assert DEFAULT_SETTINGS.get("tree.missing", 3) == 3
        with pytest.raises(KeyError):
            _ = DEFAULT_SETTINGS["tree.missing"]
        assert "default" in repr(DEFAULT_SETTINGS)

    def test_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_SETTINGS["tree.depth_cap"] = 4


# ═══════════════════════════════════════════════════════════════════
# replace()
# ═══════════════════════════════════════════════════════════════════

class TestReplace:

    def test_returns_new_registry(self):
        wide = DEFAULT_SETTINGS.replace({"tree.depth_cap": 16})
        assert wide["tree.depth_cap"] == 16
        assert DEFAULT_SETTINGS["tree.depth_cap"] == 8
        assert wide.name == "default+"
        assert DEFAULT_SETTINGS.replace({}, name="same").name == "same"

    def test_unknown_key(self):
        with pytest.raises(KeyError, match="tree.depth"):
            DEFAULT_SETTINGS.replace({"tree.depth": 4})

    @pytest.mark.parametrize("cap", [0, -3, 2.5, "8", True])
    def test_rejects_bad_depth_cap(self, cap):
        with pytest.raises(ValueError, match="depth_cap"):
            DEFAULT_SETTINGS.replace({"tree.depth_cap": cap})

    @pytest.mark.parametrize("glyph", ["", "+-", None, 7])
    def test_rejects_multi_char_glyph(self, glyph):
        with pytest.raises(ValueError, match="tree.glyph_top"):
            DEFAULT_SETTINGS.replace({"tree.glyph_top": glyph})

    def test_constructor_checks_values(self):
        with pytest.raises(ValueError):
            SettingsRegistry({"tree.placeholder": "--"})
        assert len(SettingsRegistry({"other.key": "anything"})) == 1


# ═══════════════════════════════════════════════════════════════════
# Gap helpers
# ═══════════════════════════════════════════════════════════════════

class TestGapChars:

    def test_default(self):
        assert default_gap_chars() == frozenset(".-_~:")

    def test_from_settings(self):
        reg = DEFAULT_SETTINGS.replace({"alignment.gap_chars": "-"})
        assert default_gap_chars(reg) == frozenset("-")
        assert resolve_gap_chars(None, reg) == frozenset("-")

    def test_explicit_wins(self):
        assert resolve_gap_chars([".", "-"]) == frozenset({".", "-"})
        assert resolve_gap_chars("") == frozenset()
