"""Tests for clip name matching."""
import pytest

from cdl_import.decisions import ColorDecision
from cdl_import.matcher import MatchTier, match_clip, match_clips, strip_extension


def table_of(*names):
    return {name: ColorDecision(name=name, slope="1 1 1") for name in names}


class TestStripExtension:
    """Test extension stripping."""

    @pytest.mark.parametrize("name,expected", [
        ("A001C002.mov", "A001C002"),
        ("A001_0001.R3D", "A001_0001"),
        ("clip.v2.mxf", "clip.v2"),
        ("A001C002", "A001C002"),
        (".hidden", ".hidden"),
        ("trailing.", "trailing."),
    ])
    def test_strip_extension(self, name, expected):
        assert strip_extension(name) == expected


class TestMatchClip:
    """Test the tiered matching."""

    def test_exact_match(self):
        match = match_clip(table_of("A001C002"), "A001C002")
        assert match.key == "A001C002"
        assert match.tier is MatchTier.EXACT

    def test_extension_stripped_match(self):
        match = match_clip(table_of("A001C002"), "A001C002.mov")
        assert match.key == "A001C002"
        assert match.tier is MatchTier.EXTENSION_STRIPPED

    def test_substring_match_clip_contains_key(self):
        match = match_clip(table_of("A001C002"), "A001C002_proxy")
        assert match.key == "A001C002"
        assert match.tier is MatchTier.SUBSTRING

    def test_substring_match_key_contains_clip(self):
        match = match_clip(table_of("A001C002_0412AB"), "A001C002")
        assert match.key == "A001C002_0412AB"
        assert match.tier is MatchTier.SUBSTRING

    def test_substring_match_key_contains_stripped_name(self):
        match = match_clip(table_of("A001C002_0412AB"), "A001C002.mov")
        assert match.key == "A001C002_0412AB"
        assert match.tier is MatchTier.SUBSTRING

    def test_no_match(self):
        assert match_clip(table_of("A001C002"), "B999C999") is None

    def test_exact_beats_substring(self):
        table = table_of("A001", "A001C002")
        assert match_clip(table, "A001").key == "A001"

    def test_longest_key_wins_substring_ties(self):
        table = table_of("A001", "A001C002", "C002")
        assert match_clip(table, "A001C002_proxy").key == "A001C002"

    def test_equal_length_keys_break_alphabetically(self):
        table = table_of("C002", "A001")
        assert match_clip(table, "A001C002_proxy").key == "A001"

    def test_empty_clip_name_never_matches(self):
        assert match_clip(table_of("A001"), "") is None

    def test_empty_key_never_substring_matches(self):
        assert match_clip(table_of(""), "A001") is None

    def test_empty_table(self):
        assert match_clip({}, "A001") is None

    def test_returns_decision_from_table(self):
        table = table_of("A001C002")
        assert match_clip(table, "A001C002.mov").decision is table["A001C002"]


class TestMatchClips:
    """Test matching several names at once."""

    def test_match_clips(self):
        results = match_clips(table_of("A001C002"), ["A001C002.mov", "B001C001"])
        assert results["A001C002.mov"].key == "A001C002"
        assert results["B001C001"] is None
