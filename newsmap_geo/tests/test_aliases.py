"""
Tests for alias normalization.
"""

from __future__ import annotations

import pytest

from newsmap_geo.aliases import (
    CITY_TABLE,
    DEFAULT_TABLE,
    GUARDIAN_TABLE,
    NYTIMES_TABLE,
    AliasTable,
    normalize,
)


class TestNormalize:
    def test_dotted_abbreviations(self):
        assert normalize("U.S.") == "United States"
        assert normalize("U.K.") == "United Kingdom"

    def test_guardian_spellings(self):
        assert normalize("Britain") == "United Kingdom"
        assert normalize("Burma") == "Myanmar"
        assert normalize("USA") == "United States"

    def test_unknown_passes_through(self):
        assert normalize("Ruritania") == "Ruritania"
        assert normalize("") == ""

    def test_case_sensitive(self):
        assert normalize("u.s.") == "u.s."
        assert normalize("britain") == "britain"

    def test_no_whitespace_trimming(self):
        assert normalize(" U.S. ") == " U.S. "

    def test_explicit_table(self):
        assert normalize("US", NYTIMES_TABLE) == "US"
        assert normalize("US", GUARDIAN_TABLE) == "United States"


class TestIdempotence:
    @pytest.mark.parametrize("table", [DEFAULT_TABLE, GUARDIAN_TABLE, NYTIMES_TABLE])
    def test_every_key_and_value(self, table):
        for alias, canonical in table.items():
            for x in (alias, canonical):
                once = table.normalize(x)
                assert table.normalize(once) == once

    @pytest.mark.parametrize("raw", ["Gaza Strip", "Paris (France)", "  ", "Ukraine", "America"])
    def test_assorted_strings(self, raw):
        assert normalize(normalize(raw)) == normalize(raw)


class TestAliasTable:
    def test_read_only(self):
        with pytest.raises(TypeError):
            GUARDIAN_TABLE.entries["Narnia"] = "Narnia"

    def test_preserves_order(self):
        assert [a for a, _ in GUARDIAN_TABLE.items()][:3] == ["US", "USA", "America"]

    def test_merged_earlier_wins(self):
        a = AliasTable.from_dict("a", {"X": "One"})
        b = AliasTable.from_dict("b", {"X": "Two", "Y": "Three"})
        merged = AliasTable.merged("ab", a, b)
        assert merged.normalize("X") == "One"
        assert merged.normalize("Y") == "Three"
        assert len(merged) == 2

    def test_city_table(self):
        assert "Kyiv" in CITY_TABLE
        assert CITY_TABLE.normalize("Gaza City") == "Gaza"
