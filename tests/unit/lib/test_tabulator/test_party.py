"""Unit tests for party normalization."""

import pytest

from election_map.lib.tabulator.party import normalize_party
from election_map.lib.tabulator.types import DEMOCRAT, REPUBLICAN


class TestNormalizeParty:
    """Tests for normalize_party."""

    @pytest.mark.parametrize("raw", ["REPUBLICAN", "Republican", "republican party", "GOP", "gop"])
    def test_republican_variants(self, raw: str) -> None:
        """Any label containing republican or gop maps to REPUBLICAN."""
        assert normalize_party(raw) == REPUBLICAN

    @pytest.mark.parametrize("raw", ["DEMOCRAT", "Democratic", "DEMOCRATIC-FARMER-LABOR", " democrat "])
    def test_democrat_variants(self, raw: str) -> None:
        """Any label containing democrat maps to DEMOCRAT."""
        assert normalize_party(raw) == DEMOCRAT

    def test_third_party_kept_uppercase(self) -> None:
        """Other labels become their own trimmed, upper-cased identifier."""
        assert normalize_party("  Libertarian ") == "LIBERTARIAN"
        assert normalize_party("GREEN") == "GREEN"

    def test_none_is_empty(self) -> None:
        """A missing party normalizes to the empty string."""
        assert normalize_party(None) == ""

    def test_republican_checked_before_democrat(self) -> None:
        """A label naming both parties resolves to REPUBLICAN."""
        assert normalize_party("Democrat-Republican") == REPUBLICAN
