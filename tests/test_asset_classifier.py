"""Tests for the Asset Classifier."""

import pytest
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


class TestIsDepreciableAsset:
    """Tests for is_depreciable_asset."""

    def test_below_floor_never_an_asset(self):
        """Under $300 is claimed outright, even for a laptop."""
        from suggestions.asset_classifier import is_depreciable_asset
        result = is_depreciable_asset("MacBook laptop", 299.99)
        assert result.is_asset is False
        assert result.suggested_rate is None

    def test_keyword_match(self):
        """A known keyword gives its archetype, rate and life."""
        from suggestions.asset_classifier import is_depreciable_asset
        result = is_depreciable_asset("Ergonomic office chair", 450)
        assert result.is_asset
        assert result.asset_type == "chair"
        assert result.suggested_rate == 0.20
        assert result.life_years == 5
        assert result.matched_keyword

    def test_keyword_match_is_case_insensitive(self):
        """Descriptions are matched lower-cased."""
        from suggestions.asset_classifier import is_depreciable_asset
        assert is_depreciable_asset("CANON CAMERA", 900).asset_type == "camera"

    def test_first_keyword_in_list_order_wins(self):
        """"laptop" precedes "computer" in the table."""
        from suggestions.asset_classifier import is_depreciable_asset
        assert is_depreciable_asset("laptop computer", 1200).asset_type == "laptop"

    def test_computer_beats_monitor(self):
        """A computer monitor classifies as a computer."""
        from suggestions.asset_classifier import is_depreciable_asset
        assert is_depreciable_asset("Dell computer monitor", 400).asset_type == "computer"

    def test_desk_beats_chair(self):
        """A desk chair classifies as a desk."""
        from suggestions.asset_classifier import is_depreciable_asset
        assert is_depreciable_asset("desk chair", 350).asset_type == "desk"

    def test_generic_fallback_above_floor(self):
        """No keyword but over $300 is a generic 20% asset."""
        from suggestions.asset_classifier import is_depreciable_asset
        result = is_depreciable_asset("standing mat", 350)
        assert result.is_asset
        assert result.asset_type is None
        assert result.label == "asset"
        assert result.suggested_rate == 0.20
        assert result.life_years == 5
        assert result.matched_keyword is False

    def test_exactly_floor_without_keyword(self):
        """$300 with no keyword is not an asset."""
        from suggestions.asset_classifier import is_depreciable_asset
        assert is_depreciable_asset("standing mat", 300).is_asset is False

    def test_exactly_floor_with_keyword(self):
        """$300 with a keyword is an asset."""
        from suggestions.asset_classifier import is_depreciable_asset
        assert is_depreciable_asset("printer", 300).is_asset is True


class TestKeywordTable:
    """Tests for the ordered keyword table."""

    def test_table_order(self):
        """Precedence order is fixed."""
        from suggestions.asset_classifier import ASSET_KEYWORDS
        assert [row.keyword for row in ASSET_KEYWORDS] == [
            "laptop", "computer", "monitor", "desk", "chair", "furniture",
            "printer", "phone", "tablet", "tools", "equipment", "camera", "software",
        ]

    @pytest.mark.parametrize("keyword,rate,life", [
        ("laptop", 0.30, 3),
        ("printer", 0.25, 4),
        ("furniture", 0.20, 5),
        ("software", 0.30, 3),
    ])
    def test_rates(self, keyword, rate, life):
        """Archetype rates and effective lives."""
        from suggestions.asset_classifier import find_asset_keyword
        row = find_asset_keyword(f"new {keyword}")
        assert row.rate == rate
        assert row.life_years == life

    def test_no_keyword(self):
        """Unrecognised text returns None."""
        from suggestions.asset_classifier import find_asset_keyword
        assert find_asset_keyword("coffee beans") is None
