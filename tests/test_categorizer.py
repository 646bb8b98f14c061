"""Tests for merchant-pattern auto-categorization."""

from datetime import datetime

from kostnad.domain.categorizer import MerchantCategorizer, pattern_matches
from kostnad.domain.entities import MerchantMapping


def _mapping(mapping_id, pattern, category_id=None, multi=False):
    return MerchantMapping(
        id=mapping_id,
        merchant_pattern=pattern,
        category_id=category_id,
        is_multi_merchant=multi,
        created_at=datetime(2026, 1, 1),
    )


def test_pattern_matches_case_insensitive_substring():
    assert pattern_matches("ica", "ICA KVANTUM LERUM")
    assert pattern_matches("Circle K", "circle k lerum")
    assert not pattern_matches("COOP", "ICA KVANTUM")


def test_first_matching_mapping_wins():
    categorizer = MerchantCategorizer(
        [_mapping(1, "ICA", category_id=10), _mapping(2, "ICA KVANTUM", category_id=20)]
    )

    assert categorizer.find_category("ICA KVANTUM LERUM") == 10


def test_no_match_is_uncategorized():
    categorizer = MerchantCategorizer([_mapping(1, "ICA", category_id=10)])

    assert categorizer.find_mapping("COOP FORUM") is None
    assert categorizer.find_category("COOP FORUM") is None


def test_multi_merchant_never_assigns_category():
    categorizer = MerchantCategorizer(
        [_mapping(1, "AMAZON", multi=True), _mapping(2, "AMAZON EU", category_id=30)]
    )

    assert categorizer.find_mapping("AMAZON EU").is_multi_merchant
    assert categorizer.find_category("AMAZON EU") is None


def test_earlier_category_mapping_beats_later_multi():
    categorizer = MerchantCategorizer(
        [_mapping(1, "AMAZON PRIME", category_id=40), _mapping(2, "AMAZON", multi=True)]
    )

    assert categorizer.find_category("AMAZON PRIME VIDEO") == 40
    assert categorizer.is_multi_merchant("AMAZON PRIME VIDEO")


def test_is_multi_merchant():
    categorizer = MerchantCategorizer(
        [_mapping(1, "ICA", category_id=10), _mapping(2, "Zettle", multi=True)]
    )

    assert categorizer.is_multi_merchant("ZETTLE_*KIOSK")
    assert not categorizer.is_multi_merchant("ICA NARA")


def test_empty_mapping_list():
    categorizer = MerchantCategorizer([])
    assert categorizer.find_category("ICA") is None
    assert not categorizer.is_multi_merchant("ICA")
