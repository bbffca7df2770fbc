import pytest

from smart_categorization.config import MatchingSettings
from smart_categorization.models import CategorizationScope, TransactionKind
from smart_categorization.suggestions import suggest

from tests.helpers.factories import make_tx


def test_no_matches_no_suggestions():
    tx = make_tx("s", "Bakery", "-3.20")
    others = [tx, make_tx("o", "Hardware", "-80.00")]
    assert suggest(tx, others) == []


def test_pattern_suggestion_reports_dominant_category():
    tx = make_tx("s", "Spotify", "-9.99", description="Premium 01")
    others = [
        tx,
        make_tx("a", "Spotify", "-9.99", description="Premium 02", category_id="cat-music"),
        make_tx("b", "Spotify", "-9.99", description="Premium 03", category_id="cat-music"),
        make_tx("c", "Spotify", "-9.99", description="Premium 04", category_id="cat-other"),
        make_tx("d", "Spotify", "-9.99", description="Premium 05"),
    ]

    (s,) = suggest(tx, others)

    assert s.scope is CategorizationScope.PATTERN
    assert s.match_count == 4
    assert s.category_id == "cat-music"
    assert s.agreement == pytest.approx(0.5)
    # 0.95 * 0.5 + min(4 / 10, 0.2)
    assert s.confidence == pytest.approx(0.675)
    assert s.pattern_label == "spotify / premium"
    assert s.reason == '2/4 transactions (50%) like "spotify / premium" are categorized as cat-music'
    assert s.match_ids == ("a", "b", "c", "d")


def test_uncategorized_matches_score_volume_only():
    tx = make_tx("s", "Spotify")
    (s,) = suggest(tx, [tx, make_tx("a", "Spotify")])
    assert s.category_id is None
    assert s.confidence == pytest.approx(0.1)
    assert s.reason == '1 other transaction look like "spotify"; none is categorized yet'


def test_all_suggestion_only_when_it_reaches_further():
    tx = make_tx("s", "Uber", "-12.00", description="Trip")
    others = [
        tx,
        make_tx("a", "Uber", "-8.00", description="Trip", category_id="cat-taxi"),
        make_tx("b", "Uber Eats", "-25.00", description="Dinner", category_id="cat-food"),
        make_tx("c", "Uber Eats", "-31.00", description="Lunch", category_id="cat-food"),
    ]

    out = suggest(tx, others)

    assert [s.scope for s in out] == [CategorizationScope.PATTERN, CategorizationScope.ALL]
    pattern, broad = out
    assert pattern.match_count == 1
    # 0.95 * 1 + 0.1, capped
    assert pattern.confidence == 1.0
    assert broad.match_count == 3
    assert broad.category_id == "cat-food"
    assert broad.confidence == pytest.approx(0.75 * 2 / 3 + 0.2)


def test_sorted_by_confidence_descending():
    tx = make_tx("s", "Uber", "-12.00", description="Trip")
    others = [
        tx,
        make_tx("a", "Uber", "-8.00", description="Trip"),
        make_tx("b", "Uber Eats", "-25.00", category_id="cat-food"),
        make_tx("c", "Uber Eats", "-31.00", category_id="cat-food"),
    ]

    out = suggest(tx, others)

    # pattern: 1 uncategorized match -> 0.1; all: 2/3 agree -> 0.7
    assert [s.scope for s in out] == [CategorizationScope.ALL, CategorizationScope.PATTERN]
    assert out[0].confidence > out[1].confidence


def test_min_confidence_filters():
    tx = make_tx("s", "Spotify")
    settings = MatchingSettings(suggestion_min_confidence=0.5)
    assert suggest(tx, [tx, make_tx("a", "Spotify")], settings) == []


def test_other_kinds_are_never_suggested():
    tx = make_tx("s", "Employer GmbH", "2500.00", kind=TransactionKind.INCOME)
    others = [tx, make_tx("a", "Employer GmbH", "-2500.00")]
    assert suggest(tx, others) == []


def test_confidence_is_capped_at_one():
    tx = make_tx("s", "Rent")
    others = [tx, *(make_tx(f"r{i}", "Rent", category_id="cat-rent") for i in range(12))]
    (s,) = suggest(tx, others)
    assert s.confidence == 1.0


def test_suggestions_carry_merchant_hints():
    tx = make_tx("s", "Pizza Hut", "-18.00", description="Order 1")
    others = [tx, make_tx("a", "Pizza Hut", "-22.00", description="Order 2")]
    (s,) = suggest(tx, others)
    assert s.hints == ("food",)


def test_hints_are_empty_for_unknown_merchants():
    tx = make_tx("s", "Spotify")
    (s,) = suggest(tx, [tx, make_tx("a", "Spotify")])
    assert s.hints == ()
