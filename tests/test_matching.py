from smart_categorization.matching import (
    find_matches,
    find_pattern_matches,
    matches_for_scope,
    same_kind,
)
from smart_categorization.models import CategorizationScope, TransactionKind

from tests.helpers.factories import make_tx, netflix_ledger


def _ids(txs):
    return [t.id for t in txs]


def test_pattern_matches_exclude_source_and_keep_input_order():
    ledger = netflix_ledger()
    source = ledger[0]
    assert _ids(find_pattern_matches(source, ledger)) == ["tx2", "tx3", "tx5"]


def test_pattern_matches_exclude_source_even_when_it_appears_twice():
    source = make_tx("a", "Netflix")
    assert find_pattern_matches(source, [source, source]) == []


def test_blank_merchants_share_one_pattern():
    # Merchants that normalize to nothing all land on the key for "_".
    source = make_tx("s", "***")
    others = [make_tx("a", ""), make_tx("b", "..."), make_tx("c", "Netflix")]
    assert _ids(find_pattern_matches(source, others)) == ["a", "b"]


def test_scope_pattern_filters_to_source_kind():
    ledger = netflix_ledger()
    got = matches_for_scope(ledger[0], ledger, CategorizationScope.PATTERN)
    assert _ids(got) == ["tx2", "tx5"]
    assert all(t.kind is TransactionKind.EXPENSE for t in got)


def test_scope_single_matches_nothing():
    ledger = netflix_ledger()
    assert matches_for_scope(ledger[0], ledger, CategorizationScope.SINGLE) == []


def test_scope_accepts_plain_string():
    ledger = netflix_ledger()
    assert _ids(matches_for_scope(ledger[0], ledger, "pattern")) == ["tx2", "tx5"]


def test_broad_matcher_accepts_merchant_containment_both_ways():
    source = make_tx("s", "Uber", "-12.00", description="Trip")
    longer = make_tx("a", "Uber Eats", "-30.00", description="Dinner")
    shorter = make_tx("b", "Ub", "-45.00")
    other = make_tx("c", "Lyft", "-7.00")
    assert _ids(find_matches(source, [longer, shorter, other])) == ["a", "b"]


def test_broad_matcher_accepts_amount_within_tolerance_same_currency():
    source = make_tx("s", "Gym A", "-29.90")
    near = make_tx("a", "Fitness B", "-29.90")
    cent_off = make_tx("b", "Fitness C", "-29.91")
    other_ccy = make_tx("c", "Fitness D", "-29.90", currency="USD")
    assert _ids(find_matches(source, [near, cent_off, other_ccy])) == ["a"]
    assert _ids(find_matches(source, [near, cent_off], amount_tolerance=0.02)) == ["a", "b"]


def test_broad_matcher_never_matches_on_empty_merchant():
    source = make_tx("s", "...", "-1.00")
    blank = make_tx("a", "", "-99.00", description="Cash")
    named = make_tx("b", "Bakery", "-5.00")
    assert find_matches(source, [blank, named]) == []


def test_broad_matcher_is_a_superset_of_pattern_matcher():
    ledger = netflix_ledger()
    source = ledger[0]
    strict = set(_ids(find_pattern_matches(source, ledger)))
    broad = set(_ids(find_matches(source, ledger)))
    assert strict <= broad
    assert "tx4" not in broad


def test_scope_all_is_kind_filtered():
    ledger = netflix_ledger()
    got = matches_for_scope(ledger[0], ledger, CategorizationScope.ALL)
    assert "tx3" not in _ids(got)


def test_same_kind():
    a = make_tx("a", "X")
    b = make_tx("b", "X", kind=TransactionKind.INCOME)
    assert same_kind(a, [a, b]) == [a]
