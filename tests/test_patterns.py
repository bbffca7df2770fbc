import pytest

from smart_categorization.patterns import build_key, fold_hash, pattern_label, pattern_text

from tests.helpers.factories import make_tx


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", "0"),
        ("a", "2p"),  # 97
        ("ab", "2e9"),  # 97 * 31 + 98 = 3105
        ("_", "2n"),  # 95
        # Same fold as Java's String.hashCode; this one wraps to exactly -2**31.
        ("polygenelubricants", "-zik0zk"),
    ],
)
def test_fold_hash_known_values(text, expected):
    assert fold_hash(text) == expected


def test_fold_hash_is_deterministic():
    assert fold_hash("netflix_monthly") == fold_hash("netflix_monthly")
    assert fold_hash("netflix_monthly") != fold_hash("netflix_monthl")


def test_pattern_text_strips_digits_from_description_only():
    assert pattern_text("Amazon", "Order 12345") == "amazon_order"
    assert pattern_text("7-Eleven", "Store 0042") == "7eleven_store"
    assert pattern_text("Netflix", None) == "netflix_"
    assert pattern_text(None, None) == "_"


def test_build_key_ignores_digits_in_description():
    a = make_tx("a", "Amazon", description="Order 12345")
    b = make_tx("b", "Amazon", description="Order 98765")
    c = make_tx("c", "Amazon", description="Refund 12345")
    assert build_key(a) == build_key(b)
    assert build_key(a) != build_key(c)


def test_blank_merchants_hash_to_the_bare_separator():
    keys = {build_key(make_tx(i, m)) for i, m in [("a", ""), ("b", "***"), ("c", " . ")]}
    assert keys == {fold_hash("_")} == {"2n"}


def test_build_key_ignores_case_punctuation_and_spacing():
    a = make_tx("a", "NETFLIX.COM", description="  monthly  ")
    b = make_tx("b", "netflixcom", description="Monthly")
    assert build_key(a) == build_key(b)


def test_build_key_does_not_depend_on_amount_kind_or_date():
    a = make_tx("a", "Spotify", "-9.99")
    b = make_tx("b", "Spotify", "120.00")
    assert build_key(a) == build_key(b)


@pytest.mark.parametrize(
    "merchant, description, expected",
    [
        ("Amazon", "Order 12345", "amazon / order"),
        ("Netflix", None, "netflix"),
        ("", "Transfer 0042", "transfer"),
        ("", None, "(no merchant)"),
    ],
)
def test_pattern_label(merchant, description, expected):
    assert pattern_label(make_tx("x", merchant, description=description)) == expected
