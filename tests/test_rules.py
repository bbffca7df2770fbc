from smart_categorization.models import TransactionKind
from smart_categorization.patterns import build_key
from smart_categorization.rules import apply_rules, build_rule

from tests.helpers.factories import make_tx


def test_build_rule_captures_pattern_and_kind():
    tx = make_tx("s", "Netflix", description="Monthly 0324")
    rule = build_rule(tx, "cat-streaming")
    assert rule.id.startswith("rule-")
    assert rule.pattern_key == build_key(tx)
    assert rule.pattern_label == "netflix / monthly"
    assert rule.kind is TransactionKind.EXPENSE
    assert build_rule(tx, "cat-streaming").id != rule.id


def test_apply_rules_categorizes_new_uncategorized_imports():
    rule = build_rule(make_tx("s", "Netflix", description="Monthly 0324"), "cat-streaming")
    incoming = [
        make_tx("n1", "Netflix", description="Monthly 0724"),
        make_tx("n2", "Netflix", description="Monthly 0824", category_id="cat-manual"),
        make_tx("n3", "Netflix", "15.99", description="Monthly 0924", kind=TransactionKind.INCOME),
        make_tx("n4", "Lidl"),
    ]

    out, counts = apply_rules([rule], incoming)

    assert [t.id for t in out] == ["n1", "n2", "n3", "n4"]
    assert [t.category_id for t in out] == ["cat-streaming", "cat-manual", None, None]
    assert counts == {rule.id: 1}


def test_first_matching_rule_wins_among_equal_priorities():
    tx = make_tx("s", "Spotify")
    first = build_rule(tx, "cat-music")
    second = build_rule(tx, "cat-other")
    out, counts = apply_rules([first, second], [make_tx("n", "Spotify")])
    assert out[0].category_id == "cat-music"
    assert counts == {first.id: 1}
    assert first.priority == second.priority == 0


def test_higher_priority_rule_wins_regardless_of_order():
    tx = make_tx("s", "Spotify")
    low = build_rule(tx, "cat-other")
    high = build_rule(tx, "cat-music", priority=5)
    out, counts = apply_rules([low, high], [make_tx("n1", "Spotify"), make_tx("n2", "Spotify")])
    assert [t.category_id for t in out] == ["cat-music", "cat-music"]
    assert counts == {high.id: 2}
