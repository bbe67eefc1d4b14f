"""Tests for confusion-pair extraction."""

from models.alignment import align
from models.confusion import confusion_key, extract_confusions, top_confusions


def test_single_substitution_pair() -> None:
    assert extract_confusions(align(list("cat"), list("cot"))) == {"a->o": 1}


def test_no_substitutions_gives_empty_map() -> None:
    assert extract_confusions(align(list("cat"), list("cat"))) == {}
    assert extract_confusions(align(list("cat"), list("cats"))) == {}
    assert extract_confusions(align([], [])) == {}


def test_repeated_pairs_are_counted() -> None:
    result = align(list("ee ee"), list("ww ew"))
    assert extract_confusions(result) == {"e->w": 3}


def test_case_and_whitespace_are_not_filtered() -> None:
    result = align(list("a b"), list("A\tb"))
    assert extract_confusions(result) == {"a->A": 1, " ->\t": 1}


def test_confusion_key_format() -> None:
    assert confusion_key("s", "d") == "s->d"


def test_top_confusions_orders_by_count_then_key() -> None:
    counts = {"b->c": 2, "a->b": 2, "x->y": 5, "q->w": 1}
    assert top_confusions(counts, 3) == [("x->y", 5), ("a->b", 2), ("b->c", 2)]
    assert top_confusions({}, 3) == []
