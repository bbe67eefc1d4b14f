"""Tests for whitespace normalization and tokenization."""

import random

import pytest

from models.text_normalizer import count_words, normalize_whitespace, split_chars, split_words


@pytest.mark.parametrize(
    "text,expected",
    [
        ("", ""),
        ("   ", ""),
        ("hello  world", "hello world"),
        ("  hello world  ", "hello world"),
        ("a\tb\nc\r\nd", "a b c d"),
        ("one two", "one two"),
        ("already normal", "already normal"),
    ],
)
def test_normalize_whitespace(text: str, expected: str) -> None:
    assert normalize_whitespace(text) == expected


@pytest.mark.parametrize("seed", range(10))
def test_normalize_is_idempotent(seed: int) -> None:
    rng = random.Random(seed)
    alphabet = "ab \t\n "
    for _ in range(20):
        text = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 30)))
        once = normalize_whitespace(text)
        assert normalize_whitespace(once) == once


def test_split_chars_by_code_point() -> None:
    assert split_chars("e\u0301x") == ["e", "\u0301", "x"]
    assert split_chars("") == []


def test_split_words_keeps_empty_tokens() -> None:
    assert split_words("hello  world") == ["hello", "", "world"]
    assert split_words("hello world ") == ["hello", "world", ""]
    assert split_words("") == []


def test_split_words_custom_separator() -> None:
    assert split_words("a|b", "|") == ["a", "b"]


@pytest.mark.parametrize(
    "text,expected",
    [("", 0), ("   ", 0), ("one", 1), (" one  two\tthree ", 3)],
)
def test_count_words(text: str, expected: int) -> None:
    assert count_words(text) == expected
