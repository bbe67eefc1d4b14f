"""Whitespace normalization and tokenization helpers for typed/target text."""

import re
from typing import List

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse every run of whitespace to a single space and trim both ends.

    Idempotent: normalize_whitespace(normalize_whitespace(s)) == normalize_whitespace(s).
    """
    return _WHITESPACE_RUN.sub(" ", text).strip()


def split_chars(text: str) -> List[str]:
    """Split text into one token per code point."""
    return list(text)


def split_words(text: str, separator: str = " ") -> List[str]:
    """Split text on a literal separator, keeping empty tokens.

    Doubled separators therefore produce empty-string tokens. The empty
    string has no words.
    """
    if not text:
        return []
    return text.split(separator)


def count_words(text: str) -> int:
    """Count whitespace-delimited words, ignoring incidental extra spacing."""
    return len(split_words(normalize_whitespace(text)))
