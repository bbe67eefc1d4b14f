"""Confusion-pair extraction from character alignments."""

from collections import Counter
from typing import Dict, List, Mapping, Tuple

from models.alignment import AlignmentResult, OpType

PAIR_SEPARATOR = "->"


def confusion_key(expected: str, typed: str) -> str:
    """Encode an (expected, typed) character pair as a single map key."""
    return f"{expected}{PAIR_SEPARATOR}{typed}"


def extract_confusions(alignment: AlignmentResult) -> Dict[str, int]:
    """Count substitution pairs in a character-level alignment.

    Every substitute op with both tokens present contributes one count to the
    key ``"<expected>-><typed>"``. No case folding or whitespace filtering is
    applied.
    """
    counts: Counter = Counter()
    for op in alignment.ops:
        if op.op == OpType.SUBSTITUTE and op.a is not None and op.b is not None:
            counts[confusion_key(op.a, op.b)] += 1
    return dict(counts)


def top_confusions(confusions: Mapping[str, int], limit: int = 10) -> List[Tuple[str, int]]:
    """Return the most frequent confusion pairs, ties broken by key."""
    ranked = sorted(confusions.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:limit]
