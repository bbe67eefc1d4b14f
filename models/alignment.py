"""Edit-distance alignment of token sequences.

Aligns an expected sequence (source) against a typed sequence (target) and
produces a minimal edit script. Tokens are compared with ``==`` exactly as
given; callers decide whether a token is a code point or a word.

Backtrace tie-break, applied at every cell from ``dp[m][n]`` back to
``dp[0][0]``:

1. diagonal match (tokens equal and no added cost)
2. diagonal substitution
3. deletion of the source token
4. insertion of the target token

On inputs with several minimum-cost alignments this order fixes which edit
script, and therefore which confusion pairs, get reported.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from models.exceptions import AlignmentInputError

logger = logging.getLogger(__name__)


class OpType(str, Enum):
    """Kind of step in an edit script."""

    MATCH = "match"
    INSERT = "insert"
    DELETE = "delete"
    SUBSTITUTE = "substitute"


class AlignmentOp(BaseModel):
    """One step of an edit script.

    ``a`` is the source token (None for insertions) and ``b`` the target
    token (None for deletions). For an insertion ``source_index`` is the
    position in the source before which the token is inserted; for a
    deletion ``target_index`` is the position in the target at which the
    source token went missing.
    """

    op: OpType
    a: Optional[str] = None
    b: Optional[str] = None
    source_index: int = Field(ge=0)
    target_index: int = Field(ge=0)

    model_config = {
        "frozen": True,
    }


class AlignmentResult(BaseModel):
    """Ordered edit script plus aggregate operation counts."""

    ops: Tuple[AlignmentOp, ...] = ()
    matches: int = Field(default=0, ge=0)
    insertions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)
    substitutions: int = Field(default=0, ge=0)
    distance: int = Field(default=0, ge=0)

    model_config = {
        "frozen": True,
    }

    @property
    def errors(self) -> int:
        """Number of non-match operations."""
        return self.insertions + self.deletions + self.substitutions

    def replay(self, source: Sequence[str]) -> List[str]:
        """Apply the edit script to ``source`` and return the reconstructed target."""
        out: List[str] = []
        for op in self.ops:
            if op.op == OpType.DELETE:
                continue
            if op.op == OpType.MATCH:
                out.append(source[op.source_index])
            else:
                out.append(op.b if op.b is not None else "")
        return out

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the alignment to a JSON-ready dict."""
        return self.model_dump(mode="json")


def _distance_table(source: Sequence[str], target: Sequence[str]) -> List[List[int]]:
    m, n = len(source), len(target)
    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        dp[i][0] = i
    for j in range(n + 1):
        dp[0][j] = j
    for i in range(1, m + 1):
        prev = dp[i - 1]
        row = dp[i]
        token = source[i - 1]
        for j in range(1, n + 1):
            cost = 0 if token == target[j - 1] else 1
            row[j] = min(prev[j] + 1, row[j - 1] + 1, prev[j - 1] + cost)
    return dp


def align(source: Sequence[str], target: Sequence[str]) -> AlignmentResult:
    """Compute the minimum-edit alignment of two token lists.

    Args:
        source: Expected tokens
        target: Typed tokens

    Returns:
        AlignmentResult with ops in left-to-right order.

    Raises:
        AlignmentInputError: If either argument is not a list or tuple.
    """
    for name, tokens in (("source", source), ("target", target)):
        if not isinstance(tokens, (list, tuple)):
            raise AlignmentInputError(
                f"{name} must be a list or tuple of tokens, got {type(tokens).__name__}"
            )

    dp = _distance_table(source, target)
    ops: List[AlignmentOp] = []
    i, j = len(source), len(target)
    while i > 0 or j > 0:
        current = dp[i][j]
        if i > 0 and j > 0 and source[i - 1] == target[j - 1] and current == dp[i - 1][j - 1]:
            ops.append(
                AlignmentOp(
                    op=OpType.MATCH,
                    a=source[i - 1],
                    b=target[j - 1],
                    source_index=i - 1,
                    target_index=j - 1,
                )
            )
            i -= 1
            j -= 1
        elif i > 0 and j > 0 and current == dp[i - 1][j - 1] + 1:
            ops.append(
                AlignmentOp(
                    op=OpType.SUBSTITUTE,
                    a=source[i - 1],
                    b=target[j - 1],
                    source_index=i - 1,
                    target_index=j - 1,
                )
            )
            i -= 1
            j -= 1
        elif i > 0 and current == dp[i - 1][j] + 1:
            ops.append(
                AlignmentOp(op=OpType.DELETE, a=source[i - 1], source_index=i - 1, target_index=j)
            )
            i -= 1
        else:
            ops.append(
                AlignmentOp(op=OpType.INSERT, b=target[j - 1], source_index=i, target_index=j - 1)
            )
            j -= 1
    ops.reverse()

    counts = {op_type: 0 for op_type in OpType}
    for op in ops:
        counts[op.op] += 1

    result = AlignmentResult(
        ops=tuple(ops),
        matches=counts[OpType.MATCH],
        insertions=counts[OpType.INSERT],
        deletions=counts[OpType.DELETE],
        substitutions=counts[OpType.SUBSTITUTE],
        distance=dp[len(source)][len(target)],
    )
    logger.debug(
        "Aligned %d source / %d target tokens: distance=%d",
        len(source),
        len(target),
        result.distance,
    )
    return result
