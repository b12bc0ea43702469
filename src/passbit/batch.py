"""
Batch Aggregates

Parse a batch of lines into CodeRecords and answer aggregate queries over
their identifiers. Parse failures are reported per record; the caller picks
the policy:

  - "abort": the first failure raises BatchError (cause chained)
  - "skip":  failures are collected as RecordFailure and the batch continues

Aggregates return (value, receipts_dict).
"""

from typing import Dict, Iterable, List, Optional, Tuple, TypedDict

from .core import Receipts
from .core.hashing import blake3_hash
from .kernel.directives import ParseError, UnknownSymbol
from .record import CodeRecord, WidthMismatch


ON_ERROR_POLICIES = ("abort", "skip")


# ============================================================================
# Type Definitions
# ============================================================================

class RecordFailure(TypedDict):
    """One rejected input line."""
    index: int  # position in the input sequence (0-based, blank lines counted)
    line: str  # trimmed line
    reason: str  # "width_mismatch" | "unknown_symbol"
    detail: str  # exception message


class BatchSummary(TypedDict):
    """Identifier statistics for a batch."""
    count: int
    max_identifier: Optional[int]
    min_identifier: Optional[int]
    identifiers_hash: str  # BLAKE3 over the sorted identifiers (uint16 BE each)


# ============================================================================
# Parsing
# ============================================================================

def parse_batch(
    lines: Iterable[str],
    on_error: str = "abort"
) -> Tuple[List[CodeRecord], List[RecordFailure]]:
    """
    Parse trimmed lines into records.

    Blank lines are ignored under both policies (never a failure) but still
    counted in the reported index.

    Args:
        lines: Raw text lines.
        on_error: "abort" or "skip".

    Returns:
        Tuple of (records, failures). failures is always empty in abort mode.

    Raises:
        BatchError: In abort mode, on the first line that fails to parse.
        ValueError: If on_error is not a known policy.
    """
    if on_error not in ON_ERROR_POLICIES:
        raise ValueError(
            f"Unknown on_error policy '{on_error}', expected one of {ON_ERROR_POLICIES}"
        )

    records = []
    failures = []

    for index, raw in enumerate(lines):
        line = raw.strip()
        if not line:
            continue

        try:
            records.append(CodeRecord.parse(line))
        except ParseError as e:
            if on_error == "abort":
                raise BatchError(index, line, e) from e
            failures.append({
                "index": index,
                "line": line,
                "reason": failure_reason(e),
                "detail": str(e)
            })

    return records, failures


def failure_reason(error: ParseError) -> str:
    if isinstance(error, WidthMismatch):
        return "width_mismatch"
    if isinstance(error, UnknownSymbol):
        return "unknown_symbol"
    return "parse_error"


# ============================================================================
# Aggregates
# ============================================================================

def agg_max_identifier(records: List[CodeRecord]) -> Tuple[Optional[int], Dict]:
    """
    Highest identifier in the batch, or None for an empty batch.
    """
    receipts = Receipts("aggregate.max")

    best = max((r.identifier() for r in records), default=None)

    receipts.put("count", len(records))
    receipts.put("max_identifier", best)

    return best, receipts.digest()


def agg_identifiers(records: List[CodeRecord]) -> Tuple[BatchSummary, Dict]:
    """
    Count, extremes and a hash of the sorted identifier list.
    """
    receipts = Receipts("aggregate.identifiers")

    ids = sorted(r.identifier() for r in records)

    stream = bytearray()
    for i in ids:
        stream.extend(i.to_bytes(2, byteorder='big'))

    summary: BatchSummary = {
        "count": len(ids),
        "max_identifier": ids[-1] if ids else None,
        "min_identifier": ids[0] if ids else None,
        "identifiers_hash": blake3_hash(bytes(stream))
    }

    receipts.put("summary", dict(summary))
    receipts.put("distinct", len(set(ids)))

    return summary, receipts.digest()


def agg_vacant_identifiers(records: List[CodeRecord]) -> Tuple[List[int], Dict]:
    """
    Identifiers missing from the batch whose two neighbours are both present.

    Example:
        ids {3, 4, 6, 7, 9, 12} → [5, 8]  (10 and 11 are missing side by side)
    """
    receipts = Receipts("aggregate.vacant")

    present = {r.identifier() for r in records}

    vacant = []
    if present:
        for candidate in range(min(present) + 1, max(present)):
            if (
                candidate not in present
                and candidate - 1 in present
                and candidate + 1 in present
            ):
                vacant.append(candidate)

    receipts.put("present", len(present))
    receipts.put("vacant", vacant)

    return vacant, receipts.digest()


class BatchError(Exception):
    """Raised in abort mode when a line fails to parse."""

    def __init__(self, index: int, line: str, error: ParseError):
        self.index = index
        self.line = line
        self.error = error
        self.reason = failure_reason(error)
        super().__init__(f"Line {index} ({line!r}): {error}")
