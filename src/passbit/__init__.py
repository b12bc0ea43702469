"""
Binary-Partition Code Decoder

Decodes fixed-width codes such as "FBFBBFFRLR" into (high, low) coordinates
and identifiers, with receipts for every step.
"""

__version__ = "0.1.0"

from .kernel import Directive, ParseError, UnknownSymbol, winnow, encode
from .record import CodeRecord, WidthMismatch
from .batch import (
    RecordFailure,
    BatchSummary,
    BatchError,
    parse_batch,
    agg_max_identifier,
    agg_identifiers,
    agg_vacant_identifiers
)

__all__ = [
    # Kernel
    "Directive",
    "ParseError",
    "UnknownSymbol",
    "winnow",
    "encode",

    # Records
    "CodeRecord",
    "WidthMismatch",

    # Batch
    "RecordFailure",
    "BatchSummary",
    "BatchError",
    "parse_batch",
    "agg_max_identifier",
    "agg_identifiers",
    "agg_vacant_identifiers",
]
