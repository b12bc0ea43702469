"""
Kernel: directives, symbol alphabets and the partition decoder.

Components:
  - directives: Directive enum, per-group alphabets, UnknownSymbol
  - winnow: range bisection (winnow), its inverse (encode), range_bounds
"""

from .directives import (
    Directive,
    parse_symbol,
    parse_symbols,
    render_symbols,
    ParseError,
    UnknownSymbol
)
from .winnow import (
    winnow,
    encode,
    range_bounds
)

__all__ = [
    # Directives
    "Directive",
    "parse_symbol",
    "parse_symbols",
    "render_symbols",
    "ParseError",
    "UnknownSymbol",

    # Winnow
    "winnow",
    "encode",
    "range_bounds",

    # Receipts
    "kernel_receipts",
]


def kernel_receipts(section_label: str, widths: list[int]) -> dict:
    """
    Generate receipts proving the decoder over complete ranges.

    For each width n, every value in [0, 2**n - 1] is encoded to its
    directive sequence and decoded back.

    Args:
        section_label: ASCII identifier (e.g., "kernel-high").
        widths: Group widths to exercise (e.g., [7, 3]).

    Returns:
        dict: Receipt digest with per-width round-trip results.
    """
    from ..core import Receipts, blake3_hash
    from ..core.bytesio import serialize_directives_be

    receipts = Receipts(section_label)

    results = []
    for n in widths:
        lo, hi = range_bounds(n)
        stream = bytearray()
        in_range = True
        roundtrip = True
        for v in range(lo, hi + 1):
            seq = encode(v, lo, hi, n)
            decoded = winnow(seq, lo, hi)
            in_range = in_range and lo <= decoded <= hi
            roundtrip = roundtrip and decoded == v
            stream.extend(serialize_directives_be([d.value for d in seq]))

        results.append({
            "width": n,
            "lo": lo,
            "hi": hi,
            "in_range_ok": in_range,
            "roundtrip_ok": roundtrip,
            "sequences_hash": blake3_hash(bytes(stream))
        })

    receipts.put("roundtrip", results)
    receipts.put("all_ok", all(r["in_range_ok"] and r["roundtrip_ok"] for r in results))

    return receipts.digest()
