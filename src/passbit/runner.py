"""
Batch Runner

Reads trimmed code lines, decodes every record and reports the aggregates:
  - parse: records + per-record failures (abort or skip policy)
  - decode: coordinates and identifier per record, hashed as REC1 frames
  - aggregate: max identifier, identifier summary, vacant identifiers

Every section is returned as a receipt digest, so two runs over the same
input can be compared hash-by-hash.
"""

from typing import Dict, List, Tuple

from .core import Receipts, blake3_hash
from .batch import (
    parse_batch,
    agg_max_identifier,
    agg_identifiers,
    agg_vacant_identifiers,
)


def run_batch(lines: List[str], on_error: str = "abort") -> Tuple[Dict, Dict]:
    """
    Decode a batch of code lines.

    Args:
        lines: Raw input lines (trimmed here; blank lines ignored).
        on_error: "abort" (first bad line raises BatchError) or "skip".

    Returns:
        Tuple of (result, receipts):
          result = {
            "max_identifier": int | None,
            "vacant_identifiers": [int, ...],
            "summary": BatchSummary,
            "records": [{"code", "coordinates", "identifier"}, ...],
            "failures": [RecordFailure, ...]
          }
          receipts = {section_name: digest}

    Raises:
        BatchError: In abort mode, on the first line that fails to parse.
    """
    receipts_all = {}

    # A) Parse
    records, failures = parse_batch(lines, on_error=on_error)

    parse_receipts = Receipts("parse")
    parse_receipts.put("on_error", on_error)
    parse_receipts.put("records", len(records))
    parse_receipts.put("failures", [
        {"index": f["index"], "reason": f["reason"]} for f in failures
    ])
    receipts_all["parse"] = parse_receipts.digest()

    # B) Decode
    decoded = []
    stream = bytearray()
    for record in records:
        high, low = record.coordinates()
        decoded.append({
            "code": record.code(),
            "coordinates": [high, low],
            "identifier": record.identifier()
        })
        stream.extend(record.to_bytes())

    decode_receipts = Receipts("decode")
    decode_receipts.put("records_hash", blake3_hash(bytes(stream)))
    decode_receipts.put("identifiers", [d["identifier"] for d in decoded])
    receipts_all["decode"] = decode_receipts.digest()

    # C) Aggregate
    max_id, max_receipts = agg_max_identifier(records)
    summary, summary_receipts = agg_identifiers(records)
    vacant, vacant_receipts = agg_vacant_identifiers(records)

    receipts_all["aggregate.max"] = max_receipts
    receipts_all["aggregate.identifiers"] = summary_receipts
    receipts_all["aggregate.vacant"] = vacant_receipts

    result = {
        "max_identifier": max_id,
        "vacant_identifiers": vacant,
        "summary": summary,
        "records": decoded,
        "failures": failures
    }

    return result, receipts_all


def run_batch_with_determinism_check(
    lines: List[str],
    on_error: str = "abort"
) -> Tuple[Dict, Dict]:
    """
    Run the batch twice and verify identical results and section hashes.

    Raises:
        RuntimeError: If the two runs differ.
    """
    result1, receipts1 = run_batch(lines, on_error=on_error)
    result2, receipts2 = run_batch(lines, on_error=on_error)

    if result1 != result2:
        raise RuntimeError("Runner: Determinism check failed: results differ")

    all_keys = set(receipts1.keys()) | set(receipts2.keys())

    for key in sorted(all_keys):
        if key not in receipts1:
            raise RuntimeError(f"Runner: Determinism check failed: section '{key}' missing in run 1")
        if key not in receipts2:
            raise RuntimeError(f"Runner: Determinism check failed: section '{key}' missing in run 2")

        hash1 = receipts1[key]["section_hash"]
        hash2 = receipts2[key]["section_hash"]
        if hash1 != hash2:
            raise RuntimeError(
                f"Runner: Determinism check failed: section '{key}' differs\n"
                f"  Run 1: {hash1}\n"
                f"  Run 2: {hash2}"
            )

    receipts_final = receipts1.copy()
    receipts_final["determinism"] = {
        "double_run_ok": True,
        "sections_checked": len(all_keys)
    }

    return result1, receipts_final


# ============================================================================
# CLI Entry Point
# ============================================================================

def main(argv=None) -> int:
    import argparse
    import json
    import sys

    from .batch import BatchError

    parser = argparse.ArgumentParser(
        description="Decode fixed-width binary-partition codes and report identifiers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Abort on the first malformed line
  python -m passbit.runner codes.txt

  # Report malformed lines and keep going (exit code 2 if any were skipped)
  python -m passbit.runner codes.txt --skip-invalid

  # Decode twice and compare every section hash
  python -m passbit.runner codes.txt --determinism-check
        """
    )

    parser.add_argument(
        "input_file",
        type=str,
        help="Path to a text file with one code per line"
    )

    parser.add_argument(
        "--skip-invalid",
        action="store_true",
        help="Skip malformed lines and report them under 'failures'. Default: abort."
    )

    parser.add_argument(
        "--determinism-check",
        action="store_true",
        help="Run the batch twice and compare section hashes. Default: False."
    )

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file for results JSON. Default: print to stdout."
    )

    args = parser.parse_args(argv)

    on_error = "skip" if args.skip_invalid else "abort"

    try:
        with open(args.input_file, 'r', encoding='utf-8') as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Cannot read input file: {e}", file=sys.stderr)
        return 1

    try:
        if args.determinism_check:
            result, receipts = run_batch_with_determinism_check(lines, on_error=on_error)
        else:
            result, receipts = run_batch(lines, on_error=on_error)
    except (BatchError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output = {
        "result": result,
        "receipts": receipts
    }

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(output, f, indent=2)
        print(f"Results written to: {args.output}")
    else:
        print(json.dumps(output, indent=2))

    for failure in result["failures"]:
        print(
            f"Skipped line {failure['index']} ({failure['reason']}): {failure['detail']}",
            file=sys.stderr
        )

    return 2 if result["failures"] else 0


if __name__ == "__main__":
    import sys

    sys.exit(main())
