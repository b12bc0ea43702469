"""
Runner Tests

Verifies:
  - run_batch result shape and receipt sections
  - determinism check over two runs
  - CLI exit codes (success, abort, skip with failures, missing file)
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from passbit.runner import run_batch, run_batch_with_determinism_check, main
from passbit.batch import BatchError


LINES = ["FBFBBFFRLR", "BFFFBBFRRR", "FFFBBBFRRR", "BBFFBBFRLL"]


def test_run_batch_result():
    result, receipts = run_batch(LINES)

    assert result["max_identifier"] == 820
    assert result["failures"] == []
    assert result["records"][0] == {
        "code": "FBFBBFFRLR",
        "coordinates": [44, 5],
        "identifier": 357
    }
    assert [r["identifier"] for r in result["records"]] == [357, 567, 119, 820]

    assert set(receipts) == {
        "parse", "decode", "aggregate.max", "aggregate.identifiers", "aggregate.vacant"
    }
    assert receipts["decode"]["payload"]["identifiers"] == [357, 567, 119, 820]


def test_run_batch_abort():
    with pytest.raises(BatchError):
        run_batch(LINES + ["FBFBBFF"])


def test_run_batch_skip():
    result, receipts = run_batch(LINES + ["FBFBBFF"], on_error="skip")

    assert result["max_identifier"] == 820
    assert len(result["failures"]) == 1
    assert receipts["parse"]["payload"]["failures"] == [
        {"index": 4, "reason": "width_mismatch"}
    ]


def test_run_batch_empty():
    result, _ = run_batch([])

    assert result["max_identifier"] is None
    assert result["records"] == []


def test_run_batch_with_determinism_check():
    result, receipts = run_batch_with_determinism_check(LINES)

    assert result["max_identifier"] == 820
    assert receipts["determinism"] == {"double_run_ok": True, "sections_checked": 5}


def test_run_batch_section_hashes_stable():
    _, r1 = run_batch(LINES)
    _, r2 = run_batch(list(LINES))

    for key in r1:
        assert r1[key]["section_hash"] == r2[key]["section_hash"]


# ═══════════════════════════════════════════════════════════════════════
# CLI
# ═══════════════════════════════════════════════════════════════════════

def test_cli_success(tmp_path, capsys):
    path = tmp_path / "codes.txt"
    path.write_text("\n".join(LINES) + "\n")

    assert main([str(path)]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["result"]["max_identifier"] == 820


def test_cli_output_file(tmp_path):
    path = tmp_path / "codes.txt"
    path.write_text("\n".join(LINES))
    out = tmp_path / "result.json"

    assert main([str(path), "--output", str(out), "--determinism-check"]) == 0

    output = json.loads(out.read_text())
    assert output["receipts"]["determinism"]["double_run_ok"] is True


def test_cli_abort_on_bad_line(tmp_path, capsys):
    path = tmp_path / "codes.txt"
    path.write_text("FBFBBFFRLR\nFBXBBFFRLR\n")

    assert main([str(path)]) == 1
    assert "'X'" in capsys.readouterr().err


def test_cli_skip_invalid(tmp_path, capsys):
    path = tmp_path / "codes.txt"
    path.write_text("FBFBBFFRLR\nFBXBBFFRLR\n")

    assert main([str(path), "--skip-invalid"]) == 2

    captured = capsys.readouterr()
    output = json.loads(captured.out)
    assert output["result"]["max_identifier"] == 357
    assert "Skipped line 1" in captured.err


def test_cli_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.txt")]) == 1
    assert "Cannot read input file" in capsys.readouterr().err


def test_cli_invalid_utf8(tmp_path, capsys):
    path = tmp_path / "codes.txt"
    path.write_bytes(b"FBFBBFFRLR\n\xff\xfeBBFFRLR\n")

    assert main([str(path)]) == 1
    assert "Cannot read input file" in capsys.readouterr().err


if __name__ == "__main__":
    pytest.main([__file__, "-v", "-s"])
