"""
Core Verification Tests - Registry, Hashing, Byte Frames, Receipts

  1. param_registry() completeness and consistency
  2. serialize_directives_be() / serialize_record_be() byte-level layout
  3. blake3_hash() determinism
  4. Receipts class and double-run equality
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from passbit.core import (
    param_registry,
    blake3_hash,
    serialize_directives_be,
    serialize_record_be,
    Receipts,
    assert_double_run_equal,
    SerializationError,
    ReceiptError,
    DeterminismError,
)


# ═══════════════════════════════════════════════════════════════════════
# Test 1: param_registry()
# ═══════════════════════════════════════════════════════════════════════

def test_param_registry_completeness():
    """Registry has exactly the layout keys with the frozen values."""
    reg = param_registry()

    assert set(reg.keys()) == {
        "layout_version", "high_width", "low_width", "alphabets",
        "identifier_weight", "winnow_result", "hash_algo", "byte_frame_tags"
    }

    assert reg["high_width"] == 7
    assert reg["low_width"] == 3
    assert reg["identifier_weight"] == 2 ** reg["low_width"]
    assert reg["alphabets"]["high"] == {"F": "LOWER", "B": "UPPER"}
    assert reg["alphabets"]["low"] == {"L": "LOWER", "R": "UPPER"}
    assert reg["byte_frame_tags"] == {"DIRECTIVES": "DIR1", "RECORD": "REC1"}

    print("✓ param_registry() complete")


def test_param_registry_alphabets_disjoint():
    """The two groups never share a symbol."""
    alphabets = param_registry()["alphabets"]
    assert not set(alphabets["high"]) & set(alphabets["low"])


# ═══════════════════════════════════════════════════════════════════════
# Test 2: Byte frames
# ═══════════════════════════════════════════════════════════════════════

def test_serialize_directives_layout():
    """F B F B B F F → bits 0101100, packed MSB-first into one byte."""
    data = serialize_directives_be([0, 1, 0, 1, 1, 0, 0])

    assert data[:4] == b"DIR1"
    assert data[4] == 7
    assert data[5:] == bytes([0b01011000])


def test_serialize_directives_empty():
    assert serialize_directives_be([]) == b"DIR1\x00"


def test_serialize_directives_spans_bytes():
    data = serialize_directives_be([1] * 9)
    assert data[5:] == bytes([0xFF, 0x80])


def test_serialize_directives_rejects_non_bits():
    with pytest.raises(SerializationError):
        serialize_directives_be([0, 2])


def test_serialize_record_layout():
    data = serialize_record_be([0, 1, 0, 1, 1, 0, 0], [1, 0, 1], 44, 5)

    assert data[:4] == b"REC1"
    assert data[4:10] == b"DIR1\x07" + bytes([0b01011000])
    assert data[10:16] == b"DIR1\x03" + bytes([0b10100000])
    assert data[16:] == b"\x00\x2c\x00\x05"


def test_serialize_record_rejects_out_of_range():
    with pytest.raises(SerializationError):
        serialize_record_be([], [], 70000, 0)


# ═══════════════════════════════════════════════════════════════════════
# Test 3: Hashing
# ═══════════════════════════════════════════════════════════════════════

def test_blake3_hash_deterministic():
    h1 = blake3_hash(b"FBFBBFFRLR")
    h2 = blake3_hash(b"FBFBBFFRLR")

    assert h1 == h2
    assert len(h1) == 64
    assert h1 == h1.lower()
    assert blake3_hash(b"FBFBBFFRLL") != h1


# ═══════════════════════════════════════════════════════════════════════
# Test 4: Receipts
# ═══════════════════════════════════════════════════════════════════════

def test_receipts_digest_structure():
    r = Receipts("test-section")
    r.put("count", 4)
    r.put("ids", [357, 567, 119, 820])

    digest = r.digest()

    assert digest["section"] == "test-section"
    assert digest["layout_version"] == "1"
    assert digest["payload"] == {"count": 4, "ids": [357, 567, 119, 820]}
    assert len(digest["param_registry_hash"]) == 64
    assert len(digest["section_hash"]) == 64


def test_receipts_rejects_duplicate_key():
    r = Receipts("dup")
    r.put("a", 1)
    with pytest.raises(ReceiptError):
        r.put("a", 2)


@pytest.mark.parametrize("value", [1.5, {1: "x"}, object(), [0, 0.25]])
def test_receipts_rejects_invalid_values(value):
    r = Receipts("invalid")
    with pytest.raises(ReceiptError):
        r.put("v", value)


def test_double_run_equal_passes():
    def build():
        r = Receipts("stable")
        r.put("max_identifier", 820)
        return r

    assert_double_run_equal(build)


def test_double_run_equal_detects_drift():
    counter = {"n": 0}

    def build():
        counter["n"] += 1
        r = Receipts("drift")
        r.put("run", counter["n"])
        return r

    with pytest.raises(DeterminismError) as exc_info:
        assert_double_run_equal(build)

    err = exc_info.value
    assert err.section == "drift"
    assert err.first_differing_key == "run"
    assert (err.value_a, err.value_b) == (1, 2)


if __name__ == "__main__":
    pytest.main([__file__, "-v", "-s"])
