"""
Core Component: Section Receipts & Double-Run Checker

Deterministic, ordered receipts for every decoding step.
All receipts include param_registry_hash binding and section_hash for comparison.

No timestamps, no memory addresses, no environment leakage.
"""

import json
from typing import Any, Callable

from .registry import param_registry
from .hashing import blake3_hash


class Receipts:
    """
    Section-scoped receipt builder.

    Each step (parse, decode, aggregate) creates a Receipts instance, logs
    key/value pairs, and produces a digest with:
      - section identifier
      - layout_version
      - param_registry_hash (proves both sides used the same layout)
      - payload (ordered key/value pairs)
      - section_hash (commitment to all of the above)

    Only int, bool, str, None and list/tuple/dict of those are accepted.
    """

    def __init__(self, section: str):
        self.section = section
        self.payload = []  # list of (key, value) to preserve insertion order

    def put(self, key: str, value: Any) -> None:
        """
        Insert key/value pair into receipts.

        Args:
            key: Unique string key.
            value: JSON-serializable value (int/bool/str/list/dict/None only).

        Raises:
            ReceiptError: If key is duplicate or value is invalid type.
        """
        existing_keys = [k for k, _ in self.payload]
        if key in existing_keys:
            raise ReceiptError(f"Duplicate key in receipts: '{key}'")

        _validate_receipt_value(value, key)

        self.payload.append((key, value))

    def digest(self) -> dict:
        """
        Returns the complete receipt digest with section_hash.

        Format:
          {
            "section": section,
            "layout_version": "1",
            "param_registry_hash": blake3_hash(stable_json(param_registry())),
            "payload": {key: value for key, value in self.payload},
            "section_hash": blake3_hash(stable_json({section, layout_version, param_registry_hash, payload}))
          }
        """
        registry = param_registry()
        registry_hash = blake3_hash(_stable_json_bytes(registry))

        payload_dict = {k: v for k, v in self.payload}

        pre_digest = {
            "section": self.section,
            "layout_version": registry["layout_version"],
            "param_registry_hash": registry_hash,
            "payload": payload_dict
        }

        section_hash = blake3_hash(_stable_json_bytes(pre_digest))

        return {
            **pre_digest,
            "section_hash": section_hash
        }


def assert_double_run_equal(build_section_callable: Callable[[], Receipts]) -> None:
    """
    Calls build_section_callable() twice and verifies identical section_hash.

    Args:
        build_section_callable: Function that builds and returns a Receipts instance.

    Raises:
        DeterminismError: If section_hash differs between runs.

    Example:
        >>> def build():
        ...     r = Receipts("test")
        ...     r.put("value", 42)
        ...     return r
        >>> assert_double_run_equal(build)  # passes
    """
    digest_a = build_section_callable().digest()
    digest_b = build_section_callable().digest()
    hash_a = digest_a["section_hash"]
    hash_b = digest_b["section_hash"]

    if hash_a != hash_b:
        payload_a = digest_a["payload"]
        payload_b = digest_b["payload"]

        differing_key = None
        val_a = val_b = None
        for key in sorted(set(payload_a.keys()) | set(payload_b.keys())):
            val_a = payload_a.get(key, "<MISSING>")
            val_b = payload_b.get(key, "<MISSING>")
            if val_a != val_b:
                differing_key = key
                break

        raise DeterminismError(
            section=digest_a["section"],
            first_differing_key=differing_key,
            value_a=val_a if differing_key else None,
            value_b=val_b if differing_key else None,
            hash_a=hash_a,
            hash_b=hash_b
        )


def _stable_json_bytes(obj: Any) -> bytes:
    """Serialize object to compact, key-sorted UTF-8 JSON bytes."""
    json_str = json.dumps(
        obj,
        sort_keys=True,
        ensure_ascii=False,
        separators=(',', ':')
    )
    return json_str.encode('utf-8')


def _validate_receipt_value(value: Any, key: str) -> None:
    """
    Recursively validate that value contains only allowed types.

    Raises:
        ReceiptError: If value contains floats or any non-JSON type.
    """
    if value is None or isinstance(value, (bool, int, str)):
        return

    if isinstance(value, float):
        raise ReceiptError(f"Floats forbidden in receipts (key: '{key}')")

    if isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            _validate_receipt_value(item, f"{key}[{i}]")
        return

    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise ReceiptError(
                    f"Dict keys must be strings in receipts (key: '{key}', dict_key: {k})"
                )
            _validate_receipt_value(v, f"{key}.{k}")
        return

    raise ReceiptError(
        f"Invalid type in receipts: {type(value).__name__} (key: '{key}'). "
        f"Allowed: int, bool, str, None, list, tuple, dict."
    )


class ReceiptError(Exception):
    """Raised when receipt construction fails (duplicate key, invalid type, etc.)."""
    pass


class DeterminismError(Exception):
    """Raised when double-run produces different section hashes."""

    def __init__(
        self,
        section: str,
        first_differing_key: str | None,
        value_a: Any,
        value_b: Any,
        hash_a: str,
        hash_b: str
    ):
        self.section = section
        self.first_differing_key = first_differing_key
        self.value_a = value_a
        self.value_b = value_b
        self.hash_a = hash_a
        self.hash_b = hash_b

        msg = (
            f"Double-run hash mismatch in section '{section}'.\n"
            f"  First differing key: '{first_differing_key}'\n"
            f"  Value A: {value_a}\n"
            f"  Value B: {value_b}\n"
            f"  Hash A: {hash_a}\n"
            f"  Hash B: {hash_b}"
        )
        super().__init__(msg)
