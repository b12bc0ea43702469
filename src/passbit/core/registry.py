"""
Core Component: Layout Registry

Frozen constants for the fixed-width code layout.
Widths, alphabets, identifier weight and byte frame tags are defined here
and nowhere else; every receipt is bound to a hash of this mapping.

No environment leakage, no runtime-configurable widths.
"""


def param_registry() -> dict:
    """
    Returns a frozen mapping of all layout constants.

    Keys and values are JSON-serializable primitives or lists/dicts.
    This registry is hashed into every section receipt to prove that two runs
    decoded with the same layout.

    Returns:
        dict: Frozen parameter mapping with exact keys and values.

    Raises:
        RegistryError: If any required key is missing, or the identifier
            weight does not match the low-order range size.
    """
    registry = {
        "layout_version": "1",

        # Split boundary: first high_width chars, then low_width chars
        "high_width": 7,
        "low_width": 3,

        # Symbol → directive name, per group
        "alphabets": {
            "high": {"F": "LOWER", "B": "UPPER"},
            "low": {"L": "LOWER", "R": "UPPER"},
        },

        # identifier = high * identifier_weight + low
        "identifier_weight": 8,

        # winnow reads the converged value from the upper bound
        "winnow_result": "hi",

        "hash_algo": "BLAKE3",

        # Byte frame tags for serialization (ASCII 4-byte tags)
        "byte_frame_tags": {
            "DIRECTIVES": "DIR1",
            "RECORD": "REC1"
        }
    }

    required_keys = {
        "layout_version", "high_width", "low_width", "alphabets",
        "identifier_weight", "winnow_result", "hash_algo", "byte_frame_tags"
    }

    actual_keys = set(registry.keys())
    if actual_keys != required_keys:
        missing = required_keys - actual_keys
        extra = actual_keys - required_keys
        raise RegistryError(
            f"param_registry() key mismatch. Missing: {missing}, Extra: {extra}"
        )

    if registry["identifier_weight"] != 2 ** registry["low_width"]:
        raise RegistryError(
            f"identifier_weight {registry['identifier_weight']} must equal "
            f"2**low_width ({2 ** registry['low_width']})"
        )

    return registry


class RegistryError(Exception):
    """Raised when param_registry() has missing keys or inconsistent values."""
    pass
