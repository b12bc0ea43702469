"""
Core Component: BLAKE3 Hashing

Deterministic hash for receipts and serialized records.
No seeding, no personalization.
"""

import blake3


def blake3_hash(data: bytes) -> str:
    """
    Return hex-encoded BLAKE3 digest of the byte stream.

    Args:
        data: Raw bytes to hash.

    Returns:
        str: Lowercase hexadecimal digest (64 characters).

    Example:
        >>> blake3_hash(b"test")
        '4878ca0425c739fa427f7eda20fe845f6b2e46ba5fe2a14df5b1e32f50603215'
    """
    return blake3.blake3(data).hexdigest()
