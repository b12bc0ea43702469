"""
Core Component: Byte Serialization (Big-Endian, First-Directive-First)

Stable, deterministic byte frames for directive sequences and decoded records.
These frames are hash input only; nothing reads them back.

Bit mapping (frozen):
  - Within each byte: bit 7 → directive 0, bit 6 → directive 1, ..., bit 0 → directive 7
  - A bit is 1 iff the directive is UPPER
  - Big-endian for multi-byte integers (decoded coordinates)
"""

import math


def serialize_directives_be(bits: list[int]) -> bytes:
    """
    Encode a directive sequence (as 0/1 bits) as a deterministic byte stream.

    Format (exact):
      - 4 ASCII bytes tag: b"DIR1"
      - 1 byte N (number of directives)
      - ceil(N/8) bytes: packed bits, bit 7 of byte 0 is directive 0

    Args:
        bits: Directive values in sequence order (LOWER=0, UPPER=1).

    Returns:
        bytes: Deterministic serialization.

    Raises:
        SerializationError: If N > 255 or a bit is not 0/1.
    """
    N = len(bits)
    if N > 255:
        raise SerializationError(f"Too many directives: {N} > 255")

    stream = bytearray()
    stream.extend(b"DIR1")
    stream.append(N)

    packed = bytearray(math.ceil(N / 8))
    for i, bit in enumerate(bits):
        if bit not in (0, 1):
            raise SerializationError(f"Directive bit {bit!r} at position {i} is not 0/1")
        if bit:
            packed[i // 8] |= (1 << (7 - (i % 8)))  # bit 7 → directive 0
    stream.extend(packed)

    return bytes(stream)


def serialize_record_be(
    high_bits: list[int],
    low_bits: list[int],
    high_value: int,
    low_value: int
) -> bytes:
    """
    Encode a decoded record: both directive frames plus decoded coordinates.

    Format (exact):
      - 4 ASCII bytes tag: b"REC1"
      - DIR1 frame of the high-order directives
      - DIR1 frame of the low-order directives
      - 2 bytes high coordinate (uint16, big-endian)
      - 2 bytes low coordinate (uint16, big-endian)

    Args:
        high_bits: High-order directive bits.
        low_bits: Low-order directive bits.
        high_value: Decoded high coordinate.
        low_value: Decoded low coordinate.

    Returns:
        bytes: Deterministic serialization.

    Raises:
        SerializationError: If a coordinate is outside uint16 range.
    """
    for name, value in (("high", high_value), ("low", low_value)):
        if value < 0 or value > 65535:
            raise SerializationError(f"{name} coordinate {value} out of uint16 range")

    stream = bytearray()
    stream.extend(b"REC1")
    stream.extend(serialize_directives_be(high_bits))
    stream.extend(serialize_directives_be(low_bits))
    stream.extend(high_value.to_bytes(2, byteorder='big'))
    stream.extend(low_value.to_bytes(2, byteorder='big'))

    return bytes(stream)


class SerializationError(Exception):
    """Raised when serialization encounters out-of-range sizes or values."""
    pass
