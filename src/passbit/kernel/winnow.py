"""
Kernel Component: Partition Decoder (winnow)

Iterative range bisection driven by a directive sequence.

For a closed range [lo, hi] of size 2**N and N directives, each step computes
mid = (lo + hi) // 2 and discards one half:

  LOWER → hi = mid
  UPPER → lo = mid

After N steps hi holds the decoded value. lo trails hi by one whenever an
UPPER step was taken, so only hi is read.

Example (group "high", F=LOWER, B=UPPER, range [0, 127]):
  F B F B B F F → 44
"""

from .directives import Directive


def winnow(directives, lo: int, hi: int) -> int:
    """
    Bisect [lo, hi] once per directive and return the converged value.

    Args:
        directives: Iterable of Directive, in sequence order.
        lo: Lower bound of the closed range.
        hi: Upper bound of the closed range.

    Returns:
        int: Converged value in [lo, hi].

    Notes:
        The caller guarantees hi - lo + 1 == 2**len(directives).
        An empty sequence returns hi unchanged.
    """
    for d in directives:
        mid = (lo + hi) // 2
        if d is Directive.LOWER:
            hi = mid
        else:
            lo = mid

    return hi


def range_bounds(width: int) -> tuple[int, int]:
    """Closed decode range [0, 2**width - 1] for a group of the given width."""
    if width < 0:
        raise ValueError(f"Width must be non-negative, got {width}")
    return (0, (1 << width) - 1)


def encode(value: int, lo: int, hi: int, width: int) -> tuple[Directive, ...]:
    """
    Return the unique directive sequence that winnow bisects to value.

    Follows the same mid/branch rule as winnow, so
    winnow(encode(v, lo, hi, n), lo, hi) == v for every v in [lo, hi].

    Raises:
        ValueError: If the range size is not 2**width, or value is outside [lo, hi].
    """
    if hi - lo + 1 != (1 << width):
        raise ValueError(
            f"Range [{lo}, {hi}] has size {hi - lo + 1}, expected 2**{width}"
        )
    if not lo <= value <= hi:
        raise ValueError(f"Value {value} outside range [{lo}, {hi}]")

    out = []
    for _ in range(width):
        mid = (lo + hi) // 2
        if value <= mid:
            out.append(Directive.LOWER)
            hi = mid
        else:
            out.append(Directive.UPPER)
            lo = mid

    return tuple(out)
