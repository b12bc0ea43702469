"""
Code Record: one parsed fixed-width code

Layout (from param_registry):
  - first high_width chars: high-order group, alphabet {F, B}
  - remaining low_width chars: low-order group, alphabet {L, R}

Each record decodes each group at most once. The two cache cells start as
None and are filled on first access; after that they never change.

A record is owned by a single caller. The cache cells are not guarded for
concurrent writers.
"""

from .core.registry import param_registry
from .core.bytesio import serialize_record_be
from .kernel.directives import Directive, ParseError, parse_symbols, render_symbols
from .kernel.winnow import winnow, encode, range_bounds


_REGISTRY = param_registry()

HIGH_WIDTH: int = _REGISTRY["high_width"]
LOW_WIDTH: int = _REGISTRY["low_width"]
CODE_WIDTH: int = HIGH_WIDTH + LOW_WIDTH
IDENTIFIER_WEIGHT: int = _REGISTRY["identifier_weight"]

HIGH_RANGE: tuple[int, int] = range_bounds(HIGH_WIDTH)
LOW_RANGE: tuple[int, int] = range_bounds(LOW_WIDTH)


class CodeRecord:
    """
    Parsed code with lazily decoded coordinates.

    Attributes:
        high: High-order directives (length HIGH_WIDTH).
        low: Low-order directives (length LOW_WIDTH).
    """

    def __init__(self, high: tuple[Directive, ...], low: tuple[Directive, ...]):
        if len(high) != HIGH_WIDTH:
            raise WidthMismatch(HIGH_WIDTH, len(high), group="high")
        if len(low) != LOW_WIDTH:
            raise WidthMismatch(LOW_WIDTH, len(low), group="low")
        self.high = tuple(high)
        self.low = tuple(low)
        self._high_value: int | None = None
        self._low_value: int | None = None

    @classmethod
    def parse(cls, text: str) -> "CodeRecord":
        """
        Parse a fixed-width code such as "FBFBBFFRLR".

        Raises:
            WidthMismatch: If len(text) != HIGH_WIDTH + LOW_WIDTH.
            UnknownSymbol: For the first character outside its group's alphabet.
        """
        if len(text) != CODE_WIDTH:
            raise WidthMismatch(CODE_WIDTH, len(text), text)

        high = parse_symbols(text[:HIGH_WIDTH], "high")
        low = parse_symbols(text[HIGH_WIDTH:], "low", offset=HIGH_WIDTH)
        return cls(high, low)

    @classmethod
    def from_coordinates(cls, high: int, low: int) -> "CodeRecord":
        """Build the record whose directives decode to (high, low)."""
        return cls(
            encode(high, *HIGH_RANGE, HIGH_WIDTH),
            encode(low, *LOW_RANGE, LOW_WIDTH)
        )

    def decode_high(self) -> int:
        if self._high_value is None:
            self._high_value = winnow(self.high, *HIGH_RANGE)
        return self._high_value

    def decode_low(self) -> int:
        if self._low_value is None:
            self._low_value = winnow(self.low, *LOW_RANGE)
        return self._low_value

    def coordinates(self) -> tuple[int, int]:
        """(high, low) decoded coordinate pair."""
        return (self.decode_high(), self.decode_low())

    def identifier(self) -> int:
        """high * 2**LOW_WIDTH + low, recomputed from the cached coordinates."""
        return self.decode_high() * IDENTIFIER_WEIGHT + self.decode_low()

    def code(self) -> str:
        """Render back to the fixed-width symbol string."""
        return render_symbols(self.high, "high") + render_symbols(self.low, "low")

    def to_bytes(self) -> bytes:
        """REC1 frame of this record (hash input for receipts)."""
        return serialize_record_be(
            [d.value for d in self.high],
            [d.value for d in self.low],
            self.decode_high(),
            self.decode_low()
        )

    def __eq__(self, other):
        if not isinstance(other, CodeRecord):
            return NotImplemented
        return self.high == other.high and self.low == other.low

    def __hash__(self):
        return hash((self.high, self.low))

    def __repr__(self):
        return f"CodeRecord({self.code()!r})"


class WidthMismatch(ParseError):
    """
    Raised when an input's length differs from HIGH_WIDTH + LOW_WIDTH.

    group is None for a whole input string, or "high" / "low" when a single
    directive group has the wrong length.
    """

    def __init__(
        self,
        expected: int,
        actual: int,
        text: str | None = None,
        group: str | None = None
    ):
        self.expected = expected
        self.actual = actual
        self.text = text
        self.group = group
        if group is None:
            msg = f"Code width mismatch: expected {expected} characters, got {actual}"
        else:
            msg = f"{group}-order group needs {expected} directives, got {actual}"
        super().__init__(msg + (f" ({text!r})" if text is not None else ""))
