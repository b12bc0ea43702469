"""
Kernel Component: Directives & Symbol Alphabets

A directive is one bisection step: keep the LOWER or the UPPER half.
Each code group reads directives from its own two-letter alphabet:

  group "high":  F → LOWER, B → UPPER
  group "low":   L → LOWER, R → UPPER

Alphabets come from param_registry(); any other character is rejected.
"""

from enum import Enum

from ..core.registry import param_registry


class Directive(Enum):
    """Which half of the current range to keep."""
    LOWER = 0
    UPPER = 1


_ALPHABETS: dict[str, dict[str, Directive]] = {
    group: {symbol: Directive[name] for symbol, name in table.items()}
    for group, table in param_registry()["alphabets"].items()
}

_SYMBOLS: dict[str, dict[Directive, str]] = {
    group: {d: symbol for symbol, d in table.items()}
    for group, table in _ALPHABETS.items()
}


def _alphabet(group: str) -> dict[str, Directive]:
    if group not in _ALPHABETS:
        raise ValueError(f"Unknown symbol group: '{group}'")
    return _ALPHABETS[group]


def parse_symbol(symbol: str, group: str, position: int = 0) -> Directive:
    """
    Map one raw character to its directive.

    Args:
        symbol: Single character from the input.
        group: "high" or "low".
        position: Index of the character in the full input (error reporting only).

    Returns:
        Directive: The mapped directive.

    Raises:
        UnknownSymbol: If symbol is not in the group's alphabet.
        ValueError: If group is unknown.
    """
    alphabet = _alphabet(group)
    try:
        return alphabet[symbol]
    except KeyError:
        raise UnknownSymbol(symbol, group, position) from None


def parse_symbols(text: str, group: str, offset: int = 0) -> tuple[Directive, ...]:
    """
    Map every character of text through the group's alphabet.

    offset is added to each character's index in UnknownSymbol, so the
    reported position refers to the full input string.
    """
    return tuple(
        parse_symbol(symbol, group, offset + i) for i, symbol in enumerate(text)
    )


def render_symbols(directives, group: str) -> str:
    """Inverse of parse_symbols: directives back to the group's characters."""
    _alphabet(group)
    table = _SYMBOLS[group]
    return "".join(table[d] for d in directives)


class ParseError(Exception):
    """Base for per-record parse failures."""
    pass


class UnknownSymbol(ParseError):
    """Raised when a character is outside its group's alphabet."""

    def __init__(self, symbol: str, group: str, position: int):
        self.symbol = symbol
        self.group = group
        self.position = position
        allowed = ", ".join(sorted(_ALPHABETS.get(group, {})))
        super().__init__(
            f"Unknown {group}-order symbol {symbol!r} at position {position} "
            f"(allowed: {allowed})"
        )
