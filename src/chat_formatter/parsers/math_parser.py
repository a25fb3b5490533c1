"""Recursive-descent parser for the LaTeX math subset found in chat text.

Supported constructs: ``\\frac{a}{b}``, ``\\sqrt{x}``, ``^`` and ``_``
scripts (chainable, left-associative) and ``{...}`` groups. Every other
character, including unknown backslash commands, is taken verbatim as a
one-character atom.

The parser is single-pass and never backtracks or raises. Missing closing
braces and missing group arguments degrade to empty or partial content.
Nesting beyond ``MAX_GROUP_DEPTH`` degrades to literal atoms.
"""

from __future__ import annotations

from chat_formatter.ir.schema import (
    Atom,
    Expression,
    Fraction,
    Radical,
    Sequence,
    Subscript,
    Superscript,
)

FRAC = "\\frac"
SQRT = "\\sqrt"
TIMES = "\\times"
TIMES_SIGN = "×"

# Nesting budget shared by brace groups and script chains. Past it, braces
# and script markers are read as literal characters, which keeps every tree
# shallow enough for the JSON checkpoint and the OMML writer.
MAX_GROUP_DEPTH = 32


class MathCursor:
    """Read position over a math string."""

    __slots__ = ("source", "index")

    def __init__(self, source: str):
        self.source = source
        self.index = 0

    def at_end(self) -> bool:
        return self.index >= len(self.source)

    def peek(self) -> str:
        """Return the next character, or '' at end of input."""
        if self.at_end():
            return ""
        return self.source[self.index]

    def read(self) -> str:
        """Consume and return the next character, or '' at end of input."""
        if self.at_end():
            return ""
        char = self.source[self.index]
        self.index += 1
        return char

    def match(self, token: str) -> bool:
        return self.source.startswith(token, self.index)

    def consume(self, token: str) -> bool:
        """Advance past ``token`` if it comes next."""
        if self.match(token):
            self.index += len(token)
            return True
        return False


def normalize_latex(source: str) -> str:
    """Replace ``\\times`` with the multiplication sign and trim."""
    return (source or "").replace(TIMES, TIMES_SIGN).strip()


def parse_math(source: str) -> Sequence:
    """Parse a math string (without its delimiters) into an expression tree.

    Args:
        source: Raw text found between ``\\(``/``\\)`` or ``\\[``/``\\]``.

    Returns:
        A Sequence holding the top-level expressions in source order.
    """
    cursor = MathCursor(normalize_latex(source))
    return Sequence(items=_parse_expression(cursor, depth=0))


def _parse_expression(cursor: MathCursor, depth: int) -> list[Expression]:
    """Parse expressions until end of input, or a '}' when inside a group."""
    items: list[Expression] = []

    while not cursor.at_end():
        if depth > 0 and cursor.peek() == "}":
            break

        if cursor.consume(FRAC):
            numerator = _parse_group(cursor, depth)
            denominator = _parse_group(cursor, depth)
            items.append(Fraction(numerator=numerator, denominator=denominator))
            continue

        if cursor.consume(SQRT):
            items.append(Radical(radicand=_parse_group(cursor, depth)))
            continue

        node = _parse_atom(cursor, depth)
        chained = 0
        while cursor.peek() in ("^", "_") and depth + chained < MAX_GROUP_DEPTH:
            chained += 1
            op = cursor.read()
            script = _parse_script(cursor, depth + chained)
            if op == "^":
                node = Superscript(base=node, exponent=script)
            else:
                node = Subscript(base=node, subscript=script)
        items.append(node)

    return items


def _parse_group(cursor: MathCursor, depth: int) -> list[Expression]:
    """Parse a mandatory ``{...}`` argument.

    A missing group yields a single empty atom and consumes nothing.
    """
    if cursor.peek() != "{":
        return [Atom()]
    if depth >= MAX_GROUP_DEPTH:
        return [Atom(text=cursor.read())]

    cursor.read()
    inner = _parse_expression(cursor, depth + 1)
    if cursor.peek() == "}":
        cursor.read()
    return inner


def _parse_script(cursor: MathCursor, depth: int) -> list[Expression]:
    """Parse the argument of ``^`` or ``_``: a group or one character."""
    if cursor.peek() == "{":
        return _parse_group(cursor, depth)
    # read() gives '' at end of input, i.e. an empty atom
    return [Atom(text=cursor.read())]


def _parse_atom(cursor: MathCursor, depth: int) -> Atom:
    """Parse one character, or a braced group flattened to a single atom.

    Only the group's top-level atoms contribute text; fractions, radicals
    and scripts inside a flattened group are dropped.
    """
    if cursor.peek() == "{":
        group = _parse_group(cursor, depth)
        return Atom(text="".join(item.text for item in group if isinstance(item, Atom)))
    return Atom(text=cursor.read())
