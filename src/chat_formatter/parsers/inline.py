"""Split a single line of chat text into text, bold and math spans."""

from __future__ import annotations

import re

from chat_formatter.exceptions import ContractViolationError
from chat_formatter.ir.schema import BoldSpan, MathSpan, Span, TextSpan
from chat_formatter.parsers.math_parser import parse_math

# \( ... \) or \[ ... \]
INLINE_MATH_RE = re.compile(r"\\\((.*?)\\\)|\\\[(.*?)\\\]", re.DOTALL)

# **bold**
BOLD_RE = re.compile(r"\*\*(.+?)\*\*", re.DOTALL)


def split_spans(line: str) -> tuple[Span, ...]:
    """Split one line into spans, in source order.

    Math ranges are isolated first, so bold markers never reach into math.
    Unmatched delimiters are kept as literal text.

    Raises:
        ContractViolationError: If ``line`` contains a line break.
    """
    if "\n" in line or "\r" in line:
        raise ContractViolationError(
            f"split_spans expects a single line, got {line[:40]!r}"
        )

    spans: list[Span] = []
    last = 0

    for match in INLINE_MATH_RE.finditer(line):
        if match.start() > last:
            spans.extend(split_bold(line[last:match.start()]))

        display = match.group(1) is None
        latex = match.group(2) if display else match.group(1)
        spans.append(
            MathSpan(latex=latex, display=display, expression=parse_math(latex))
        )
        last = match.end()

    if last < len(line):
        spans.extend(split_bold(line[last:]))

    return tuple(spans)


def split_bold(text: str) -> list[Span]:
    """Split a math-free text segment on ``**bold**`` markers."""
    if not text:
        return []

    spans: list[Span] = []
    idx = 0

    for match in BOLD_RE.finditer(text):
        if match.start() > idx:
            spans.append(TextSpan(text=text[idx:match.start()]))
        spans.append(BoldSpan(text=match.group(1)))
        idx = match.end()

    if idx < len(text):
        spans.append(TextSpan(text=text[idx:]))

    return spans
