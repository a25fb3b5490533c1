"""Write IR spans into python-docx paragraphs."""

from __future__ import annotations

from typing import Optional

from docx.shared import Pt

from chat_formatter.generators.omml import append_math
from chat_formatter.ir.schema import BoldSpan, MathSpan


def write_spans(
    paragraph,
    spans,
    bold: bool = False,
    font_size: Optional[float] = None,
) -> None:
    """Append spans to a paragraph as runs and equations.

    Args:
        paragraph: The python-docx paragraph (or table cell paragraph).
        spans: The IR spans, in order.
        bold: Force every text run bold (header rows, titles).
        font_size: Point size applied to every text run.
    """
    for span in spans:
        if isinstance(span, MathSpan):
            append_math(paragraph, span.expression)
            continue

        run = paragraph.add_run(span.text)
        if bold or isinstance(span, BoldSpan):
            run.bold = True
        if font_size:
            run.font.size = Pt(font_size)
