"""Document Intermediate Representation models."""

from chat_formatter.ir.schema import (
    Atom,
    BlankLineBlock,
    BoldSpan,
    BulletItemBlock,
    DocumentIR,
    DocumentMetadata,
    Expression,
    Fraction,
    HeadingBlock,
    IRBlock,
    MathSpan,
    ParagraphBlock,
    Radical,
    Sequence,
    Span,
    Subscript,
    Superscript,
    TableBlock,
    TableCell,
    TextSpan,
    flatten_text,
    spans_text,
)

__all__ = [
    "Atom",
    "BlankLineBlock",
    "BoldSpan",
    "BulletItemBlock",
    "DocumentIR",
    "DocumentMetadata",
    "Expression",
    "Fraction",
    "HeadingBlock",
    "IRBlock",
    "MathSpan",
    "ParagraphBlock",
    "Radical",
    "Sequence",
    "Span",
    "Subscript",
    "Superscript",
    "TableBlock",
    "TableCell",
    "TextSpan",
    "flatten_text",
    "spans_text",
]
