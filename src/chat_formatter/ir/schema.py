"""Pydantic models for the Document Intermediate Representation (IR).

The IR is a flat, ordered list of blocks. Blocks hold inline spans, and math
spans hold an expression tree. Every node is frozen and every sequence is a
tuple, so a built document can be shared between renderers without copying.
This is the central contract between the parser and generator stages.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Math expressions (discriminated union via `type` field)
# ---------------------------------------------------------------------------


class Atom(_Node):
    """One character, or the concatenated text of a flattened group."""

    type: Literal["atom"] = "atom"
    text: str = ""


class Sequence(_Node):
    type: Literal["sequence"] = "sequence"
    items: tuple[Expression, ...] = ()


class Fraction(_Node):
    type: Literal["fraction"] = "fraction"
    numerator: tuple[Expression, ...] = ()
    denominator: tuple[Expression, ...] = ()


class Radical(_Node):
    """Square root. The degree is always empty and never shown."""

    type: Literal["radical"] = "radical"
    radicand: tuple[Expression, ...] = ()


class Superscript(_Node):
    type: Literal["superscript"] = "superscript"
    base: Expression
    exponent: tuple[Expression, ...] = ()


class Subscript(_Node):
    type: Literal["subscript"] = "subscript"
    base: Expression
    subscript: tuple[Expression, ...] = ()


Expression = Annotated[
    Union[Atom, Sequence, Fraction, Radical, Superscript, Subscript],
    Field(discriminator="type"),
]

# Rebuild now that Expression is defined (recursive reference)
for _model in (Sequence, Fraction, Radical, Superscript, Subscript):
    _model.model_rebuild()


# ---------------------------------------------------------------------------
# Inline spans
# ---------------------------------------------------------------------------


class TextSpan(_Node):
    type: Literal["text"] = "text"
    text: str = ""


class BoldSpan(_Node):
    """Bold run. Holds plain text only, never nested bold or math."""

    type: Literal["bold"] = "bold"
    text: str = ""


class MathSpan(_Node):
    """Inline or display math.

    ``latex`` keeps the raw text between the delimiters so renderers without
    equation support can emit it verbatim; ``display`` is True for ``\\[ \\]``.
    """

    type: Literal["math"] = "math"
    latex: str = ""
    display: bool = False
    expression: Sequence = Field(default_factory=Sequence)

    @property
    def delimited(self) -> str:
        """The math text wrapped in its original delimiters."""
        if self.display:
            return f"\\[{self.latex}\\]"
        return f"\\({self.latex}\\)"


Span = Annotated[
    Union[TextSpan, BoldSpan, MathSpan],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Block types (discriminated union via `type` field)
# ---------------------------------------------------------------------------


class TableCell(_Node):
    spans: tuple[Span, ...] = ()


class HeadingBlock(_Node):
    type: Literal["heading"] = "heading"
    level: int = Field(ge=1, le=2)
    spans: tuple[Span, ...] = ()


class BulletItemBlock(_Node):
    type: Literal["bullet_item"] = "bullet_item"
    spans: tuple[Span, ...] = ()


class ParagraphBlock(_Node):
    type: Literal["paragraph"] = "paragraph"
    spans: tuple[Span, ...] = ()


class TableBlock(_Node):
    """A pipe table. Row 0 is the header row by convention.

    All rows have the same number of cells.
    """

    type: Literal["table"] = "table"
    rows: tuple[tuple[TableCell, ...], ...] = ()

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    @property
    def num_cols(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @property
    def header(self) -> tuple[TableCell, ...]:
        return self.rows[0] if self.rows else ()


class BlankLineBlock(_Node):
    type: Literal["blank_line"] = "blank_line"


# The top-level discriminated union of all block types
IRBlock = Annotated[
    Union[
        HeadingBlock,
        BulletItemBlock,
        ParagraphBlock,
        TableBlock,
        BlankLineBlock,
    ],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Document metadata
# ---------------------------------------------------------------------------


class DocumentMetadata(_Node):
    source_file: str = ""
    title: str = ""
    line_count: int = 0


# ---------------------------------------------------------------------------
# Top-level IR document
# ---------------------------------------------------------------------------


class DocumentIR(_Node):
    """The complete intermediate representation of a parsed chat text."""

    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    body: tuple[IRBlock, ...] = ()

    def to_json(self, **kwargs) -> str:
        """Serialize to JSON string."""
        return self.model_dump_json(indent=2, **kwargs)

    @classmethod
    def from_json(cls, json_str: str) -> DocumentIR:
        """Deserialize from JSON string."""
        return cls.model_validate_json(json_str)


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------


def flatten_text(expr: Expression) -> str:
    """Concatenate every atom in an expression tree, depth-first."""
    if isinstance(expr, Atom):
        return expr.text
    if isinstance(expr, Sequence):
        return _join(expr.items)
    if isinstance(expr, Fraction):
        return _join(expr.numerator) + _join(expr.denominator)
    if isinstance(expr, Radical):
        return _join(expr.radicand)
    if isinstance(expr, Superscript):
        return flatten_text(expr.base) + _join(expr.exponent)
    if isinstance(expr, Subscript):
        return flatten_text(expr.base) + _join(expr.subscript)
    return ""


def _join(items) -> str:
    return "".join(flatten_text(item) for item in items)


def spans_text(spans) -> str:
    """Plain text of a span list; math spans contribute their raw LaTeX."""
    parts = []
    for span in spans:
        if isinstance(span, MathSpan):
            parts.append(span.latex)
        else:
            parts.append(span.text)
    return "".join(parts)
