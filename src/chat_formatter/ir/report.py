"""Conversion report: diagnostics and statistics from a conversion run."""

from __future__ import annotations

import json
from dataclasses import dataclass, field


@dataclass
class ConversionReport:
    """Summary of a chat-text conversion run."""

    # Source info
    source_file: str = ""
    line_count: int = 0
    output_format: str = ""

    # Timing
    parse_time_seconds: float = 0.0
    generate_time_seconds: float = 0.0
    total_time_seconds: float = 0.0

    # Block counts
    heading_count: int = 0
    paragraph_count: int = 0
    bullet_count: int = 0
    table_count: int = 0
    blank_line_count: int = 0

    # Span counts
    bold_count: int = 0
    math_count: int = 0

    # Heading level distribution: {level: count}
    headings_by_level: dict[int, int] = field(default_factory=dict)

    # Warnings collected during conversion
    warnings: list[str] = field(default_factory=list)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self._to_dict(), indent=indent)

    def _to_dict(self) -> dict:
        """Convert to a plain dict for JSON serialization."""
        return {
            "source_file": self.source_file,
            "line_count": self.line_count,
            "output_format": self.output_format,
            "timing": {
                "parse_seconds": round(self.parse_time_seconds, 3),
                "generate_seconds": round(self.generate_time_seconds, 3),
                "total_seconds": round(self.total_time_seconds, 3),
            },
            "block_counts": {
                "headings": self.heading_count,
                "paragraphs": self.paragraph_count,
                "bullets": self.bullet_count,
                "tables": self.table_count,
                "blank_lines": self.blank_line_count,
            },
            "span_counts": {
                "bold": self.bold_count,
                "math": self.math_count,
            },
            "headings_by_level": {
                str(k): v for k, v in sorted(self.headings_by_level.items())
            },
            "warnings": self.warnings,
        }

    @classmethod
    def from_ir(cls, ir: "DocumentIR") -> ConversionReport:
        """Build a report by walking an IR document."""
        report = cls(
            source_file=ir.metadata.source_file,
            line_count=ir.metadata.line_count,
        )
        _walk_blocks(ir.body, report)
        return report


def _walk_blocks(blocks, report: ConversionReport) -> None:
    """Walk IR blocks to populate report counters and warnings."""
    from chat_formatter.ir.schema import (
        BlankLineBlock,
        BulletItemBlock,
        HeadingBlock,
        ParagraphBlock,
        TableBlock,
    )

    for index, block in enumerate(blocks):
        if isinstance(block, HeadingBlock):
            report.heading_count += 1
            report.headings_by_level[block.level] = (
                report.headings_by_level.get(block.level, 0) + 1
            )
            _count_spans(block.spans, index, report)
        elif isinstance(block, ParagraphBlock):
            report.paragraph_count += 1
            _count_spans(block.spans, index, report)
        elif isinstance(block, BulletItemBlock):
            report.bullet_count += 1
            _count_spans(block.spans, index, report)
        elif isinstance(block, TableBlock):
            report.table_count += 1
            if block.num_cols == 1:
                report.warnings.append(
                    f"Block {index}: table has a single column"
                )
            for row in block.rows:
                for cell in row:
                    _count_spans(cell.spans, index, report)
        elif isinstance(block, BlankLineBlock):
            report.blank_line_count += 1


def _count_spans(spans, index: int, report: ConversionReport) -> None:
    from chat_formatter.ir.schema import BoldSpan, MathSpan

    for span in spans:
        if isinstance(span, BoldSpan):
            report.bold_count += 1
        elif isinstance(span, MathSpan):
            report.math_count += 1
            if not span.expression.items:
                report.warnings.append(
                    f"Block {index}: empty math expression"
                )
