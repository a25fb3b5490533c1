"""Line-oriented block parser for chat text.

Turns the whole input into a flat list of blocks: blank lines, pipe tables,
``#``/``##`` headings, ``-``/``*`` bullet items and paragraphs. Table lines
are detected first and collected greedily with lookahead, so a heading or
bullet that happens to contain two pipes is read as a table row.

Parsing never fails: ragged tables are padded and all inline text goes
through the tolerant span splitter.
"""

from __future__ import annotations

import logging

from chat_formatter.ir.schema import (
    BlankLineBlock,
    BulletItemBlock,
    DocumentIR,
    DocumentMetadata,
    HeadingBlock,
    IRBlock,
    ParagraphBlock,
    TableBlock,
    TableCell,
)
from chat_formatter.parsers.inline import split_spans

logger = logging.getLogger(__name__)

HEADING_MARKERS = (("# ", 1), ("## ", 2))
BULLET_MARKERS = ("- ", "* ")
SEPARATOR_CHARS = frozenset("|-: \t")


def parse_document(text: str, source_file: str = "", title: str = "") -> DocumentIR:
    """Parse chat text into a DocumentIR.

    Args:
        text: The full input. CRLF and CR line endings are accepted.
        source_file: Recorded in the document metadata.
        title: Recorded in the document metadata.

    Returns:
        The parsed document. Never raises for malformed input.
    """
    lines = split_lines(text)
    body = _parse_blocks(lines)
    logger.debug("Parsed %d blocks from %d lines", len(body), len(lines))

    return DocumentIR(
        metadata=DocumentMetadata(
            source_file=source_file,
            title=title,
            line_count=len(lines),
        ),
        body=body,
    )


def split_lines(text: str) -> list[str]:
    """Normalize line endings and split, keeping empty lines."""
    return (text or "").replace("\r\n", "\n").replace("\r", "\n").split("\n")


def _parse_blocks(lines: list[str]) -> list[IRBlock]:
    blocks: list[IRBlock] = []
    idx = 0

    while idx < len(lines):
        line = lines[idx]

        if not line.strip():
            blocks.append(BlankLineBlock())
            idx += 1
            continue

        if is_table_line(line):
            end = idx
            while end < len(lines) and is_table_line(lines[end]):
                end += 1
            blocks.append(_build_table(lines[idx:end]))
            idx = end
            continue

        blocks.append(_parse_line(line))
        idx += 1

    return blocks


def _parse_line(line: str) -> IRBlock:
    """Classify a single non-blank, non-table line."""
    for marker, level in HEADING_MARKERS:
        if line.startswith(marker):
            return HeadingBlock(
                level=level,
                spans=split_spans(line[len(marker):].strip()),
            )

    if line.startswith(BULLET_MARKERS):
        return BulletItemBlock(spans=split_spans(line[2:]))

    return ParagraphBlock(spans=split_spans(line))


# ---------------------------------------------------------------------------
# Pipe tables
# ---------------------------------------------------------------------------


def is_table_line(line: str) -> bool:
    """True if the trimmed line holds at least two pipes."""
    return line.strip().count("|") >= 2


def is_separator_line(line: str) -> bool:
    """True for a header separator such as ``|---|:--:|``."""
    stripped = line.strip()
    if not stripped:
        return False
    return "-" in stripped and all(ch in SEPARATOR_CHARS for ch in stripped)


def split_cells(line: str) -> list[str]:
    """Split a table line into trimmed cell texts.

    One leading and one trailing pipe are removed before splitting.
    """
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|"):
        stripped = stripped[:-1]
    return [cell.strip() for cell in stripped.split("|")]


def _build_table(run: list[str]) -> TableBlock:
    """Build one table from a contiguous run of table lines."""
    raw_rows = [
        split_cells(line)
        for k, line in enumerate(run)
        if not (k == 1 and is_separator_line(line))
    ]
    num_cols = max(len(cells) for cells in raw_rows)

    rows = []
    for cells in raw_rows:
        padded = cells + [""] * (num_cols - len(cells))
        rows.append(tuple(TableCell(spans=split_spans(text)) for text in padded))

    return TableBlock(rows=rows)
