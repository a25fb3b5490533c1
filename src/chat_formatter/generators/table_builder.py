"""Bordered table rendering for python-docx.

Converts a TableBlock's rows of span cells into a python-docx Table whose
first row is a bold, repeating header row.
"""

from __future__ import annotations

from docx.document import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.table import Table

from chat_formatter.config import Config
from chat_formatter.generators.runs import write_spans
from chat_formatter.generators.styles import doc_style_or_fallback
from chat_formatter.ir.schema import TableBlock

BORDER_EDGES = ("top", "left", "bottom", "right", "insideH", "insideV")


def build_table(doc: Document, block: TableBlock, config: Config) -> Table:
    """Create a python-docx Table from a TableBlock.

    Args:
        doc: The python-docx Document to add the table to.
        block: The IR TableBlock containing cell spans.
        config: Application configuration.

    Returns:
        The created Table object.
    """
    style = doc_style_or_fallback(doc, config.style.table_style, fallback=None)

    if block.num_rows == 0 or block.num_cols == 0:
        # Empty table: add a minimal 1x1 placeholder
        table = doc.add_table(rows=1, cols=1)
        table.style = style
        _set_table_borders(table)
        return table

    table = doc.add_table(rows=block.num_rows, cols=block.num_cols)
    table.style = style

    for r, row in enumerate(block.rows):
        header = r == 0 and config.style.bold_header_row
        for c, cell_data in enumerate(row):
            paragraph = table.cell(r, c).paragraphs[0]
            write_spans(paragraph, cell_data.spans, bold=header)

    # Apply table-wide formatting
    _set_table_autofit(table)
    _set_table_borders(table)
    _set_header_row(table)

    return table


def _table_properties(table: Table):
    tbl = table._tbl
    tblPr = tbl.tblPr
    if tblPr is None:
        tblPr = OxmlElement("w:tblPr")
        tbl.insert(0, tblPr)
    return tblPr


def _set_table_autofit(table: Table) -> None:
    """Set table width to 100% of page width via OOXML."""
    tblPr = _table_properties(table)
    tblW = tblPr.find(qn("w:tblW"))
    if tblW is None:
        tblW = OxmlElement("w:tblW")
        tblPr.append(tblW)
    tblW.set(qn("w:type"), "pct")
    tblW.set(qn("w:w"), "5000")  # 5000 = 100% in fifths of a percent


def _set_table_borders(table: Table) -> None:
    """Draw single-line borders on every edge, independent of the style."""
    tblPr = _table_properties(table)
    existing = tblPr.find(qn("w:tblBorders"))
    if existing is not None:
        tblPr.remove(existing)

    borders = OxmlElement("w:tblBorders")
    for edge in BORDER_EDGES:
        element = OxmlElement(f"w:{edge}")
        element.set(qn("w:val"), "single")
        element.set(qn("w:sz"), "6")  # eighths of a point
        element.set(qn("w:space"), "0")
        element.set(qn("w:color"), "auto")
        borders.append(element)

    # tblBorders must follow tblW in the schema order
    tblW = tblPr.find(qn("w:tblW"))
    if tblW is not None:
        tblW.addnext(borders)
    else:
        tblPr.append(borders)


def _set_header_row(table: Table) -> None:
    """Mark the first row as a header row so it repeats across pages."""
    if len(table.rows) == 0:
        return
    first_row = table.rows[0]
    trPr = first_row._tr.get_or_add_trPr()
    tblHeader = OxmlElement("w:tblHeader")
    trPr.append(tblHeader)
