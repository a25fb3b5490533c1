"""IR → .docx renderer.

Walks the flat block list in order, generating Word content for each block
type. Math spans become native Word equations (OMML), bold spans become bold
runs and headings get per-level font-size tiers on top of their styles.
"""

from __future__ import annotations

import logging
from pathlib import Path

from docx import Document
from docx.shared import Pt

from chat_formatter.exceptions import GenerationError
from chat_formatter.generators.base import BaseGenerator
from chat_formatter.generators.runs import write_spans
from chat_formatter.generators.styles import (
    apply_bullet_numbering,
    doc_style_or_fallback,
    ensure_styles_exist,
    heading_style_name,
)
from chat_formatter.generators.table_builder import build_table
from chat_formatter.ir.schema import (
    BlankLineBlock,
    BulletItemBlock,
    DocumentIR,
    HeadingBlock,
    IRBlock,
    ParagraphBlock,
    TableBlock,
)

logger = logging.getLogger(__name__)


class WordGenerator(BaseGenerator):
    """Generates a Word document from a DocumentIR."""

    @property
    def name(self) -> str:
        return "docx"

    @property
    def extension(self) -> str:
        return ".docx"

    def generate(self, ir: DocumentIR, output_path: Path) -> Path:
        """Generate a .docx file from a DocumentIR.

        Args:
            ir: The document IR to render.
            output_path: Where to write the .docx file.

        Returns:
            The output path (for convenience).
        """
        output_path = Path(output_path)
        doc = self.generate_document(ir)

        try:
            doc.save(str(output_path))
        except OSError as exc:
            raise GenerationError(f"Failed to save document: {exc}") from exc

        logger.info("Generated %s", output_path)
        return output_path

    def generate_document(self, ir: DocumentIR) -> Document:
        """Generate and return a python-docx Document object (for testing).

        Args:
            ir: The document IR to render.

        Returns:
            The python-docx Document object.
        """
        doc = Document()
        ensure_styles_exist(doc)

        title = self.document_title(ir)
        if title:
            doc.core_properties.title = title
            self._render_title(doc, title)

        for block in ir.body:
            self._render_block(doc, block)

        logger.debug("Rendered %d blocks to docx", len(ir.body))
        return doc

    def _render_block(self, doc: Document, block: IRBlock) -> None:
        """Dispatch rendering to the appropriate method by block type."""
        if isinstance(block, HeadingBlock):
            self._render_heading(doc, block)
        elif isinstance(block, ParagraphBlock):
            self._render_paragraph(doc, block)
        elif isinstance(block, BulletItemBlock):
            self._render_bullet_item(doc, block)
        elif isinstance(block, TableBlock):
            self._render_table(doc, block)
        elif isinstance(block, BlankLineBlock):
            self._render_blank_line(doc)
        else:
            logger.warning("Unknown block type: %s", type(block).__name__)

    def _render_title(self, doc: Document, title: str) -> None:
        """Render the document title as a bold paragraph plus a spacer."""
        paragraph = doc.add_paragraph(style=self.config.style.body_style)
        run = paragraph.add_run(title)
        run.bold = True
        run.font.size = Pt(self.config.style.title_font_size)
        doc.add_paragraph(style=self.config.style.body_style)

    def _render_heading(self, doc: Document, block: HeadingBlock) -> None:
        """Render a heading with its level's style and font size.

        Always uses doc.add_paragraph(style=...) to respect heading_prefix
        configuration, never doc.add_heading() which ignores it.
        """
        style_name = doc_style_or_fallback(
            doc,
            heading_style_name(self.config.style, block.level),
            self.config.style.body_style,
        )
        paragraph = doc.add_paragraph(style=style_name)
        write_spans(
            paragraph,
            block.spans,
            bold=True,
            font_size=self.config.style.heading_font_size(block.level),
        )

    def _render_paragraph(self, doc: Document, block: ParagraphBlock) -> None:
        paragraph = doc.add_paragraph(style=self.config.style.body_style)
        write_spans(paragraph, block.spans)

    def _render_bullet_item(self, doc: Document, block: BulletItemBlock) -> None:
        """Render a bullet item with native list numbering."""
        style = doc_style_or_fallback(
            doc, self.config.style.list_bullet_style, self.config.style.body_style
        )
        paragraph = doc.add_paragraph(style=style)
        write_spans(paragraph, block.spans)

        # Apply numbering XML so bullets actually render
        apply_bullet_numbering(paragraph)

    def _render_table(self, doc: Document, block: TableBlock) -> None:
        """Render a table using the table builder."""
        build_table(doc, block, self.config)

    def _render_blank_line(self, doc: Document) -> None:
        doc.add_paragraph(style=self.config.style.body_style)
