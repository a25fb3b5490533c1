"""IR → standalone HTML page.

Math is left as delimited LaTeX text and typeset in the browser by MathJax,
which recognises ``\\( \\)`` and ``\\[ \\]`` out of the box.
"""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path

from chat_formatter.exceptions import GenerationError
from chat_formatter.generators.base import BaseGenerator
from chat_formatter.ir.schema import (
    BlankLineBlock,
    BoldSpan,
    BulletItemBlock,
    DocumentIR,
    HeadingBlock,
    MathSpan,
    ParagraphBlock,
    TableBlock,
)

logger = logging.getLogger(__name__)

# Characters that could end a CSS declaration or the <style> element
_CSS_UNSAFE_RE = re.compile(r"[<>{};\\]")


class HtmlGenerator(BaseGenerator):
    """Generates an HTML page from a DocumentIR."""

    @property
    def name(self) -> str:
        return "html"

    @property
    def extension(self) -> str:
        return ".html"

    def generate(self, ir: DocumentIR, output_path: Path) -> Path:
        """Write the rendered page to output_path."""
        output_path = Path(output_path)
        try:
            output_path.write_text(self.render(ir), encoding="utf-8")
        except OSError as exc:
            raise GenerationError(f"Failed to save document: {exc}") from exc

        logger.info("Generated %s", output_path)
        return output_path

    def render(self, ir: DocumentIR) -> str:
        """Render the full page markup."""
        parts = self._header(self.document_title(ir))
        parts.extend(self._body(ir))
        parts.append("</body>")
        parts.append("</html>")
        return "\n".join(parts) + "\n"

    def _header(self, title: str) -> list[str]:
        cfg = self.config.html
        return [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="UTF-8">',
            f"<title>{_escape(title)}</title>",
            f'<script src="{html.escape(cfg.mathjax_url)}"></script>',
            "<style>",
            f"body {{ font-family: {_css_value(cfg.font_family)}; "
            f"font-size: {_css_value(cfg.font_size_px)}px; "
            f"padding: {_css_value(cfg.padding_px)}px; }}",
            "table { border-collapse: collapse; margin: 8px 0; }",
            "th, td { border: 1px solid #888; padding: 4px 8px; }",
            "</style>",
            "</head>",
            "<body>",
        ]

    def _body(self, ir: DocumentIR) -> list[str]:
        parts: list[str] = []
        in_list = False

        for block in ir.body:
            if isinstance(block, BulletItemBlock):
                if not in_list:
                    parts.append("<ul>")
                    in_list = True
                parts.append(f"<li>{render_spans(block.spans)}</li>")
                continue

            if in_list:
                parts.append("</ul>")
                in_list = False

            if isinstance(block, HeadingBlock):
                tag = f"h{block.level}"
                parts.append(f"<{tag}>{render_spans(block.spans)}</{tag}>")
            elif isinstance(block, ParagraphBlock):
                parts.append(f"<p>{render_spans(block.spans)}</p>")
            elif isinstance(block, TableBlock):
                parts.extend(_render_table(block))
            elif isinstance(block, BlankLineBlock):
                pass
            else:
                logger.warning("Unknown block type: %s", type(block).__name__)

        if in_list:
            parts.append("</ul>")
        return parts


def render_spans(spans) -> str:
    """Render spans as inline HTML; math keeps its original delimiters."""
    out = []
    for span in spans:
        if isinstance(span, MathSpan):
            out.append(_escape(span.delimited))
        elif isinstance(span, BoldSpan):
            out.append(f"<strong>{_escape(span.text)}</strong>")
        else:
            out.append(_escape(span.text))
    return "".join(out)


def _render_table(block: TableBlock) -> list[str]:
    if not block.rows:
        return []

    parts = ["<table>", "<thead>"]
    cells = "".join(f"<th>{render_spans(cell.spans)}</th>" for cell in block.header)
    parts.append(f"<tr>{cells}</tr>")
    parts.append("</thead>")

    if block.num_rows > 1:
        parts.append("<tbody>")
        for row in block.rows[1:]:
            cells = "".join(f"<td>{render_spans(cell.spans)}</td>" for cell in row)
            parts.append(f"<tr>{cells}</tr>")
        parts.append("</tbody>")

    parts.append("</table>")
    return parts


def _escape(text: str) -> str:
    return html.escape(text, quote=False)


def _css_value(value) -> str:
    """Strip characters that could close the declaration or the style element."""
    return _CSS_UNSAFE_RE.sub("", str(value))
