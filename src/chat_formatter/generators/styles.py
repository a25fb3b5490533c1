"""Word document style management.

Handles heading style names, bullet list numbering and style fallbacks
for documents generated from chat text.
"""

from __future__ import annotations

from docx import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from chat_formatter.config import StyleConfig

BULLET_NUM_ID = "100"
BULLET_CHAR = "•"


def heading_style_name(config: StyleConfig, level: int) -> str:
    """Return the Word style name for a heading level (e.g. 'Heading 1')."""
    return f"{config.heading_prefix} {level}"


def ensure_styles_exist(doc: Document) -> None:
    """Ensure the document has a bullet numbering definition.

    python-docx creates heading styles on demand, but the bullet list style
    needs an abstract numbering definition to actually render bullets.
    """
    numbering_elem = doc.part.numbering_part._element
    _create_bullet_numbering(numbering_elem)


def _create_bullet_numbering(numbering_elem) -> None:
    """Create a single-level abstract numbering definition for bullets."""
    abstract_num = OxmlElement("w:abstractNum")
    abstract_num.set(qn("w:abstractNumId"), BULLET_NUM_ID)

    lvl = OxmlElement("w:lvl")
    lvl.set(qn("w:ilvl"), "0")

    start = OxmlElement("w:start")
    start.set(qn("w:val"), "1")
    lvl.append(start)

    num_fmt = OxmlElement("w:numFmt")
    num_fmt.set(qn("w:val"), "bullet")
    lvl.append(num_fmt)

    lvl_text = OxmlElement("w:lvlText")
    lvl_text.set(qn("w:val"), BULLET_CHAR)
    lvl.append(lvl_text)

    lvl_jc = OxmlElement("w:lvlJc")
    lvl_jc.set(qn("w:val"), "left")
    lvl.append(lvl_jc)

    ppr = OxmlElement("w:pPr")
    ind = OxmlElement("w:ind")
    ind.set(qn("w:left"), "720")
    ind.set(qn("w:hanging"), "360")
    ppr.append(ind)
    lvl.append(ppr)

    abstract_num.append(lvl)
    numbering_elem.insert(0, abstract_num)

    # Create concrete num referencing this abstract
    num = OxmlElement("w:num")
    num.set(qn("w:numId"), BULLET_NUM_ID)
    abstract_ref = OxmlElement("w:abstractNumId")
    abstract_ref.set(qn("w:val"), BULLET_NUM_ID)
    num.append(abstract_ref)
    numbering_elem.append(num)


def apply_bullet_numbering(paragraph) -> None:
    """Apply <w:numPr> to a paragraph so its bullet actually renders."""
    pPr = paragraph._element.get_or_add_pPr()
    numPr = OxmlElement("w:numPr")
    ilvl_elem = OxmlElement("w:ilvl")
    ilvl_elem.set(qn("w:val"), "0")
    numPr.append(ilvl_elem)
    numId_elem = OxmlElement("w:numId")
    numId_elem.set(qn("w:val"), BULLET_NUM_ID)
    numPr.append(numId_elem)
    pPr.append(numPr)


def doc_style_or_fallback(
    doc: Document, style_name: str, fallback: str = "Normal"
) -> str:
    """Return style_name if it exists in doc, otherwise fallback."""
    try:
        doc.styles[style_name]
        return style_name
    except KeyError:
        return fallback
