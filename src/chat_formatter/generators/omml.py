"""Expression tree → Office Math Markup (OMML) for python-docx.

Each expression node maps onto its native Word equation element:

    Atom         →  <m:r><m:t>
    Sequence     →  children inlined
    Fraction     →  <m:f> with <m:num>/<m:den>
    Radical      →  <m:rad> with a hidden, empty <m:deg>
    Superscript  →  <m:sSup> with <m:e>/<m:sup>
    Subscript    →  <m:sSub> with <m:e>/<m:sub>
"""

from __future__ import annotations

from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from chat_formatter.ir.schema import (
    Atom,
    Fraction,
    Radical,
    Sequence,
    Subscript,
    Superscript,
)


def build_omath(expression: Sequence):
    """Build an <m:oMath> element for a parsed math span."""
    omath = OxmlElement("m:oMath")
    _append_all(omath, expression.items)
    return omath


def append_math(paragraph, expression: Sequence) -> None:
    """Append an equation to a python-docx paragraph."""
    paragraph._element.append(build_omath(expression))


def _append_all(parent, items) -> None:
    for item in items:
        _append_expression(parent, item)


def _append_expression(parent, expr) -> None:
    if isinstance(expr, Atom):
        parent.append(_math_run(expr.text))
    elif isinstance(expr, Sequence):
        _append_all(parent, expr.items)
    elif isinstance(expr, Fraction):
        frac = OxmlElement("m:f")
        frac.append(_container("m:num", expr.numerator))
        frac.append(_container("m:den", expr.denominator))
        parent.append(frac)
    elif isinstance(expr, Radical):
        rad = OxmlElement("m:rad")
        rad_pr = OxmlElement("m:radPr")
        deg_hide = OxmlElement("m:degHide")
        deg_hide.set(qn("m:val"), "1")
        rad_pr.append(deg_hide)
        rad.append(rad_pr)
        rad.append(OxmlElement("m:deg"))
        rad.append(_container("m:e", expr.radicand))
        parent.append(rad)
    elif isinstance(expr, Superscript):
        sup = OxmlElement("m:sSup")
        sup.append(_container("m:e", (expr.base,)))
        sup.append(_container("m:sup", expr.exponent))
        parent.append(sup)
    elif isinstance(expr, Subscript):
        sub = OxmlElement("m:sSub")
        sub.append(_container("m:e", (expr.base,)))
        sub.append(_container("m:sub", expr.subscript))
        parent.append(sub)


def _container(tag: str, items):
    element = OxmlElement(tag)
    _append_all(element, items)
    return element


def _math_run(text: str):
    run = OxmlElement("m:r")
    t = OxmlElement("m:t")
    t.set(qn("xml:space"), "preserve")
    t.text = text
    run.append(t)
    return run
