from __future__ import annotations

import io
import logging
from typing import Any
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4, LEGAL, LETTER, landscape
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import KeepTogether, Paragraph, SimpleDocTemplate, Spacer

from resume_builder.export.content import content_lines

logger = logging.getLogger(__name__)

PAGE_SIZES = {"A4": A4, "LETTER": LETTER, "LEGAL": LEGAL}

# base font -> (regular, bold)
_FONTS = {
    "helvetica": ("Helvetica", "Helvetica-Bold"),
    "times": ("Times-Roman", "Times-Bold"),
    "courier": ("Courier", "Courier-Bold"),
}
_SERIF_HINTS = ("times", "georgia", "garamond", "serif")
_MONO_HINTS = ("courier", "mono", "consolas")

DEFAULT_FONT_SIZE = 11.0
MIN_FONT_SIZE = 6.0
MAX_FONT_SIZE = 72.0
DEFAULT_MARGIN_MM = 20.0
MAX_MARGIN_MM = 60.0


def _font_family(name: str | None) -> tuple[str, str]:
    lowered = (name or "").lower()
    if any(hint in lowered for hint in _MONO_HINTS):
        return _FONTS["courier"]
    # "sans-serif" contains "serif"
    if "sans" not in lowered and any(hint in lowered for hint in _SERIF_HINTS):
        return _FONTS["times"]
    return _FONTS["helvetica"]


def _number(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip().removesuffix("px").removesuffix("pt"))
    except (TypeError, ValueError):
        return default


def _margin(value: Any) -> float:
    return min(max(_number(value, DEFAULT_MARGIN_MM), 0.0), MAX_MARGIN_MM) * mm


def _is_bold(weight: Any) -> bool:
    if weight is None:
        return False
    text = str(weight).strip().lower()
    if text in {"bold", "bolder"}:
        return True
    return text.isdigit() and int(text) >= 600


def _to_color(value: str | None) -> colors.Color:
    if not value:
        return colors.black
    text = value.strip()
    if text.startswith("#") and len(text) == 4:
        text = "#" + "".join(ch * 2 for ch in text[1:])
    try:
        if text.startswith("#"):
            return colors.HexColor(text)
        named = getattr(colors, text.lower(), None)
        return named if isinstance(named, colors.Color) else colors.black
    except ValueError:
        return colors.black


def _page_size(page_settings: dict[str, Any]) -> tuple[float, float]:
    size = PAGE_SIZES.get(str(page_settings.get("page_size") or "A4").upper(), A4)
    if page_settings.get("orientation") == "landscape":
        return landscape(size)
    return size


def _section_styles(section: dict[str, Any], index: int) -> tuple[ParagraphStyle, ParagraphStyle]:
    style = section.get("style") or {}
    regular, bold = _font_family(style.get("font_family"))
    # larger sizes overflow the frame and fail the layout
    size = min(max(_number(style.get("font_size"), DEFAULT_FONT_SIZE), MIN_FONT_SIZE), MAX_FONT_SIZE)
    color = _to_color(style.get("color"))
    body = ParagraphStyle(
        name=f"Body{index}",
        fontName=bold if _is_bold(style.get("font_weight")) else regular,
        fontSize=size,
        leading=size * 1.35,
        textColor=color,
        alignment=TA_LEFT,
        spaceAfter=2,
    )
    title = ParagraphStyle(
        name=f"Title{index}",
        parent=body,
        fontName=bold,
        fontSize=size + 3,
        leading=(size + 3) * 1.3,
        spaceAfter=5,
    )
    return title, body


def render_resume_pdf(resume: dict[str, Any]) -> bytes:
    """Render a resume document to PDF bytes using reportlab platypus."""
    page_settings = resume.get("page_settings") or {}
    margins = page_settings.get("margins") or {}

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=_page_size(page_settings),
        topMargin=_margin(margins.get("top")),
        rightMargin=_margin(margins.get("right")),
        bottomMargin=_margin(margins.get("bottom")),
        leftMargin=_margin(margins.get("left")),
        title=resume.get("name") or "Resume",
    )

    story: list[Any] = []
    for index, section in enumerate(resume.get("sections") or []):
        title_style, body_style = _section_styles(section, index)
        block: list[Any] = [Paragraph(escape(str(section.get("title") or "")), title_style)]
        for label, text in content_lines(section.get("content")):
            markup = escape(text)
            if label:
                markup = f"<b>{escape(label)}:</b> {markup}"
            block.append(Paragraph(markup, body_style))
        story.append(KeepTogether(block))
        story.append(Spacer(1, 6 * mm))

    if not story:
        story.append(Spacer(1, 1))

    doc.build(story)
    logger.info("resume_pdf_rendered resume_id=%s sections=%s", resume.get("id"), len(resume.get("sections") or []))
    return buffer.getvalue()
