# src/slidemaker/kernel/ops/encode.py
from __future__ import annotations

import io
import re
from typing import Tuple

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import MSO_ANCHOR, PP_PARAGRAPH_ALIGNMENT
from pptx.oxml.xmlchemy import OxmlElement
from pptx.shapes.autoshape import Shape
from pptx.util import Inches, Pt

from slidemaker.core.logging import get_logger

from ..errors import EncodingFailure
from .assemble import BULLET_GLYPH, FONT_FACE, RenderPlan, SlidePlan, TextBlock

log = get_logger(__name__)

MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
EXTENSION = ".pptx"
DEFAULT_FILE_STEM = "presentation"
SUBJECT = "AI-Generated Educational Slides"

BLANK_LAYOUT = 6  # "Blank" in the default python-pptx template
BULLET_INDENT = Inches(0.3)

_ALIGN = {
    "left": PP_PARAGRAPH_ALIGNMENT.LEFT,
    "center": PP_PARAGRAPH_ALIGNMENT.CENTER,
    "right": PP_PARAGRAPH_ALIGNMENT.RIGHT,
}
_ANCHOR = {
    "top": MSO_ANCHOR.TOP,
    "middle": MSO_ANCHOR.MIDDLE,
    "bottom": MSO_ANCHOR.BOTTOM,
}
_UNSAFE = re.compile(r"[^A-Za-z0-9]")


# ---------- file name ----------

def sanitize_stem(title: str) -> str:
    stem = title if title and title.strip() else DEFAULT_FILE_STEM
    return _UNSAFE.sub("_", stem)


def suggested_file_name(title: str) -> str:
    return sanitize_stem(title) + EXTENSION


# ---------- helpers ----------

def _rgb(hex_color: str) -> RGBColor:
    return RGBColor.from_string(hex_color)


def _style_master(prs, plan: RenderPlan) -> None:
    """Background and accent bar live on the master so every slide inherits them."""
    master = prs.slide_master
    bg = master.background.fill
    bg.solid()
    bg.fore_color.rgb = _rgb(plan.tokens.background)

    spTree = master.shapes._spTree
    next_id = max((int(i) for i in spTree.xpath("//p:cNvPr/@id")), default=0) + 1
    bar = plan.accent_bar
    sp = spTree.add_autoshape(
        next_id, "Accent Bar", "rect",
        Inches(bar.x), Inches(bar.y), Inches(bar.w), Inches(bar.h),
    )
    shape = Shape(sp, master.shapes)
    shape.fill.solid()
    shape.fill.fore_color.rgb = _rgb(plan.tokens.accent)
    shape.line.fill.background()


def _set_bullet(paragraph, color: str) -> None:
    pPr = paragraph._p.get_or_add_pPr()
    pPr.set("marL", str(BULLET_INDENT))
    pPr.set("indent", str(-BULLET_INDENT))
    bu_clr = OxmlElement("a:buClr")
    srgb = OxmlElement("a:srgbClr")
    srgb.set("val", color)
    bu_clr.append(srgb)
    pPr.append(bu_clr)
    bu_font = OxmlElement("a:buFont")
    bu_font.set("typeface", FONT_FACE)
    pPr.append(bu_font)
    bu_char = OxmlElement("a:buChar")
    bu_char.set("char", BULLET_GLYPH)
    pPr.append(bu_char)


def _add_block(slide, block: TextBlock) -> None:
    b = block.box
    tb = slide.shapes.add_textbox(Inches(b.x), Inches(b.y), Inches(b.w), Inches(b.h))
    tf = tb.text_frame
    tf.word_wrap = True
    if block.anchor:
        tf.vertical_anchor = _ANCHOR[block.anchor]

    for i, text in enumerate(block.paragraphs):
        p = tf.paragraphs[0] if i == 0 else tf.add_paragraph()
        p.alignment = _ALIGN[block.align]
        # spcAft must precede the bu* elements inside a:pPr
        if block.space_after is not None:
            p.space_after = Pt(block.space_after)
        if block.bullet_color:
            _set_bullet(p, block.bullet_color)
        run = p.add_run()
        run.text = text
        run.font.name = block.font_face
        run.font.size = Pt(block.font_size)
        run.font.bold = block.bold
        run.font.color.rgb = _rgb(block.color)


def _add_slide(prs, slide_plan: SlidePlan) -> None:
    slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT])
    for block in slide_plan.blocks:
        _add_block(slide, block)
    if slide_plan.notes:
        slide.notes_slide.notes_text_frame.text = slide_plan.notes


# ---------- op ----------

def encode(plan: RenderPlan, presentation_title: str, product_name: str = "SlideMaker") -> Tuple[bytes, str]:
    """
    Serialize a render plan into .pptx bytes.
    Returns (bytes, suggested file name). Nothing touches disk.
    """
    try:
        prs = Presentation()
        prs.slide_width = Inches(plan.page_width)
        prs.slide_height = Inches(plan.page_height)

        props = prs.core_properties
        props.author = product_name
        props.title = plan.title
        props.subject = SUBJECT

        _style_master(prs, plan)
        for slide_plan in plan.slides:
            _add_slide(prs, slide_plan)

        buf = io.BytesIO()
        prs.save(buf)
        data = buf.getvalue()
    except Exception as e:
        log.exception("encode failed")
        raise EncodingFailure() from e

    name = suggested_file_name(presentation_title)
    log.info("encoded slides=%d bytes=%d file=%s", len(plan.slides), len(data), name)
    return data, name
