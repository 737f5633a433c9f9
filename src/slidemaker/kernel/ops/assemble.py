# src/slidemaker/kernel/ops/assemble.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from slidemaker.core.logging import get_logger

from ..models import Deck, Theme

log = get_logger(__name__)

# Widescreen page, inches
PAGE_WIDTH = 10.0
PAGE_HEIGHT = 5.625

FONT_FACE = "Arial"
BULLET_GLYPH = "•"
DEFAULT_TITLE = "Generated Presentation"


@dataclass(frozen=True)
class ThemeTokens:
    background: str
    accent: str
    title: str
    bullet: str
    number: str


# One row per theme; the assembler never branches on the theme itself.
THEMES: Dict[Theme, ThemeTokens] = {
    Theme.DARK: ThemeTokens(
        background="1A1A2E",
        accent="6366F1",
        title="FFFFFF",
        bullet="E2E8F0",
        number="A5B4FC",
    ),
    Theme.LIGHT: ThemeTokens(
        background="FFFFFF",
        accent="6366F1",
        title="1E293B",
        bullet="475569",
        number="94A3B8",
    ),
}


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    w: float
    h: float


ACCENT_BAR = Box(0.0, 0.0, PAGE_WIDTH, 0.15)
COVER_TITLE = Box(0.5, 2.0, 9.0, 1.5)
COVER_SUBTITLE = Box(0.5, 4.0, 9.0, 0.5)
SLIDE_NUMBER = Box(9.2, 0.3, 0.5, 0.4)
SLIDE_TITLE = Box(0.5, 0.5, 9.0, 0.8)
SLIDE_BODY = Box(0.5, 1.5, 9.0, 4.0)


@dataclass
class TextBlock:
    box: Box
    paragraphs: List[str]
    font_size: int
    color: str
    bold: bool = False
    align: str = "left"
    anchor: Optional[str] = None
    bullet_color: Optional[str] = None
    space_after: Optional[int] = None
    font_face: str = FONT_FACE


@dataclass
class SlidePlan:
    kind: str
    blocks: List[TextBlock]
    notes: str = ""


@dataclass
class RenderPlan:
    title: str
    tokens: ThemeTokens
    accent_bar: Box
    slides: List[SlidePlan] = field(default_factory=list)
    page_width: float = PAGE_WIDTH
    page_height: float = PAGE_HEIGHT


def _cover(title: str, product_name: str, tokens: ThemeTokens) -> SlidePlan:
    return SlidePlan(kind="title", blocks=[
        TextBlock(COVER_TITLE, [title], font_size=44, color=tokens.title, bold=True, align="center"),
        TextBlock(COVER_SUBTITLE, [f"Created with {product_name}"], font_size=18,
                  color=tokens.number, align="center"),
    ])


def _content(number: int, slide, tokens: ThemeTokens) -> SlidePlan:
    return SlidePlan(kind="content", notes=slide.speaker_notes, blocks=[
        TextBlock(SLIDE_NUMBER, [str(number)], font_size=14, color=tokens.number),
        TextBlock(SLIDE_TITLE, [slide.title], font_size=32, color=tokens.title, bold=True),
        TextBlock(SLIDE_BODY, list(slide.bullets), font_size=18, color=tokens.bullet,
                  anchor="top", bullet_color=tokens.accent, space_after=12),
    ])


def assemble(deck: Deck, product_name: str = "SlideMaker") -> RenderPlan:
    """Lay out a cover slide plus one content slide per deck slide, numbered from 1."""
    tokens = THEMES[deck.theme]
    title = deck.presentation_title.strip() or DEFAULT_TITLE

    plan = RenderPlan(title=title, tokens=tokens, accent_bar=ACCENT_BAR)
    plan.slides.append(_cover(title, product_name, tokens))
    for number, slide in enumerate(deck.slides, start=1):
        plan.slides.append(_content(number, slide, tokens))

    log.info("assembled theme=%s slides=%d", deck.theme.value, len(plan.slides))
    return plan
