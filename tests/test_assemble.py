import pytest

from slidemaker.kernel.errors import EmptyDeck
from slidemaker.kernel.models import Deck, Slide, Theme
from slidemaker.kernel.ops.assemble import (
    ACCENT_BAR, PAGE_HEIGHT, PAGE_WIDTH, SLIDE_BODY, THEMES, assemble,
)


def test_theme_token_table():
    dark, light = THEMES[Theme.DARK], THEMES[Theme.LIGHT]
    assert dark.background == "1A1A2E" and light.background == "FFFFFF"
    assert dark.accent == light.accent == "6366F1"
    assert dark.title == "FFFFFF" and light.title == "1E293B"
    assert dark.bullet == "E2E8F0" and light.bullet == "475569"
    assert dark.number == "A5B4FC" and light.number == "94A3B8"
    assert set(THEMES) == set(Theme)


def test_cover_plus_one_slide_per_deck_slide(deck):
    plan = assemble(deck)
    assert [s.kind for s in plan.slides] == ["title", "content", "content", "content"]
    assert (plan.page_width, plan.page_height) == (PAGE_WIDTH, PAGE_HEIGHT)
    assert plan.accent_bar == ACCENT_BAR and ACCENT_BAR.w == PAGE_WIDTH


def test_cover_blocks(deck):
    cover = assemble(deck, product_name="SlideMaker").slides[0]
    title, subtitle = cover.blocks
    assert title.paragraphs == ["Bio 101: Ch. 3!"]
    assert title.bold and title.align == "center" and title.font_size == 44
    assert subtitle.paragraphs == ["Created with SlideMaker"]
    assert subtitle.align == "center"
    assert subtitle.box.y > title.box.y


def test_content_slides_numbered_from_one(deck):
    plan = assemble(deck)
    numbers = [s.blocks[0].paragraphs[0] for s in plan.slides[1:]]
    assert numbers == ["1", "2", "3"]


def test_content_slide_styling_follows_theme(deck):
    for theme in Theme:
        tokens = THEMES[theme]
        slide = assemble(deck.model_copy(update={"theme": theme})).slides[1]
        number, title, body = slide.blocks
        assert number.color == tokens.number
        assert title.color == tokens.title and title.bold and title.align == "left"
        assert body.color == tokens.bullet
        assert body.bullet_color == tokens.accent
        assert body.anchor == "top" and body.space_after == 12
        assert body.box == SLIDE_BODY
        assert body.paragraphs == ["Basic unit of life", "Have membranes"]


def test_notes_carried_on_content_slides(deck):
    plan = assemble(deck)
    assert [s.notes for s in plan.slides] == ["", "", "Mention the powerhouse joke.", ""]


def test_blank_title_gets_default_cover_title():
    plan = assemble(Deck(presentation_title="  ", slides=[Slide(title="x")]))
    assert plan.title == "Generated Presentation"


def test_deck_without_slides_is_refused():
    with pytest.raises(EmptyDeck):
        Deck(presentation_title="nothing", slides=[])
