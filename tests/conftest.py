# tests/conftest.py
import io
import sys
import pathlib

import pytest

# Add <repo>/src to sys.path so `import slidemaker...` works under pytest
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from slidemaker.kernel.models import Deck, Slide, Theme


@pytest.fixture
def pptx_bytes() -> bytes:
    from pptx import Presentation

    prs = Presentation()
    s1 = prs.slides.add_slide(prs.slide_layouts[1])
    s1.shapes.title.text = "Photosynthesis"
    s1.placeholders[1].text = "Light reactions\nCalvin cycle"
    s2 = prs.slides.add_slide(prs.slide_layouts[1])
    s2.shapes.title.text = "Respiration"
    buf = io.BytesIO()
    prs.save(buf)
    return buf.getvalue()


@pytest.fixture
def docx_bytes() -> bytes:
    from docx import Document as DocxDocument

    doc = DocxDocument()
    doc.add_heading("Chapter 3", level=1)
    doc.add_paragraph("Cells are the basic unit of life.")
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


@pytest.fixture
def deck() -> Deck:
    return Deck(
        presentation_title="Bio 101: Ch. 3!",
        theme=Theme.DARK,
        slides=[
            Slide(title="Cells", bullets=["Basic unit of life", "Have membranes"]),
            Slide(title="Organelles", bullets=["Nucleus", "Mitochondria"], speaker_notes="Mention the powerhouse joke."),
            Slide(title="Summary", bullets=[]),
        ],
    )
