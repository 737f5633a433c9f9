# src/slidemaker/kernel/ops/extract.py
from __future__ import annotations

import io
from functools import partial
from typing import Callable, Dict, Iterator, List, Mapping, Optional

import mammoth
from pdfminer.high_level import extract_text as pdf_extract_text
from pptx import Presentation
from pptx.enum.shapes import MSO_SHAPE_TYPE

from slidemaker.core.logging import get_logger
from slidemaker.core.metrics import EXTRACTIONS

from ..errors import ExtractionFailure
from ..models import Document, ExtractedText, FormatTag
from ..office.lo_export import convert_bytes

log = get_logger(__name__)

Decoder = Callable[[bytes], str]


# ---------- decoders ----------

def decode_pdf(data: bytes) -> str:
    # Image-only PDFs have no text layer; pdfminer returns "" for them
    return pdf_extract_text(io.BytesIO(data)) or ""


def decode_docx(data: bytes) -> str:
    result = mammoth.extract_raw_text(io.BytesIO(data))
    return result.value or ""


def _shape_texts(shapes) -> Iterator[str]:
    for shape in shapes:
        if shape.shape_type == MSO_SHAPE_TYPE.GROUP:
            yield from _shape_texts(shape.shapes)
            continue
        if shape.has_text_frame:
            txt = (shape.text_frame.text or "").strip()
            if txt:
                yield txt
        elif getattr(shape, "has_table", False) and shape.has_table:
            for row in shape.table.rows:
                cells = [c.text.strip() for c in row.cells if c.text.strip()]
                if cells:
                    yield " | ".join(cells)


def decode_pptx(data: bytes) -> str:
    prs = Presentation(io.BytesIO(data))
    slides: List[str] = []
    for slide in prs.slides:
        parts = list(_shape_texts(slide.shapes))
        if parts:
            slides.append("\n".join(parts))
    return "\n\n".join(slides)


def decode_legacy_presentation(data: bytes, suffix: str,
                               soffice_bin: Optional[str] = None, timeout_s: int = 90) -> str:
    pptx_bytes = convert_bytes(data, suffix, target="pptx", soffice_bin=soffice_bin, timeout_s=timeout_s)
    return decode_pptx(pptx_bytes)


def decode_plain(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def default_decoders(soffice_bin: Optional[str] = None, timeout_s: int = 90) -> Dict[FormatTag, Decoder]:
    return {
        FormatTag.PDF: decode_pdf,
        FormatTag.DOCX: decode_docx,
        FormatTag.PPTX: decode_pptx,
        FormatTag.PPT: partial(decode_legacy_presentation, suffix=".ppt",
                               soffice_bin=soffice_bin, timeout_s=timeout_s),
        FormatTag.ODP: partial(decode_legacy_presentation, suffix=".odp",
                               soffice_bin=soffice_bin, timeout_s=timeout_s),
        FormatTag.PLAIN: decode_plain,
    }


# ---------- op ----------

def extract(document: Document, tag: FormatTag,
            decoders: Optional[Mapping[FormatTag, Decoder]] = None) -> ExtractedText:
    """
    Run the decoder for `tag` over the document bytes.

    Any decoder fault becomes ExtractionFailure; no partial text is returned.
    """
    table = decoders if decoders is not None else default_decoders()
    decoder = table.get(tag)
    if decoder is None:
        raise ExtractionFailure(format=tag.value, detail=f"No decoder registered for {tag.value}")

    try:
        text = decoder(document.data)
    except Exception as e:
        log.warning("extract failed format=%s error=%s", tag.value, type(e).__name__)
        EXTRACTIONS.labels(tag.value, "error").inc()
        raise ExtractionFailure(format=tag.value, cause=e) from e

    text = (text or "").strip()
    EXTRACTIONS.labels(tag.value, "ok" if text else "empty").inc()
    log.info("extracted format=%s chars=%d", tag.value, len(text))
    return ExtractedText(text=text, source_format=tag.source_format)
