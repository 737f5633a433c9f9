# src/slidemaker/kernel/ops/validate.py
from __future__ import annotations

import json
import re
from typing import Any, Callable, List, Tuple

from slidemaker.core.logging import get_logger
from slidemaker.core.metrics import SLIDES_REPAIRED

from ..errors import SynthesisEnvelopeInvalid
from ..models import Slide

log = get_logger(__name__)

_FENCE_OPEN = re.compile(r"^```[\w-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```$")


def strip_code_fence(raw: str) -> str:
    """Remove a leading ```lang / trailing ``` pair if the model wrapped its answer."""
    text = (raw or "").strip()
    text = _FENCE_OPEN.sub("", text, count=1)
    text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


# ---------- field coercion ----------

def _title(value: Any, index: int) -> str:
    if isinstance(value, str) and value:
        return value
    return f"Slide {index}"


def _bullets(value: Any, index: int) -> List[str]:
    if not isinstance(value, list):
        return []
    return [b for b in value if isinstance(b, str)]


def _notes(value: Any, index: int) -> str:
    return value if isinstance(value, str) else ""


# (candidate key, model field, coercion); each coercion gets the 1-based slide index
FIELD_COERCIONS: Tuple[Tuple[str, str, Callable[[Any, int], Any]], ...] = (
    ("title", "title", _title),
    ("bullets", "bullets", _bullets),
    ("speakerNotes", "speaker_notes", _notes),
)


def repair_candidate(candidate: Any, index: int) -> Slide:
    """Coerce one untrusted candidate into a Slide. Never raises."""
    fields = candidate if isinstance(candidate, dict) else {}
    values = {name: coerce(fields.get(key), index) for key, name, coerce in FIELD_COERCIONS}
    if values != {name: fields.get(key) for key, name, _ in FIELD_COERCIONS}:
        SLIDES_REPAIRED.inc()
    return Slide(**values)


def validate(raw: str) -> List[Slide]:
    """
    Parse a synthesis response into slides.

    Only a broken envelope is fatal (not JSON, or not a top-level array).
    Field-level problems are repaired per slide and never surface.
    """
    text = strip_code_fence(raw)
    try:
        candidates = json.loads(text)
    except (TypeError, ValueError) as e:
        log.warning("synthesis response is not JSON (%d chars)", len(text))
        raise SynthesisEnvelopeInvalid(meta={"reason": "not_json"}) from e

    if not isinstance(candidates, list):
        log.warning("synthesis response top level is %s, expected array", type(candidates).__name__)
        raise SynthesisEnvelopeInvalid(meta={"reason": "not_array"})

    slides = [repair_candidate(c, i) for i, c in enumerate(candidates, start=1)]
    log.info("validated slides=%d", len(slides))
    return slides
