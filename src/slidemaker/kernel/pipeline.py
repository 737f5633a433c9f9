# src/slidemaker/kernel/pipeline.py
from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Tuple

from slidemaker.core.ctx import set_ctx
from slidemaker.core.logging import get_logger

from slidemaker.core.metrics import DECKS_GENERATED

from .errors import ProblemDetails, SynthesisFailure, UnsupportedFormat
from .history import DeckHistory
from .models import Deck, Document, ExtractedText, FormatTag, HistoryEntry, Theme
from .ops.assemble import assemble
from .ops.dispatch import Unsupported, classify
from .ops.encode import MEDIA_TYPE, encode
from .ops.extract import Decoder, extract
from .ops.validate import validate

log = get_logger(__name__)

# (content, policy) -> raw response text
Synthesize = Callable[[str, object], str]


@dataclass(frozen=True)
class ExportResult:
    data: bytes
    file_name: str
    media_type: str = MEDIA_TYPE


# ---------- upload ----------

def ingest(document: Document, decoders: Optional[Mapping[FormatTag, Decoder]] = None) -> ExtractedText:
    set_ctx(file_name=document.file_name or None)
    tag = classify(document.mime_type, document.file_name)
    if isinstance(tag, Unsupported):
        log.info("rejected upload mime=%s ext=%s", tag.mime_type, tag.extension)
        raise UnsupportedFormat(mime_type=tag.mime_type, extension=tag.extension)
    return extract(document, tag, decoders=decoders)


class ContentBuffer:
    """
    User-owned text accumulated across uploads, each block headed by a
    provenance separator naming its source file.

    Blocks land in completion order by default. With ordered=True they are
    kept in submission order instead, using the sequence number handed out
    by submit().
    """

    def __init__(self, text: str = "", ordered: bool = False):
        self.ordered = ordered
        self._head = text
        self._seq = itertools.count(1)
        self._blocks: List[Tuple[int, str, str]] = []
        self._lock = threading.Lock()

    def submit(self) -> int:
        with self._lock:
            return next(self._seq)

    def append(self, file_name: str, text: str, seq: Optional[int] = None) -> None:
        with self._lock:
            if seq is None:
                seq = next(self._seq)
            self._blocks.append((seq, file_name, text))
            if self.ordered:
                self._blocks.sort(key=lambda b: b[0])

    @staticmethod
    def separator(file_name: str) -> str:
        return f"--- {file_name} ---"

    @property
    def text(self) -> str:
        with self._lock:
            parts = [self._head] if self._head.strip() else []
            for _seq, name, body in self._blocks:
                parts.append(f"{self.separator(name)}\n\n{body}")
        return "\n\n".join(parts)


# ---------- generation ----------

def generate_deck(
    content: str,
    synthesize: Synthesize,
    *,
    title: str = "",
    theme: Theme = Theme.DARK,
    policy: object = None,
) -> Deck:
    """
    content -> synthesis -> validated slides -> Deck.
    Provider faults surface as SynthesisFailure, a broken response as
    SynthesisEnvelopeInvalid, and a deck with nothing left as EmptyDeck.
    """
    try:
        raw = synthesize(content, policy)
    except ProblemDetails as e:
        DECKS_GENERATED.labels(e.code or "error").inc()
        raise
    except Exception as e:
        log.warning("synthesis failed error=%s", type(e).__name__)
        DECKS_GENERATED.labels(SynthesisFailure.code).inc()
        raise SynthesisFailure() from e

    try:
        slides = validate(raw)
        deck = Deck(presentation_title=title, theme=theme, slides=slides)
    except ProblemDetails as e:
        DECKS_GENERATED.labels(e.code or "error").inc()
        raise
    DECKS_GENERATED.labels("ok").inc()
    log.info("generated deck slides=%d theme=%s", len(deck.slides), deck.theme.value)
    return deck


def generate_and_record(
    content: str,
    synthesize: Synthesize,
    history: DeckHistory,
    **kwargs,
) -> Tuple[Deck, HistoryEntry]:
    """generate_deck, then record the deck; failed generations leave history untouched."""
    deck = generate_deck(content, synthesize, **kwargs)
    entry = history.record(deck)
    set_ctx(deck_id=entry.id)
    return deck, entry


def export_deck(deck: Deck, product_name: str = "SlideMaker") -> ExportResult:
    plan = assemble(deck, product_name=product_name)
    data, name = encode(plan, deck.presentation_title, product_name=product_name)
    return ExportResult(data=data, file_name=name)
