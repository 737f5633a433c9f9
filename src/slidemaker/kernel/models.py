from __future__ import annotations

import datetime as dt
import uuid
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import EmptyDeck


class SourceFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    PRESENTATION = "presentation"
    PLAIN = "plain"


class FormatTag(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    PPTX = "pptx"
    PPT = "ppt"
    ODP = "odp"
    PLAIN = "txt"

    @property
    def source_format(self) -> SourceFormat:
        if self in (FormatTag.PPTX, FormatTag.PPT, FormatTag.ODP):
            return SourceFormat.PRESENTATION
        if self is FormatTag.PDF:
            return SourceFormat.PDF
        if self is FormatTag.DOCX:
            return SourceFormat.DOCX
        return SourceFormat.PLAIN


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"


class Document(BaseModel):
    """An uploaded file as received; never mutated."""
    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: Optional[str] = None
    file_name: str = ""


class ExtractedText(BaseModel):
    text: str
    source_format: SourceFormat


class Slide(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    bullets: List[str] = Field(default_factory=list)
    speaker_notes: str = Field(default="", alias="speakerNotes")


class Deck(BaseModel):
    presentation_title: str = ""
    theme: Theme = Theme.DARK
    slides: List[Slide]

    @model_validator(mode="after")
    def _require_slides(self) -> "Deck":
        # EmptyDeck is not a ValueError, so pydantic lets it through unwrapped
        if not self.slides:
            raise EmptyDeck()
        return self


class HistoryEntry(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str
    created_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))
    theme: Theme = Theme.DARK
    slides: List[Slide]
