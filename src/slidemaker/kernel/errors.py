from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class ProblemDetails(Exception):
    type: str = "about:blank"
    title: str = "Operation failed"
    detail: str = ""
    status: int = 400
    op: Optional[str] = None
    code: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "type": self.type,
            "title": self.title,
            "detail": self.detail,
            "status": self.status,
        }
        if self.op is not None:
            data["op"] = self.op
        if self.code is not None:
            data["code"] = self.code
        if self.meta is not None:
            data["meta"] = self.meta
        return data

    def __str__(self) -> str:
        return f"{self.title} ({self.code or ''}): {self.detail}"


ACCEPTED_FORMATS = "PDF, Word (.docx), PowerPoint (.pptx, .ppt), OpenDocument presentation (.odp) or plain text (.txt)"


@dataclass
class UnsupportedFormat(ProblemDetails):
    title: str = "Unsupported file type"
    status: int = 415
    op: Optional[str] = "dispatch.classify"
    code: Optional[str] = "E_UNSUPPORTED_FORMAT"
    mime_type: Optional[str] = None
    extension: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.detail:
            rejected = self.mime_type or self.extension or "unknown"
            self.detail = f"'{rejected}' is not supported. Upload a {ACCEPTED_FORMATS} file."


@dataclass
class ExtractionFailure(ProblemDetails):
    title: str = "Could not read document"
    status: int = 422
    op: Optional[str] = "extract"
    code: Optional[str] = "E_EXTRACTION"
    format: Optional[str] = None
    cause: Optional[BaseException] = None

    def __post_init__(self) -> None:
        if not self.detail:
            self.detail = f"The {self.format or 'document'} file could not be decoded."


@dataclass
class SynthesisEnvelopeInvalid(ProblemDetails):
    title: str = "Invalid slide data"
    detail: str = "Failed to parse slide data from the AI response. Please try generating again."
    status: int = 502
    op: Optional[str] = "validate"
    code: Optional[str] = "E_SYNTHESIS_ENVELOPE"


@dataclass
class SynthesisUnavailable(ProblemDetails):
    title: str = "Slide generation unavailable"
    detail: str = "An API key is required for slide generation. Please add it in settings."
    status: int = 401
    op: Optional[str] = "synthesize"
    code: Optional[str] = "E_SYNTHESIS_UNAVAILABLE"


@dataclass
class EmptyDeck(ProblemDetails):
    title: str = "No slides generated"
    detail: str = "No slides could be generated from this content. Try adding more text."
    status: int = 422
    op: Optional[str] = "assemble"
    code: Optional[str] = "E_EMPTY_DECK"


@dataclass
class EncodingFailure(ProblemDetails):
    title: str = "Error generating PowerPoint"
    detail: str = "The presentation file could not be generated."
    status: int = 500
    op: Optional[str] = "encode"
    code: Optional[str] = "E_ENCODING"


@dataclass
class SynthesisFailure(ProblemDetails):
    title: str = "Slide generation failed"
    detail: str = "The AI provider could not complete the request. Please try again."
    status: int = 502
    op: Optional[str] = "synthesize"
    code: Optional[str] = "E_SYNTHESIS"
