# src/slidemaker/kernel/ops/dispatch.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Dict, Optional, Union

from ..models import FormatTag

MIME_FORMATS: Dict[str, FormatTag] = {
    "application/pdf": FormatTag.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": FormatTag.DOCX,
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": FormatTag.PPTX,
    "application/vnd.ms-powerpoint": FormatTag.PPT,
    "application/vnd.oasis.opendocument.presentation": FormatTag.ODP,
    "text/plain": FormatTag.PLAIN,
}

EXTENSION_FORMATS: Dict[str, FormatTag] = {
    ".pdf": FormatTag.PDF,
    ".docx": FormatTag.DOCX,
    ".pptx": FormatTag.PPTX,
    ".ppt": FormatTag.PPT,
    ".odp": FormatTag.ODP,
    ".txt": FormatTag.PLAIN,
}

# MIME values that carry no format information; the extension decides
GENERIC_MIME = {
    "",
    "application/octet-stream",
    "binary/octet-stream",
    "application/unknown",
}


@dataclass(frozen=True)
class Unsupported:
    mime_type: Optional[str]
    extension: Optional[str]


def _normalize_mime(mime_type: Optional[str]) -> str:
    return (mime_type or "").split(";")[0].strip().lower()


def classify(mime_type: Optional[str], file_name: Optional[str]) -> Union[FormatTag, Unsupported]:
    """
    Pick the extraction strategy for an upload.

    An exact MIME match wins. The extension is only consulted when the
    declared MIME type is absent or generic; file content is never sniffed.
    """
    mime = _normalize_mime(mime_type)
    if mime in MIME_FORMATS:
        return MIME_FORMATS[mime]

    ext = PurePath(file_name or "").suffix.lower()
    if mime in GENERIC_MIME and ext in EXTENSION_FORMATS:
        return EXTENSION_FORMATS[ext]

    return Unsupported(mime_type=mime or None, extension=ext or None)
