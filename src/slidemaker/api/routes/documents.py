# src/slidemaker/api/routes/documents.py
from __future__ import annotations

import asyncio
from typing import Any, Dict

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from slidemaker.api.deps import get_settings
from slidemaker.core.config import Settings
from slidemaker.core.logging import get_logger
from slidemaker.kernel.models import Document
from slidemaker.kernel.ops.extract import default_decoders
from slidemaker.kernel.pipeline import ingest

router = APIRouter()
log = get_logger(__name__)


@router.post("/api/extract-text")
async def extract_text(
    file: UploadFile = File(..., description="PDF, DOCX, PPTX, PPT, ODP or TXT"),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Pull plain text out of one uploaded document.
    {"text": "...", "sourceFormat": "pdf|docx|presentation|plain", "fileName": "..."}
    """
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File too large")

    doc = Document(data=data, mime_type=file.content_type, file_name=file.filename or "")
    decoders = default_decoders(soffice_bin=settings.SOFFICE_BIN, timeout_s=settings.SOFFICE_TIMEOUT_S)

    # decoders are blocking; keep them off the event loop
    extracted = await asyncio.to_thread(ingest, doc, decoders)
    return {
        "text": extracted.text,
        "sourceFormat": extracted.source_format.value,
        "fileName": doc.file_name,
    }
