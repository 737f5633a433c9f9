# src/slidemaker/api/routes/slides.py
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, ConfigDict, Field

from slidemaker.api.deps import SynthesizerFactory, get_history, get_settings, get_synthesizer_factory
from slidemaker.core.config import Settings
from slidemaker.kernel.history import DeckHistory
from slidemaker.kernel.models import Deck, Slide, Theme
from slidemaker.kernel.pipeline import export_deck, generate_and_record
from slidemaker.services.synthesis import SynthesisPolicy

router = APIRouter()


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str = ""
    presentation_title: str = Field(default="", alias="presentationTitle")
    theme: Optional[Theme] = None
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    policy: SynthesisPolicy = Field(default_factory=SynthesisPolicy)


class DownloadRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    slides: List[Slide] = Field(default_factory=list)
    presentation_title: str = Field(default="", alias="presentationTitle")
    theme: Optional[Theme] = None


def _theme(requested: Optional[Theme], settings: Settings) -> Theme:
    return requested or Theme(settings.DEFAULT_THEME)


@router.post("/api/generate-slides")
async def generate_slides(
    body: GenerateRequest,
    settings: Settings = Depends(get_settings),
    history: DeckHistory = Depends(get_history),
    synthesizer_factory: SynthesizerFactory = Depends(get_synthesizer_factory),
) -> Dict[str, Any]:
    if not body.content.strip():
        raise HTTPException(status_code=400, detail="Missing required field: content")

    synthesize = synthesizer_factory(body.api_key)
    deck, entry = await asyncio.to_thread(
        generate_and_record,
        body.content,
        synthesize,
        history,
        title=body.presentation_title,
        theme=_theme(body.theme, settings),
        policy=body.policy,
    )
    return {
        "id": entry.id,
        "slides": [s.model_dump(by_alias=True) for s in deck.slides],
    }


@router.post("/api/download-pptx")
async def download_pptx(
    body: DownloadRequest,
    settings: Settings = Depends(get_settings),
) -> Response:
    if not body.slides:
        raise HTTPException(status_code=400, detail="Missing or invalid slides data")

    deck = Deck(
        presentation_title=body.presentation_title,
        theme=_theme(body.theme, settings),
        slides=body.slides,
    )
    result = await asyncio.to_thread(export_deck, deck, settings.PRODUCT_NAME)
    return Response(
        content=result.data,
        media_type=result.media_type,
        headers={"Content-Disposition": f'attachment; filename="{result.file_name}"'},
    )
