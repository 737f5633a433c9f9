# src/slidemaker/api/deps.py
from __future__ import annotations

from typing import Callable, Optional

from fastapi import Request

from slidemaker.core.config import Settings
from slidemaker.kernel.history import DeckHistory
from slidemaker.kernel.pipeline import Synthesize

SynthesizerFactory = Callable[[Optional[str]], Synthesize]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_history(request: Request) -> DeckHistory:
    return request.app.state.history


def get_synthesizer_factory(request: Request) -> SynthesizerFactory:
    return request.app.state.synthesizer_factory
