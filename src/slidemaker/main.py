# src/slidemaker/main.py
from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from slidemaker import __version__
from slidemaker.api.deps import SynthesizerFactory
from slidemaker.api.routes.documents import router as documents_router
from slidemaker.api.routes.history import router as history_router
from slidemaker.api.routes.slides import router as slides_router
from slidemaker.core.config import Settings, settings as default_settings
from slidemaker.core.ctx import set_ctx
from slidemaker.core.logging import get_logger
from slidemaker.core.metrics import MetricsMiddleware, metrics_app
from slidemaker.kernel.errors import ProblemDetails
from slidemaker.kernel.history import DeckHistory
from slidemaker.services.synthesis import ChatSynthesizer

log = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    history: Optional[DeckHistory] = None,
    synthesizer_factory: Optional[SynthesizerFactory] = None,
) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(title=settings.APP_NAME, version=__version__)
    app.state.settings = settings
    app.state.history = history or DeckHistory(capacity=settings.HISTORY_CAPACITY)
    app.state.synthesizer_factory = synthesizer_factory or (
        lambda api_key: ChatSynthesizer(settings, api_key=api_key)
    )

    # ---- Middlewares (order matters) ----
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def _request_ctx(request: Request, call_next):
        set_ctx(request_id=request.headers.get("x-request-id") or None)
        return await call_next(request)

    @app.exception_handler(ProblemDetails)
    async def _problem(request: Request, exc: ProblemDetails):
        # one message per failure category; causes stay in the logs
        log.warning("request failed code=%s status=%s", exc.code, exc.status)
        return JSONResponse(
            {"error": exc.detail, "title": exc.title, "code": exc.code},
            status_code=exc.status,
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    # Prometheus metrics
    app.mount("/metrics", metrics_app)

    @app.get("/health")
    async def health():
        return JSONResponse({"ok": True, "env": settings.ENV})

    app.include_router(documents_router)
    app.include_router(slides_router)
    app.include_router(history_router)
    return app


app = create_app()
