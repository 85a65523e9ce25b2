# src/api/app.py

"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from src.api.routes import chat, search, speech, translate, voice
from src.config.logging_config import setup_logging
from src.providers.base import (
    ChatProvider,
    TranscriptionProvider,
    TTSProvider,
)
from src.providers.registry import (
    build_chat_provider,
    build_transcription_provider,
    build_tts_provider,
)
from src.services.chat_service import ChatService
from src.services.search_orchestrator import SearchOrchestrator
from src.services.translator import Translator
from src.storage.session_store import SessionStore

logger = logging.getLogger("food_finder.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    log_file = setup_logging()
    logger.info("Starting Food Finder API (log file: %s)", log_file)
    yield
    evicted = app.state.store.evict_expired()
    logger.info("Shutting down Food Finder API (%d idle sessions)", evicted)


async def http_exception_handler(
    request: Request, exc: HTTPException,
) -> JSONResponse:
    """Render errors as ``{"error": ...}`` bodies."""
    content = (
        exc.detail if isinstance(exc.detail, dict)
        else {"error": exc.detail}
    )
    return JSONResponse(status_code=exc.status_code, content=content)


async def global_exception_handler(
    request: Request, exc: Exception,
) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500, content={"error": "Internal server error"}
    )


def create_app(
    orchestrator: SearchOrchestrator | None = None,
    chat_provider: ChatProvider | None = None,
    tts_provider: TTSProvider | None = None,
    transcription_provider: TranscriptionProvider | None = None,
    store: SessionStore | None = None,
) -> FastAPI:
    """Build the app; collaborators default to the configured providers."""
    app = FastAPI(
        title="Food Finder API",
        description=(
            "Cross-platform food delivery search with a voice/chat "
            "front-end"
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    chat_provider = chat_provider or build_chat_provider()
    tts_provider = tts_provider or build_tts_provider()
    transcription_provider = (
        transcription_provider or build_transcription_provider()
    )
    store = store or SessionStore()

    app.state.orchestrator = orchestrator or SearchOrchestrator()
    app.state.chat_provider = chat_provider
    app.state.tts_provider = tts_provider
    app.state.transcription_provider = transcription_provider
    app.state.store = store
    app.state.translator = Translator(chat_provider)
    app.state.chat_service = ChatService(
        chat_provider, tts_provider, transcription_provider, store
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    for module in (search, chat, voice, speech, translate):
        app.include_router(module.router, prefix="/api")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": "food-finder"}

    return app
