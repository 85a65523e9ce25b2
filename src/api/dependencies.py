# src/api/dependencies.py

"""Per-app service accessors for route ``Depends``."""

from fastapi import Request

from src.providers.base import ChatProvider, TranscriptionProvider, TTSProvider
from src.services.chat_service import ChatService
from src.services.search_orchestrator import SearchOrchestrator
from src.services.translator import Translator


def get_orchestrator(request: Request) -> SearchOrchestrator:
    orchestrator: SearchOrchestrator = request.app.state.orchestrator
    return orchestrator


def get_chat_service(request: Request) -> ChatService:
    service: ChatService = request.app.state.chat_service
    return service


def get_chat_provider(request: Request) -> ChatProvider:
    provider: ChatProvider = request.app.state.chat_provider
    return provider


def get_tts_provider(request: Request) -> TTSProvider:
    provider: TTSProvider = request.app.state.tts_provider
    return provider


def get_transcription_provider(request: Request) -> TranscriptionProvider:
    provider: TranscriptionProvider = request.app.state.transcription_provider
    return provider


def get_translator(request: Request) -> Translator:
    translator: Translator = request.app.state.translator
    return translator
