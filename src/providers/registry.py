# src/providers/registry.py

"""Configuration-driven provider selection."""

import logging
from collections.abc import Callable

from src.config.settings import Settings
from src.providers.base import (
    ChatProvider,
    TranscriptionProvider,
    TTSProvider,
)
from src.providers.chat import groq_chat_provider, openai_chat_provider
from src.providers.transcription import (
    GeminiTranscriptionProvider,
    groq_transcription_provider,
    openai_transcription_provider,
)
from src.providers.tts import (
    ElevenLabsTTSProvider,
    GeminiTTSProvider,
    groq_tts_provider,
    openai_tts_provider,
)

logger = logging.getLogger("food_finder.providers")

CHAT_PROVIDERS: dict[str, Callable[[], ChatProvider]] = {
    "groq": groq_chat_provider,
    "openai": openai_chat_provider,
}

TTS_PROVIDERS: dict[str, Callable[[], TTSProvider]] = {
    "elevenlabs": ElevenLabsTTSProvider,
    "openai": openai_tts_provider,
    "groq": groq_tts_provider,
    "gemini": GeminiTTSProvider,
}

TRANSCRIPTION_PROVIDERS: dict[str, Callable[[], TranscriptionProvider]] = {
    "openai": openai_transcription_provider,
    "groq": groq_transcription_provider,
    "gemini": GeminiTranscriptionProvider,
}


def _build(kind: str, factories: dict[str, Callable[[], object]],
           name: str) -> object:
    key = name.strip().lower()
    factory = factories.get(key)
    if factory is None:
        raise ValueError(
            f"Unknown {kind} provider '{name}'. "
            f"Choose from: {', '.join(sorted(factories))}"
        )
    logger.info("Using %s provider: %s", kind, key)
    return factory()


def build_chat_provider(name: str | None = None) -> ChatProvider:
    """Chat provider named by *name* or ``CHAT_PROVIDER``."""
    provider: ChatProvider = _build(  # type: ignore[assignment]
        "chat", CHAT_PROVIDERS, name or Settings.CHAT_PROVIDER
    )
    return provider


def build_tts_provider(name: str | None = None) -> TTSProvider:
    provider: TTSProvider = _build(  # type: ignore[assignment]
        "tts", TTS_PROVIDERS, name or Settings.TTS_PROVIDER
    )
    return provider


def build_transcription_provider(
    name: str | None = None,
) -> TranscriptionProvider:
    provider: TranscriptionProvider = _build(  # type: ignore[assignment]
        "transcription",
        TRANSCRIPTION_PROVIDERS,
        name or Settings.TRANSCRIPTION_PROVIDER,
    )
    return provider
