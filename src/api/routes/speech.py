# src/api/routes/speech.py

"""Standalone transcription and text-to-speech endpoints."""

import asyncio
import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from src.api.dependencies import get_transcription_provider, get_tts_provider
from src.api.schemas import AudioBody, TTSBody
from src.providers.base import (
    ProviderError,
    TranscriptionProvider,
    TTSProvider,
)

logger = logging.getLogger("food_finder.api.speech")
router = APIRouter()


@router.post("/transcribe")
async def transcribe(
    body: AudioBody,
    provider: TranscriptionProvider = Depends(get_transcription_provider),
) -> dict[str, Any]:
    if not body.audio:
        raise HTTPException(status_code=400, detail="Audio data is required")
    try:
        result = await asyncio.to_thread(
            provider.transcribe, body.audio, body.mime_type
        )
    except ProviderError as exc:
        logger.error("Transcription error: %s", exc)
        raise HTTPException(
            status_code=500,
            detail={"error": "Transcription failed", "details": str(exc)},
        ) from exc
    logger.info("Transcription (%s): %s", result.language, result.text)
    return {"text": result.text, "language": result.language}


@router.post("/tts")
async def tts(
    body: TTSBody,
    provider: TTSProvider = Depends(get_tts_provider),
) -> dict[str, Any]:
    """Synthesize speech; returns base64 audio for direct playback."""
    if not body.text:
        raise HTTPException(status_code=400, detail="Text is required")
    clip = await asyncio.to_thread(
        provider.synthesize, body.text, body.voice_id
    )
    if clip is None:
        raise HTTPException(
            status_code=502,
            detail={
                "error": "Text-to-speech failed",
                "details": f"{provider.name} provider returned no audio",
            },
        )
    return {"audio": clip.data, "contentType": clip.content_type}


@router.get("/tts/voices")
async def voices(
    provider: TTSProvider = Depends(get_tts_provider),
) -> list[dict[str, str]]:
    return [asdict(v) for v in provider.voices]
