# src/api/routes/chat.py

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from src.api.dependencies import get_chat_service
from src.api.schemas import AudioBody, ChatBody, ChatStartBody
from src.providers.base import ProviderError
from src.services.chat_service import ChatService

logger = logging.getLogger("food_finder.api.chat")
router = APIRouter(prefix="/chat")


def _failed(message: str, exc: Exception) -> HTTPException:
    logger.error("%s: %s", message, exc, exc_info=True)
    return HTTPException(
        status_code=500, detail={"error": message, "details": str(exc)}
    )


@router.post("")
async def chat(
    body: ChatBody,
    service: ChatService = Depends(get_chat_service),
) -> dict[str, Any]:
    """Text in, structured reply plus optional audio out."""
    if not body.message:
        raise HTTPException(status_code=400, detail="Message is required")
    try:
        reply: dict[str, Any] = await asyncio.to_thread(
            service.send_message,
            body.message,
            body.session_id,
            body.language,
            body.generate_audio,
        )
    except ProviderError as exc:
        raise _failed("Chat failed", exc) from exc
    return reply


@router.post("/start")
async def start(
    body: ChatStartBody,
    service: ChatService = Depends(get_chat_service),
) -> dict[str, Any]:
    result: dict[str, Any] = await asyncio.to_thread(
        service.start, body.session_id, body.language, body.generate_audio
    )
    return result


@router.post("/audio")
async def audio(
    body: AudioBody,
    service: ChatService = Depends(get_chat_service),
) -> dict[str, Any]:
    """Transcribe base64 audio and answer in the detected language."""
    if not body.audio:
        raise HTTPException(status_code=400, detail="Audio data is required")
    try:
        reply: dict[str, Any] = await asyncio.to_thread(
            service.send_audio, body.audio, body.mime_type, body.session_id
        )
    except ProviderError as exc:
        raise _failed("Audio chat failed", exc) from exc
    return reply


@router.get("/history/{session_id}")
async def history(
    session_id: str,
    service: ChatService = Depends(get_chat_service),
) -> dict[str, Any]:
    result = service.history(session_id)
    if result is None:
        raise HTTPException(
            status_code=404, detail="Conversation not found"
        )
    return result


@router.delete("/{session_id}")
async def clear(
    session_id: str,
    service: ChatService = Depends(get_chat_service),
) -> dict[str, Any]:
    service.clear(session_id)
    return {"success": True, "message": "Conversation cleared"}
