# src/api/routes/voice.py

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from src.api.dependencies import get_chat_provider, get_translator
from src.api.schemas import VoiceBody
from src.providers.base import ChatProvider
from src.services.search_orchestrator import (
    load_scraper_class,
    resolve_sources,
)
from src.services.translator import Translator
from src.services.voice_processor import VoiceCommandProcessor

logger = logging.getLogger("food_finder.api.voice")
router = APIRouter()


@router.post("/process-voice")
async def process_voice(
    body: VoiceBody,
    chat_provider: ChatProvider = Depends(get_chat_provider),
    translator: Translator = Depends(get_translator),
) -> dict[str, Any]:
    """Extract a search query from a transcribed voice command.

    With ``validate`` set, the query is tried against the first selected
    platform and shortened until it returns results.
    """
    if not body.text:
        raise HTTPException(status_code=400, detail="Text is required")

    search = None
    if body.validate_query:
        sources = resolve_sources(body.platforms, body.region)
        if sources:
            search = load_scraper_class(sources[0]["scraper"])().search

    processor = VoiceCommandProcessor(chat_provider, translator, search)
    command = await asyncio.to_thread(
        processor.process,
        body.text,
        body.language,
        body.lat,
        body.lon,
        body.validate_query,
        body.use_ai,
    )
    return command.to_dict()
