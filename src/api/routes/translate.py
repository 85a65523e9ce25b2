# src/api/routes/translate.py

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from src.api.dependencies import get_translator
from src.api.schemas import TranslateBody
from src.services.translator import Translator

router = APIRouter(prefix="/translate")


@router.post("")
async def translate(
    body: TranslateBody,
    translator: Translator = Depends(get_translator),
) -> dict[str, Any]:
    """Named phrase (``type``) or free ``text`` in the target language."""
    if not body.text and not body.type:
        raise HTTPException(
            status_code=400, detail="Text or type is required"
        )

    translated = None
    if body.type:
        translated = await asyncio.to_thread(
            translator.phrase, body.type, body.language
        )
    if translated is None:
        translated = await asyncio.to_thread(
            translator.translate, body.text or "", body.language
        )
    return {"translated": translated, "language": body.language}


@router.get("/phrases/{language}")
async def phrases(language: str) -> dict[str, Any]:
    return {"language": language, "phrases": Translator.phrases_for(language)}


@router.get("/languages")
async def languages() -> dict[str, Any]:
    return {"languages": Translator.languages()}
