# src/providers/transcription.py

"""Speech-to-text providers."""

import base64
import binascii
import json
import re

from curl_cffi import CurlMime

from src.config.settings import Settings
from src.providers.base import (
    HTTPProviderMixin,
    ProviderError,
    TranscriptionResult,
    audio_extension,
)
from src.providers.tts import _first_part

# Whisper on Groq misdetects Gulf Arabic as Persian/Urdu and friends
GROQ_LANGUAGE_MAP: dict[str, str] = {
    "ar": "ar", "fa": "ar", "ur": "ar", "ps": "ar", "sd": "ar", "ku": "ar",
    "en": "en", "fr": "fr", "es": "es", "de": "de", "it": "it",
    "pt": "pt", "ru": "ru", "zh": "zh", "ja": "ja", "ko": "ko",
    "tr": "tr", "nl": "nl", "hi": "hi", "id": "id", "ms": "ms", "th": "th",
}


def _decode_audio(audio_base64: str, provider: str) -> bytes:
    try:
        return base64.b64decode(audio_base64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ProviderError(provider, "Audio is not valid base64") from exc


class WhisperTranscriptionProvider(HTTPProviderMixin):
    """Whisper ``/audio/transcriptions`` (OpenAI or Groq)."""

    def __init__(
        self,
        name: str,
        url: str,
        api_key: str,
        env_var: str,
        model: str,
        language_map: dict[str, str] | None = None,
    ) -> None:
        self.name = name
        super().__init__(api_key, env_var)
        self.url = url
        self.model = model
        self.language_map = language_map

    def _normalize_language(self, detected: str) -> str:
        if self.language_map is None:
            return detected
        language = self.language_map.get(detected, "en")
        if language != detected:
            self.logger.info(
                "[%s] Corrected language '%s' -> '%s'",
                self.name,
                detected,
                language,
            )
        return language

    def transcribe(
        self,
        audio_base64: str,
        mime_type: str = "audio/webm",
        language_hint: str | None = None,
    ) -> TranscriptionResult:
        """Transcribe base64 audio; raises :class:`ProviderError`."""
        self._require_key()
        audio = _decode_audio(audio_base64, self.name)

        form = CurlMime()
        try:
            form.addpart(
                name="file",
                content_type=mime_type,
                filename=f"audio.{audio_extension(mime_type)}",
                data=audio,
            )
            form.addpart(name="model", data=self.model.encode())
            form.addpart(name="response_format", data=b"verbose_json")
            if language_hint:
                form.addpart(name="language", data=language_hint.encode())

            resp = self._send(
                self.url,
                {"Authorization": f"Bearer {self.api_key}"},
                multipart=form,
            )
        finally:
            form.close()

        try:
            data = json.loads(resp.text)
        except ValueError as exc:
            raise ProviderError(self.name, "Malformed JSON response") from exc
        return TranscriptionResult(
            text=str(data.get("text") or ""),
            language=self._normalize_language(
                str(data.get("language") or "en")
            ),
        )


class GeminiTranscriptionProvider(HTTPProviderMixin):
    """Gemini generateContent with inline audio input."""

    name = "gemini"
    API_URL = (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-2.0-flash:generateContent"
    )
    PROMPT = (
        'Transcribe this audio. Return JSON: {"text":"transcription",'
        '"language":"ISO 639-1 code"}. Nothing else.'
    )

    def __init__(self, api_key: str | None = None) -> None:
        super().__init__(
            Settings.GEMINI_API_KEY if api_key is None else api_key,
            "GEMINI_API_KEY",
        )

    def transcribe(
        self,
        audio_base64: str,
        mime_type: str = "audio/webm",
        language_hint: str | None = None,
    ) -> TranscriptionResult:
        self._require_key()
        data = self._post_json(
            self.API_URL,
            {
                "Content-Type": "application/json",
                "x-goog-api-key": self.api_key,
            },
            {
                "contents": [{
                    "parts": [
                        {"text": self.PROMPT},
                        {
                            "inlineData": {
                                "mimeType": mime_type,
                                "data": audio_base64,
                            },
                        },
                    ],
                }],
            },
        )
        raw = str(_first_part(data).get("text") or "").strip()
        # The model sometimes wraps its JSON in a markdown fence
        cleaned = re.sub(r"^```(?:json)?\s*|\s*```$", "", raw)
        try:
            parsed = json.loads(cleaned)
        except ValueError:
            return TranscriptionResult(text=raw, language="en")
        if not isinstance(parsed, dict):
            return TranscriptionResult(text=raw, language="en")
        return TranscriptionResult(
            text=str(parsed.get("text") or raw),
            language=str(parsed.get("language") or "en"),
        )


def openai_transcription_provider() -> WhisperTranscriptionProvider:
    """OpenAI whisper-1: reliable language detection."""
    return WhisperTranscriptionProvider(
        name="openai",
        url="https://api.openai.com/v1/audio/transcriptions",
        api_key=Settings.OPENAI_API_KEY,
        env_var="OPENAI_API_KEY",
        model="whisper-1",
    )


def groq_transcription_provider() -> WhisperTranscriptionProvider:
    """Groq whisper-large-v3-turbo with language correction."""
    return WhisperTranscriptionProvider(
        name="groq",
        url="https://api.groq.com/openai/v1/audio/transcriptions",
        api_key=Settings.GROQ_API_KEY,
        env_var="GROQ_API_KEY",
        model="whisper-large-v3-turbo",
        language_map=GROQ_LANGUAGE_MAP,
    )
