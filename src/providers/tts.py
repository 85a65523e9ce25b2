# src/providers/tts.py

"""Text-to-speech providers.

Synthesis is best-effort: a missing key or a failed call returns
``None`` so the caller can still answer in text.
"""

import base64
from typing import Any

from src.config.settings import Settings
from src.providers.base import (
    AudioClip,
    HTTPProviderMixin,
    ProviderError,
    Voice,
)


class ElevenLabsTTSProvider(HTTPProviderMixin):
    """ElevenLabs multilingual v2: best quality, especially for Arabic."""

    name = "elevenlabs"
    API_URL = "https://api.elevenlabs.io/v1/text-to-speech/{voice}"
    MODEL = "eleven_multilingual_v2"
    voices = [
        Voice("EXAVITQu4vr4xnSDxMaL", "Bella", "elevenlabs"),
        Voice("21m00Tcm4TlvDq8ikWAM", "Rachel", "elevenlabs"),
        Voice("AZnzlk1XvdvUeBnXmlld", "Domi", "elevenlabs"),
        Voice("MF3mGyEYCl7XYWbV9V6O", "Elli", "elevenlabs"),
        Voice("TxGEqnHWrfWFTfGW9XjX", "Josh", "elevenlabs"),
        Voice("pNInz6obpgDQGcFmaJgB", "Adam", "elevenlabs"),
    ]
    DEFAULT_VOICE = "EXAVITQu4vr4xnSDxMaL"

    def __init__(
        self,
        api_key: str | None = None,
        stability: float = 0.75,
        similarity_boost: float = 0.75,
    ) -> None:
        super().__init__(
            Settings.ELEVENLABS_API_KEY if api_key is None else api_key,
            "ELEVENLABS_API_KEY",
        )
        self.stability = stability
        self.similarity_boost = similarity_boost

    def synthesize(
        self, text: str, voice: str | None = None,
    ) -> AudioClip | None:
        if not self.configured:
            return None
        try:
            resp = self._send(
                self.API_URL.format(voice=voice or self.DEFAULT_VOICE),
                {
                    "Accept": "audio/mpeg",
                    "Content-Type": "application/json",
                    "xi-api-key": self.api_key,
                },
                json={
                    "text": text,
                    "model_id": self.MODEL,
                    "voice_settings": {
                        "stability": self.stability,
                        "similarity_boost": self.similarity_boost,
                        "style": 0,
                    },
                },
            )
        except ProviderError as exc:
            self.logger.error("ElevenLabs TTS error: %s", exc)
            return None
        return AudioClip(
            data=base64.b64encode(resp.content).decode("ascii"),
            content_type="audio/mpeg",
        )


class OpenAICompatibleTTSProvider(HTTPProviderMixin):
    """``/audio/speech`` endpoints (OpenAI tts-1, Groq PlayAI)."""

    def __init__(
        self,
        name: str,
        url: str,
        api_key: str,
        env_var: str,
        model: str,
        voices: list[Voice],
        default_voice: str,
        response_format: str = "mp3",
    ) -> None:
        self.name = name
        super().__init__(api_key, env_var)
        self.url = url
        self.model = model
        self.voices = voices
        self.default_voice = default_voice
        self.response_format = response_format

    @property
    def content_type(self) -> str:
        return (
            "audio/wav" if self.response_format == "wav" else "audio/mpeg"
        )

    def synthesize(
        self, text: str, voice: str | None = None,
    ) -> AudioClip | None:
        if not self.configured:
            return None
        try:
            resp = self._send(
                self.url,
                {
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self.model,
                    "input": text,
                    "voice": voice or self.default_voice,
                    "response_format": self.response_format,
                },
            )
        except ProviderError as exc:
            self.logger.error("%s TTS error: %s", self.name, exc)
            return None
        return AudioClip(
            data=base64.b64encode(resp.content).decode("ascii"),
            content_type=self.content_type,
        )


class GeminiTTSProvider(HTTPProviderMixin):
    """Gemini generateContent with audio output modality."""

    name = "gemini"
    API_URL = (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-2.0-flash:generateContent"
    )
    voices = [
        Voice("Puck", "Puck", "gemini"),
        Voice("Charon", "Charon", "gemini"),
        Voice("Kore", "Kore", "gemini"),
        Voice("Fenrir", "Fenrir", "gemini"),
        Voice("Aoede", "Aoede", "gemini"),
    ]
    DEFAULT_VOICE = "Kore"

    def __init__(self, api_key: str | None = None) -> None:
        super().__init__(
            Settings.GEMINI_API_KEY if api_key is None else api_key,
            "GEMINI_API_KEY",
        )

    def synthesize(
        self, text: str, voice: str | None = None,
    ) -> AudioClip | None:
        if not self.configured:
            return None
        try:
            data = self._post_json(
                self.API_URL,
                {
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.api_key,
                },
                {
                    "contents": [{
                        "parts": [
                            {"text": f"Read this aloud naturally: {text}"},
                        ],
                    }],
                    "generationConfig": {
                        "response_modalities": ["AUDIO"],
                        "speech_config": {
                            "voiceConfig": {
                                "prebuiltVoiceConfig": {
                                    "voiceName": voice or self.DEFAULT_VOICE,
                                },
                            },
                        },
                    },
                },
            )
        except ProviderError as exc:
            self.logger.error("Gemini TTS error: %s", exc)
            return None

        inline = _first_part(data).get("inlineData") or {}
        if not inline.get("data"):
            self.logger.error("Gemini TTS: no audio in response")
            return None
        return AudioClip(
            data=str(inline["data"]),
            content_type=str(inline.get("mimeType") or "audio/mp3"),
        )


def _first_part(data: dict[str, Any]) -> dict[str, Any]:
    """First content part of a Gemini generateContent response."""
    candidates: list[dict[str, Any]] = data.get("candidates") or []
    if not candidates:
        return {}
    content: dict[str, Any] = candidates[0].get("content") or {}
    parts: list[dict[str, Any]] = content.get("parts") or []
    return parts[0] if parts else {}


def openai_tts_provider() -> OpenAICompatibleTTSProvider:
    """OpenAI tts-1, mp3 output."""
    return OpenAICompatibleTTSProvider(
        name="openai",
        url="https://api.openai.com/v1/audio/speech",
        api_key=Settings.OPENAI_API_KEY,
        env_var="OPENAI_API_KEY",
        model="tts-1",
        voices=[
            Voice(v.lower(), v, "openai")
            for v in (
                "Nova", "Alloy", "Ash", "Coral", "Echo",
                "Fable", "Onyx", "Sage", "Shimmer",
            )
        ],
        default_voice="nova",
    )


def groq_tts_provider() -> OpenAICompatibleTTSProvider:
    """Groq PlayAI, wav output; fast but fewer voices."""
    return OpenAICompatibleTTSProvider(
        name="groq",
        url="https://api.groq.com/openai/v1/audio/speech",
        api_key=Settings.GROQ_API_KEY,
        env_var="GROQ_API_KEY",
        model="playai-tts",
        voices=[
            Voice(f"{v}-PlayAI", v, "groq-playai")
            for v in (
                "Arista", "Atlas", "Celeste", "Cheyenne", "Fritz",
                "Gail", "Indigo", "Jennifer", "Nova", "Quinn", "Ruby",
            )
        ],
        default_voice="Arista-PlayAI",
        response_format="wav",
    )
