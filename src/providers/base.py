# src/providers/base.py

"""Capability interfaces and shared HTTP plumbing for AI providers."""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Protocol

from curl_cffi import requests as curl_requests

from src.config.settings import Settings


class ProviderError(Exception):
    """An AI provider call failed.  ``status_code`` is the HTTP status."""

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(f"[{provider}] {message}")
        self.provider = provider
        self.status_code = status_code

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


class ProviderNotConfiguredError(ProviderError):
    """The provider's API key is missing."""

    def __init__(self, provider: str, env_var: str) -> None:
        super().__init__(provider, f"{env_var} not configured")
        self.env_var = env_var


@dataclass
class AudioClip:
    """Base64-encoded synthesized audio."""

    data: str
    content_type: str


@dataclass
class TranscriptionResult:
    """Transcribed text plus the detected ISO 639-1 language."""

    text: str
    language: str = "en"


@dataclass
class Voice:
    """A selectable TTS voice."""

    id: str
    name: str
    category: str


class ChatProvider(Protocol):
    """Chat-completion capability.

    ``fast_model`` names a cheaper model for short utility prompts
    (keyword extraction, translation).
    """

    name: str
    fast_model: str

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = Settings.CHAT_MAX_TOKENS,
        json_mode: bool = False,
    ) -> str:
        ...


class TTSProvider(Protocol):
    """Text-to-speech capability.  Returns ``None`` when unavailable."""

    name: str
    voices: list[Voice]

    def synthesize(
        self, text: str, voice: str | None = None,
    ) -> AudioClip | None:
        ...


class TranscriptionProvider(Protocol):
    """Speech-to-text capability."""

    name: str

    def transcribe(
        self,
        audio_base64: str,
        mime_type: str = "audio/webm",
        language_hint: str | None = None,
    ) -> TranscriptionResult:
        ...


def audio_extension(mime_type: str) -> str:
    """File extension the transcription APIs expect for *mime_type*."""
    if "webm" in mime_type:
        return "webm"
    if "mp3" in mime_type or "mpeg" in mime_type:
        return "mp3"
    return "wav"


class HTTPProviderMixin:
    """Blocking curl_cffi transport shared by the HTTP providers."""

    name: str = "provider"

    def __init__(self, api_key: str, env_var: str) -> None:
        self.api_key = api_key
        self.env_var = env_var
        self.settings = Settings()
        self.logger = logging.getLogger(
            f"food_finder.providers.{self.name}"
        )
        self.session = curl_requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _require_key(self) -> None:
        if not self.api_key:
            raise ProviderNotConfiguredError(self.name, self.env_var)

    def _send(
        self,
        url: str,
        headers: dict[str, str],
        **kwargs: Any,
    ) -> curl_requests.Response:
        """POST to *url*, raising :class:`ProviderError` on non-200."""
        start = time.monotonic()
        try:
            resp = self.session.post(
                url,
                headers=headers,
                timeout=self.settings.PROVIDER_TIMEOUT,
                **kwargs,
            )
        except Exception as exc:
            raise ProviderError(self.name, str(exc)) from exc
        elapsed_ms = (time.monotonic() - start) * 1000
        self.logger.debug(
            "[%s] POST %s -> %d in %.0fms",
            self.name,
            url,
            resp.status_code,
            elapsed_ms,
        )
        if resp.status_code != 200:
            raise ProviderError(
                self.name,
                f"HTTP {resp.status_code}: {resp.text[:300]}",
                status_code=resp.status_code,
            )
        return resp

    def _post_json(
        self,
        url: str,
        headers: dict[str, str],
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """POST JSON and decode a JSON object response."""
        resp = self._send(url, headers, json=payload)
        try:
            data: dict[str, Any] = json.loads(resp.text)
        except ValueError as exc:
            raise ProviderError(
                self.name, "Malformed JSON response"
            ) from exc
        return data
