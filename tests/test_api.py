# tests/test_api.py

"""Tests for the HTTP API routes."""

import json
import unittest
from typing import Any

from fastapi.testclient import TestClient

from src.api.app import create_app
from src.models.comparison import ComparisonGroup, Pagination, Variant
from src.providers.base import (
    AudioClip,
    ProviderError,
    TranscriptionResult,
    Voice,
)
from src.services.search_orchestrator import SearchRequest, SearchResponse
from src.storage.session_store import SessionStore


class FakeOrchestrator:
    """Records requests and returns one canned comparison group."""

    def __init__(self, error: Exception | None = None) -> None:
        self.requests: list[SearchRequest] = []
        self.error = error

    async def search(self, request: SearchRequest) -> SearchResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        group = ComparisonGroup(
            product_name="Pizza Margherita",
            restaurant_name="Luigi",
            variants=[
                Variant(source="beta", price=25.0, is_lowest=True),
                Variant(source="alpha", price=30.0),
            ],
            lowest_price=25.0,
        )
        return SearchResponse(
            query=request.term,
            products=[group],
            pagination=Pagination(1, 12, 1, 1, False, False),
            all_restaurants=["Luigi"],
        )


class FakeChat:
    name = "fake"
    fast_model = "fast"

    def __init__(self, reply: str | Exception = "") -> None:
        self.reply = reply

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


class FakeTTS:
    name = "fake"
    voices = [Voice("v1", "Bella", "fake")]

    def __init__(self, silent: bool = False) -> None:
        self.silent = silent

    def synthesize(
        self, text: str, voice: str | None = None,
    ) -> AudioClip | None:
        if self.silent:
            return None
        return AudioClip(data="QUJD", content_type="audio/mpeg")


class FakeTranscriber:
    name = "fake"

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error

    def transcribe(
        self,
        audio_base64: str,
        mime_type: str = "audio/webm",
        language_hint: str | None = None,
    ) -> TranscriptionResult:
        if self.error is not None:
            raise self.error
        return TranscriptionResult(text="iki lahmacun", language="tr")


CHAT_REPLY = json.dumps({
    "response": "Great choice!",
    "foodMentioned": True,
    "foodItems": ["pizza"],
    "shouldSearch": True,
    "shouldStop": False,
})


def _client(
    orchestrator: FakeOrchestrator | None = None,
    chat: FakeChat | None = None,
    tts: FakeTTS | None = None,
    transcriber: FakeTranscriber | None = None,
) -> TestClient:
    app = create_app(
        orchestrator=orchestrator or FakeOrchestrator(),  # type: ignore
        chat_provider=chat or FakeChat(CHAT_REPLY),
        tts_provider=tts or FakeTTS(),
        transcription_provider=transcriber or FakeTranscriber(),
        store=SessionStore(),
    )
    return TestClient(app, raise_server_exceptions=False)


class TestHealthAndSearch(unittest.TestCase):
    """/health and /api/search."""

    def test_health(self) -> None:
        resp = _client().get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(), {"status": "healthy", "service": "food-finder"}
        )

    def test_search_returns_page(self) -> None:
        orchestrator = FakeOrchestrator()
        resp = _client(orchestrator).post("/api/search", json={
            "term": " pizza ",
            "sort": "distance",
            "page": 2,
            "price_max": 40,
            "platforms": ["tgoyemek"],
        })
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["products"][0]["platform_count"], 2)
        self.assertEqual(body["all_restaurants"], ["Luigi"])
        request = orchestrator.requests[0]
        self.assertEqual(request.term, "pizza")
        self.assertEqual(request.sort, "distance")
        self.assertEqual(request.page, 2)
        self.assertEqual(request.filters.price_max, 40)
        self.assertEqual(request.platforms, ["tgoyemek"])

    def test_search_requires_term(self) -> None:
        resp = _client().post("/api/search", json={"term": "   "})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Search term is required"})

    def test_unexpected_error_is_500(self) -> None:
        client = _client(FakeOrchestrator(RuntimeError("boom")))
        resp = client.post("/api/search", json={"term": "pizza"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Internal server error"})


class TestChatRoutes(unittest.TestCase):
    """/api/chat endpoints."""

    def test_chat_round_trip(self) -> None:
        client = _client()
        resp = client.post("/api/chat", json={
            "message": "pizza", "sessionId": "s1", "generateAudio": False,
        })
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["foodItems"], ["pizza"])
        self.assertIsNone(body["audio"])

        history = client.get("/api/chat/history/s1").json()
        self.assertEqual(len(history["history"]), 2)

        cleared = client.delete("/api/chat/s1").json()
        self.assertEqual(
            cleared, {"success": True, "message": "Conversation cleared"}
        )
        self.assertEqual(
            client.get("/api/chat/history/s1").status_code, 404
        )

    def test_chat_requires_message(self) -> None:
        resp = _client().post("/api/chat", json={})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Message is required"})

    def test_chat_provider_failure(self) -> None:
        client = _client(
            chat=FakeChat(ProviderError("fake", "down", status_code=500))
        )
        resp = client.post("/api/chat", json={"message": "hi"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["error"], "Chat failed")
        self.assertIn("down", resp.json()["details"])

    def test_start_with_audio(self) -> None:
        resp = _client().post("/api/chat/start", json={"language": "tr"})
        body = resp.json()
        self.assertTrue(body["sessionId"].startswith("session_"))
        self.assertEqual(body["audio"]["contentType"], "audio/mpeg")

    def test_audio_chat(self) -> None:
        resp = _client().post("/api/chat/audio", json={"audio": "QUJD"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["transcript"], "iki lahmacun")

    def test_audio_chat_requires_audio(self) -> None:
        resp = _client().post("/api/chat/audio", json={})
        self.assertEqual(resp.status_code, 400)


class TestSpeechRoutes(unittest.TestCase):
    """/api/transcribe and /api/tts."""

    def test_transcribe(self) -> None:
        resp = _client().post(
            "/api/transcribe",
            json={"audio": "QUJD", "mimeType": "audio/wav"},
        )
        self.assertEqual(
            resp.json(), {"text": "iki lahmacun", "language": "tr"}
        )

    def test_transcribe_failure(self) -> None:
        client = _client(
            transcriber=FakeTranscriber(ProviderError("fake", "bad"))
        )
        resp = client.post("/api/transcribe", json={"audio": "QUJD"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["error"], "Transcription failed")

    def test_tts(self) -> None:
        resp = _client().post("/api/tts", json={"text": "Merhaba"})
        self.assertEqual(
            resp.json(), {"audio": "QUJD", "contentType": "audio/mpeg"}
        )

    def test_tts_requires_text(self) -> None:
        resp = _client().post("/api/tts", json={})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Text is required"})

    def test_tts_without_audio_is_502(self) -> None:
        resp = _client(tts=FakeTTS(silent=True)).post(
            "/api/tts", json={"text": "Merhaba"}
        )
        self.assertEqual(resp.status_code, 502)

    def test_voices(self) -> None:
        resp = _client().get("/api/tts/voices")
        self.assertEqual(
            resp.json(), [{"id": "v1", "name": "Bella", "category": "fake"}]
        )


class TestVoiceAndTranslateRoutes(unittest.TestCase):
    """/api/process-voice and /api/translate."""

    def test_process_voice(self) -> None:
        resp = _client(chat=FakeChat("chicken shawarma")).post(
            "/api/process-voice",
            json={"text": "I want chicken shawarma"},
        )
        body = resp.json()
        self.assertEqual(body["search_query"], "chicken shawarma")
        self.assertTrue(body["ai_extracted"])
        self.assertFalse(body["validated"])

    def test_process_voice_without_ai(self) -> None:
        resp = _client().post(
            "/api/process-voice",
            json={"text": "find me some sushi", "useAI": False},
        )
        self.assertEqual(resp.json()["search_query"], "sushi")

    def test_process_voice_requires_text(self) -> None:
        resp = _client().post("/api/process-voice", json={})
        self.assertEqual(resp.status_code, 400)

    def test_translate_phrase(self) -> None:
        resp = _client().post(
            "/api/translate", json={"type": "greeting", "language": "tr"}
        )
        self.assertEqual(
            resp.json()["translated"],
            "Bugün ne sipariş etmek istersiniz?",
        )

    def test_translate_requires_input(self) -> None:
        resp = _client().post("/api/translate", json={"language": "fr"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Text or type is required"})

    def test_phrases_and_languages(self) -> None:
        client = _client()
        phrases = client.get("/api/translate/phrases/ar").json()
        self.assertEqual(phrases["language"], "ar")
        self.assertIn("no_results", phrases["phrases"])
        languages = client.get("/api/translate/languages").json()
        self.assertEqual(len(languages["languages"]), 20)


if __name__ == "__main__":
    unittest.main()
