# src/services/chat_service.py

"""Conversational assistant with food detection.

The model is asked for a strict JSON reply so the front-end can decide
whether to launch a search.  Conversations live in an injected
:class:`~src.storage.session_store.SessionStore`.
"""

import json
import logging
import random
import re
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

from src.config.settings import Settings
from src.providers.base import (
    AudioClip,
    ChatProvider,
    ProviderError,
    TranscriptionProvider,
    TTSProvider,
)
from src.storage.session_store import SessionStore

logger = logging.getLogger("food_finder.chat")

BUSY_REPLIES: dict[str, str] = {
    "en": "I'm a bit busy right now. Give me a moment and try again!",
    "ar": "لحظة، جاري المحاولة...",
}
EMPTY_TRANSCRIPT_REPLY = "I didn't catch that. Could you try again?"

GREETINGS: dict[str, list[str]] = {
    "en": [
        "Hey there! What's on your mind?",
        "Hi! How can I help you today?",
        "Hey! What can I do for you?",
    ],
    "ar": [
        "أهلاً! شو عبالك اليوم؟",
        "مرحبا! كيف أقدر أساعدك؟",
        "هلا! شو تبي؟",
    ],
    "fr": [
        "Salut ! Qu'est-ce qui te ferait plaisir ?",
        "Coucou ! Comment je peux t'aider ?",
        "Hey ! Quoi de neuf ?",
    ],
    "es": [
        "¡Hola! ¿Qué tienes en mente?",
        "¡Hey! ¿En qué te puedo ayudar?",
        "¡Hola! ¿Qué se te antoja?",
    ],
    "de": [
        "Hey! Was hast du auf dem Herzen?",
        "Hallo! Wie kann ich dir helfen?",
        "Hi! Was kann ich für dich tun?",
    ],
    "zh": ["嘿！你在想什么？", "你好！我能帮你什么？", "嗨！有什么需要的吗？"],
    "hi": [
        "नमस्ते! क्या चल रहा है?",
        "हाय! मैं कैसे मदद कर सकता हूं?",
        "हेलो! क्या चाहिए?",
    ],
    "pt": [
        "Oi! O que está pensando?",
        "E aí! Como posso ajudar?",
        "Olá! O que posso fazer por você?",
    ],
    "ru": [
        "Привет! Что у тебя на уме?",
        "Хей! Чем могу помочь?",
        "Здравствуй! Что тебе нужно?",
    ],
    "ja": [
        "やあ！何を考えてる？",
        "こんにちは！何かお手伝いできる？",
        "ハイ！何でも聞いてね！",
    ],
    "ko": [
        "안녕! 무슨 생각 중이야?",
        "하이! 뭘 도와줄까?",
        "안녕하세요! 무엇이 필요하세요?",
    ],
    "it": [
        "Ciao! Cosa hai in mente?",
        "Hey! Come posso aiutarti?",
        "Ciao! Che mi racconti?",
    ],
    "tr": [
        "Selam! Aklında ne var?",
        "Merhaba! Nasıl yardımcı olabilirim?",
        "Hey! Ne yapabilirim senin için?",
    ],
}

_SYSTEM_PROMPT = """\
You are a fun, friendly, and curious AI assistant who loves chatting. \
You're warm, witty, and genuinely interested in people.

**Rules:**
- CRITICAL: You MUST respond in the SAME language the user is speaking. \
If they speak Arabic, reply in Arabic. If English, reply in English. \
The detected language code "{language}" is just a hint, always match the \
user's actual language.
- Keep responses under 30 words, concise but expressive
- ALWAYS end with a follow-up question to keep the conversation going
- Remember what the user said earlier and reference it when relevant
- Be playful and use casual language, like talking to a friend
- You can help find food! If the user mentions food, being hungry, or \
wanting to eat, extract the food items

**Response format: JSON only, no extra text:**
{{"response":"your reply","foodMentioned":bool,"foodItems":["items in \
english"],"shouldSearch":bool,"shouldStop":bool}}

- foodItems: always in English, even if the user speaks another language. \
Extract ALL food/drink items mentioned.
- foodMentioned: true whenever the user mentions ANY food, drink, or says \
they're hungry
- shouldSearch: true whenever foodItems is not empty
- shouldStop: true only when user says bye/stop/done/quit/goodbye

**Examples:**
User: "I'm starving"
{{"response":"Oh no, we can't have that! What kind of food are you craving \
right now?","foodMentioned":true,"foodItems":[],"shouldSearch":false,\
"shouldStop":false}}

User: "pizza"
{{"response":"Great choice! Let me find some pizza for you. Any particular \
style you love?","foodMentioned":true,"foodItems":["pizza"],\
"shouldSearch":true,"shouldStop":false}}

User: "bye"
{{"response":"It was awesome chatting with you! Come back anytime!",\
"foodMentioned":false,"foodItems":[],"shouldSearch":false,\
"shouldStop":true}}"""

_EMBEDDED_JSON = re.compile(r'\{[\s\S]*"response"[\s\S]*\}')


@dataclass
class ChatReply:
    """Structured assistant reply."""

    response: str
    food_mentioned: bool = False
    food_items: list[str] = field(default_factory=lambda: list[str]())
    should_search: bool = False
    should_stop: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "response": self.response,
            "foodMentioned": self.food_mentioned,
            "foodItems": self.food_items,
            "shouldSearch": self.should_search,
            "shouldStop": self.should_stop,
        }


def get_system_prompt(language: str = "en") -> str:
    return _SYSTEM_PROMPT.format(language=language)


def _reply_from(parsed: Any, raw: str) -> ChatReply | None:
    if not isinstance(parsed, dict):
        return None
    items = parsed.get("foodItems") or []
    if not isinstance(items, list):
        items = []
    return ChatReply(
        response=str(parsed.get("response") or raw),
        food_mentioned=bool(parsed.get("foodMentioned")),
        food_items=[str(i) for i in items if i],
        should_search=bool(parsed.get("shouldSearch")),
        should_stop=bool(parsed.get("shouldStop")),
    )


def parse_ai_response(text: str) -> ChatReply:
    """Parse a model reply: pure JSON, JSON inside prose, or plain text."""
    try:
        reply = _reply_from(json.loads(text), text)
    except ValueError:
        reply = None
    if reply is not None:
        return reply

    match = _EMBEDDED_JSON.search(text)
    if match:
        try:
            reply = _reply_from(json.loads(match.group(0)), text)
        except ValueError:
            reply = None
        if reply is not None:
            return reply

    return ChatReply(response=text)


def build_messages(
    user_message: str,
    history: list[dict[str, str]] | None = None,
    language: str = "en",
    context_size: int = Settings.CONTEXT_MESSAGES,
) -> list[dict[str, str]]:
    """System prompt + the last *context_size* history turns + message."""
    messages = [{"role": "system", "content": get_system_prompt(language)}]
    recent = (history or [])[-context_size:] if context_size > 0 else []
    for msg in recent:
        messages.append({
            "role": "user" if msg.get("role") == "user" else "assistant",
            "content": msg.get("content", ""),
        })
    messages.append({"role": "user", "content": user_message})
    return messages


def generate_greeting(language: str = "en") -> str:
    """A random greeting in *language* (English when unsupported)."""
    options = GREETINGS.get(language) or GREETINGS["en"]
    return random.choice(options)


def busy_reply(language: str = "en") -> ChatReply:
    return ChatReply(
        response=BUSY_REPLIES.get(language, BUSY_REPLIES["en"])
    )


class ChatService:
    """Runs chat turns against the configured providers."""

    def __init__(
        self,
        chat_provider: ChatProvider,
        tts_provider: TTSProvider | None,
        transcription_provider: TranscriptionProvider | None,
        store: SessionStore,
    ) -> None:
        self.chat_provider = chat_provider
        self.tts_provider = tts_provider
        self.transcription_provider = transcription_provider
        self.store = store
        self.settings = Settings()

    # ── Private helpers ──────────────────────────────────

    def _ask(
        self,
        message: str,
        history: list[dict[str, str]],
        language: str,
    ) -> ChatReply:
        start = time.monotonic()
        try:
            text = self.chat_provider.chat(
                build_messages(
                    message,
                    history,
                    language,
                    self.settings.CONTEXT_MESSAGES,
                ),
                json_mode=True,
            )
        except ProviderError as exc:
            if exc.is_rate_limited:
                logger.warning("Chat provider rate-limited: %s", exc)
                return busy_reply(language)
            raise
        logger.debug(
            "Chat reply in %.0fms", (time.monotonic() - start) * 1000
        )
        return parse_ai_response(text)

    def _speak(self, text: str) -> dict[str, str] | None:
        """Synthesize *text*; failures only cost the audio."""
        if self.tts_provider is None or not text:
            return None
        try:
            clip: AudioClip | None = self.tts_provider.synthesize(text)
        except Exception as exc:
            logger.error("TTS error: %s", exc, exc_info=True)
            return None
        if clip is None:
            return None
        return {"data": clip.data, "contentType": clip.content_type}

    def _turn(
        self,
        session_id: str,
        message: str,
        language: str,
    ) -> dict[str, Any]:
        conversation = self.store.get_or_create(session_id, language)
        reply = self._ask(message, conversation.history, language)

        limit = self.settings.HISTORY_LIMIT
        conversation.add_message("user", message, limit)
        conversation.add_message("assistant", reply.response, limit)

        if reply.food_mentioned and reply.food_items:
            conversation.last_food_items = list(reply.food_items)

        body = reply.to_dict()
        body["foodItems"] = (
            reply.food_items or list(conversation.last_food_items)
        )
        body["sessionId"] = session_id
        return body

    # ── Public API ───────────────────────────────────────

    @staticmethod
    def new_session_id() -> str:
        return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"

    def start(
        self,
        session_id: str | None = None,
        language: str = "en",
        generate_audio: bool = True,
    ) -> dict[str, Any]:
        """Open (or reset) a session with a localized greeting."""
        session_id = session_id or self.new_session_id()
        greeting = generate_greeting(language)

        self.store.delete(session_id)
        conversation = self.store.get_or_create(session_id, language)
        conversation.add_message(
            "assistant", greeting, self.settings.HISTORY_LIMIT
        )

        return {
            "greeting": greeting,
            "sessionId": session_id,
            "audio": self._speak(greeting) if generate_audio else None,
        }

    def send_message(
        self,
        message: str,
        session_id: str = "default",
        language: str = "en",
        generate_audio: bool = True,
    ) -> dict[str, Any]:
        """Text in, structured reply (plus optional audio) out."""
        body = self._turn(session_id, message, language)
        body["audio"] = (
            self._speak(body["response"]) if generate_audio else None
        )
        return body

    def send_audio(
        self,
        audio_base64: str,
        mime_type: str = "audio/webm",
        session_id: str = "default",
    ) -> dict[str, Any]:
        """Transcribe, then answer in the detected language.

        Raises :class:`ProviderError` when transcription fails.
        """
        if self.transcription_provider is None:
            raise ProviderError("transcription", "No provider configured")

        logger.info(
            "Received audio: %d chars base64, type: %s",
            len(audio_base64),
            mime_type,
        )
        result = self.transcription_provider.transcribe(
            audio_base64, mime_type
        )
        transcript = result.text.strip()
        logger.info("Transcribed (%s): %s", result.language, transcript)

        if not transcript:
            return {
                **ChatReply(response=EMPTY_TRANSCRIPT_REPLY).to_dict(),
                "transcript": "",
                "sessionId": session_id,
                "audio": None,
            }

        conversation = self.store.get_or_create(session_id, result.language)
        conversation.language = result.language

        body = self._turn(session_id, transcript, result.language)
        body["transcript"] = transcript
        body["audio"] = self._speak(body["response"])
        return body

    def history(self, session_id: str) -> dict[str, Any] | None:
        """Session history, or ``None`` when the session is unknown."""
        conversation = self.store.get(session_id)
        if conversation is None:
            return None
        return {
            "sessionId": session_id,
            "history": list(conversation.history),
            "lastActivity": conversation.last_activity,
        }

    def clear(self, session_id: str) -> bool:
        return self.store.delete(session_id)
