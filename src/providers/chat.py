# src/providers/chat.py

"""Chat-completion providers (OpenAI-compatible endpoints)."""

from typing import Any

from src.config.settings import Settings
from src.providers.base import HTTPProviderMixin


class OpenAICompatibleChatProvider(HTTPProviderMixin):
    """Chat completions against any OpenAI-compatible endpoint."""

    def __init__(
        self,
        name: str,
        base_url: str,
        api_key: str,
        env_var: str,
        default_model: str,
        fast_model: str | None = None,
    ) -> None:
        self.name = name
        super().__init__(api_key, env_var)
        self.base_url = base_url.rstrip("/")
        self.default_model = default_model
        self.fast_model = fast_model or default_model

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = Settings.CHAT_MAX_TOKENS,
        json_mode: bool = False,
    ) -> str:
        """Return the first choice's message content ('' when absent)."""
        self._require_key()
        payload: dict[str, Any] = {
            "model": model or self.default_model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        data = self._post_json(
            f"{self.base_url}/chat/completions",
            {
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            payload,
        )
        choices: list[dict[str, Any]] = data.get("choices") or []
        if not choices:
            return ""
        message: dict[str, Any] = choices[0].get("message") or {}
        return str(message.get("content") or "")


def groq_chat_provider() -> OpenAICompatibleChatProvider:
    """Groq Llama: fastest round-trip, free tier available."""
    return OpenAICompatibleChatProvider(
        name="groq",
        base_url="https://api.groq.com/openai/v1",
        api_key=Settings.GROQ_API_KEY,
        env_var="GROQ_API_KEY",
        default_model=Settings.GROQ_CHAT_MODEL,
        fast_model=Settings.FAST_CHAT_MODEL,
    )


def openai_chat_provider() -> OpenAICompatibleChatProvider:
    """OpenAI: slower, more reliable JSON output."""
    return OpenAICompatibleChatProvider(
        name="openai",
        base_url="https://api.openai.com/v1",
        api_key=Settings.OPENAI_API_KEY,
        env_var="OPENAI_API_KEY",
        default_model=Settings.OPENAI_CHAT_MODEL,
    )
