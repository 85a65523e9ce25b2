# tests/test_translator.py

"""Tests for UI phrase translation."""

import unittest
from typing import Any

from src.providers.base import ProviderError
from src.services.translator import PHRASES, Translator, language_name


class FakeChat:
    name = "fake"
    fast_model = "fast"

    def __init__(self, reply: str | Exception = "") -> None:
        self.reply = reply
        self.kwargs: list[dict[str, Any]] = []

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        self.kwargs.append(kwargs)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


class TestTranslate(unittest.TestCase):
    """Translator.translate behaviour."""

    def test_english_passthrough(self) -> None:
        chat = FakeChat("nope")
        self.assertEqual(Translator(chat).translate("Hi", "en"), "Hi")
        self.assertEqual(chat.kwargs, [])

    def test_no_provider_passthrough(self) -> None:
        self.assertEqual(Translator(None).translate("Hi", "fr"), "Hi")

    def test_uses_fast_model(self) -> None:
        chat = FakeChat("  Bonjour \n")
        self.assertEqual(Translator(chat).translate("Hi", "fr"), "Bonjour")
        self.assertEqual(chat.kwargs[0]["model"], "fast")
        self.assertEqual(chat.kwargs[0]["temperature"], 0.1)

    def test_provider_error_returns_input(self) -> None:
        chat = FakeChat(ProviderError("fake", "down"))
        self.assertEqual(Translator(chat).translate("Hi", "fr"), "Hi")


class TestPhrases(unittest.TestCase):
    """Pre-translated phrases and language listing."""

    def test_pre_translated_phrase(self) -> None:
        chat = FakeChat("unused")
        phrase = Translator(chat).phrase("greeting", "tr")
        self.assertEqual(phrase, PHRASES["greeting"]["tr"])
        self.assertEqual(chat.kwargs, [])

    def test_missing_language_translated(self) -> None:
        phrase = Translator(FakeChat("Hva vil du bestille?")).phrase(
            "greeting", "no"
        )
        self.assertEqual(phrase, "Hva vil du bestille?")

    def test_unknown_phrase_type(self) -> None:
        self.assertIsNone(Translator(None).phrase("farewell", "en"))

    def test_phrases_for_falls_back_to_english(self) -> None:
        phrases = Translator.phrases_for("sv")
        self.assertEqual(phrases["no_results"], PHRASES["no_results"]["en"])

    def test_languages(self) -> None:
        languages = {lang["code"]: lang for lang in Translator.languages()}
        self.assertEqual(len(languages), 20)
        self.assertTrue(languages["ar"]["hasPreTranslated"])
        self.assertFalse(languages["pl"]["hasPreTranslated"])

    def test_language_name(self) -> None:
        self.assertEqual(language_name("tr"), "Turkish")
        self.assertEqual(language_name("xx"), "xx")


if __name__ == "__main__":
    unittest.main()
