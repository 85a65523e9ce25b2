# src/services/translator.py

"""UI phrase translation: pre-translated phrases first, then the LLM."""

import logging

from src.providers.base import ChatProvider, ProviderError

logger = logging.getLogger("food_finder.translator")

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English", "ar": "Arabic", "fr": "French", "es": "Spanish",
    "de": "German", "it": "Italian", "pt": "Portuguese", "ru": "Russian",
    "zh": "Chinese", "ja": "Japanese", "ko": "Korean", "hi": "Hindi",
    "tr": "Turkish", "nl": "Dutch", "pl": "Polish", "sv": "Swedish",
    "da": "Danish", "no": "Norwegian", "fi": "Finnish", "cs": "Czech",
}

PHRASES: dict[str, dict[str, str]] = {
    "greeting": {
        "en": "What would you like to order today?",
        "ar": "ماذا تريد أن تطلب اليوم؟",
        "fr": "Que souhaitez-vous commander aujourd'hui?",
        "es": "¿Qué te gustaría pedir hoy?",
        "de": "Was möchten Sie heute bestellen?",
        "it": "Cosa vorresti ordinare oggi?",
        "pt": "O que você gostaria de pedir hoje?",
        "ru": "Что бы вы хотели заказать сегодня?",
        "zh": "你今天想点什么？",
        "ja": "今日は何を注文しますか？",
        "ko": "오늘 무엇을 주문하시겠습니까?",
        "hi": "आज आप क्या ऑर्डर करना चाहेंगे?",
        "tr": "Bugün ne sipariş etmek istersiniz?",
    },
    "no_results": {
        "en": "No results found. Try something else!",
        "ar": "لم يتم العثور على نتائج. جرب شيئًا آخر!",
        "fr": "Aucun résultat trouvé. Essayez autre chose!",
        "es": "No se encontraron resultados. ¡Prueba otra cosa!",
        "de": "Keine Ergebnisse gefunden. Versuchen Sie etwas anderes!",
        "it": "Nessun risultato trovato. Prova qualcos'altro!",
        "pt": "Nenhum resultado encontrado. Tente outra coisa!",
        "ru": "Ничего не найдено. Попробуйте что-то другое!",
        "zh": "没有找到结果。试试别的吧！",
        "ja": "結果が見つかりませんでした。他のものを試してください！",
        "ko": "결과를 찾을 수 없습니다. 다른 것을 시도해 보세요!",
        "hi": "कोई परिणाम नहीं मिला। कुछ और आज़माएं!",
        "tr": "Sonuç bulunamadı. Başka bir şey deneyin!",
    },
}


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code, code)


class Translator:
    """Translate short UI strings with the chat provider's fast model.

    Never raises on provider failure: the input text is returned.
    """

    def __init__(self, chat_provider: ChatProvider | None) -> None:
        self.chat_provider = chat_provider

    def translate(self, text: str, language: str) -> str:
        if language == "en" or not text or self.chat_provider is None:
            return text
        try:
            translated = self.chat_provider.chat(
                [
                    {
                        "role": "system",
                        "content": (
                            f"Translate to {language_name(language)}. "
                            "Return ONLY the translation, nothing else. "
                            "Keep numbers as-is."
                        ),
                    },
                    {"role": "user", "content": text},
                ],
                model=self.chat_provider.fast_model,
                temperature=0.1,
                max_tokens=150,
            )
        except ProviderError as exc:
            logger.error("Translation error: %s", exc)
            return text
        return translated.strip() or text

    def phrase(self, phrase_type: str, language: str) -> str | None:
        """A named phrase in *language*, translating English on a miss.

        Returns ``None`` for an unknown phrase type.
        """
        translations = PHRASES.get(phrase_type)
        if translations is None:
            return None
        if language in translations:
            return translations[language]
        return self.translate(translations["en"], language)

    @staticmethod
    def phrases_for(language: str) -> dict[str, str]:
        """Every pre-translated phrase in *language* (English fallback)."""
        return {
            key: translations.get(language, translations["en"])
            for key, translations in PHRASES.items()
        }

    @staticmethod
    def languages() -> list[dict[str, object]]:
        return [
            {
                "code": code,
                "name": name,
                "hasPreTranslated": code in PHRASES["greeting"],
            }
            for code, name in LANGUAGE_NAMES.items()
        ]
