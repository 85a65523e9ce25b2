# src/services/voice_processor.py

"""Turn a spoken food request into a search query."""

import logging
import re
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from typing import Any

from src.models.product import Product
from src.providers.base import ChatProvider, ProviderError
from src.services.translator import Translator

logger = logging.getLogger("food_finder.voice")

STOP_WORDS: frozenset[str] = frozenset({
    # Articles & determiners
    "a", "an", "the", "some", "any", "this", "that", "these", "those",
    # Pronouns
    "i", "me", "my", "we", "our", "you", "your", "it", "its",
    # Request verbs
    "want", "need", "get", "give", "have", "like", "love", "crave",
    "craving", "order", "find", "search", "looking", "show", "bring",
    "make", "would", "could", "can", "please", "just", "really", "very",
    "wanna", "gonna", "gotta", "lemme", "let", "im", "i'm", "id", "i'd",
    # Fillers
    "um", "uh", "hmm", "oh", "ah", "er", "basically", "actually",
    "maybe", "probably", "think", "guess", "something", "anything",
    "stuff",
    # Prepositions & conjunctions
    "for", "to", "from", "with", "without", "and", "or", "but", "of",
    "in", "on", "at",
    # Time / place
    "tonight", "today", "now", "right", "later", "soon", "here", "there",
    "nearby", "near", "close", "around", "somewhere", "anywhere",
    # Food words that are not searchable
    "food", "eat", "eating", "hungry", "meal", "dinner", "lunch",
    "breakfast", "snack", "delivery", "deliver", "delivered", "ordering",
    # Other
    "be", "is", "are", "was", "were", "been", "being",
    "do", "does", "did", "doing", "done",
    "go", "going", "went", "gone",
    "know", "see", "feel", "look",
    "good", "great", "nice", "best", "better",
    "one", "two", "three", "first", "second",
    "also", "too", "so", "then", "than", "as", "if",
    "yes", "no", "ok", "okay", "sure", "alright",
    "hey", "hi", "hello", "thanks", "thank",
})

MIN_VALIDATED_RESULTS = 3

_PUNCTUATION = re.compile(r"[^\w\s']")

EXTRACTION_PROMPT = """\
You are a food order assistant. Extract ONLY the food/drink items from \
the user's message.
Rules:
- Return ONLY the food keywords in English, nothing else
- Translate non-English food names to English if possible \
(e.g., "بيتزا" → "pizza")
- Keep specific dish names (e.g., "margherita pizza", "chicken biryani")
- Remove filler words, greetings, and non-food words
- If multiple items, separate with spaces
- If no food items found, return empty string

Examples:
"I want to order a large pepperoni pizza" → "pepperoni pizza"
"Can I get some chicken shawarma and hummus" → "chicken shawarma hummus"
"أريد بيتزا وبرجر" → "pizza burger"
"Je voudrais commander des sushis" → "sushi"
"""


@dataclass
class Keywords:
    search_terms: list[str] = field(default_factory=lambda: list[str]())
    search_query: str = ""
    original_text: str = ""


@dataclass
class VoiceCommand:
    """Result of processing one voice/text command."""

    search_terms: list[str]
    search_query: str
    search_message: str
    language: str
    original_text: str
    validated: bool = False
    result_count: int = 0
    ai_extracted: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def extract_keywords(text: str | None) -> Keywords:
    """Stop-word keyword extraction.

    Punctuation other than apostrophes becomes whitespace; words shorter
    than two characters and stop words are dropped; order is preserved
    and duplicates removed.
    """
    if not text or not text.strip():
        return Keywords()

    original = text.strip()
    cleaned = _PUNCTUATION.sub(" ", original.lower())

    words: list[str] = []
    for word in cleaned.split():
        word = word.strip("'")
        if len(word) >= 2 and word not in STOP_WORDS:
            words.append(word)

    unique = list(dict.fromkeys(words))
    return Keywords(
        search_terms=unique,
        search_query=" ".join(unique),
        original_text=original,
    )


class VoiceCommandProcessor:
    """Keyword extraction, optional validation and a localized message.

    ``search`` is any ``(query, lat, lon) -> list[Product]`` callable,
    normally a platform adapter's ``search`` method.
    """

    def __init__(
        self,
        chat_provider: ChatProvider | None,
        translator: Translator | None = None,
        search: Callable[[str, float | None, float | None], list[Product]]
        | None = None,
    ) -> None:
        self.chat_provider = chat_provider
        self.translator = translator or Translator(chat_provider)
        self.search = search

    def extract_with_ai(self, text: str) -> str | None:
        """LLM extraction; ``None`` means fall back to stop words."""
        if self.chat_provider is None:
            return None
        try:
            extracted = self.chat_provider.chat(
                [
                    {"role": "system", "content": EXTRACTION_PROMPT},
                    {"role": "user", "content": text},
                ],
                model=self.chat_provider.fast_model,
                temperature=0.1,
                max_tokens=100,
            ).strip().strip('"')
        except ProviderError as exc:
            logger.error("AI extraction error: %s", exc)
            return None
        logger.info("AI extracted '%s' from '%s'", extracted, text)
        return extracted or None

    def search_message(self, query: str, language: str) -> str:
        """'Searching for X' in the user's language."""
        return self.translator.translate(f"Searching for {query}", language)

    def validate(
        self,
        terms: list[str],
        query: str,
        lat: float | None,
        lon: float | None,
    ) -> tuple[str, bool, int]:
        """Check *query* yields results, shortening it when it does not.

        Returns ``(query, validated, result_count)``.  A shortened query
        must return at least ``MIN_VALIDATED_RESULTS`` to be accepted.
        """
        if self.search is None or not query:
            return query, False, 0

        count = len(self.search(query, lat, lon))
        if count > 0:
            return query, True, count

        for size in range(len(terms) - 1, 0, -1):
            shorter = " ".join(terms[:size])
            shorter_count = len(self.search(shorter, lat, lon))
            if shorter_count >= MIN_VALIDATED_RESULTS:
                logger.info(
                    "Validated shorter query '%s' (%d results)",
                    shorter,
                    shorter_count,
                )
                return shorter, True, shorter_count

        return query, False, count

    def process(
        self,
        text: str,
        language: str = "en",
        lat: float | None = None,
        lon: float | None = None,
        validate: bool = False,
        use_ai: bool = True,
    ) -> VoiceCommand:
        query = ""
        terms: list[str] = []

        if use_ai:
            extracted = self.extract_with_ai(text)
            if extracted:
                query = extracted
                terms = extracted.split()

        if not query:
            simple = extract_keywords(text)
            query = simple.search_query
            terms = simple.search_terms

        validated = False
        result_count = 0
        if validate and query:
            query, validated, result_count = self.validate(
                terms, query, lat, lon
            )
            terms = query.split()

        return VoiceCommand(
            search_terms=terms,
            search_query=query,
            search_message=self.search_message(query, language),
            language=language,
            original_text=text,
            validated=validated,
            result_count=result_count,
            ai_extracted=use_ai,
        )
