# src/api/schemas.py

"""Request bodies for the HTTP API.

Required text fields are optional at the schema level so the routes can
answer a missing value with a 400 and a readable message.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.config.settings import Settings


class CamelModel(BaseModel):
    """Accepts both ``snake_case`` and the front-end's ``camelCase``."""

    model_config = ConfigDict(populate_by_name=True)


class SearchBody(BaseModel):
    term: str | None = None
    lat: float | None = None
    lon: float | None = None
    sort: str = Settings.DEFAULT_SORT
    page: int = 1
    price_min: float | None = None
    price_max: float | None = None
    time_min: int | None = None
    time_max: int | None = None
    restaurant_filter: str = ""
    platforms: list[str] | None = None
    region: str | None = None
    group_by_restaurant: bool = False


class ChatBody(CamelModel):
    message: str | None = None
    session_id: str = Field("default", alias="sessionId")
    generate_audio: bool = Field(True, alias="generateAudio")
    language: str = "en"


class ChatStartBody(CamelModel):
    session_id: str | None = Field(None, alias="sessionId")
    generate_audio: bool = Field(True, alias="generateAudio")
    language: str = "en"


class AudioBody(CamelModel):
    audio: str | None = None
    mime_type: str = Field("audio/webm", alias="mimeType")
    session_id: str = Field("default", alias="sessionId")


class VoiceBody(CamelModel):
    text: str | None = None
    language: str = "en"
    lat: float | None = None
    lon: float | None = None
    validate_query: bool = Field(False, alias="validate")
    use_ai: bool = Field(True, alias="useAI")
    platforms: list[str] | None = None
    region: str | None = None


class TTSBody(CamelModel):
    text: str | None = None
    voice_id: str | None = Field(None, alias="voiceId")


class TranslateBody(BaseModel):
    text: str | None = None
    language: str = "en"
    type: str | None = None
