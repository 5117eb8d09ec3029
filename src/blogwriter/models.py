"""
Pydantic модели для API клиента.

Модели запроса/ответа соответствуют контракту Gemini generateContent
(поля в camelCase через alias).
"""

import math
import re
from datetime import datetime, timezone
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


# ===== GEMINI REQUEST MODELS =====

class Part(BaseModel):
    """Часть содержимого сообщения."""
    text: Optional[str] = None


class Content(BaseModel):
    """Содержимое сообщения."""
    role: Optional[str] = None
    parts: List[Part] = Field(default_factory=list)


class GenerationConfig(BaseModel):
    """Параметры генерации."""
    model_config = ConfigDict(populate_by_name=True)

    temperature: float = Field(default=0.7, description="Температура генерации (0.0-2.0)")
    top_k: int = Field(default=40, alias="topK")
    top_p: float = Field(default=0.95, alias="topP")
    max_output_tokens: int = Field(default=2048, alias="maxOutputTokens")


HARM_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]


class SafetySetting(BaseModel):
    """Порог фильтра безопасности для категории."""
    category: str
    threshold: str = "BLOCK_MEDIUM_AND_ABOVE"


def default_safety_settings() -> List[SafetySetting]:
    return [SafetySetting(category=category) for category in HARM_CATEGORIES]


class GenerateContentRequest(BaseModel):
    """Тело запроса generateContent."""
    model_config = ConfigDict(populate_by_name=True)

    contents: List[Content]
    generation_config: GenerationConfig = Field(
        default_factory=GenerationConfig, alias="generationConfig"
    )
    safety_settings: List[SafetySetting] = Field(
        default_factory=default_safety_settings, alias="safetySettings"
    )

    @classmethod
    def from_prompt(cls, prompt: str, generation_config: Optional[GenerationConfig] = None) -> "GenerateContentRequest":
        """Запрос из одного текстового промпта."""
        return cls(
            contents=[Content(parts=[Part(text=prompt)])],
            generation_config=generation_config or GenerationConfig(),
        )

    def to_payload(self) -> dict:
        """JSON-совместимый dict в формате API."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ===== GEMINI RESPONSE MODELS =====

class Candidate(BaseModel):
    """Вариант ответа модели."""
    model_config = ConfigDict(populate_by_name=True)

    content: Optional[Content] = None
    finish_reason: Optional[str] = Field(default=None, alias="finishReason")


class PromptFeedback(BaseModel):
    """Реакция фильтров на промпт."""
    model_config = ConfigDict(populate_by_name=True)

    block_reason: Optional[str] = Field(default=None, alias="blockReason")


class GenerateContentResponse(BaseModel):
    """Ответ generateContent."""
    model_config = ConfigDict(populate_by_name=True)

    candidates: List[Candidate] = Field(default_factory=list)
    prompt_feedback: Optional[PromptFeedback] = Field(default=None, alias="promptFeedback")

    def first_text(self) -> Optional[str]:
        """Текст первой части первого кандидата (или None)."""
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text


# ===== ARTICLE MODELS =====

WORDS_PER_MINUTE = 200

_TITLE_RE = re.compile(r'^#{1,4} (.+)$')


class Article(BaseModel):
    """Сгенерированная статья."""
    topic: str
    content: str
    model: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def word_count(self) -> int:
        return len(self.content.split())

    @property
    def reading_minutes(self) -> int:
        """Время чтения в минутах (200 слов в минуту, с округлением вверх)."""
        return math.ceil(self.word_count / WORDS_PER_MINUTE)

    @property
    def title(self) -> Optional[str]:
        """Текст первого заголовка статьи."""
        for line in self.content.split('\n'):
            m = _TITLE_RE.match(line.strip())
            if m:
                return m.group(1).strip()
        return None


# ===== LOCAL CONFIG MODELS =====

class ClientConfig(BaseModel):
    """Конфигурация клиента."""
    api_key: Optional[str] = Field(default=None, description="Gemini API key")
    model: str
    base_url: str
    temperature: float = 0.7
    max_output_tokens: int = 2048
