"""
Основной клиент BlogWriter.

Предоставляет высокоуровневый API: генерация статьи по теме,
повторная генерация и преобразование результата в HTML.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import httpx

from blogwriter.config import get_config_manager
from blogwriter.http_client import HTTPClient
from blogwriter.markdown_formatter import format_markdown
from blogwriter.models import (
    Article,
    GenerateContentRequest,
    GenerationConfig,
)
from blogwriter.exceptions import (
    AuthenticationError,
    BlogWriterError,
    ValidationError,
)

logger = logging.getLogger(__name__)


ARTICLE_PROMPT_TEMPLATE = """You are a professional blog writer. Write a comprehensive, well-structured, and engaging 1000-word blog post about: "{topic}"

Please follow these guidelines:
- Start with an engaging title
- Create a compelling introduction that hooks the reader
- Use clear headings and subheadings to organize content
- Write in a conversational yet professional tone
- Include practical examples, insights, or actionable advice
- Use proper paragraph breaks for readability
- End with a strong conclusion that summarizes key points
- Make it informative, valuable, and engaging for readers
- Aim for approximately 1000 words

Format the output with proper markdown headings (# for main title, ## for sections, ### for subsections) and ensure good flow between paragraphs."""


def build_prompt(topic: str) -> str:
    """Встроить тему в шаблон промпта."""
    return ARTICLE_PROMPT_TEMPLATE.format(topic=topic)


class BlogWriterClient:
    """
    Клиент для генерации статей через Gemini API.

    Пример использования:

    ```python
    with BlogWriterClient(api_key="your-key") as client:
        article = client.generate_article("Remote work in 2024")
        print(article.word_count, article.reading_minutes)
        html = client.render(article)
    ```
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        config_dir: Optional[Path] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Инициализация клиента.

        Args:
            api_key: Gemini API key. Если не указан, берётся из конфигурации.
            model: Модель генерации. Если не указана, берётся из конфигурации.
            config_dir: Директория для хранения конфигурации
            timeout: Таймаут запросов в секундах
            transport: Транспорт httpx (для тестов)
        """
        self._config_manager = get_config_manager(config_dir)
        config = self._config_manager.get_config()

        self.model = model or config.model
        self.generation_config = GenerationConfig(
            temperature=config.temperature,
            max_output_tokens=config.max_output_tokens,
        )
        self._last_topic: Optional[str] = None

        self._http = HTTPClient(
            api_key=api_key or config.api_key,
            base_url=config.base_url,
            timeout=timeout,
            transport=transport
        )

    @property
    def has_api_key(self) -> bool:
        """Задан ли ключ API."""
        return bool(self._http.api_key)

    @property
    def last_topic(self) -> Optional[str]:
        """Тема последней генерации."""
        return self._last_topic

    # ===== GENERATION =====

    def generate_article(self, topic: str) -> Article:
        """
        Сгенерировать статью по теме.

        Args:
            topic: Тема статьи

        Returns:
            Статья

        Raises:
            ValidationError: Пустая тема
            AuthenticationError, RateLimitError, EmptyResultError, TransportError
        """
        topic = (topic or "").strip()
        if not topic:
            raise ValidationError("Topic must not be empty")

        self._last_topic = topic
        logger.info(f"Generating article about: {topic}")

        request = GenerateContentRequest.from_prompt(
            build_prompt(topic), generation_config=self.generation_config
        )
        text = self._http.generate_text(self.model, request)

        return Article(topic=topic, content=text, model=self.model)

    def regenerate(self) -> Article:
        """
        Повторить генерацию для последней темы.

        Raises:
            BlogWriterError: Если генерации ещё не было
        """
        if self._last_topic is None:
            raise BlogWriterError("Nothing to regenerate: no article has been generated yet")
        return self.generate_article(self._last_topic)

    # ===== RENDERING =====

    @staticmethod
    def render(article: Union[Article, str]) -> str:
        """
        Преобразовать статью (или markdown-текст) в HTML.

        Args:
            article: Статья или текст

        Returns:
            HTML разметка
        """
        text = article.content if isinstance(article, Article) else article
        return format_markdown(text)

    def close(self) -> None:
        """Закрыть HTTP клиент."""
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def request_article(
    topic: str,
    credential: str,
    model: Optional[str] = None,
    transport: Optional[httpx.BaseTransport] = None
) -> str:
    """
    Запросить текст статьи одним обращением к API.

    Args:
        topic: Тема статьи
        credential: Gemini API key
        model: Модель (по умолчанию из конфигурации)
        transport: Транспорт httpx (для тестов)

    Returns:
        Сгенерированный markdown-текст

    Raises:
        AuthenticationError: Ключ неверен или не задан
        RateLimitError: Превышен лимит запросов
        EmptyResultError: Пустой ответ
        TransportError: Прочие ошибки сети/протокола
    """
    if not credential or not credential.strip():
        raise AuthenticationError("Gemini API key is required")

    with BlogWriterClient(api_key=credential.strip(), model=model, transport=transport) as client:
        return client.generate_article(topic).content
