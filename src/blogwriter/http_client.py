"""
HTTP клиент для Gemini generateContent API.
"""

import logging
from typing import Optional, Dict, Any

import httpx

from blogwriter.config import DEFAULT_BASE_URL
from blogwriter.exceptions import (
    AuthenticationError,
    EmptyResultError,
    RateLimitError,
    TransportError,
)
from blogwriter.models import GenerateContentRequest, GenerateContentResponse

logger = logging.getLogger(__name__)


class HTTPClient:
    """
    HTTP клиент для работы с Gemini API.

    Поддерживает:
    - Передачу ключа API через query параметр `key`
    - Обработку ошибок API (400/403/429/прочие)
    - Ровно один запрос на вызов, без повторов
    """

    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Инициализация HTTP клиента.

        Args:
            api_key: Gemini API key.
            base_url: Базовый URL API.
            timeout: Таймаут запросов в секундах.
            transport: Транспорт httpx (для тестов).
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

        # HTTP клиент
        self._client: Optional[httpx.Client] = None

    def _get_sync_client(self) -> httpx.Client:
        """Получить синхронный HTTP клиент."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport
            )
        return self._client

    def _handle_response_error(self, response: httpx.Response) -> None:
        """
        Обработать ошибку ответа.

        Args:
            response: HTTP ответ

        Raises:
            AuthenticationError: 400/403
            RateLimitError: 429
            TransportError: прочие статусы
        """
        if response.is_success:
            return

        try:
            error_data = response.json().get("error", {})
            message = error_data.get("message") or response.text
            details = {"status": error_data.get("status")}
        except Exception:
            message = response.text or f"HTTP {response.status_code}"
            details = {}

        logger.error(f"Gemini API error {response.status_code}: {message}")

        if response.status_code == 400:
            raise AuthenticationError(
                "Invalid API key or request format. Please check your Gemini API key.",
                status_code=400,
                details={**details, "response": message}
            )
        elif response.status_code == 403:
            raise AuthenticationError(
                "API access denied. Please verify your Gemini API key has the required permissions.",
                status_code=403,
                details={**details, "response": message}
            )
        elif response.status_code == 429:
            raise RateLimitError(
                "Rate limit exceeded. Please try again in a few minutes.",
                details={**details, "response": message}
            )
        else:
            raise TransportError(
                f"API request failed: {response.status_code}",
                status_code=response.status_code,
                details={**details, "response": message}
            )

    def generate_content(self, model: str, request: GenerateContentRequest) -> GenerateContentResponse:
        """
        Выполнить запрос generateContent.

        Args:
            model: Имя модели
            request: Тело запроса

        Returns:
            Разобранный ответ API

        Raises:
            AuthenticationError: Ключ не задан или отклонён
            RateLimitError: Превышен лимит
            TransportError: Сетевая ошибка или некорректный ответ
        """
        if not self.api_key:
            raise AuthenticationError("Gemini API key is required")

        client = self._get_sync_client()

        logger.debug(f"POST /models/{model}:generateContent")
        try:
            response = client.post(
                f"/models/{model}:generateContent",
                params={"key": self.api_key},
                json=request.to_payload()
            )
        except httpx.HTTPError as e:
            logger.error(f"Request to Gemini API failed: {e}")
            raise TransportError(
                "Failed to reach the Gemini API. Please check your internet connection and try again.",
                details={"error": str(e)}
            ) from e

        self._handle_response_error(response)

        try:
            data: Dict[str, Any] = response.json()
            return GenerateContentResponse.model_validate(data)
        except ValueError as e:
            # json.JSONDecodeError и pydantic.ValidationError - подклассы ValueError
            raise TransportError(
                "Malformed response from the Gemini API",
                status_code=response.status_code,
                details={"error": str(e)}
            ) from e

    def generate_text(self, model: str, request: GenerateContentRequest) -> str:
        """
        Сгенерировать текст.

        Returns:
            Текст первого кандидата

        Raises:
            EmptyResultError: Успешный ответ без текста
        """
        result = self.generate_content(model, request)

        if not result.candidates:
            block_reason = result.prompt_feedback.block_reason if result.prompt_feedback else None
            raise EmptyResultError(
                "No content generated. Please try a different prompt.",
                details={"block_reason": block_reason} if block_reason else None
            )

        text = result.first_text()
        if not text or not text.strip():
            raise EmptyResultError(
                "Empty response from Gemini API. Please try again.",
                details={"finish_reason": result.candidates[0].finish_reason}
            )

        logger.info(f"Generated {len(text)} characters with {model}")
        return text

    def close(self) -> None:
        """Закрыть HTTP клиент."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
