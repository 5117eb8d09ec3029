"""
Исключения для BlogWriter Client.
"""

from typing import Optional, Dict, Any


class BlogWriterError(Exception):
    """Базовое исключение для BlogWriter Client."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(BlogWriterError):
    """Некорректные входные данные (например, пустая тема)."""
    pass


class APIError(BlogWriterError):
    """Ошибка API запроса."""

    def __init__(
        self,
        message: str,
        status_code: int,
        error_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.error_type = error_type
        super().__init__(message, details)


class AuthenticationError(APIError):
    """Ключ API неверен или не имеет доступа (400/403)."""

    def __init__(
        self,
        message: str = "Invalid API key",
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, status_code=status_code, error_type="auth_error", details=details)


class RateLimitError(APIError):
    """Превышен лимит запросов (429)."""

    def __init__(self, message: str = "Rate limit exceeded", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=429, error_type="rate_limited", details=details)


class TransportError(BlogWriterError):
    """Сетевая ошибка, прочие HTTP статусы или некорректный ответ."""

    def __init__(
        self,
        message: str = "Request failed",
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        super().__init__(message, details)


class EmptyResultError(BlogWriterError):
    """Сервис ответил успешно, но текста в ответе нет."""
    pass
