"""
BlogWriter Python Client.

Генерация статей через Gemini API и преобразование markdown в HTML.
"""

from blogwriter.client import BlogWriterClient, request_article
from blogwriter.markdown_formatter import format_markdown, format_inline
from blogwriter.models import (
    Article,
    ClientConfig,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
)
from blogwriter.exceptions import (
    BlogWriterError,
    ValidationError,
    APIError,
    AuthenticationError,
    RateLimitError,
    TransportError,
    EmptyResultError,
)

__version__ = "1.0.0"

__all__ = [
    # Client
    "BlogWriterClient",
    "request_article",
    # Formatter
    "format_markdown",
    "format_inline",
    # Models
    "Article",
    "ClientConfig",
    "GenerateContentRequest",
    "GenerateContentResponse",
    "GenerationConfig",
    # Exceptions
    "BlogWriterError",
    "ValidationError",
    "APIError",
    "AuthenticationError",
    "RateLimitError",
    "TransportError",
    "EmptyResultError",
]
