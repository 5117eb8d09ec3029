"""
Управление конфигурацией и хранением ключа API.

Хранит данные в файле в домашней директории пользователя.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from blogwriter.models import ClientConfig

logger = logging.getLogger(__name__)

# =============================================================================
# НАСТРОЙКИ ПО УМОЛЧАНИЮ
# =============================================================================
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-1.5-flash"
# =============================================================================


def default_config() -> ClientConfig:
    """Конфигурация по умолчанию (без ключа API)."""
    return ClientConfig(
        api_key=None,
        model=DEFAULT_MODEL,
        base_url=DEFAULT_BASE_URL,
    )


class ConfigManager:
    """Менеджер конфигурации клиента."""

    # Директория для хранения конфигурации
    CONFIG_DIR_NAME = ".blogwriter"
    CONFIG_FILE_NAME = "config.json"

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Инициализация менеджера конфигурации.

        Args:
            config_dir: Путь к директории конфигурации.
                        По умолчанию ~/.blogwriter/
        """
        if config_dir is None:
            home = Path.home()
            self.config_dir = home / self.CONFIG_DIR_NAME
        else:
            self.config_dir = Path(config_dir)

        self.config_file = self.config_dir / self.CONFIG_FILE_NAME
        self._config: Optional[ClientConfig] = None

    def _ensure_config_dir(self) -> None:
        """Создать директорию конфигурации если не существует."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load(self) -> ClientConfig:
        """
        Загрузить конфигурацию из файла.

        Returns:
            Конфигурация клиента
        """
        if self._config is not None:
            return self._config

        if not self.config_file.exists():
            self._config = default_config()
            return self._config

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = json.load(f)

            # Недостающие поля берём из значений по умолчанию
            merged = default_config().model_dump()
            merged.update({k: v for k, v in data.items() if v is not None})
            self._config = ClientConfig(**merged)
            return self._config

        except (KeyError, ValueError, AttributeError, TypeError) as e:
            # ValueError покрывает JSONDecodeError, UnicodeDecodeError и ошибки pydantic
            # Поврежденный файл - создаём новую конфигурацию
            logger.warning(f"Config file {self.config_file} is corrupt, using defaults: {e}")
            self._config = default_config()
            return self._config

    def save(self, config: Optional[ClientConfig] = None) -> None:
        """
        Сохранить конфигурацию в файл.

        Args:
            config: Конфигурация для сохранения.
                   Если не указана, сохраняет текущую.
        """
        if config is not None:
            self._config = config

        if self._config is None:
            return

        self._ensure_config_dir()

        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(self._config.model_dump(), f, indent=2, ensure_ascii=False)

        logger.debug(f"Config saved to {self.config_file}")

    def get_config(self) -> ClientConfig:
        """Получить текущую конфигурацию."""
        if self._config is None:
            return self.load()
        return self._config

    def set_api_key(self, api_key: str) -> None:
        """
        Сохранить ключ API.

        Args:
            api_key: Gemini API key
        """
        config = self.get_config()
        config.api_key = api_key.strip()
        self.save(config)
        logger.info("API key saved")

    def get_api_key(self) -> Optional[str]:
        """
        Получить сохранённый ключ API.

        Returns:
            Ключ или None если не задан
        """
        return self.get_config().api_key or None

    def clear_api_key(self) -> None:
        """Удалить сохранённый ключ API."""
        config = self.get_config()
        config.api_key = None
        self.save(config)

    def set_model(self, model: str) -> None:
        """
        Установить модель генерации.

        Args:
            model: Имя модели (например, gemini-1.5-flash)
        """
        config = self.get_config()
        config.model = model
        self.save(config)

    def clear_all(self) -> None:
        """Сбросить конфигурацию к значениям по умолчанию."""
        self._config = default_config()
        self.save()


_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """
    Получить глобальный экземпляр менеджера конфигурации.

    Args:
        config_dir: Путь к директории конфигурации

    Returns:
        ConfigManager
    """
    global _config_manager

    if _config_manager is None or config_dir is not None:
        _config_manager = ConfigManager(config_dir)

    return _config_manager


def mask_key(api_key: Optional[str]) -> str:
    """Скрыть ключ для вывода: первые 4 и последние 4 символа."""
    if not api_key:
        return ""
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:4]}{'*' * (len(api_key) - 8)}{api_key[-4:]}"
