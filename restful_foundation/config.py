"""
Конфигурационные параметры клиента RESTfulFoundation.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_USER_AGENT = "RESTfulFoundation.Client"


class RESTConfig(BaseSettings):
    """
    Настройки клиента.
    Читаются из переменных окружения (префикс RESTFUL_) или .env файла.

    Attributes:
        root_path: Корневой URL API
        user_agent: Значение заголовка User-Agent для всех запросов
        timeout: Общий таймаут запроса в секундах
        max_connections: Максимальное количество одновременных соединений
        verify_ssl: Проверять SSL сертификаты
    """

    root_path: Optional[str] = Field(None, alias="RESTFUL_ROOT_PATH")
    user_agent: str = Field(DEFAULT_USER_AGENT, alias="RESTFUL_USER_AGENT")
    timeout: float = Field(100, alias="RESTFUL_TIMEOUT", gt=0, le=3600)
    max_connections: int = Field(100, alias="RESTFUL_MAX_CONNECTIONS", ge=1)
    verify_ssl: bool = Field(True, alias="RESTFUL_VERIFY_SSL")

    model_config = SettingsConfigDict(
        env_prefix="RESTFUL_",
        # Сначала ищем .env в текущей директории, затем в корне проекта
        env_file=(
            ".env",
            str(Path(__file__).parent.parent / ".env"),
        ),
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )
