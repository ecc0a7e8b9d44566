"""Task Lifecycle Service - Configuration.

Конфигурация приложения через Pydantic Settings.
Настройки неизменяемы: создаются один раз при старте процесса
и передаются в конструкторы компонентов.
"""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from task_lifecycle.core.constants import (
    DEFAULT_DATABASE_URL,
    DEFAULT_DISPATCH_EVENT_TYPE,
    DEFAULT_DISPATCH_TIMEOUT,
    DEFAULT_DISPATCH_USER_AGENT,
    DEFAULT_DRAIN_TIMEOUT,
    DEFAULT_REDIS_URL,
    DEFAULT_TABLE_NAME,
    INTERNAL_SECRET_HEADER,
)


class ServerSettings(BaseModel):
    """Настройки сервера (Uvicorn)."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="0.0.0.0", description="Хост")
    port: int = Field(default=8000, description="Порт")
    reload: bool = Field(default=False, description="Режим автоперезагрузки")

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        """Валидация порта.

        Args:
            value: Номер порта для проверки.

        Returns:
            Проверенное значение порта.

        Raises:
            ValueError: Если порт вне допустимого диапазона.

        """
        if not 1 <= value <= 65535:
            msg = f"Порт ({value}) должен быть в диапазоне 1-65535"
            raise ValueError(msg)
        return value


class DatabaseSettings(BaseModel):
    """Настройки durable хранилища (SQLAlchemy)."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(default=DEFAULT_DATABASE_URL, description="SQLAlchemy async URL")
    echo: bool = Field(default=False, description="Логировать SQL запросы")
    table_name: str = Field(default=DEFAULT_TABLE_NAME, description="Таблица задач")


class RedisSettings(BaseModel):
    """Настройки Redis (кэш статусов)."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(default=DEFAULT_REDIS_URL, description="URL подключения к Redis")
    key_prefix: str = Field(default="", description="Префикс ключей кэша")
    status_ttl_seconds: int = Field(
        default=0,
        ge=0,
        description="TTL записи статуса (0 - без истечения)",
    )


class CacheSettings(BaseModel):
    """Поведение read path относительно кэша."""

    model_config = ConfigDict(frozen=True)

    read_through: bool = Field(
        default=False,
        description="При промахе кэша читать durable хранилище и чинить кэш",
    )


class InternalAuthSettings(BaseModel):
    """Настройки привилегированных endpoints."""

    model_config = ConfigDict(frozen=True)

    secret: str | None = Field(default=None, description="Общий секрет внешнего worker'а")
    header_name: str = Field(default=INTERNAL_SECRET_HEADER, description="Заголовок с секретом")

    @field_validator("secret")
    @classmethod
    def validate_secret(cls, value: str | None) -> str | None:
        """Пустой секрет считается ненастроенным.

        Args:
            value: Секрет для проверки.

        Returns:
            None если секрет пустой, иначе значение без изменений.

        """
        if not value:
            return None
        return value


class DispatchSettings(BaseModel):
    """Настройки dispatch во внешний backend."""

    model_config = ConfigDict(frozen=True)

    url: str | None = Field(
        default=None,
        description="Endpoint триггера (например https://api.github.com/repos/{owner}/{repo}/dispatches)",
    )
    token: str | None = Field(default=None, description="Токен для Authorization")
    event_type: str = Field(default=DEFAULT_DISPATCH_EVENT_TYPE, description="Тип события")
    user_agent: str = Field(default=DEFAULT_DISPATCH_USER_AGENT, description="User-Agent")
    timeout_seconds: float = Field(default=DEFAULT_DISPATCH_TIMEOUT, gt=0, description="HTTP таймаут")
    drain_timeout_seconds: float = Field(
        default=DEFAULT_DRAIN_TIMEOUT,
        ge=0,
        description="Сколько ждать незавершённые dispatch при остановке",
    )

    @property
    def enabled(self) -> bool:
        """Dispatch включён, если задан URL.

        Returns:
            True если URL настроен.

        """
        return bool(self.url)


class LogSettings(BaseModel):
    """Настройки логирования."""

    model_config = ConfigDict(frozen=True)

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Уровень логирования",
    )
    format: Literal["json", "text"] = Field(default="text", description="Формат логов")


class Settings(BaseSettings):
    """Главные настройки приложения.

    Все настройки загружаются из переменных окружения с префиксом TASKS__.
    Пример: TASKS__INTERNAL__SECRET=change-me
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        env_prefix="TASKS__",
        extra="ignore",
        frozen=True,
    )

    app_name: str = Field(default="Task Lifecycle Service", description="Название приложения")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Окружение",
    )
    debug: bool = Field(default=False, description="Режим отладки")

    server: ServerSettings = Field(default_factory=ServerSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    internal: InternalAuthSettings = Field(default_factory=InternalAuthSettings)
    dispatch: DispatchSettings = Field(default_factory=DispatchSettings)
    log: LogSettings = Field(default_factory=LogSettings)


@lru_cache
def get_settings() -> Settings:
    """Получить настройки процесса (создаются один раз).

    Returns:
        Singleton Settings.

    """
    return Settings()
