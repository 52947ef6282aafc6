# geotrack/config/loader.py
"""
Загрузчик конфигурации проекта.
Единственный источник значений по умолчанию: config/config.json.
Переменные окружения (и .env в корне проекта) имеют приоритет.
"""

from __future__ import annotations

import json
import os
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from geotrack.common.constants import Environment


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Возвращает путь к файлу конфигурации."""
    return get_project_root() / "config" / "config.json"


def load_config_json() -> dict[str, Any]:
    """Загружает config.json и возвращает словарь."""
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


def _env(*names: str, default: Any = None) -> Any:
    """Первое непустое значение из перечисленных переменных окружения."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "geotrack"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = Environment.DEVELOPMENT.value

    @field_validator("ENVIRONMENT", mode="before")
    @classmethod
    def normalize_environment(cls, v: Any) -> str:
        """Приводит режим к нижнему регистру; пустое значение означает development."""
        if not v:
            return Environment.DEVELOPMENT.value
        return str(v).strip().lower()

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION.value


class ServerSettings(BaseModel):
    """Настройки HTTP-сервера."""
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=3000, ge=1, le=65535)
    CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])


class StorageSettings(BaseModel):
    """Настройки файла журнала локаций."""
    DATA_FILE_NAME: str = "locations.json"
    DATA_FILE: str | None = None

    def resolve_data_file(self, environment: str) -> Path:
        """
        Путь к файлу журнала.

        Явно заданный DATA_FILE важнее всего; в production файл лежит во
        временной директории, иначе в корне проекта.
        """
        if self.DATA_FILE:
            return Path(self.DATA_FILE)
        if environment == Environment.PRODUCTION.value:
            return Path(tempfile.gettempdir()) / self.DATA_FILE_NAME
        return get_project_root() / self.DATA_FILE_NAME


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_FORMAT: str = "colored"
    LOG_MAX_BYTES: int = 10485760
    LOG_BACKUP_COUNT: int = 5

    @field_validator("LOG_FORMAT")
    @classmethod
    def check_format(cls, v: str) -> str:
        """Поддерживаются только json и colored."""
        if v not in ("json", "colored"):
            raise ValueError(f"Неизвестный формат логов: {v}")
        return v


class ReporterSettings(BaseModel):
    """Настройки клиента, периодически отправляющего координаты."""
    API_URL: str = "http://localhost:3000"
    INTERVAL_SECONDS: float = Field(default=30.0, gt=0)
    REQUEST_TIMEOUT: float = Field(default=10.0, gt=0)
    LATITUDE: float = Field(default=37.7749, ge=-90, le=90)
    LONGITUDE: float = Field(default=-122.4194, ge=-180, le=180)
    ACCURACY: float | None = 5.0


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    system: SystemSettings = Field(default_factory=SystemSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    reporter: ReporterSettings = Field(default_factory=ReporterSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def data_file(self) -> Path:
        """Файл журнала для текущего режима."""
        return self.storage.resolve_data_file(self.system.ENVIRONMENT)

    @classmethod
    def from_config_json(cls, config_data: dict[str, Any] | None = None) -> "Settings":
        """
        Создаёт объект Settings из config.json.
        Значения из окружения переопределяют файл.
        """
        if config_data is None:
            config_data = load_config_json()

        # Ключи _comment_* это пояснения внутри JSON
        data = {k: v for k, v in config_data.items() if not k.startswith("_comment_")}

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "geotrack"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=data.get("DEBUG", False),
                LOG_LEVEL=_env("LOG_LEVEL", default=data.get("LOG_LEVEL", "INFO")),
                ENVIRONMENT=_env("ENVIRONMENT", "NODE_ENV", default=data.get("ENVIRONMENT")),
            ),
            server=ServerSettings(
                HOST=_env("HOST", default=data.get("HOST", "0.0.0.0")),
                PORT=int(_env("PORT", default=data.get("PORT", 3000))),
                CORS_ORIGINS=data.get("CORS_ORIGINS", ["*"]),
            ),
            storage=StorageSettings(
                DATA_FILE_NAME=data.get("DATA_FILE_NAME", "locations.json"),
                DATA_FILE=_env("LOCATION_DATA_FILE", default=data.get("DATA_FILE")),
            ),
            logging=LoggingSettings(
                LOG_TO_FILE=data.get("LOG_TO_FILE", False),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_FORMAT=_env("LOG_FORMAT", default=data.get("LOG_FORMAT", "colored")),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
                LOG_BACKUP_COUNT=data.get("LOG_BACKUP_COUNT", 5),
            ),
            reporter=ReporterSettings(
                API_URL=_env("LOCATION_API_URL", default=data.get("REPORTER_API_URL", "http://localhost:3000")),
                INTERVAL_SECONDS=float(_env(
                    "REPORTER_INTERVAL_SECONDS",
                    default=data.get("REPORTER_INTERVAL_SECONDS", 30.0),
                )),
                REQUEST_TIMEOUT=data.get("REPORTER_REQUEST_TIMEOUT", 10.0),
                LATITUDE=data.get("REPORTER_LATITUDE", 37.7749),
                LONGITUDE=data.get("REPORTER_LONGITUDE", -122.4194),
                ACCURACY=data.get("REPORTER_ACCURACY", 5.0),
            ),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


# Экспорт синглтона для удобного импорта
settings = get_settings()
