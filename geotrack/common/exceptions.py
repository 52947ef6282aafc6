# geotrack/common/exceptions.py
"""
Иерархия исключений сервиса локаций.
"""

from __future__ import annotations


class LocationServiceError(Exception):
    """Базовая ошибка сервиса."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LocationServiceError):
    """Некорректные входные данные (HTTP 400)."""

    status_code = 400


class StorageReadError(LocationServiceError):
    """Файл хранилища не читается или повреждён."""


class StorageWriteError(LocationServiceError):
    """Не удалось сохранить журнал на диск."""


class InternalError(LocationServiceError):
    """Непредвиденная ошибка при обработке запроса (HTTP 500)."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
