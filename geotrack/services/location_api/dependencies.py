# geotrack/services/location_api/dependencies.py
"""
Зависимости Location API.

Хранилище создаётся один раз на приложение и живёт в app.state;
обработчики получают сервис через Depends.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request

from geotrack.core.locations.store import LocationStore
from geotrack.services.location_api.service import LocationService


def init_dependencies(app: FastAPI, store: Optional[LocationStore] = None) -> LocationService:
    """
    Создаёт хранилище и сервис и прикрепляет их к приложению.

    Args:
        app: FastAPI приложение
        store: Готовое хранилище (тесты); по умолчанию файл из настроек
    """
    if store is None:
        from geotrack.config import settings
        store = LocationStore(Path(settings.data_file))

    service = LocationService(store)
    app.state.location_store = store
    app.state.location_service = service
    return service


def get_location_service(request: Request) -> LocationService:
    """Получение сервиса текущего приложения."""
    service = getattr(request.app.state, "location_service", None)
    if service is None:
        raise RuntimeError("LocationService не инициализирован")
    return service
