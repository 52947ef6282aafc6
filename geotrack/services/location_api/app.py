# geotrack/services/location_api/app.py
"""
FastAPI приложение Location API.

Endpoints:
- POST /api/location - принять точку
- GET /api/location?limit=N - последние N точек (по умолчанию 10)
- GET /api/location/latest - последняя точка
- GET /api/health - статус сервиса
- GET / - описание API
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from geotrack.common.constants import API_VERSION, TypeMsg
from geotrack.common.exceptions import InternalError, LocationServiceError, ValidationError
from geotrack.common.logger import log_error, log_info, setup_logging
from geotrack.config import settings
from geotrack.core.locations.store import LocationStore
from geotrack.services.location_api.dependencies import get_location_service, init_dependencies
from geotrack.services.location_api.service import LocationService
from geotrack.shared.models.common import (
    ErrorResponse,
    HealthStatus,
    LocationListResponse,
    LocationResponse,
    MessageResponse,
    ServiceInfo,
)


# =============================================================================
# LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Жизненный цикл приложения: загрузка журнала при старте."""
    setup_logging()

    store: LocationStore = app.state.location_store
    await store.load()

    await log_info(
        f"Location API запущен: окружение={settings.system.ENVIRONMENT}, "
        f"файл данных={store.path}, записей={store.count}",
        type_msg=TypeMsg.INFO,
    )

    yield

    await log_info("Location API остановлен", type_msg=TypeMsg.INFO)


# =============================================================================
# ПРИЛОЖЕНИЕ
# =============================================================================

def create_app(store: Optional[LocationStore] = None) -> FastAPI:
    """
    Собирает приложение.

    Args:
        store: Хранилище журнала; по умолчанию файл из настроек
    """
    app = FastAPI(
        title="Location Tracking API",
        description="Приём геолокации устройств и выдача последних точек.",
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    init_dependencies(app, store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LocationServiceError)
    async def service_error_handler(request: Request, exc: LocationServiceError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Детали сбоя уходят в лог; клиенту только общий текст."""
        await log_error(
            f"Ошибка при обработке {request.method} {request.url.path}: {exc}",
            exc_info=True,
        )
        error = InternalError()
        return JSONResponse(status_code=error.status_code, content={"error": error.message})

    # === LOCATION ENDPOINTS ===

    @app.post(
        "/api/location",
        response_model=LocationResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
        tags=["Location"],
        summary="Принять геолокацию",
    )
    async def post_location(
        request: Request,
        service: LocationService = Depends(get_location_service),
    ) -> LocationResponse:
        """
        Принимает {latitude, longitude, accuracy?, timestamp?}.

        Тело читается вручную, чтобы ошибки валидации отдавались как 400
        с понятным сообщением, а не как 422.
        """
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValidationError("Request body must be valid JSON") from e

        record = await service.ingest(payload)

        return LocationResponse(message="Location received successfully", data=record)

    @app.get(
        "/api/location",
        response_model=LocationListResponse,
        responses={500: {"model": ErrorResponse}},
        tags=["Location"],
        summary="Последние локации",
    )
    async def get_locations(
        limit: Optional[str] = Query(default=None),
        service: LocationService = Depends(get_location_service),
    ) -> LocationListResponse:
        """Последние limit точек, от старых к новым."""
        records = service.query(limit)
        return LocationListResponse(
            message="Location data retrieved successfully",
            count=len(records),
            data=records,
        )

    @app.get(
        "/api/location/latest",
        response_model=LocationResponse,
        responses={404: {"model": MessageResponse}, 500: {"model": ErrorResponse}},
        tags=["Location"],
        summary="Последняя локация",
    )
    async def get_latest_location(
        service: LocationService = Depends(get_location_service),
    ) -> Any:
        record = service.latest()
        if record is None:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"message": "No location data available"},
            )

        return LocationResponse(message="Latest location retrieved successfully", data=record)

    # === HEALTH / INFO ===

    @app.get("/api/health", response_model=HealthStatus, tags=["Health"])
    async def health_check(
        service: LocationService = Depends(get_location_service),
    ) -> HealthStatus:
        """Проверка здоровья сервиса."""
        return HealthStatus(**service.health())

    @app.get("/", response_model=ServiceInfo, tags=["Health"])
    async def root(
        service: LocationService = Depends(get_location_service),
    ) -> ServiceInfo:
        return ServiceInfo(**service.info())

    return app


app = create_app()
