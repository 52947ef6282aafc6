"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Generator

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("LOG_FORMAT", "colored")

from fastapi.testclient import TestClient

from geotrack.common.timeutils import utc_now_iso
from geotrack.core.locations.store import LocationStore
from geotrack.services.location_api.app import create_app
from geotrack.shared.models.location_dto import LocationFix


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


# =============================================================================
# ФИКСТУРЫ ХРАНИЛИЩА
# =============================================================================

@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    """Путь к файлу журнала во временной директории."""
    return tmp_path / "locations.json"


@pytest.fixture
def store(data_file: Path) -> LocationStore:
    """Пустое хранилище на временном файле."""
    return LocationStore(data_file)


@pytest.fixture
def make_fix() -> Callable[..., LocationFix]:
    """Фабрика валидных точек."""

    def _make(
        latitude: float = 37.7749,
        longitude: float = -122.4194,
        accuracy: float | None = 5.0,
        timestamp: str | None = None,
    ) -> LocationFix:
        return LocationFix(
            latitude=latitude,
            longitude=longitude,
            accuracy=accuracy,
            timestamp=timestamp or utc_now_iso(),
        )

    return _make


# =============================================================================
# ФИКСТУРЫ API
# =============================================================================

@pytest.fixture
def client(store: LocationStore) -> Generator[TestClient, None, None]:
    """TestClient с запущенным lifespan (журнал загружен)."""
    app = create_app(store=store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def server_error_client(store: LocationStore) -> Generator[TestClient, None, None]:
    """TestClient, который отдаёт ответы 500 вместо проброса исключения в тест."""
    app = create_app(store=store)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """Тело POST /api/location."""
    return {"latitude": 37.7749, "longitude": -122.4194, "accuracy": 5}
