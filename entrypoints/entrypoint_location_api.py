#!/usr/bin/env python3
"""
Entrypoint для Location API.

Запуск:
    python entrypoints/entrypoint_location_api.py

Порт по умолчанию: 3000 (переменная окружения PORT).
"""

import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

import uvicorn

from geotrack.config import settings


def main() -> None:
    """Запустить Location API."""
    # Журнал не защищён между процессами: только один воркер
    uvicorn.run(
        "geotrack.services.location_api.app:app",
        host=settings.server.HOST,
        port=settings.server.PORT,
        workers=1,
        reload=settings.system.DEBUG,
        log_level=settings.system.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
