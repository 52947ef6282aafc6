#!/usr/bin/env python3
"""
Entrypoint для клиента, периодически отправляющего координаты.

Запуск:
    python entrypoints/entrypoint_reporter.py

Адрес API задаётся LOCATION_API_URL, интервал задаётся REPORTER_INTERVAL_SECONDS.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

from geotrack.client.api_client import LocationApiClient
from geotrack.client.reporter import LocationReporter, StaticPositionProvider
from geotrack.common.logger import setup_logging
from geotrack.config import settings


async def run_reporter() -> None:
    """Запускает репортер до Ctrl+C."""
    setup_logging()

    async with LocationApiClient() as client:
        reporter = LocationReporter(
            client=client,
            provider=StaticPositionProvider.from_settings(),
            interval=settings.reporter.INTERVAL_SECONDS,
        )
        await reporter.start()
        try:
            while reporter.running:
                await asyncio.sleep(1)
        finally:
            await reporter.stop()


if __name__ == "__main__":
    try:
        asyncio.run(run_reporter())
    except KeyboardInterrupt:
        pass
