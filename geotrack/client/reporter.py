# geotrack/client/reporter.py
"""
Периодическая отправка координат устройства в Location API.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from geotrack.client.api_client import LocationApiClient
from geotrack.common.constants import TypeMsg
from geotrack.common.logger import log_error, log_info
from geotrack.common.timeutils import utc_now_iso
from geotrack.shared.models.location_dto import LocationFix, LocationRecord


class PositionProvider(ABC):
    """Источник координат (GPS, браузер, тестовая точка)."""

    @abstractmethod
    async def acquire(self) -> LocationFix:
        """
        Получает текущую точку.

        Raises:
            Exception: если координаты сейчас недоступны
        """
        pass


class StaticPositionProvider(PositionProvider):
    """
    Фиксированная тестовая точка.
    Используется, когда к процессу не подключено реальное устройство.
    """

    def __init__(self, latitude: float, longitude: float, accuracy: Optional[float] = None) -> None:
        self.latitude = latitude
        self.longitude = longitude
        self.accuracy = accuracy

    @classmethod
    def from_settings(cls) -> "StaticPositionProvider":
        from geotrack.config import settings
        return cls(
            latitude=settings.reporter.LATITUDE,
            longitude=settings.reporter.LONGITUDE,
            accuracy=settings.reporter.ACCURACY,
        )

    async def acquire(self) -> LocationFix:
        return LocationFix(
            latitude=self.latitude,
            longitude=self.longitude,
            accuracy=self.accuracy,
            timestamp=utc_now_iso(),
        )


class LocationReporter:
    """
    Раз в interval секунд берёт точку у провайдера и отправляет её.
    Ошибки отдельной отправки логируются, цикл продолжается.
    """

    name = "LocationReporter"

    def __init__(
        self,
        client: LocationApiClient,
        provider: PositionProvider,
        interval: float = 30.0,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval должен быть положительным")
        self.client = client
        self.provider = provider
        self.interval = interval
        self._running = False
        self._task: Optional[asyncio.Task] = None
        self._sent = 0
        self._failed = 0
        self._last_record: Optional[LocationRecord] = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Запускает фоновый цикл отправки."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._run())
        await log_info(
            f"{self.name} запущен, интервал {self.interval} с",
            type_msg=TypeMsg.INFO,
        )

    async def stop(self) -> None:
        """Останавливает цикл."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None

        await log_info(f"{self.name} остановлен", type_msg=TypeMsg.INFO)

    async def _run(self) -> None:
        while self._running:
            await self.report_once()
            await asyncio.sleep(self.interval)

    async def report_once(self) -> Optional[LocationRecord]:
        """
        Один цикл: получить точку и отправить.

        Returns:
            Сохранённая сервером запись или None при ошибке
        """
        try:
            fix = await self.provider.acquire()
        except Exception as e:
            self._failed += 1
            await log_error(f"Не удалось получить координаты: {e}")
            return None

        try:
            record = await self.client.post_location(
                latitude=fix.latitude,
                longitude=fix.longitude,
                accuracy=fix.accuracy,
                timestamp=fix.timestamp,
            )
        except (httpx.HTTPError, KeyError, ValueError) as e:
            self._failed += 1
            await log_error(
                f"Ошибка отправки локации: {e}",
                extra={"latitude": fix.latitude, "longitude": fix.longitude},
            )
            return None

        self._sent += 1
        self._last_record = record
        await log_info(
            f"Локация отправлена, id={record.id}",
            type_msg=TypeMsg.DEBUG,
        )
        return record

    def get_stats(self) -> Dict[str, Any]:
        return {
            "sent": self._sent,
            "failed": self._failed,
            "last_record": self._last_record,
        }
