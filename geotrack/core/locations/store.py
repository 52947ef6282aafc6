# geotrack/core/locations/store.py
"""
Хранилище журнала локаций.

Журнал живёт в памяти (последние MAX_STORED_LOCATIONS записей, старые
вытесняются первыми) и после каждого добавления целиком перезаписывается
в JSON-файл. Сбой записи логируется, но не отменяет добавление.
"""

from __future__ import annotations

import asyncio
import json
from collections import deque
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from geotrack.common.constants import DEFAULT_QUERY_LIMIT, MAX_STORED_LOCATIONS, TypeMsg
from geotrack.common.exceptions import StorageReadError, StorageWriteError
from geotrack.common.logger import log_error, log_info, log_warning
from geotrack.common.timeutils import utc_now_iso
from geotrack.shared.models.location_dto import LocationFix, LocationRecord


class LocationStore:
    """
    Упорядоченный журнал локаций с файловым бэкапом.

    Единственный владелец журнала и файла. Добавление (выдача id, вставка,
    вытеснение, запись на диск) выполняется под одной блокировкой.
    """

    capacity = MAX_STORED_LOCATIONS

    def __init__(self, path: Path | str) -> None:
        """
        Args:
            path: Файл, в котором хранится журнал
        """
        self._path = Path(path)
        self._log: deque[LocationRecord] = deque()
        self._next_id = 1
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def count(self) -> int:
        return len(self._log)

    # =========================================================================
    # ЗАГРУЗКА
    # =========================================================================

    async def load(self) -> None:
        """
        Загружает журнал из файла, заменяя текущий.

        Нет файла: пустой журнал. Файл повреждён: пустой журнал и
        предупреждение; запуск сервиса не прерывается.
        """
        if not self._path.exists():
            self._replace([])
            await log_info(
                f"Файл журнала не найден, начинаем с пустого: {self._path}",
                type_msg=TypeMsg.INFO,
            )
            return

        try:
            records = self._read_snapshot()
        except StorageReadError as e:
            self._replace([])
            await log_warning(
                f"Не удалось прочитать журнал локаций, начинаем с пустого: {e.message}",
                extra={"path": str(self._path)},
            )
            return

        self._replace(records)
        await log_info(
            f"Загружено {len(self._log)} локаций из {self._path}",
            type_msg=TypeMsg.INFO,
        )

    def _read_snapshot(self) -> list[LocationRecord]:
        """
        Читает и разбирает файл журнала.

        Raises:
            StorageReadError: файл не читается или содержимое некорректно
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
            data = json.loads(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageReadError(str(e)) from e

        if not isinstance(data, list):
            raise StorageReadError(f"ожидался JSON-массив, получено {type(data).__name__}")

        try:
            return [LocationRecord.model_validate(item) for item in data]
        except PydanticValidationError as e:
            raise StorageReadError(f"некорректная запись: {e.error_count()} ошибок") from e

    def _replace(self, records: list[LocationRecord]) -> None:
        """Полностью заменяет журнал и пересчитывает счётчик id."""
        self._log = deque(records[-self.capacity:])
        max_id = max((r.id for r in records), default=0)
        self._next_id = max_id + 1

    # =========================================================================
    # ЗАПИСЬ
    # =========================================================================

    async def append(self, fix: LocationFix) -> LocationRecord:
        """
        Добавляет точку в конец журнала.

        Назначает id и receivedAt, вытесняет самые старые записи сверх
        ёмкости и сохраняет журнал на диск до возврата.

        Returns:
            Сохранённая запись
        """
        async with self._lock:
            record = LocationRecord.from_fix(
                fix,
                record_id=self._next_id,
                received_at=utc_now_iso(),
            )
            self._next_id += 1

            self._log.append(record)
            while len(self._log) > self.capacity:
                self._log.popleft()

            await self._persist_locked()

        return record

    async def persist(self) -> bool:
        """
        Перезаписывает файл журнала текущим содержимым.

        Returns:
            True, если запись удалась
        """
        async with self._lock:
            return await self._persist_locked()

    async def _persist_locked(self) -> bool:
        payload = [record.to_json() for record in self._log]
        try:
            await asyncio.to_thread(self._write_snapshot, payload)
        except StorageWriteError as e:
            await log_error(
                f"Ошибка сохранения журнала локаций: {e.message}",
                extra={"path": str(self._path), "records": len(payload)},
                exc_info=True,
            )
            return False
        return True

    def _write_snapshot(self, payload: list[dict[str, Any]]) -> None:
        """
        Raises:
            StorageWriteError: файл не удалось записать
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, ensure_ascii=False, indent=2)
        except (OSError, TypeError, ValueError) as e:
            raise StorageWriteError(str(e)) from e

    # =========================================================================
    # ЧТЕНИЕ
    # =========================================================================

    def recent(self, limit: int = DEFAULT_QUERY_LIMIT) -> list[LocationRecord]:
        """Последние limit записей, от старых к новым."""
        if limit <= 0:
            return []
        return list(self._log)[-limit:]

    def latest(self) -> Optional[LocationRecord]:
        """Последняя добавленная запись или None."""
        return self._log[-1] if self._log else None
