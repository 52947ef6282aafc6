"""
Тесты для хранилища журнала локаций.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from geotrack.common.constants import MAX_STORED_LOCATIONS
from geotrack.common.exceptions import StorageWriteError
from geotrack.core.locations.store import LocationStore


class TestAppend:
    """Тесты для append."""

    @pytest.mark.asyncio
    async def test_assigns_increasing_ids(self, store: LocationStore, make_fix) -> None:
        """Каждый новый id больше всех предыдущих."""
        ids = []
        for i in range(5):
            record = await store.append(make_fix(latitude=float(i)))
            ids.append(record.id)

        assert ids == sorted(ids)
        assert len(set(ids)) == 5

    @pytest.mark.asyncio
    async def test_sets_received_at(self, store: LocationStore, make_fix) -> None:
        """receivedAt назначает сервер."""
        record = await store.append(make_fix(timestamp="2024-01-01T00:00:00.000Z"))

        assert record.timestamp == "2024-01-01T00:00:00.000Z"
        assert record.received_at.endswith("Z")
        assert record.received_at != record.timestamp

    @pytest.mark.asyncio
    async def test_concurrent_appends_get_unique_ids(self, store: LocationStore, make_fix) -> None:
        """Параллельные добавления не получают одинаковых id."""
        records = await asyncio.gather(*(store.append(make_fix()) for _ in range(20)))

        ids = [r.id for r in records]
        assert len(set(ids)) == 20
        assert [r.id for r in store.recent(20)] == sorted(ids)

    @pytest.mark.asyncio
    async def test_evicts_oldest_over_capacity(self, store: LocationStore, make_fix) -> None:
        """Сверх ёмкости остаются только последние 100 записей."""
        total = MAX_STORED_LOCATIONS + 7
        appended = [await store.append(make_fix(accuracy=float(i))) for i in range(total)]

        assert store.count == MAX_STORED_LOCATIONS
        kept = store.recent(MAX_STORED_LOCATIONS)
        assert [r.id for r in kept] == [r.id for r in appended[7:]]

    @pytest.mark.asyncio
    async def test_writes_file_before_returning(
        self, store: LocationStore, data_file: Path, make_fix
    ) -> None:
        """После append файл уже содержит новую запись."""
        record = await store.append(make_fix())

        data = json.loads(data_file.read_text(encoding="utf-8"))
        assert data[-1]["id"] == record.id
        assert "receivedAt" in data[-1]

    @pytest.mark.asyncio
    async def test_persist_failure_keeps_record(self, store: LocationStore, make_fix) -> None:
        """Ошибка записи на диск не отменяет добавление."""
        with patch.object(
            LocationStore, "_write_snapshot", side_effect=StorageWriteError("disk full")
        ), patch("geotrack.core.locations.store.log_error", new_callable=AsyncMock) as mock_log:
            record = await store.append(make_fix())

        assert store.latest() == record
        assert store.count == 1
        mock_log.assert_awaited_once()


class TestRead:
    """Тесты для recent и latest."""

    @pytest.mark.asyncio
    async def test_recent_returns_all_in_order(self, store: LocationStore, make_fix) -> None:
        appended = [await store.append(make_fix(latitude=float(i))) for i in range(1, 8)]

        assert store.recent(7) == appended

    @pytest.mark.asyncio
    async def test_recent_window(self, store: LocationStore, make_fix) -> None:
        """Последние N записей, от старых к новым."""
        appended = [await store.append(make_fix(latitude=float(i))) for i in range(1, 6)]

        assert store.recent(2) == appended[3:]

    @pytest.mark.asyncio
    async def test_recent_limit_above_length(self, store: LocationStore, make_fix) -> None:
        appended = [await store.append(make_fix()) for _ in range(3)]

        assert store.recent(50) == appended

    @pytest.mark.asyncio
    async def test_recent_default_limit(self, store: LocationStore, make_fix) -> None:
        for _ in range(15):
            await store.append(make_fix())

        assert len(store.recent()) == 10

    def test_recent_non_positive_limit(self, store: LocationStore) -> None:
        assert store.recent(0) == []
        assert store.recent(-3) == []

    def test_latest_empty(self, store: LocationStore) -> None:
        assert store.latest() is None

    @pytest.mark.asyncio
    async def test_reads_are_idempotent(self, store: LocationStore, make_fix) -> None:
        for _ in range(4):
            await store.append(make_fix())

        assert store.recent(3) == store.recent(3)
        assert store.latest() == store.latest()


class TestLoad:
    """Тесты для load и persist."""

    @pytest.mark.asyncio
    async def test_missing_file_gives_empty_log(self, store: LocationStore) -> None:
        await store.load()

        assert store.count == 0
        assert store.latest() is None

    @pytest.mark.asyncio
    async def test_round_trip(self, data_file: Path, make_fix) -> None:
        """persist + load в новом хранилище дают тот же журнал."""
        original = LocationStore(data_file)
        for i in range(5):
            await original.append(make_fix(latitude=float(i + 1), accuracy=None))
        assert await original.persist() is True

        restarted = LocationStore(data_file)
        await restarted.load()

        assert restarted.recent(100) == original.recent(100)

    @pytest.mark.asyncio
    async def test_ids_continue_after_restart(self, data_file: Path, make_fix) -> None:
        original = LocationStore(data_file)
        last = None
        for _ in range(3):
            last = await original.append(make_fix())

        restarted = LocationStore(data_file)
        await restarted.load()
        record = await restarted.append(make_fix())

        assert record.id > last.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            '{"latitude": 1}',
            '[{"id": "x"}]',
            "",
        ],
    )
    async def test_corrupt_file_gives_empty_log(
        self, store: LocationStore, data_file: Path, content: str
    ) -> None:
        """Повреждённый файл не роняет загрузку."""
        data_file.write_text(content, encoding="utf-8")

        with patch("geotrack.core.locations.store.log_warning", new_callable=AsyncMock) as mock_warn:
            await store.load()

        assert store.count == 0
        mock_warn.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_load_trims_oversized_file(self, data_file: Path) -> None:
        """Файл с лишними записями обрезается до ёмкости."""
        rows = [
            {
                "id": i,
                "latitude": 1.0,
                "longitude": 2.0,
                "accuracy": None,
                "timestamp": "2024-01-01T00:00:00.000Z",
                "receivedAt": "2024-01-01T00:00:00.000Z",
            }
            for i in range(1, 131)
        ]
        data_file.write_text(json.dumps(rows), encoding="utf-8")

        store = LocationStore(data_file)
        await store.load()

        assert store.count == MAX_STORED_LOCATIONS
        assert store.recent(1)[0].id == 130

    @pytest.mark.asyncio
    async def test_load_converts_numeric_timestamps(self, data_file: Path) -> None:
        """Записи с epoch-числом в timestamp приводятся к ISO-8601."""
        rows = [
            {
                "id": 1,
                "latitude": 1.0,
                "longitude": 2.0,
                "accuracy": None,
                "timestamp": "2024-01-01T00:00:00.000Z",
                "receivedAt": "2024-01-01T00:00:00.000Z",
            },
            {
                "id": 2,
                "latitude": 3.0,
                "longitude": 4.0,
                "accuracy": 5,
                "timestamp": 1700000000000,
                "receivedAt": "2023-11-14T22:13:21.000Z",
            },
        ]
        data_file.write_text(json.dumps(rows), encoding="utf-8")

        store = LocationStore(data_file)
        with patch("geotrack.core.locations.store.log_warning", new_callable=AsyncMock) as mock_warn:
            await store.load()

        assert store.count == 2
        assert store.latest().timestamp == "2023-11-14T22:13:20.000Z"
        mock_warn.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_load_replaces_current_log(self, store: LocationStore, make_fix) -> None:
        await store.append(make_fix())
        store.path.unlink()

        await store.load()

        assert store.count == 0

    @pytest.mark.asyncio
    async def test_persist_creates_parent_directory(self, tmp_path: Path, make_fix) -> None:
        store = LocationStore(tmp_path / "nested" / "dir" / "locations.json")
        await store.append(make_fix())

        assert store.path.exists()

    @pytest.mark.asyncio
    async def test_persist_reports_failure(self, tmp_path: Path) -> None:
        """Запись в каталог вместо файла возвращает False."""
        store = LocationStore(tmp_path)

        with patch("geotrack.core.locations.store.log_error", new_callable=AsyncMock):
            assert await store.persist() is False
