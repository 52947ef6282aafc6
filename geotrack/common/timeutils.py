# geotrack/common/timeutils.py
"""
Работа с метками времени в формате ISO-8601 (UTC, суффикс Z).
"""

from __future__ import annotations

from datetime import datetime, timezone

from geotrack.common.constants import EPOCH_MILLIS_THRESHOLD


def to_iso(moment: datetime) -> str:
    """Форматирует datetime как ISO-8601 UTC с миллисекундами."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    """Текущее время сервера."""
    return to_iso(datetime.now(timezone.utc))


def epoch_to_iso(value: float) -> str:
    """
    Переводит числовой epoch в ISO-8601.

    Значения от 1e11 и выше считаются миллисекундами (Date.now() на клиенте),
    меньшие считаются секундами.

    Raises:
        OverflowError, OSError, ValueError: если значение вне диапазона дат
    """
    seconds = value / 1000 if abs(value) >= EPOCH_MILLIS_THRESHOLD else value
    return to_iso(datetime.fromtimestamp(seconds, tz=timezone.utc))
