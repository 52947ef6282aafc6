# geotrack/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class Environment(str, Enum):
    """Режимы запуска сервиса."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


# Ёмкость журнала локаций (старые записи вытесняются первыми)
MAX_STORED_LOCATIONS = 100

# Размер выборки по умолчанию для GET /api/location
DEFAULT_QUERY_LIMIT = 10

# Версия публичного API (отдаётся в GET /)
API_VERSION = "1.0.0"

# Граница между секундами и миллисекундами для числового epoch
EPOCH_MILLIS_THRESHOLD = 100_000_000_000
