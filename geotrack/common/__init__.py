# geotrack/common/__init__.py
"""
Общие утилиты, константы, исключения и логгер.
"""

from geotrack.common.logger import get_logger, log_info, log_error, log_warning, log_debug
from geotrack.common.constants import TypeMsg

__all__ = [
    "get_logger",
    "log_info",
    "log_error",
    "log_warning",
    "log_debug",
    "TypeMsg",
]
