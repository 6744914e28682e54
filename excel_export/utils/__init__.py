# excel_export/utils/__init__.py
"""
Вспомогательные модули пакета (логирование).
"""

from .logger import get_logger, setup_logger, set_logging_enabled, is_logging_enabled

__all__ = [
    "get_logger",
    "setup_logger",
    "set_logging_enabled",
    "is_logging_enabled",
]
