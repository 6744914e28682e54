# excel_export/exceptions/__init__.py
"""
Пакет пользовательских исключений.
"""

from .app_exceptions import (
    ExcelExportError,
    WorksheetError,
    DuplicateWorksheetError,
    ExportError,
    ConfigError,
)

__all__ = [
    "ExcelExportError",
    "WorksheetError",
    "DuplicateWorksheetError",
    "ExportError",
    "ConfigError",
]
