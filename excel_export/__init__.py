# excel_export/__init__.py
"""
excel_export - выгрузка табличных данных (списков, провайдеров данных,
коллекций записей) в файлы XLS, XLSX, HTML и CSV.
"""

from excel_export.config import ExportConfig, load_config, OUTPUT_DEFAULT
from excel_export.core import (
    Excel,
    Record,
    MappingRecord,
    DataProvider,
    ArrayDataProvider,
    ModelDataProvider,
    fill_worksheet,
)
from excel_export.exceptions import (
    ExcelExportError,
    WorksheetError,
    DuplicateWorksheetError,
    ExportError,
    ConfigError,
)

__version__ = "0.1.0"

__all__ = [
    "Excel",
    "ExportConfig",
    "load_config",
    "OUTPUT_DEFAULT",
    "Record",
    "MappingRecord",
    "DataProvider",
    "ArrayDataProvider",
    "ModelDataProvider",
    "fill_worksheet",
    "ExcelExportError",
    "WorksheetError",
    "DuplicateWorksheetError",
    "ExportError",
    "ConfigError",
]
