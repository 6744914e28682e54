# excel_export/core/__init__.py
"""
Ядро: построитель книги, источники данных и рендер по умолчанию.
"""

from .excel import Excel, build_headers
from .render import NormalizedRows, fill_worksheet, normalize_source
from .sources import (
    Record,
    MappingRecord,
    DataProvider,
    ArrayDataProvider,
    ModelDataProvider,
    RowsSource,
    ProviderSource,
    ModelProviderSource,
    ValueSource,
    classify_source,
)

__all__ = [
    "Excel",
    "build_headers",
    "NormalizedRows",
    "fill_worksheet",
    "normalize_source",
    "Record",
    "MappingRecord",
    "DataProvider",
    "ArrayDataProvider",
    "ModelDataProvider",
    "RowsSource",
    "ProviderSource",
    "ModelProviderSource",
    "ValueSource",
    "classify_source",
]
