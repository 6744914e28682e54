# excel_export/exporter/__init__.py
"""
Писатели форматов выгрузки.
"""

from .writers import (
    FORMAT_XLS,
    FORMAT_XLSX,
    FORMAT_HTML,
    FORMAT_CSV,
    SUPPORTED_FORMATS,
    CONTENT_TYPES,
    BaseWriter,
    XlsWriter,
    XlsxWriter,
    HtmlWriter,
    CsvWriter,
    create_writer,
    sheet_rows,
)

__all__ = [
    "FORMAT_XLS",
    "FORMAT_XLSX",
    "FORMAT_HTML",
    "FORMAT_CSV",
    "SUPPORTED_FORMATS",
    "CONTENT_TYPES",
    "BaseWriter",
    "XlsWriter",
    "XlsxWriter",
    "HtmlWriter",
    "CsvWriter",
    "create_writer",
    "sheet_rows",
]
