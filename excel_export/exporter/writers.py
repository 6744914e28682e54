# excel_export/exporter/writers.py
"""
Модуль записи книги openpyxl в файлы разных форматов.

- .xls  - xlwt (старый двоичный формат Excel);
- .xlsx - xlsxwriter;
- .html - pandas (DataFrame.to_html), по таблице на лист;
- .csv  - pandas (DataFrame.to_csv), только активный лист.

Каждый писатель сначала целиком формирует содержимое в памяти и только затем
пишет его в файл или в стандартный поток вывода, поэтому при ошибке
кодирования файл не создается.
"""

import html
import io
import sys
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

import pandas as pd
import xlsxwriter
import xlwt
from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from excel_export.config import ExportConfig, is_stdout_target
from excel_export.exceptions import ExportError
from excel_export.utils.logger import get_logger

logger = get_logger(__name__)

FORMAT_XLS = '.xls'
FORMAT_XLSX = '.xlsx'
FORMAT_HTML = '.html'
FORMAT_CSV = '.csv'

SUPPORTED_FORMATS = (FORMAT_XLS, FORMAT_XLSX, FORMAT_HTML, FORMAT_CSV)

CONTENT_TYPES: Dict[str, str] = {
    FORMAT_XLS: 'application/vnd.ms-excel; charset=UTF-8',
    FORMAT_XLSX: 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet; charset=UTF-8',
    FORMAT_HTML: 'text/html; charset=UTF-8',
    FORMAT_CSV: 'text/csv; charset=UTF-8',
}

DATE_NUM_FORMAT = 'yyyy-mm-dd hh:mm:ss'


def sheet_rows(worksheet: Worksheet) -> List[List[Any]]:
    """
    Читает значения листа openpyxl построчно.

    Пустой лист дает пустой список (openpyxl для него возвращает одну пустую ячейку).
    """
    rows = [list(row) for row in worksheet.iter_rows(values_only=True)]
    if rows == [[None]]:
        return []
    return rows


def _plain_value(value: Any) -> Any:
    # xlwt и xlsxwriter не везде принимают Decimal
    if isinstance(value, Decimal):
        return float(value)
    return value


class BaseWriter:
    """
    Базовый писатель: проверка книги и вывод готового содержимого.

    Подкласс задает format, content_type, binary и реализует render().
    """

    format: str = ''
    content_type: str = ''
    binary: bool = True
    encoding: str = 'utf-8'

    def render(self, workbook: Workbook) -> Union[bytes, str]:
        raise NotImplementedError

    def save(self, workbook: Workbook, target: Optional[str]) -> None:
        """
        Записывает книгу в файл или в стандартный поток вывода.

        Args:
            workbook (Workbook): Книга openpyxl.
            target (Optional[str]): Путь к файлу или признак стандартного вывода.

        Raises:
            ExportError: Книга пуста или вывод невозможен.
            OSError: Ошибка записи файла (например, каталог не существует).
        """
        if not workbook.worksheets:
            raise ExportError("Книга не содержит ни одного листа")

        payload = self.render(workbook)

        if is_stdout_target(target):
            self._write_stdout(payload)
            logger.debug(f"{type(self).__name__}: содержимое записано в stdout ({len(payload)} байт/символов)")
            return

        if self.binary:
            with open(target, 'wb') as f:
                f.write(payload)
        else:
            with open(target, 'w', encoding=self.encoding, newline='') as f:
                f.write(payload)
        logger.debug(f"{type(self).__name__}: файл записан: {target}")

    def _write_stdout(self, payload: Union[bytes, str]) -> None:
        stream = sys.stdout
        if not self.binary:
            stream.write(payload)
            stream.flush()
            return
        buffer = getattr(stream, 'buffer', None)
        if buffer is None:
            raise ExportError("Стандартный вывод не поддерживает двоичную запись")
        stream.flush()
        buffer.write(payload)
        buffer.flush()


class XlsWriter(BaseWriter):
    """Запись в формат Excel 97-2003 (.xls) через xlwt."""

    format = FORMAT_XLS
    content_type = CONTENT_TYPES[FORMAT_XLS]

    def render(self, workbook: Workbook) -> bytes:
        book = xlwt.Workbook(encoding='utf-8')
        date_style = xlwt.easyxf(num_format_str=DATE_NUM_FORMAT)
        for worksheet in workbook.worksheets:
            sheet = book.add_sheet(worksheet.title, cell_overwrite_ok=True)
            for r, row in enumerate(sheet_rows(worksheet)):
                for c, value in enumerate(row):
                    if value is None:
                        continue
                    if isinstance(value, (datetime, date, time)):
                        sheet.write(r, c, value, date_style)
                    else:
                        sheet.write(r, c, _plain_value(value))
        output = io.BytesIO()
        book.save(output)
        return output.getvalue()


class XlsxWriter(BaseWriter):
    """Запись в формат Office Open XML (.xlsx) через xlsxwriter."""

    format = FORMAT_XLSX
    content_type = CONTENT_TYPES[FORMAT_XLSX]

    workbook_options = {
        'in_memory': True,
        'strings_to_numbers': False,  # Строки остаются строками
        'strings_to_formulas': False,  # Значения вида "=A1" не считаются формулами
        'strings_to_urls': False,
    }

    def render(self, workbook: Workbook) -> bytes:
        output = io.BytesIO()
        with xlsxwriter.Workbook(output, self.workbook_options) as book:
            date_format = book.add_format({'num_format': DATE_NUM_FORMAT})
            for worksheet in workbook.worksheets:
                sheet = book.add_worksheet(worksheet.title)
                for r, row in enumerate(sheet_rows(worksheet)):
                    for c, value in enumerate(row):
                        if value is None:
                            continue
                        if isinstance(value, (datetime, date, time)):
                            sheet.write_datetime(r, c, value, date_format)
                        else:
                            sheet.write(r, c, _plain_value(value))
        return output.getvalue()


def _sheet_frame(worksheet: Worksheet) -> pd.DataFrame:
    # dtype=object, чтобы целые числа рядом с пустыми ячейками не становились float
    return pd.DataFrame(sheet_rows(worksheet), dtype=object)


class HtmlWriter(BaseWriter):
    """Запись всех листов в HTML-документ: заголовок и таблица на каждый лист."""

    format = FORMAT_HTML
    content_type = CONTENT_TYPES[FORMAT_HTML]
    binary = False

    def render(self, workbook: Workbook) -> str:
        parts = [
            '<!DOCTYPE html>',
            '<html>',
            '<head>',
            '<meta charset="utf-8">',
            f'<title>{html.escape(workbook.worksheets[0].title)}</title>',
            '</head>',
            '<body>',
        ]
        for worksheet in workbook.worksheets:
            parts.append(f'<h2>{html.escape(worksheet.title)}</h2>')
            parts.append(_sheet_frame(worksheet).to_html(header=False, index=False, na_rep='', border=1))
        parts.extend(['</body>', '</html>', ''])
        return '\n'.join(parts)


class CsvWriter(BaseWriter):
    """Запись активного листа в CSV через pandas."""

    format = FORMAT_CSV
    content_type = CONTENT_TYPES[FORMAT_CSV]
    binary = False

    def __init__(self, delimiter: str = ',', encoding: str = 'utf-8'):
        self.delimiter = delimiter
        self.encoding = encoding

    def render(self, workbook: Workbook) -> str:
        worksheet = workbook.active
        if worksheet is None:
            worksheet = workbook.worksheets[0]
        return _sheet_frame(worksheet).to_csv(
            sep=self.delimiter,
            header=False,
            index=False,
            na_rep='',
            lineterminator='\n',
        )


def create_writer(fmt: str, config: Optional[ExportConfig] = None) -> BaseWriter:
    """
    Возвращает писатель для формата.

    Неизвестный формат обрабатывается как CSV.

    Args:
        fmt (str): Один из FORMAT_* (с точкой).
        config (Optional[ExportConfig]): Настройки (используются для CSV).

    Returns:
        BaseWriter: Писатель формата.
    """
    if fmt == FORMAT_XLS:
        return XlsWriter()
    if fmt == FORMAT_XLSX:
        return XlsxWriter()
    if fmt == FORMAT_HTML:
        return HtmlWriter()
    if fmt != FORMAT_CSV:
        logger.warning(f"Формат '{fmt}' не поддерживается, используется CSV.")
    config = config or ExportConfig()
    return CsvWriter(delimiter=config.csv_delimiter, encoding=config.csv_encoding)
