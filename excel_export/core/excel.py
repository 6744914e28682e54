# excel_export/core/excel.py
"""
Построитель книги Excel: листы из списков, провайдеров данных и записей,
выгрузка в .xls, .xlsx, .html или .csv.

Пример:

    (Excel()
        .worksheet('Worksheet #1', [['col1', 'col2'], ['cell11', 'cell12']],
                   lambda worksheet, data: fill_worksheet(worksheet, data))
        .worksheet('Worksheet #2', ModelDataProvider(User, users))
        .export('export.xlsx', '/tmp/'))
"""

import os
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from excel_export.config import ExportConfig, OUTPUT_DEFAULT, is_stdout_target
from excel_export.core.render import fill_worksheet, normalize_source
from excel_export.core.sources import classify_source
from excel_export.exceptions import DuplicateWorksheetError, WorksheetError
from excel_export.exporter.writers import (
    CONTENT_TYPES,
    FORMAT_CSV,
    FORMAT_HTML,
    FORMAT_XLS,
    FORMAT_XLSX,
    SUPPORTED_FORMATS,
    create_writer,
)
from excel_export.utils.logger import get_log_file_path, get_logger, setup_logger

logger = get_logger(__name__)

RenderCallback = Callable[[Worksheet, Any], Any]
HeaderSink = Callable[[str, str], None]


def _log_header(name: str, value: str) -> None:
    logger.debug(f"Заголовок ответа: {name}: {value}")


def build_headers(filename: str, fmt: str) -> List[Tuple[str, str]]:
    """
    Заголовки ответа для выгрузки файла.

    Args:
        filename (str): Имя файла для Content-Disposition.
        fmt (str): Формат выгрузки.

    Returns:
        List[Tuple[str, str]]: Пары (имя, значение).
    """
    return [
        ('Content-Disposition', f'attachment; filename="{filename}"'),
        ('Cache-Control', 'max-age=0'),
        ('Content-Type', CONTENT_TYPES.get(fmt, CONTENT_TYPES[FORMAT_CSV])),
    ]


class Excel:
    """
    Обертка над книгой openpyxl для выгрузки табличных данных.

    Принимает списки строк, списки записей, провайдеры данных и одиночные
    значения. Книга создается без листа по умолчанию: каждый видимый лист
    добавлен явно через worksheet().
    """

    OUTPUT_DEFAULT = OUTPUT_DEFAULT
    FORMAT_XLS = FORMAT_XLS
    FORMAT_XLSX = FORMAT_XLSX
    FORMAT_HTML = FORMAT_HTML
    FORMAT_CSV = FORMAT_CSV

    MAX_TITLE_LENGTH = 31
    INVALID_TITLE_CHARS = frozenset('\\/?*[]:')

    def __init__(self, config: Optional[ExportConfig] = None, header_sink: Optional[HeaderSink] = None):
        """
        Инициализирует книгу и удаляет лист по умолчанию.

        Args:
            config (Optional[ExportConfig]): Настройки. None - значения по умолчанию.
            header_sink (Optional[HeaderSink]): Получатель заголовков ответа при выводе в stdout.
                                                По умолчанию заголовки только пишутся в лог.
        """
        self.config = config or ExportConfig()
        # Файл лога из конфигурации подключается, если логгер пишет в другой файл или не настроен
        if self.config.log_file and get_log_file_path() != self.config.log_file:
            setup_logger(self.config.log_file, force_recreate=True)
        self.header_sink: HeaderSink = header_sink or _log_header
        self._scenario: Optional[str] = self.config.scenario
        self._workbook = Workbook()
        self._workbook.remove(self._workbook.active)
        self.dropped_counts: Dict[str, int] = {}
        self.last_headers: List[Tuple[str, str]] = []
        logger.debug("Excel: книга создана, лист по умолчанию удален.")

    # --- Свойства ---

    @property
    def workbook(self) -> Workbook:
        return self._workbook

    @property
    def sheet_names(self) -> List[str]:
        return list(self._workbook.sheetnames)

    @property
    def scenario_name(self) -> Optional[str]:
        return self._scenario

    # --- Настройка ---

    def scenario(self, name: Optional[str]) -> "Excel":
        """
        Задает сценарий для отбора атрибутов записей рендерером по умолчанию.

        Args:
            name (Optional[str]): Имя сценария. None отключает отбор.

        Returns:
            Excel: self для цепочки вызовов.
        """
        self._scenario = name
        return self

    # --- Листы ---

    def _validate_title(self, title: Any) -> None:
        if not isinstance(title, str) or not title.strip():
            raise WorksheetError(f"Имя листа должно быть непустой строкой, получено: {title!r}")
        if len(title) > self.MAX_TITLE_LENGTH:
            raise WorksheetError(
                f"Имя листа '{title}' длиннее {self.MAX_TITLE_LENGTH} символов"
            )
        invalid = sorted(set(title) & self.INVALID_TITLE_CHARS)
        if invalid:
            raise WorksheetError(
                f"Имя листа '{title}' содержит недопустимые символы: {' '.join(invalid)}"
            )
        if title.startswith("'") or title.endswith("'"):
            raise WorksheetError(f"Имя листа '{title}' не может начинаться или заканчиваться апострофом")
        # Excel сравнивает имена листов без учета регистра
        if title.lower() in (name.lower() for name in self._workbook.sheetnames):
            raise DuplicateWorksheetError(f"Лист '{title}' уже существует в книге")

    def worksheet(self, title: str, data: Any, render: Optional[RenderCallback] = None) -> "Excel":
        """
        Добавляет лист из массива данных, провайдера, записи или значения.

        Если рендер завершается ошибкой, лист удаляется из книги, а исключение
        передается вызывающему.

        Args:
            title (str): Имя листа.
            data (Any): Данные листа.
            render (Optional[RenderCallback]): Функция (лист, данные) заполнения листа.
                                               По умолчанию default_render.

        Returns:
            Excel: self для цепочки вызовов.

        Raises:
            WorksheetError: Недопустимое имя листа.
            DuplicateWorksheetError: Лист с таким именем уже есть.
        """
        self._validate_title(title)

        if not callable(render):
            render = self.default_render

        sheet = self._workbook.create_sheet(title)
        try:
            render(sheet, data)
        except Exception as e:
            logger.error(f"Excel: ошибка заполнения листа '{title}': {e}")
            self._workbook.remove(sheet)
            self.dropped_counts.pop(title, None)
            raise

        logger.debug(f"Excel: лист '{title}' добавлен ({sheet.max_row} строк).")
        return self

    def default_render(self, worksheet: Worksheet, data: Any) -> Worksheet:
        """
        Рендер по умолчанию: выгружает данные как есть, без форматирования.

        Args:
            worksheet (Worksheet): Лист openpyxl.
            data (Any): Данные листа.

        Returns:
            Worksheet: Заполненный лист.
        """
        result = normalize_source(classify_source(data), self._scenario)
        self.dropped_counts[worksheet.title] = result.dropped
        if result.dropped:
            logger.warning(
                f"Excel: на листе '{worksheet.title}' пропущено неподдерживаемых элементов: {result.dropped}"
            )
        return fill_worksheet(worksheet, result.rows)

    # --- Выгрузка ---

    def export(self, filename: Optional[str] = None, path: Optional[str] = None) -> bool:
        """
        Выгружает книгу.

        Формат определяется по расширению имени файла. Если расширение не
        .xls, .xlsx, .html или .csv, используется CSV и к имени добавляется ".csv".

        Args:
            filename (Optional[str]): Имя файла. По умолчанию Export_{timestamp}.
            path (Optional[str]): Каталог вывода, к которому имя файла просто
                                  дописывается. По умолчанию стандартный вывод.

        Returns:
            bool: True, если выгрузка прошла успешно, иначе False.
        """
        if not isinstance(filename, str) or not filename:
            filename = f"{self.config.filename_prefix}{int(time.time())}"

        if path is None:
            path = self.config.default_path

        fmt = '.' + filename.split('.')[-1]
        if fmt not in SUPPORTED_FORMATS:
            fmt = FORMAT_CSV
            filename += fmt

        target = OUTPUT_DEFAULT if is_stdout_target(path) else os.fspath(path) + filename
        return self._output(target, filename, fmt)

    def _output(self, target: str, filename: str, fmt: str) -> bool:
        logger.info(f"Excel: начало выгрузки '{filename}' (формат {fmt}, листов: {len(self._workbook.worksheets)})")
        self.last_headers = build_headers(filename, fmt)
        writer = create_writer(fmt, self.config)

        try:
            if is_stdout_target(target):
                for name, value in self.last_headers:
                    self.header_sink(name, value)
            writer.save(self._workbook, target)
        except Exception as e:
            logger.error(f"Excel: ошибка выгрузки '{filename}' в '{target}': {e}", exc_info=True)
            return False

        logger.info(f"Excel: выгрузка '{filename}' завершена.")
        return True
