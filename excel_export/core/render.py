# excel_export/core/render.py
"""
Рендеринг листа по умолчанию: приведение источника данных к двумерному
списку ячеек и запись его на лист openpyxl без форматирования.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from openpyxl.worksheet.worksheet import Worksheet

from excel_export.core.sources import (
    DataSource,
    ModelProviderSource,
    ProviderSource,
    Record,
    RowsSource,
    ValueSource,
    is_scalar,
)
from excel_export.utils.logger import get_logger

logger = get_logger(__name__)

# Виды нормализованного элемента
_ROW = "row"
_SCALAR = "scalar"


@dataclass
class NormalizedRows:
    """
    Результат нормализации источника.

    Attributes:
        rows (List[List[Any]]): Строки листа, строка 0 обычно заголовок.
        dropped (int): Сколько элементов отброшено как неподдерживаемые.
    """
    rows: List[List[Any]]
    dropped: int = 0


def _record_row(record: Record, scenario: Optional[str]) -> List[Any]:
    names = record.exportable_names(scenario)
    attributes = record.get_attributes(names)
    return [attributes.get(name) for name in names]


def _normalize_item(item: Any, scenario: Optional[str]) -> Optional[Tuple[str, Any]]:
    """
    Приводит один элемент последовательности к строке или скаляру.

    Returns:
        Optional[Tuple[str, Any]]: (вид, значение) или None, если элемент не поддерживается.
    """
    if isinstance(item, Record):
        return _ROW, _record_row(item, scenario)
    if is_scalar(item):
        return _SCALAR, item
    if isinstance(item, Mapping):
        return _ROW, list(item.values())
    if isinstance(item, (list, tuple)):
        return _ROW, list(item)
    return None


def normalize_items(items: List[Any], scenario: Optional[str]) -> NormalizedRows:
    """
    Нормализует последовательность элементов в строки листа.

    Записи заменяются значениями своих атрибутов, словари - своими значениями,
    списки и кортежи остаются строками, скаляры и None сохраняются.
    Прочие объекты отбрасываются без ошибки.

    Если среди сохраненных элементов нет ни одной строки, все скаляры образуют
    одну строку. Иначе каждый скаляр становится строкой из одной ячейки.

    Args:
        items (List[Any]): Элементы источника.
        scenario (Optional[str]): Сценарий для отбора атрибутов записей.

    Returns:
        NormalizedRows: Строки и число отброшенных элементов.
    """
    kept: List[Tuple[str, Any]] = []
    dropped = 0
    for item in items:
        normalized = _normalize_item(item, scenario)
        if normalized is None:
            logger.debug(f"Элемент типа {type(item).__name__} не поддерживается и пропущен.")
            dropped += 1
            continue
        kept.append(normalized)

    if kept and all(kind == _SCALAR for kind, _ in kept):
        return NormalizedRows([[value for _, value in kept]], dropped)

    rows = [value if kind == _ROW else [value] for kind, value in kept]
    return NormalizedRows(rows, dropped)


def normalize_model_provider(source: ModelProviderSource, scenario: Optional[str]) -> NormalizedRows:
    """
    Строит строки из провайдера записей модели: заголовок из схемы модели,
    затем по строке на каждую запись в том же порядке полей.

    Элементы, не являющиеся записями, отбрасываются.
    """
    provider = source.provider
    header = provider.header_names(scenario)
    rows: List[List[Any]] = [list(header)]
    dropped = 0
    for record in provider.get_data():
        if not isinstance(record, Record):
            dropped += 1
            continue
        attributes = record.get_attributes(header)
        rows.append([attributes.get(name) for name in header])
    return NormalizedRows(rows, dropped)


def normalize_source(source: DataSource, scenario: Optional[str]) -> NormalizedRows:
    """
    Приводит источник данных любого варианта к строкам листа.

    Args:
        source (DataSource): Классифицированный источник (см. classify_source).
        scenario (Optional[str]): Сценарий для отбора атрибутов записей.

    Returns:
        NormalizedRows: Строки и число отброшенных элементов.
    """
    if isinstance(source, ModelProviderSource):
        return normalize_model_provider(source, scenario)
    if isinstance(source, ProviderSource):
        return normalize_items(source.provider.get_data(), scenario)
    if isinstance(source, RowsSource):
        return normalize_items(list(source.items), scenario)
    if isinstance(source, ValueSource):
        return normalize_items([source.value], scenario)
    raise TypeError(f"Неизвестный вариант источника: {source!r}")


def _cell_value(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return value


def fill_worksheet(worksheet: Worksheet, rows: List[List[Any]]) -> Worksheet:
    """
    Записывает строки на лист построчно, начиная с ячейки A1.

    Для строки без значений (пустой или из одних None) создается пустая
    ячейка в первом столбце, чтобы строка учитывалась в max_row и не терялась
    при выгрузке, даже если она последняя.

    Args:
        worksheet (Worksheet): Лист openpyxl.
        rows (List[List[Any]]): Строки ячеек.

    Returns:
        Worksheet: Тот же лист.
    """
    for row_index, row in enumerate(rows, start=1):
        written = False
        for col_index, value in enumerate(row, start=1):
            if value is None:
                continue
            worksheet.cell(row=row_index, column=col_index, value=_cell_value(value))
            written = True
        if not written:
            worksheet.cell(row=row_index, column=1)
    logger.debug(f"На лист '{worksheet.title}' записано строк: {len(rows)}")
    return worksheet
