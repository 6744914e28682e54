# excel_export/core/sources.py
"""
Источники данных для листов книги.

Модуль описывает:
- записи (Record) - объекты с именованными атрибутами и сценариями,
  определяющими, какие атрибуты можно выгружать;
- провайдеры данных (DataProvider) - объекты, отдающие уже разбитую на
  страницы коллекцию элементов;
- варианты источника (RowsSource, ProviderSource, ModelProviderSource, ValueSource),
  по которым рендерер по умолчанию выбирает способ нормализации.
"""

from dataclasses import dataclass, fields, is_dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Dict, Any, List, Optional, Sequence, Union, Iterable

from excel_export.utils.logger import get_logger

logger = get_logger(__name__)

# Типы, значения которых записываются в ячейку как есть
SCALAR_TYPES = (str, bytes, bool, int, float, Decimal, datetime, date, time)


def is_scalar(value: Any) -> bool:
    """True для значений, которые можно положить в одну ячейку (включая None)."""
    return value is None or isinstance(value, SCALAR_TYPES)


# --- Записи ---

class Record:
    """
    Запись с именованными атрибутами (аналог модели ORM).

    Подклассы могут быть dataclass'ами: тогда имена атрибутов берутся из полей.
    Иначе используются публичные атрибуты экземпляра. Для отбора атрибутов
    по сценарию подкласс задает словарь safe_attributes: {сценарий: [имена]}.
    """

    safe_attributes: Dict[str, List[str]] = {}

    def attribute_names(self) -> List[str]:
        """
        Возвращает имена всех атрибутов записи в порядке объявления.

        Returns:
            List[str]: Имена атрибутов.
        """
        if is_dataclass(self):
            return [f.name for f in fields(self)]
        return [name for name in vars(self) if not name.startswith('_')]

    @classmethod
    def schema_names(cls) -> Optional[List[str]]:
        """
        Имена атрибутов, известные по самому классу, без создания экземпляра.

        Returns:
            Optional[List[str]]: Поля dataclass'а или None, если класс схему не объявляет.
        """
        if is_dataclass(cls):
            return [f.name for f in fields(cls)]
        return None

    def get_attributes(self, names: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        """
        Возвращает значения атрибутов.

        Args:
            names (Optional[Sequence[str]]): Имена нужных атрибутов. None - все атрибуты.

        Returns:
            Dict[str, Any]: Словарь имя -> значение в порядке names.
        """
        if names is None:
            names = self.attribute_names()
        return {name: getattr(self, name, None) for name in names}

    def safe_attribute_names(self, scenario: str) -> List[str]:
        """
        Возвращает имена атрибутов, разрешенных для сценария.

        Если сценарий не объявлен в safe_attributes, разрешены все атрибуты.

        Args:
            scenario (str): Имя сценария.

        Returns:
            List[str]: Имена атрибутов.
        """
        if scenario in self.safe_attributes:
            return list(self.safe_attributes[scenario])
        return self.attribute_names()

    def exportable_names(self, scenario: Optional[str]) -> List[str]:
        """Имена атрибутов для выгрузки: безопасные для сценария или все, если сценарий None."""
        if scenario is None:
            return self.attribute_names()
        return self.safe_attribute_names(scenario)


class MappingRecord(Record):
    """Запись поверх обычного словаря."""

    def __init__(self, attributes: Dict[str, Any], safe_attributes: Optional[Dict[str, List[str]]] = None):
        self._attributes = dict(attributes)
        if safe_attributes is not None:
            self.safe_attributes = safe_attributes

    def attribute_names(self) -> List[str]:
        return list(self._attributes)

    def get_attributes(self, names: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        if names is None:
            return dict(self._attributes)
        return {name: self._attributes.get(name) for name in names}

    def __repr__(self) -> str:
        return f"MappingRecord({self._attributes!r})"


# --- Провайдеры данных ---

class DataProvider:
    """
    Базовый провайдер данных с постраничной выборкой.

    Подкласс реализует _all_items(); get_data() возвращает только текущую страницу.
    """

    def __init__(self, page_size: Optional[int] = None, page: int = 0):
        """
        Args:
            page_size (Optional[int]): Размер страницы. None - без разбиения.
            page (int): Номер текущей страницы, с нуля.
        """
        if page_size is not None and page_size <= 0:
            raise ValueError(f"Размер страницы должен быть положительным, получено: {page_size}")
        if page < 0:
            raise ValueError(f"Номер страницы не может быть отрицательным, получено: {page}")
        self.page_size = page_size
        self.page = page

    def _all_items(self) -> List[Any]:
        raise NotImplementedError

    @property
    def total_item_count(self) -> int:
        return len(self._all_items())

    @property
    def page_count(self) -> int:
        total = self.total_item_count
        if self.page_size is None:
            return 1 if total else 0
        return (total + self.page_size - 1) // self.page_size

    def get_data(self) -> List[Any]:
        """
        Возвращает элементы текущей страницы.

        Returns:
            List[Any]: Элементы страницы (пустой список, если страница за пределами данных).
        """
        items = self._all_items()
        if self.page_size is None:
            return list(items)
        start = self.page * self.page_size
        return list(items[start:start + self.page_size])


class ArrayDataProvider(DataProvider):
    """Провайдер поверх уже загруженного списка (строк, записей, значений)."""

    def __init__(self, raw_data: Iterable[Any], page_size: Optional[int] = None, page: int = 0):
        super().__init__(page_size=page_size, page=page)
        self.raw_data = list(raw_data)

    def _all_items(self) -> List[Any]:
        return self.raw_data


class ModelDataProvider(DataProvider):
    """
    Провайдер записей одной модели.

    Модель (класс Record или его экземпляр) задает схему: имена атрибутов,
    из которых строится строка заголовка. Класс модели не инстанцируется:
    схема берется из полей dataclass'а, а если класс ее не объявляет -
    из первой записи текущей страницы.
    """

    def __init__(self, model: Union[Record, type], records: Iterable[Any],
                 page_size: Optional[int] = None, page: int = 0):
        super().__init__(page_size=page_size, page=page)
        if isinstance(model, type):
            if not issubclass(model, Record):
                raise TypeError(f"Модель должна быть подклассом Record, получено: {model!r}")
        elif not isinstance(model, Record):
            raise TypeError(f"Модель должна быть экземпляром Record, получено: {model!r}")
        self.model = model
        self.records = list(records)

    def _all_items(self) -> List[Any]:
        return self.records

    def header_names(self, scenario: Optional[str]) -> List[str]:
        """
        Имена полей для строки заголовка.

        Args:
            scenario (Optional[str]): Сценарий отбора атрибутов. None - все атрибуты.

        Returns:
            List[str]: Имена полей (пустой список, если схему определить нельзя).
        """
        if not isinstance(self.model, type):
            return self.model.exportable_names(scenario)

        if scenario is not None and scenario in self.model.safe_attributes:
            return list(self.model.safe_attributes[scenario])

        names = self.model.schema_names()
        if names is not None:
            return names

        for record in self.get_data():
            if isinstance(record, Record):
                return record.exportable_names(scenario)
        logger.debug(f"Схема модели {self.model.__name__} не определена: на странице нет записей.")
        return []


# --- Варианты источника ---

@dataclass(frozen=True)
class RowsSource:
    """Упорядоченная последовательность строк, записей или значений."""
    items: Sequence[Any]


@dataclass(frozen=True)
class ProviderSource:
    """Провайдер данных без схемы."""
    provider: DataProvider


@dataclass(frozen=True)
class ModelProviderSource:
    """Провайдер записей со схемой модели."""
    provider: ModelDataProvider


@dataclass(frozen=True)
class ValueSource:
    """Одиночное значение: запись, скаляр или произвольный объект."""
    value: Any


DataSource = Union[RowsSource, ProviderSource, ModelProviderSource, ValueSource]


def classify_source(data: Any) -> DataSource:
    """
    Определяет вариант источника для входных данных листа.

    Уже классифицированный источник возвращается без изменений.

    Args:
        data (Any): Входные данные: список/кортеж, провайдер, запись или значение.

    Returns:
        DataSource: Вариант источника.
    """
    if isinstance(data, (RowsSource, ProviderSource, ModelProviderSource, ValueSource)):
        return data
    if isinstance(data, ModelDataProvider):
        return ModelProviderSource(data)
    if isinstance(data, DataProvider):
        return ProviderSource(data)
    if isinstance(data, (list, tuple)):
        return RowsSource(data)
    return ValueSource(data)
