# excel_export/config.py
"""
Конфигурация построителя книг: значения по умолчанию и загрузка из YAML.
"""

from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Dict, Any, Optional, Union

import yaml

from excel_export.exceptions import ConfigError
from excel_export.utils.logger import get_logger

logger = get_logger(__name__)

# Путь вывода по умолчанию: стандартный поток вывода процесса
OUTPUT_DEFAULT = "php://output"
# Короткая запись того же назначения
OUTPUT_STDOUT_ALIAS = "-"

DEFAULT_SCENARIO = "search"
DEFAULT_FILENAME_PREFIX = "Export_"


def is_stdout_target(path: Optional[str]) -> bool:
    """True, если путь означает запись в стандартный поток вывода."""
    return path is None or path in (OUTPUT_DEFAULT, OUTPUT_STDOUT_ALIAS)


@dataclass
class ExportConfig:
    """
    Настройки построителя книг.

    Attributes:
        scenario (Optional[str]): Сценарий для отбора "безопасных" атрибутов записей.
                                  None отключает фильтрацию.
        filename_prefix (str): Префикс имени файла, если имя не передано в export().
        default_path (str): Путь вывода по умолчанию.
        csv_delimiter (str): Разделитель полей CSV.
        csv_encoding (str): Кодировка CSV-файлов.
        log_file (Optional[str]): Файл лога; если задан, Excel() вызывает setup_logger() с этим файлом.
    """
    scenario: Optional[str] = DEFAULT_SCENARIO
    filename_prefix: str = DEFAULT_FILENAME_PREFIX
    default_path: str = OUTPUT_DEFAULT
    csv_delimiter: str = ","
    csv_encoding: str = "utf-8"
    log_file: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def config_from_dict(data: Dict[str, Any]) -> ExportConfig:
    """
    Создает ExportConfig из словаря, проверяя имена и типы ключей.

    Args:
        data (Dict[str, Any]): Словарь настроек.

    Returns:
        ExportConfig: Конфигурация.

    Raises:
        ConfigError: Неизвестный ключ или значение неверного типа.
    """
    known = {f.name for f in fields(ExportConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Неизвестные параметры конфигурации: {', '.join(unknown)}")

    for key in ("filename_prefix", "default_path", "csv_delimiter", "csv_encoding"):
        if key in data and not isinstance(data[key], str):
            raise ConfigError(f"Параметр '{key}' должен быть строкой, получено: {data[key]!r}")
    for key in ("scenario", "log_file"):
        if key in data and data[key] is not None and not isinstance(data[key], str):
            raise ConfigError(f"Параметр '{key}' должен быть строкой или null, получено: {data[key]!r}")
    if "csv_delimiter" in data and len(data["csv_delimiter"]) != 1:
        raise ConfigError("Параметр 'csv_delimiter' должен состоять из одного символа")

    return ExportConfig(**data)


def load_config(config_path: Union[str, Path]) -> ExportConfig:
    """
    Загружает конфигурацию из YAML-файла.

    Пустой файл дает конфигурацию по умолчанию.

    Args:
        config_path (Union[str, Path]): Путь к YAML-файлу.

    Returns:
        ExportConfig: Загруженная конфигурация.

    Raises:
        ConfigError: Файл не найден, не читается или содержит не словарь.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Конфигурационный файл не найден: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Не удалось прочитать конфигурацию '{config_path}': {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Конфигурация '{config_path}' должна быть словарем YAML")

    config = config_from_dict(data)
    logger.debug(f"Конфигурация загружена из {config_path}: {config.to_dict()}")
    return config
