# excel_export/utils/logger.py
"""
Модуль для настройки и предоставления логгера для пакета excel_export.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

# --- Настройки логгера ---
# Имя корневого логгера пакета; все модульные логгеры являются его потомками
ROOT_LOGGER_NAME = "excel_export"

BASE_LOG_LEVEL = logging.DEBUG

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

FILE_LOG_LEVEL = logging.DEBUG

CONSOLE_LOG_LEVEL = logging.INFO

# Уровень, при котором ни одно сообщение не проходит
_DISABLED_LEVEL = logging.CRITICAL + 1

_LOGGING_ENABLED = True

# _logger_instance хранит настроенный корневой логгер пакета
_logger_instance: Optional[logging.Logger] = None

# _log_file_path хранит путь к файлу лога, если он используется
_log_file_path: Optional[str] = None


def setup_logger(log_file_path: Optional[str] = None, force_recreate: bool = False) -> logging.Logger:
    """
    Настраивает и возвращает корневой логгер пакета excel_export.

    Библиотечные модули сами логгер не настраивают: эту функцию вызывает
    приложение, использующее пакет. Последующие вызовы возвращают уже
    настроенный экземпляр.

    Args:
        log_file_path (Optional[str]): Путь к файлу лога. Если None, логирование в файл отключено.
        force_recreate (bool): Если True, заново создает хендлеры, даже если логгер уже настроен.
                              Используется в основном для тестов.

    Returns:
        logging.Logger: Настроенный корневой логгер пакета.
    """
    global _logger_instance, _log_file_path

    if _logger_instance is not None and not force_recreate:
        return _logger_instance

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(BASE_LOG_LEVEL if _LOGGING_ENABLED else _DISABLED_LEVEL)

    # Очищаем хендлеры, чтобы не дублировать сообщения при повторной настройке
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    _log_file_path = None
    if log_file_path and _LOGGING_ENABLED:
        try:
            Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file_path, mode='a', encoding='utf-8')
            file_handler.setLevel(FILE_LOG_LEVEL)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

            _log_file_path = log_file_path
            logger.debug(f"FileHandler добавлен. Логи будут записываться в: {log_file_path}")
        except OSError as e:
            # Ошибка файла лога не прерывает настройку консольного вывода
            print(f"Ошибка при настройке FileHandler для лога '{log_file_path}': {e}", file=sys.stderr)

    if _LOGGING_ENABLED:
        # stderr, чтобы не смешивать лог с выгрузкой в stdout
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(CONSOLE_LOG_LEVEL)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    _logger_instance = logger

    logger.debug(f"Корневой логгер '{ROOT_LOGGER_NAME}' настроен.")
    if _log_file_path:
        logger.info(f"Логирование в файл включено: {_log_file_path}")

    return logger


def get_logger(module_name: str) -> logging.Logger:
    """
    Возвращает логгер для конкретного модуля.

    Имена модулей пакета уже начинаются с "excel_export.", поэтому они
    используются как есть; остальные имена подвешиваются к корневому логгеру.

    Args:
        module_name (str): Имя модуля, обычно __name__.

    Returns:
        logging.Logger: Логгер для указанного модуля.
    """
    if module_name == ROOT_LOGGER_NAME or module_name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(module_name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{module_name}")


def get_log_file_path() -> Optional[str]:
    """
    Возвращает путь к файлу лога, если он был настроен.

    Returns:
        Optional[str]: Путь к файлу лога или None.
    """
    return _log_file_path


def set_logging_enabled(enabled: bool):
    """
    Включает или отключает логирование для всего пакета.

    Args:
        enabled (bool): True для включения, False для отключения.
    """
    global _LOGGING_ENABLED
    _LOGGING_ENABLED = enabled
    logger_instance = logging.getLogger(ROOT_LOGGER_NAME)
    level_to_set = BASE_LOG_LEVEL if enabled else _DISABLED_LEVEL
    for handler in logger_instance.handlers:
        handler.setLevel(level_to_set)
    logger_instance.setLevel(level_to_set)
    if _logger_instance:
        _logger_instance.info(f"Логирование {'включено' if enabled else 'отключено'}.")


def is_logging_enabled() -> bool:
    """Проверяет, включено ли логирование."""
    return _LOGGING_ENABLED
