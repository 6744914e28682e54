# excel_export/exceptions/app_exceptions.py
"""
Модуль с пользовательскими исключениями пакета excel_export.
"""


class ExcelExportError(Exception):
    """Базовый класс для всех исключений пакета."""
    pass


class WorksheetError(ExcelExportError):
    """Лист не может быть создан: недопустимое имя или ошибка заполнения."""
    pass


class DuplicateWorksheetError(WorksheetError):
    """Лист с таким именем уже есть в книге."""
    pass


class ExportError(ExcelExportError):
    """Исключение, возникающее при записи книги в файл или поток."""
    pass


class ConfigError(ExcelExportError):
    """Исключение, связанное с чтением или проверкой конфигурации."""
    pass
