# tests/conftest.py
"""
Общие фикстуры тестов excel_export.
"""
import os
import tempfile
from dataclasses import dataclass
from typing import ClassVar, Dict, List

import pytest

from excel_export import Record


@dataclass
class User(Record):
    """Тестовая модель пользователя."""
    id: int = 0
    name: str = ""
    email: str = ""
    password_hash: str = ""

    safe_attributes: ClassVar[Dict[str, List[str]]] = {
        "search": ["id", "name", "email"],
        "public": ["name"],
    }


@pytest.fixture
def user_model():
    return User


@pytest.fixture
def users():
    """Три пользователя для листов из записей."""
    return [
        User(1, "alice", "alice@example.com", "h1"),
        User(2, "bob", "bob@example.com", "h2"),
        User(3, "carol", "carol@example.com", "h3"),
    ]


@pytest.fixture
def save_dir():
    """Временный каталог для выгрузки; путь с завершающим разделителем."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield tmp_dir + os.sep


@pytest.fixture
def missing_dir(save_dir):
    """Путь к несуществующему каталогу."""
    return os.path.join(save_dir, "no_such_dir") + os.sep
