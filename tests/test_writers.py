# tests/test_writers.py
"""
Тесты для модуля excel_export/exporter/writers.py.
"""
import io
import sys
from datetime import datetime
from decimal import Decimal

import pytest
from openpyxl import Workbook, load_workbook

from excel_export import ExportConfig, ExportError, OUTPUT_DEFAULT
from excel_export.core.render import fill_worksheet
from excel_export.exporter import (
    CONTENT_TYPES,
    CsvWriter,
    HtmlWriter,
    XlsWriter,
    XlsxWriter,
    create_writer,
    sheet_rows,
)


def make_workbook(*sheets):
    """Книга из пар (имя, строки) без листа по умолчанию."""
    workbook = Workbook()
    workbook.remove(workbook.active)
    for title, rows in sheets:
        fill_worksheet(workbook.create_sheet(title), rows)
    return workbook


# --- Вспомогательные функции ---

def test_sheet_rows_of_empty_sheet():
    workbook = make_workbook(("Empty", []))
    assert sheet_rows(workbook["Empty"]) == []


def test_sheet_rows_pads_short_rows():
    workbook = make_workbook(("Ragged", [["a", "b"], ["c"]]))
    assert sheet_rows(workbook["Ragged"]) == [["a", "b"], ["c", None]]


def test_trailing_empty_row_survives_csv(tmp_path):
    workbook = make_workbook(("Sheet", [["a", "b"], []]))
    assert sheet_rows(workbook["Sheet"]) == [["a", "b"], [None, None]]
    target = tmp_path / "trailing.csv"
    CsvWriter().save(workbook, str(target))
    assert target.read_text(encoding="utf-8").splitlines() == ["a,b", ","]


def test_create_writer_by_format():
    assert isinstance(create_writer(".xls"), XlsWriter)
    assert isinstance(create_writer(".xlsx"), XlsxWriter)
    assert isinstance(create_writer(".html"), HtmlWriter)
    assert isinstance(create_writer(".csv"), CsvWriter)
    assert isinstance(create_writer(".ods"), CsvWriter)


def test_create_writer_uses_csv_config():
    writer = create_writer(".csv", ExportConfig(csv_delimiter="\t", csv_encoding="cp1251"))
    assert writer.delimiter == "\t"
    assert writer.encoding == "cp1251"


def test_content_types_cover_all_formats():
    assert set(CONTENT_TYPES) == {".xls", ".xlsx", ".html", ".csv"}


def test_empty_workbook_raises():
    with pytest.raises(ExportError):
        CsvWriter().save(make_workbook(), OUTPUT_DEFAULT)


# --- CSV ---

def test_csv_writes_only_active_sheet(tmp_path):
    workbook = make_workbook(("First", [["1", "2"]]), ("Second", [["3", "4"]]))
    target = tmp_path / "out.csv"
    CsvWriter().save(workbook, str(target))
    assert target.read_text(encoding="utf-8").splitlines() == ["1,2"]


def test_csv_quotes_values_with_delimiter(tmp_path):
    workbook = make_workbook(("Sheet", [["a,b", 'say "hi"', None, 3]]))
    target = tmp_path / "quoted.csv"
    CsvWriter().save(workbook, str(target))
    assert target.read_text(encoding="utf-8").splitlines() == ['"a,b","say ""hi""",,3']


def test_csv_keeps_integers_next_to_blanks(tmp_path):
    workbook = make_workbook(("Sheet", [[1, None], [None, 2]]))
    target = tmp_path / "ints.csv"
    CsvWriter().save(workbook, str(target))
    assert target.read_text(encoding="utf-8").splitlines() == ["1,", ",2"]


# --- HTML ---

def test_html_contains_every_sheet_escaped(tmp_path):
    workbook = make_workbook(("Users & Co", [["<b>name</b>"]]), ("Second", [["value"]]))
    target = tmp_path / "out.html"
    HtmlWriter().save(workbook, str(target))
    content = target.read_text(encoding="utf-8")
    assert content.startswith("<!DOCTYPE html>")
    assert "<h2>Users &amp; Co</h2>" in content
    assert "<h2>Second</h2>" in content
    assert "&lt;b&gt;name&lt;/b&gt;" in content
    assert content.count("<table") == 2


# --- XLSX ---

def test_xlsx_round_trip_values(tmp_path):
    moment = datetime(2024, 1, 2, 3, 4, 5)
    workbook = make_workbook(
        ("Data", [["text", "=1+1", 7, Decimal("2.5"), True, moment]]),
        ("Other", [["x"]]),
    )
    target = tmp_path / "out.xlsx"
    XlsxWriter().save(workbook, str(target))

    loaded = load_workbook(target)
    assert loaded.sheetnames == ["Data", "Other"]
    values = [c.value for c in loaded["Data"][1]]
    assert values[:5] == ["text", "=1+1", 7, 2.5, True]
    assert values[5].date() == moment.date()


def test_xlsx_to_stdout(capsysbinary):
    workbook = make_workbook(("Sheet", [["a"]]))
    XlsxWriter().save(workbook, OUTPUT_DEFAULT)
    assert capsysbinary.readouterr().out[:2] == b"PK"


def test_binary_writer_needs_byte_stdout(monkeypatch):
    monkeypatch.setattr(sys, "stdout", io.StringIO())
    with pytest.raises(ExportError):
        XlsWriter().save(make_workbook(("Sheet", [["a"]])), OUTPUT_DEFAULT)


# --- XLS ---

def test_xls_writes_ole_file(tmp_path):
    workbook = make_workbook(("Sheet", [["a", 1, None, datetime(2024, 1, 2)], [Decimal("1.5")]]))
    target = tmp_path / "out.xls"
    XlsWriter().save(workbook, str(target))
    assert target.read_bytes()[:4] == b"\xd0\xcf\x11\xe0"


def test_missing_directory_raises_oserror(tmp_path):
    target = tmp_path / "missing" / "out.xls"
    with pytest.raises(OSError):
        XlsWriter().save(make_workbook(("Sheet", [["a"]])), str(target))
    assert not target.exists()
