from decimal import Decimal
from pathlib import Path
import datetime

import pytest

from gapps.sheets.cells import (CURRENCY_FORMAT, DATE_FORMAT, cell_value, coerce_to_cell, currency_cell,
                                formula_cell, from_serial, row_to_row_data, to_serial)


def test_cell_conversion():
    assert(cell_value("foo") == "foo")
    assert(cell_value(2.0) == 2.0)
    assert(cell_value(datetime.datetime(1950, 6, 15)) == datetime.datetime(1950, 6, 15))
    assert(cell_value(coerce_to_cell("foo")) == "foo")
    assert(cell_value(coerce_to_cell(Decimal("2.0"))) == 2.0)
    assert(cell_value(coerce_to_cell(Path("a/b"))) == "a/b")
    assert(cell_value(coerce_to_cell(None)) is None)
    assert(cell_value(coerce_to_cell(True)) is True)
    assert(cell_value(coerce_to_cell(datetime.datetime(1950, 6, 15))) == datetime.datetime(1950, 6, 15))
    assert(cell_value(currency_cell(Decimal("2.01"))) == Decimal("2.01"))
    assert(isinstance(cell_value(formula_cell("A1+B2")), dict))
    assert(row_to_row_data(["foo", None, 2.0]) == {"values": [
        {"userEnteredValue": {"stringValue": "foo"}}, {}, {"userEnteredValue": {"numberValue": 2.0}}]})
    with pytest.raises(ValueError):
        coerce_to_cell(Decimal("299792.457999999984"))
    for value in ("Infinity", "-Infinity", "NaN"):
        with pytest.raises(ValueError):
            coerce_to_cell(Decimal(value))
    with pytest.raises(ValueError):
        currency_cell(Decimal("Infinity"))


def test_dates_carry_format():
    cell = coerce_to_cell(datetime.date(2020, 2, 29))
    assert(cell["userEnteredFormat"]["numberFormat"] == DATE_FORMAT)
    assert(cell_value(cell) == datetime.date(2020, 2, 29))
    assert(currency_cell(3)["userEnteredFormat"]["numberFormat"] == CURRENCY_FORMAT)


def test_serials():
    assert(to_serial(datetime.date(1899, 12, 31)) == 1)
    assert(to_serial(datetime.datetime(1899, 12, 31, 12)) == 1.5)
    assert(from_serial(1.5) == datetime.datetime(1899, 12, 31, 12))
    assert(from_serial(1.5, with_time=False) == datetime.date(1899, 12, 31))
    utc_noon = datetime.datetime(1900, 1, 1, 12, tzinfo=datetime.timezone.utc)
    assert(to_serial(utc_noon) == 2.5)


def test_formula_and_passthrough():
    assert(formula_cell("SUM(A1:A3)") == {"userEnteredValue": {"formulaValue": "=SUM(A1:A3)"}})
    assert(formula_cell("=A1") == {"userEnteredValue": {"formulaValue": "=A1"}})
    cell = {"userEnteredValue": {"stringValue": "x"}, "note": "n"}
    assert(coerce_to_cell(cell) is cell)
    with pytest.raises(ValueError):
        coerce_to_cell({"not": "a cell"})


def test_effective_value_preferred():
    cell = {"userEnteredValue": {"formulaValue": "=1+1"}, "effectiveValue": {"numberValue": 2}}
    assert(cell_value(cell) == 2.0)
    assert(cell_value({"effectiveValue": {"errorValue": {"type": "REF"}}})["effectiveValue"])
    assert(cell_value({}) is None)
