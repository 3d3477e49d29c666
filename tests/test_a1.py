import pytest

from gapps.sheets.a1 import MAX_COLUMNS, col_to_int, int_to_col, quote_title, range_a1


def test_columns():
    assert(col_to_int("A") == 1)
    assert(col_to_int("z") == 26)
    assert(col_to_int("AA") == 27)
    assert(col_to_int("BX") == 76)
    assert(col_to_int("ZZZ") == MAX_COLUMNS)
    assert(int_to_col(76) == "BX")
    assert(int_to_col(MAX_COLUMNS) == "ZZZ")
    for i in (1, 26, 27, 702, 703, 12345):
        assert(col_to_int(int_to_col(i)) == i)


def test_invalid_columns():
    assert(col_to_int("") == 0)
    assert(col_to_int("AAAA") == 0)
    assert(col_to_int("A1") == 0)
    assert(int_to_col(0) == "")
    assert(int_to_col(MAX_COLUMNS + 1) == "")


def test_quote_title():
    assert(quote_title("test") == "test")
    assert(quote_title("this is a test") == "'this is a test'")
    assert(quote_title("Bob's") == "'Bob''s'")
    # would read as cell references
    assert(quote_title("A1") == "'A1'")
    assert(quote_title("ABC") == "'ABC'")
    assert(quote_title("Sheet1") == "Sheet1")


def test_ranges():
    assert(range_a1("test", "C", 4, "BX", 2) == "test!C4:BX2")
    assert(range_a1("test", 3, 4, 76, 2) == "test!C4:BX2")
    assert(range_a1("new tab", "A", 1, "C", 4) == "'new tab'!A1:C4")
    assert(range_a1("new tab", "A", 0, "A") == "'new tab'!A:A")
    assert(range_a1("new tab", start_row=1, end_row=1) == "'new tab'!1:1")
    assert(range_a1("new tab", "A", 2, "A") == "'new tab'!A2:A")
    assert(range_a1("new tab", "B", 2, end_row=2) == "'new tab'!B2:2")
    assert(range_a1("new tab") == "'new tab'")
    assert(range_a1(start_col="A", start_row=1, end_col="A", end_row=2) == "A1:A2")
    assert(range_a1(start_col="B", start_row=3) == "B3")


def test_invalid_ranges():
    with pytest.raises(ValueError):
        range_a1()
    with pytest.raises(ValueError):
        range_a1("test", "A1")
    with pytest.raises(ValueError):
        range_a1("test", MAX_COLUMNS + 1)
    with pytest.raises(ValueError):
        range_a1("t", end_col="B", end_row=2)
    with pytest.raises(ValueError):
        range_a1(end_row=3)
