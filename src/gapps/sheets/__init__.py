"""
Google Sheets v4: spreadsheets, sheets and cell values
"""

from .a1 import MAX_COLUMNS, col_to_int, int_to_col, quote_title, range_a1
from .cells import coerce_to_cell, currency_cell, formula_cell, cell_value, row_to_row_data
from .resources import (GoogleSheetsEnum, GridProperties, SheetProperties, Sheet,
                        SpreadsheetProperties, Spreadsheet, ValueRange, UpdateSheetsResponse)
from .requests import *
from .ops import *
