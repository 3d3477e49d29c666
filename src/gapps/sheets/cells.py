"""
Converting between Python values and Sheets CellData.
https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#CellData

Dates and times are stored by Sheets as serial numbers, days since
1899-12-30 with the fraction being the time of day, and only the number
format tells them apart from plain numbers.  So the format travels with the
value here in both directions.
"""
from decimal import Decimal
import datetime

SERIAL_EPOCH = datetime.datetime(1899, 12, 30)

DATE_FORMAT = {"type": "DATE", "pattern": "yyyy-mm-dd"}
DATE_TIME_FORMAT = {"type": "DATE_TIME", "pattern": "yyyy-mm-dd hh:mm:ss"}
CURRENCY_FORMAT = {"type": "CURRENCY", "pattern": "\"$\"#,##0.00"}

_CELL_KEYS = ("userEnteredValue", "effectiveValue", "formattedValue",
              "userEnteredFormat", "effectiveFormat", "note", "hyperlink")


def _cell(kind: str, value, number_format: dict|None = None) -> dict:
    cell = {"userEnteredValue": {kind: value}}
    if number_format:
        cell["userEnteredFormat"] = {"numberFormat": dict(number_format)}
    return cell


def to_serial(value: datetime.date) -> float:
    """Date or datetime to a serial number, aware datetimes are taken as UTC."""
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    else:
        value = datetime.datetime.combine(value, datetime.time())
    delta = value - SERIAL_EPOCH
    return delta.days + (delta.seconds + delta.microseconds / 1e6) / 86400


def from_serial(serial: float, with_time: bool = True) -> datetime.date:
    """Serial number to a datetime (to the millisecond) or a date."""
    dt = SERIAL_EPOCH + datetime.timedelta(days=float(serial))
    ms = round(dt.microsecond / 1000)
    dt = dt.replace(microsecond=0) + datetime.timedelta(milliseconds=ms)
    return dt if with_time else dt.date()


def _exact_float(value: Decimal) -> float:
    if not value.is_finite():
        raise ValueError(f"{value} is not a finite number")
    f = float(value)
    if Decimal(repr(f)) != value:
        raise ValueError(f"{value} cannot be represented exactly as a double")
    return f


def coerce_to_cell(value) -> dict:
    """
    CellData for a Python value.  Strings, bools, numbers, dates and None map
    onto the matching cell value, anything else is written as its str().
    Decimals that would lose precision as a double raise ValueError rather
    than silently changing.  CellData dicts are passed through.
    """
    if value is None:
        return {}
    if isinstance(value, dict):
        if any(k in value for k in _CELL_KEYS):
            return value
        raise ValueError(f"Not a CellData dict: {value}")
    if isinstance(value, bool):
        return _cell("boolValue", value)
    if isinstance(value, Decimal):
        return _cell("numberValue", _exact_float(value))
    if isinstance(value, (int, float)):
        return _cell("numberValue", value)
    if isinstance(value, datetime.datetime):
        return _cell("numberValue", to_serial(value), DATE_TIME_FORMAT)
    if isinstance(value, datetime.date):
        return _cell("numberValue", to_serial(value), DATE_FORMAT)
    return _cell("stringValue", str(value))


def currency_cell(amount: Decimal|float|int) -> dict:
    """A number formatted as currency, read back as a Decimal."""
    a = _exact_float(amount) if isinstance(amount, Decimal) else float(amount)
    return _cell("numberValue", a, CURRENCY_FORMAT)


def formula_cell(formula: str) -> dict:
    f = str(formula)
    return _cell("formulaValue", f if f.startswith("=") else "=" + f)


def cell_value(cell):
    """
    The Python value of a cell, the evaluated value when Sheets supplied one.
    Anything that isn't a dict is assumed to be a value already.  Formulas that
    haven't been evaluated and error cells have no sensible value so the
    CellData comes back as-is.
    """
    if not isinstance(cell, dict):
        return cell
    value = cell.get("effectiveValue") or cell.get("userEnteredValue")
    if not value:
        return None
    if "formulaValue" in value or "errorValue" in value:
        return cell
    number_format = (cell.get("effectiveFormat") or cell.get("userEnteredFormat") or {}).get("numberFormat", {})
    if "numberValue" in value:
        n = value["numberValue"]
        kind = number_format.get("type")
        if kind == "DATE":
            return from_serial(n, with_time=False)
        if kind == "DATE_TIME":
            return from_serial(n)
        if kind == "CURRENCY":
            return Decimal(repr(float(n)))
        return float(n)
    if "boolValue" in value:
        return bool(value["boolValue"])
    if "stringValue" in value:
        return value["stringValue"]
    return cell


def row_to_row_data(row) -> dict:
    """RowData for a sequence of values."""
    return {"values": [coerce_to_cell(v) for v in row]}
