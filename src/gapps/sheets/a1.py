"""
Just enough A1 notation to address whole sheets and rectangular ranges.
See https://developers.google.com/sheets/api/guides/concepts#cell

    <title>!<start col><start row>:<end col><end row>

Rows are 1-based integers, columns are A-ZZZ.  Leaving out the columns or
rows makes that side unbounded, a bare title is the whole sheet.
"""
import re

# can address up to 'ZZZ'
MAX_COLUMNS = 18278

_COL_RE = re.compile(r"^[A-Z]{1,3}$")
# titles that can go unquoted
_PLAIN_TITLE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
# titles that could be read as a cell or column reference
_CELLISH_RE = re.compile(r"^[A-Za-z]{1,3}\d*$")


def col_to_int(column: str) -> int:
    """
    Column label to its 1-based index, 'A' is 1.
    Returns 0 for an invalid label.
    """
    c = str(column).upper()
    if not _COL_RE.match(c):
        return 0
    num = 0
    for ch in c:
        num = num * 26 + (ord(ch) - 64)
    return num


def int_to_col(index: int) -> str:
    """
    1-based column index to its label.
    Returns an empty string when out of the A-ZZZ range.
    """
    i = int(index)
    if i < 1 or i > MAX_COLUMNS:
        return ""
    col = ""
    while i:
        i, r = divmod(i - 1, 26)
        col = chr(r + 65) + col
    return col


def quote_title(title: str) -> str:
    """
    Sheet titles with spaces or punctuation need single quotes, with any
    quote in the title doubled.
    """
    t = str(title)
    if _PLAIN_TITLE_RE.match(t) and not _CELLISH_RE.match(t):
        return t
    return "'" + t.replace("'", "''") + "'"


def _column(col: str|int) -> str:
    if isinstance(col, int) and col:
        c = int_to_col(col)
    else:
        c = str(col or "").upper()
    if (col and not c) or (c and not _COL_RE.match(c)):
        raise ValueError(f"Invalid column: {col}")
    return c


def range_a1(title: str = "",
             start_col: str|int = "", start_row: int = 0,
             end_col: str|int = "", end_row: int = 0) -> str:
    """
    Build an A1 range.  Integer columns are 1-based indices, 0 or empty
    values leave that side unbounded and with no bounds at all the range is
    the whole sheet.
    """
    sc, ec = _column(start_col), _column(end_col)
    start = f"{sc}{start_row or ''}"
    end = f"{ec}{end_row or ''}"
    if end and not start:
        raise ValueError("An end bound needs a start bound")
    cells = f"{start}:{end}" if end else start
    if not title:
        if not cells:
            raise ValueError("A range needs a title or some bounds")
        return cells
    return f"{quote_title(title)}!{cells}" if cells else quote_title(title)
