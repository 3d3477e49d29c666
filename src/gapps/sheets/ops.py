"""
Wrappers for the Sheets v4 spreadsheet and values operations.
See https://developers.google.com/sheets/api/reference/rest
The service() decorator handles building the service, pass service= to
use a specific one.
"""
from collections.abc import Iterable
import logging

from ..access import session, service
from ..errors import NotAuthenticatedError
from .a1 import range_a1
from .cells import cell_value, row_to_row_data
from .requests import (AddSheetRequest, AppendCellsRequest, GoogleSheetsUpdateRequestBase,
                       UpdateCellsRequest, UpdateSheetPropertiesRequest, make_request)
from .resources import GoogleSheetsEnum, SheetProperties, Spreadsheet, UpdateSheetsResponse, ValueRange

logger = logging.getLogger(__name__)

__all__ = ["scopes", "build_service", "get_spreadsheet_info", "create_spreadsheet", "batch_update",
           "add_sheet", "find_sheet_id", "obtain_sheet_id", "get_sheet_info", "write_sheet",
           "append_sheet", "get_cells", "get_cell_values", "update_values", "clear_values",
           "clear_sheet"]

scopes = ["https://www.googleapis.com/auth/spreadsheets"]

DEFAULT_BATCH_SIZE = 1000

_CELL_FIELDS = ("sheets(properties(sheetId,title),data(startRow,startColumn,rowData(values("
                "userEnteredValue,effectiveValue,userEnteredFormat(numberFormat),effectiveFormat(numberFormat)))))")


def _range_list(ranges: str|Iterable[str]) -> list[str]:
    if isinstance(ranges, str):
        return [ranges]
    return [str(r) for r in ranges]


def _chunks(rows: list, batch_size: int):
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, not {batch_size}")
    for start in range(0, len(rows), batch_size):
        yield start, rows[start:start + batch_size]


def build_service():
    """The session's sheets service, for callers wanting to hold on to one."""
    s = session.get_service("sheets", "v4")
    if s is None:
        raise NotAuthenticatedError("no credentials available for sheets v4")
    return s


@service("sheets", "v4")
def get_spreadsheet_info(spreadsheet_id: str, *, service=None) -> Spreadsheet:
    """
    Spreadsheet properties and the properties of its sheets, no cell data.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/get
    """
    response = service.spreadsheets().get(spreadsheetId=spreadsheet_id).execute()
    return Spreadsheet.from_base(response)


@service("sheets", "v4")
def create_spreadsheet(title: str, *, service=None) -> Spreadsheet:
    """
    A whole new spreadsheet in the user's root folder, use the drive
    functions to create one elsewhere.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/create
    """
    response = service.spreadsheets().create(body={"properties": {"title": title}}).execute()
    return Spreadsheet.from_base(response)


@service("sheets", "v4")
def batch_update(spreadsheet_id: str,
                 requests: list[GoogleSheetsUpdateRequestBase|dict],
                 includeSpreadsheetInResponse: bool = False,
                 *, service=None) -> UpdateSheetsResponse:
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate
    The requests are applied in order and atomically, if one fails none are.
    """
    body = make_request(requests, includeSpreadsheetInResponse)
    logger.debug("batchUpdate %s: %d request(s)", spreadsheet_id, len(body["requests"]))
    response = service.spreadsheets().batchUpdate(spreadsheetId=spreadsheet_id, body=body).execute()
    return UpdateSheetsResponse.from_base(response)


@service("sheets", "v4")
def add_sheet(spreadsheet_id: str, title: str, *, service=None) -> SheetProperties:
    """Add a sheet (tab) with the given title, returning its properties."""
    response = batch_update(spreadsheet_id, [AddSheetRequest(title)], service=service)
    return SheetProperties.from_base(response.replies[0]["addSheet"]["properties"])


@service("sheets", "v4")
def find_sheet_id(spreadsheet_id: str, title: str, *, service=None) -> int|None:
    """The id of the sheet with the given title, None if there isn't one."""
    props = get_spreadsheet_info(spreadsheet_id, service=service).sheet(str(title))
    return props.sheetId if props is not None else None


@service("sheets", "v4")
def obtain_sheet_id(spreadsheet_id: str, title: str, *, service=None) -> int:
    """The id of the sheet with the given title, adding the sheet if need be."""
    sheet_id = find_sheet_id(spreadsheet_id, title, service=service)
    if sheet_id is None:
        sheet_id = add_sheet(spreadsheet_id, title, service=service).sheetId
    return sheet_id


@service("sheets", "v4")
def get_sheet_info(spreadsheet_id: str, sheet_id: int, *, service=None) -> SheetProperties|None:
    return get_spreadsheet_info(spreadsheet_id, service=service).sheet(int(sheet_id))


@service("sheets", "v4")
def write_sheet(spreadsheet_id: str, sheet_id: int, rows: Iterable[Iterable],
                batch_size: int = DEFAULT_BATCH_SIZE, *, service=None) -> None:
    """
    Replace the contents of the sheet with rows.  The grid is resized to fit
    the data exactly and cleared, then the rows are written batch_size at a
    time, each batch being its own batchUpdate call.
    Values are converted with coerce_to_cell().
    """
    rows = [list(r) for r in rows]
    width = max((len(r) for r in rows), default=0)
    # every row is converted before the first request goes out
    row_data = [row_to_row_data(r) for r in rows]
    # a sheet can't have zero rows or columns
    resize = UpdateSheetPropertiesRequest(
        {"sheetId": sheet_id, "gridProperties": {"rowCount": max(len(rows), 1),
                                                 "columnCount": max(width, 1)}},
        "gridProperties(rowCount,columnCount)")
    clear = UpdateCellsRequest(sheet_id, range={})
    requests = [resize, clear]
    for start, chunk in _chunks(row_data, batch_size):
        requests.append(UpdateCellsRequest(sheet_id, chunk, rowIndex=start))
        batch_update(spreadsheet_id, requests, service=service)
        requests = []
    if requests:
        batch_update(spreadsheet_id, requests, service=service)


@service("sheets", "v4")
def append_sheet(spreadsheet_id: str, sheet_id: int, rows: Iterable[Iterable],
                 batch_size: int = DEFAULT_BATCH_SIZE, *, service=None) -> list[UpdateSheetsResponse]:
    """
    Append rows after the last row with data, batch_size rows per
    batchUpdate call, growing the grid as needed.
    Returns the response of each call.
    """
    row_data = [row_to_row_data(r) for r in rows]
    responses = []
    for _, chunk in _chunks(row_data, batch_size):
        request = AppendCellsRequest(sheet_id, chunk)
        responses.append(batch_update(spreadsheet_id, [request], service=service))
    return responses


@service("sheets", "v4")
def get_cells(spreadsheet_id: str, ranges: str|Iterable[str], *, service=None) -> list[list[list]]:
    """
    Cell values for the ranges, converted with cell_value() so dates and
    currency come back typed.  One list of rows per range, ordered by sheet
    when the ranges cover several.
    """
    response = service.spreadsheets().get(spreadsheetId=spreadsheet_id,
                                          ranges=_range_list(ranges),
                                          includeGridData=True,
                                          fields=_CELL_FIELDS).execute()
    results = []
    for sheet in response.get("sheets", []):
        for grid in sheet.get("data", []):
            results.append([[cell_value(c) for c in row.get("values", [])]
                            for row in grid.get("rowData", [])])
    return results


@service("sheets", "v4")
def get_cell_values(spreadsheet_id: str, ranges: str|Iterable[str],
                    valueRenderOption: str = "UNFORMATTED",
                    dateTimeRenderOption: str = "SERIAL",
                    dimension: str = "ROWS",
                    *, service=None) -> list[list[list]]:
    """
    Raw values for each range, one list of rows per range.
    Empty trailing rows and columns are not returned.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/batchGet
    """
    value_render = GoogleSheetsEnum.valueRenderOption(valueRenderOption)
    if not value_render:
        raise ValueError(f"Invalid valueRenderOption value: {valueRenderOption}")
    date_time_render = GoogleSheetsEnum.dateTimeRenderOption(dateTimeRenderOption)
    if not date_time_render:
        raise ValueError(f"Invalid dateTimeRenderOption value: {dateTimeRenderOption}")
    dim = GoogleSheetsEnum.dimension(dimension)
    if not dim:
        raise ValueError(f"Invalid majorDimension value: {dimension}")
    response = service.spreadsheets().values().batchGet(spreadsheetId=spreadsheet_id,
                                                        ranges=_range_list(ranges),
                                                        majorDimension=dim,
                                                        valueRenderOption=value_render,
                                                        dateTimeRenderOption=date_time_render).execute()
    return [vr.get("values", []) for vr in response.get("valueRanges", [])]


@service("sheets", "v4")
def update_values(spreadsheet_id: str, data: ValueRange|list[ValueRange],
                  valueInputOption: str = "USER",
                  *, service=None) -> dict:
    """
    Write values to A1 ranges, parsed as if typed in with USER or stored
    as-is with RAW.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/batchUpdate
    """
    value_input = GoogleSheetsEnum.valueInputOption(valueInputOption)
    if not value_input:
        raise ValueError(f"Invalid valueInputOption value: {valueInputOption}")
    dlist = [data] if isinstance(data, ValueRange) else list(data)
    body = {"valueInputOption": value_input,
            "data": [ValueRange.from_base(d).to_base() for d in dlist]}
    return service.spreadsheets().values().batchUpdate(spreadsheetId=spreadsheet_id,
                                                        body=body).execute()


@service("sheets", "v4")
def clear_values(spreadsheet_id: str, ranges: str|Iterable[str], *, service=None) -> list[str]:
    """
    Set the ranges to blank, formatting is kept.  Returns the ranges cleared.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/batchClear
    """
    range_list = _range_list(ranges)
    if not range_list:
        return []
    response = service.spreadsheets().values().batchClear(spreadsheetId=spreadsheet_id,
                                                          body={"ranges": range_list}).execute()
    return response.get("clearedRanges", [])


@service("sheets", "v4")
def clear_sheet(spreadsheet_id: str, title: str, *, service=None) -> list[str]:
    """Blank every cell of the sheet with the given title."""
    return clear_values(spreadsheet_id, [range_a1(title)], service=service)
