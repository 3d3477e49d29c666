"""
Request objects for spreadsheets.batchUpdate.
https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request
Each request goes into the body keyed by its name, which is derived from
the class name: AddSheetRequest -> {'addSheet': {...}}
"""
from dataclasses import dataclass, field
from typing import List
import re

from ..resources import GoogleResourceBase

__all__ = ["GoogleSheetsUpdateRequestBase", "AddSheetRequest", "UpdateSheetPropertiesRequest",
           "UpdateCellsRequest", "AppendCellsRequest", "make_request"]


class GoogleSheetsUpdateRequestBase(GoogleResourceBase):
    """
    Base class for sheet batchUpdate requests to get the actual
    request dict into the right format.
    """
    _NAME_RE = re.compile(r"^([A-Z])([a-zA-Z]+)Request$")

    def to_request(self) -> dict[str, dict]:
        m = self._NAME_RE.match(self.__class__.__name__)
        if not m:
            raise RuntimeError("Invalid Google Sheets request format for class name")
        return {m.group(1).lower() + m.group(2): self.trim()}


@dataclass
class AddSheetRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#addsheetrequest
    """
    title: str

    def to_base(self) -> dict:
        return {'properties': {'title': self.title}}


@dataclass
class UpdateSheetPropertiesRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatesheetpropertiesrequest
    properties must carry the sheetId, fields is the mask of what to change.
    """
    properties: dict
    fields: str


@dataclass
class UpdateCellsRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatecellsrequest
    Writes rows starting at the start coordinate, or with no rows clears the
    fields over the given range.
    """
    sheetId: int
    rows: List[dict] = field(default_factory=list)
    fields: str = field(default="userEnteredValue,userEnteredFormat")
    rowIndex: int = field(default=0)
    columnIndex: int = field(default=0)
    range: dict|None = field(default=None)

    def to_base(self) -> dict:
        b = {'rows': list(self.rows), 'fields': self.fields}
        if self.range is not None:
            b['range'] = dict(self.range, sheetId=self.sheetId)
        else:
            b['start'] = {'sheetId': self.sheetId, 'rowIndex': self.rowIndex,
                          'columnIndex': self.columnIndex}
        return b


@dataclass
class AppendCellsRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#appendcellsrequest
    """
    sheetId: int
    rows: List[dict] = field(default_factory=list)
    fields: str = field(default="userEnteredValue,userEnteredFormat")


def make_request(requests: list[GoogleSheetsUpdateRequestBase|dict],
                 includeSpreadsheetInResponse: bool = False) -> dict:
    """
    Assemble the batchUpdate body.  Request objects are converted, dicts
    are assumed to already be in request form.
    """
    return {
        'requests': [r.to_request() if isinstance(r, GoogleSheetsUpdateRequestBase) else r
                     for r in requests],
        'includeSpreadsheetInResponse': includeSpreadsheetInResponse,
    }
