"""
Dataclass implementations of the sheets resources we read and write.
dataclasses.asdict() gives exactly the dict the client needs going out,
coming back the nested resources are rebuilt in fixup(), through
from_base() so keys we don't model are dropped.
Only the resources and fields this library uses are modelled, anything
else stays a dict.
"""
from dataclasses import dataclass, field
from typing import List

from ..resources import GoogleResourceBase


class GoogleSheetsEnum():
    """
    Sheets takes its enums as plain strings.  These accept the full API name
    or a short alias, case-insensitively, and return the API name, or an
    empty string when the option is unknown so callers can raise.
    """
    _ALIASES = {
        # https://developers.google.com/sheets/api/reference/rest/v4/ValueRenderOption
        "valueRenderOption": {"FORMATTED_VALUE": ("FORMATTED",),
                              "UNFORMATTED_VALUE": ("UNFORMATTED",),
                              "FORMULA": ()},
        # https://developers.google.com/sheets/api/reference/rest/v4/DateTimeRenderOption
        "dateTimeRenderOption": {"SERIAL_NUMBER": ("SERIAL",),
                                 "FORMATTED_STRING": ("FORMATTED",)},
        # https://developers.google.com/sheets/api/reference/rest/v4/Dimension
        "dimension": {"ROWS": ("R",),
                      "COLUMNS": ("C", "COLS")},
        # https://developers.google.com/sheets/api/reference/rest/v4/ValueInputOption
        "valueInputOption": {"RAW": (),
                             "USER_ENTERED": ("USER",)},
    }

    @classmethod
    def _lookup(cls, kind: str, option: str) -> str:
        o = str(option).upper()
        for name, aliases in cls._ALIASES[kind].items():
            if o == name or o in aliases:
                return name
        return ""

    @classmethod
    def valueRenderOption(cls, option: str) -> str:
        return cls._lookup("valueRenderOption", option)

    @classmethod
    def dateTimeRenderOption(cls, option: str) -> str:
        return cls._lookup("dateTimeRenderOption", option)

    @classmethod
    def dimension(cls, dim: str) -> str:
        return cls._lookup("dimension", dim)

    @classmethod
    def valueInputOption(cls, option: str) -> str:
        return cls._lookup("valueInputOption", option)


@dataclass
class GridProperties(GoogleResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#gridproperties"""
    rowCount: int = field(default=-1)
    columnCount: int = field(default=-1)
    frozenRowCount: int = field(default=0)
    frozenColumnCount: int = field(default=0)

    def __bool__(self) -> bool:
        return self.rowCount >= 0 and self.columnCount >= 0


@dataclass
class SheetProperties(GoogleResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheetproperties"""
    sheetId: int = field(default=-1)
    title: str = field(default="")
    index: int = field(default=-1)
    sheetType: str = field(default="")
    gridProperties: GridProperties|dict = field(default_factory=dict)
    hidden: bool = field(default=False)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.gridProperties = GridProperties.from_base(self.gridProperties)

    def __bool__(self) -> bool:
        """
        Valid when it has an ID and a title, the ID of the first sheet is 0
        """
        return self.sheetId >= 0 and bool(self.title)

    def __str__(self) -> str:
        if not self:
            return "<invalid sheet>"
        val = f"{self.title}({self.sheetId}[{self.index}]):{self.sheetType}"
        if self.is_grid():
            val += f"({self.gridProperties.rowCount}Rx{self.gridProperties.columnCount}C)"
        return val

    def is_grid(self) -> bool:
        """
        A GRID sheet is the traditional range of cells and is normally
        what you want to work with.
        """
        return self.sheetType == 'GRID'


@dataclass
class Sheet(GoogleResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheet
    Only the properties and grid data are kept.
    """
    properties: SheetProperties|dict = field(default_factory=dict)
    data: List[dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.properties = SheetProperties.from_base(self.properties)

    def __bool__(self) -> bool:
        return bool(self.properties)

    def __str__(self) -> str:
        return str(self.properties)


@dataclass
class SpreadsheetProperties(GoogleResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets#SpreadsheetProperties
    """
    title: str = field(default="")
    locale: str = field(default="")
    timeZone: str = field(default="")

    def __bool__(self) -> bool:
        return bool(self.title)


@dataclass
class Spreadsheet(GoogleResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets#resource:-spreadsheet
    """
    spreadsheetId: str = field(default="")
    properties: SpreadsheetProperties|dict = field(default_factory=dict)
    sheets: List[Sheet|dict] = field(default_factory=list)
    spreadsheetUrl: str = field(default="")

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.properties = SpreadsheetProperties.from_base(self.properties)
        self.sheets = [Sheet.from_base(s) for s in self.sheets]

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)

    def __str__(self) -> str:
        if not self.spreadsheetId:
            return 'unconnected'
        return f"{self.properties.title}[{','.join(str(s) for s in self.sheets)}]"

    def sheet(self, key: str|int) -> SheetProperties|None:
        """Properties of the sheet with the given title (str) or sheetId (int)."""
        attr = "sheetId" if isinstance(key, int) else "title"
        for s in self.sheets:
            if getattr(s.properties, attr) == key:
                return s.properties
        return None


@dataclass
class ValueRange(GoogleResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values#resource:-valuerange"""
    range: str = field(default="")
    majorDimension: str = field(default="ROWS")
    values: List[list] = field(default_factory=list)

    def __post_init__(self):
        self.fixup()

    def fixup(self) -> None:
        if self.majorDimension:
            d = GoogleSheetsEnum.dimension(self.majorDimension)
            if not d:
                raise ValueError(f"Invalid majorDimension value: {self.majorDimension}")
            self.majorDimension = d

    def __bool__(self) -> bool:
        return bool(self.range)


@dataclass
class UpdateSheetsResponse(GoogleResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate#response-body
    """
    spreadsheetId: str = field(default="")
    replies: List[dict] = field(default_factory=list)
    updatedSpreadsheet: Spreadsheet|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)

    def fixup(self) -> None:
        self.updatedSpreadsheet = Spreadsheet.from_base(self.updatedSpreadsheet)
