from decimal import Decimal

import pytest

from gapps.sheets import (ValueRange, add_sheet, append_sheet, clear_sheet, clear_values, find_sheet_id,
                          get_cell_values, get_cells, get_sheet_info, get_spreadsheet_info, obtain_sheet_id,
                          update_values, write_sheet)

INFO = {
    "spreadsheetId": "ss",
    "properties": {"title": "test", "locale": "en_US"},
    "sheets": [
        {"properties": {"sheetId": 0, "title": "Sheet1", "index": 0, "sheetType": "GRID",
                        "gridProperties": {"rowCount": 1000, "columnCount": 26}}},
        {"properties": {"sheetId": 5, "title": "new tab", "index": 1, "sheetType": "GRID",
                        "gridProperties": {"rowCount": 4, "columnCount": 3}}},
    ],
    "spreadsheetUrl": "https://docs.google.com/spreadsheets/d/ss",
}


def _spreadsheets(sheets_service, info=INFO):
    spreadsheets = sheets_service.spreadsheets.return_value
    spreadsheets.get.return_value.execute.return_value = info
    spreadsheets.batchUpdate.return_value.execute.return_value = {"spreadsheetId": "ss", "replies": [{}]}
    return spreadsheets


def _bodies(spreadsheets):
    return [c.kwargs["body"] for c in spreadsheets.batchUpdate.call_args_list]


def test_spreadsheet_info(sheets_service):
    _spreadsheets(sheets_service, dict(INFO, somethingNew={"a": 1}))
    info = get_spreadsheet_info("ss", service=sheets_service)
    assert(info.properties.title == "test")
    assert([s.properties.title for s in info.sheets] == ["Sheet1", "new tab"])
    assert(str(info) == "test[Sheet1(0[0]):GRID(1000Rx26C),new tab(5[1]):GRID(4Rx3C)]")


def test_find_sheet_id(sheets_service):
    _spreadsheets(sheets_service)
    assert(find_sheet_id("ss", "new tab", service=sheets_service) == 5)
    assert(find_sheet_id("ss", "Sheet1", service=sheets_service) == 0)
    assert(find_sheet_id("ss", "no such tab", service=sheets_service) is None)


def test_get_sheet_info(sheets_service):
    _spreadsheets(sheets_service)
    info = get_sheet_info("ss", 5, service=sheets_service)
    assert(info.gridProperties.rowCount == 4)
    assert(info.gridProperties.columnCount == 3)
    assert(get_sheet_info("ss", 99, service=sheets_service) is None)


def test_add_sheet(sheets_service):
    spreadsheets = _spreadsheets(sheets_service)
    spreadsheets.batchUpdate.return_value.execute.return_value = {
        "spreadsheetId": "ss",
        "replies": [{"addSheet": {"properties": {"sheetId": 7, "title": "another tab"}}}]}
    props = add_sheet("ss", "another tab", service=sheets_service)
    assert((props.sheetId, props.title) == (7, "another tab"))
    assert(_bodies(spreadsheets) == [{"requests": [{"addSheet": {"properties": {"title": "another tab"}}}],
                                      "includeSpreadsheetInResponse": False}])
    assert(spreadsheets.batchUpdate.call_args.kwargs["spreadsheetId"] == "ss")


def test_obtain_sheet_id(sheets_service):
    spreadsheets = _spreadsheets(sheets_service)
    assert(obtain_sheet_id("ss", "new tab", service=sheets_service) == 5)
    spreadsheets.batchUpdate.assert_not_called()

    spreadsheets.batchUpdate.return_value.execute.return_value = {
        "spreadsheetId": "ss",
        "replies": [{"addSheet": {"properties": {"sheetId": 7, "title": "another tab"}}}]}
    assert(obtain_sheet_id("ss", "another tab", service=sheets_service) == 7)
    spreadsheets.batchUpdate.assert_called_once()


def test_write_sheet_in_batches(sheets_service):
    spreadsheets = _spreadsheets(sheets_service)
    rows = [["a", 1], ["b", 2, True], ["c"], ["d"], ["e"]]
    assert(write_sheet("ss", 5, rows, batch_size=2, service=sheets_service) is None)
    bodies = _bodies(spreadsheets)
    assert(len(bodies) == 3)

    first = bodies[0]["requests"]
    assert(first[0] == {"updateSheetProperties": {
        "properties": {"sheetId": 5, "gridProperties": {"rowCount": 5, "columnCount": 3}},
        "fields": "gridProperties(rowCount,columnCount)"}})
    assert(first[1] == {"updateCells": {"fields": "userEnteredValue,userEnteredFormat",
                                        "range": {"sheetId": 5}}})
    assert(first[2]["updateCells"]["start"] == {"sheetId": 5, "rowIndex": 0, "columnIndex": 0})
    assert(first[2]["updateCells"]["rows"][1] == {"values": [
        {"userEnteredValue": {"stringValue": "b"}},
        {"userEnteredValue": {"numberValue": 2}},
        {"userEnteredValue": {"boolValue": True}}]})

    assert([len(b["requests"]) for b in bodies] == [3, 1, 1])
    assert([b["requests"][0]["updateCells"]["start"]["rowIndex"] for b in bodies[1:]] == [2, 4])
    assert(len(bodies[2]["requests"][0]["updateCells"]["rows"]) == 1)


def test_write_empty_sheet(sheets_service):
    spreadsheets = _spreadsheets(sheets_service)
    write_sheet("ss", 0, [], service=sheets_service)
    bodies = _bodies(spreadsheets)
    assert(len(bodies) == 1)
    requests = bodies[0]["requests"]
    assert(len(requests) == 2)
    assert(requests[0]["updateSheetProperties"]["properties"]["gridProperties"] ==
           {"rowCount": 1, "columnCount": 1})
    assert(requests[1]["updateCells"]["range"] == {"sheetId": 0})


def test_write_sheet_bad_value_sends_nothing(sheets_service):
    spreadsheets = _spreadsheets(sheets_service)
    rows = [["a"], ["b"], [Decimal("299792.457999999984")]]
    with pytest.raises(ValueError):
        write_sheet("ss", 5, rows, batch_size=1, service=sheets_service)
    spreadsheets.batchUpdate.assert_not_called()


def test_append_sheet_bad_value_sends_nothing(sheets_service):
    spreadsheets = _spreadsheets(sheets_service)
    with pytest.raises(ValueError):
        append_sheet("ss", 5, [["a"], [Decimal("NaN")]], batch_size=1, service=sheets_service)
    spreadsheets.batchUpdate.assert_not_called()


def test_write_sheet_bad_batch_size(sheets_service):
    _spreadsheets(sheets_service)
    with pytest.raises(ValueError):
        write_sheet("ss", 5, [["x"]], batch_size=0, service=sheets_service)


def test_append_sheet(sheets_service):
    spreadsheets = _spreadsheets(sheets_service)
    rows = [[60, 62, 64], ["C", "D", "E"], [1, 2, 3]]
    responses = append_sheet("ss", 5, rows, batch_size=2, service=sheets_service)
    assert([r.spreadsheetId for r in responses] == ["ss", "ss"])
    bodies = _bodies(spreadsheets)
    assert([list(b["requests"][0]) for b in bodies] == [["appendCells"], ["appendCells"]])
    assert(bodies[0]["requests"][0]["appendCells"]["sheetId"] == 5)
    assert(len(bodies[0]["requests"][0]["appendCells"]["rows"]) == 2)
    assert(bodies[1]["requests"][0]["appendCells"]["rows"] == [{"values": [
        {"userEnteredValue": {"numberValue": 1}},
        {"userEnteredValue": {"numberValue": 2}},
        {"userEnteredValue": {"numberValue": 3}}]}])


def test_get_cells(sheets_service):
    spreadsheets = _spreadsheets(sheets_service, {"sheets": [{"data": [{"rowData": [
        {"values": [{"effectiveValue": {"stringValue": "Do"}},
                    {"effectiveValue": {"numberValue": 60}}]},
        {},
    ]}]}]})
    assert(get_cells("ss", "new tab", service=sheets_service) == [[["Do", 60.0], []]])
    kwargs = spreadsheets.get.call_args.kwargs
    assert(kwargs["ranges"] == ["new tab"])
    assert(kwargs["includeGridData"] is True)


def test_get_cell_values(sheets_service):
    values = sheets_service.spreadsheets.return_value.values.return_value
    values.batchGet.return_value.execute.return_value = {
        "valueRanges": [{"range": "'new tab'!A1:A2", "values": [["Do"], [60]]},
                        {"range": "Sheet1!A1:A2"}]}
    data = get_cell_values("ss", ["new tab!A1:A2", "A1:A2"], service=sheets_service)
    assert(data == [[["Do"], [60]], []])
    kwargs = values.batchGet.call_args.kwargs
    assert(kwargs["valueRenderOption"] == "UNFORMATTED_VALUE")
    assert(kwargs["dateTimeRenderOption"] == "SERIAL_NUMBER")
    assert(kwargs["majorDimension"] == "ROWS")

    get_cell_values("ss", "x", "formatted", "formatted", "cols", service=sheets_service)
    kwargs = values.batchGet.call_args.kwargs
    assert((kwargs["valueRenderOption"], kwargs["dateTimeRenderOption"], kwargs["majorDimension"]) ==
           ("FORMATTED_VALUE", "FORMATTED_STRING", "COLUMNS"))

    get_cell_values("ss", "x", valueRenderOption="formula", dateTimeRenderOption="serial",
                    dimension="rows", service=sheets_service)
    assert(values.batchGet.call_args.kwargs["valueRenderOption"] == "FORMULA")


@pytest.mark.parametrize("options", [{"valueRenderOption": "pretty"},
                                     {"dateTimeRenderOption": "iso"},
                                     {"dimension": "diagonal"}])
def test_get_cell_values_invalid(sheets_service, options):
    with pytest.raises(ValueError):
        get_cell_values("ss", "x", service=sheets_service, **options)
    sheets_service.spreadsheets.return_value.values.return_value.batchGet.assert_not_called()


def test_update_values(sheets_service):
    values = sheets_service.spreadsheets.return_value.values.return_value
    values.batchUpdate.return_value.execute.return_value = {"totalUpdatedCells": 2}
    result = update_values("ss", ValueRange("new tab!A1:B1", values=[["x", "=1+1"]]), service=sheets_service)
    assert(result["totalUpdatedCells"] == 2)
    assert(values.batchUpdate.call_args.kwargs["body"] == {
        "valueInputOption": "USER_ENTERED",
        "data": [{"range": "new tab!A1:B1", "majorDimension": "ROWS", "values": [["x", "=1+1"]]}]})
    with pytest.raises(ValueError):
        update_values("ss", [], valueInputOption="typed", service=sheets_service)


def test_clear(sheets_service):
    values = sheets_service.spreadsheets.return_value.values.return_value
    values.batchClear.return_value.execute.return_value = {"clearedRanges": ["'new tab'!A1:Z1000"]}
    assert(clear_sheet("ss", "new tab", service=sheets_service) == ["'new tab'!A1:Z1000"])
    assert(values.batchClear.call_args.kwargs["body"] == {"ranges": ["'new tab'"]})
    values.batchClear.reset_mock()
    assert(clear_values("ss", [], service=sheets_service) == [])
    values.batchClear.assert_not_called()
