from unittest.mock import MagicMock

import pytest

from gapps.drive import DriveQuery, build_request, parents_query, quote


def test_fields_selector():
    assert(DriveQuery().fields_selector == "nextPageToken,files")
    assert(DriveQuery(fields=["id", "name"]).fields_selector == "nextPageToken,files(id,name)")
    q = DriveQuery(kind="permissions", file_id="f", fields=["role"])
    assert(q.fields_selector == "nextPageToken,permissions(role)")
    assert(q.items_key == "permissions")


def test_invalid_queries():
    with pytest.raises(ValueError):
        DriveQuery(kind="comments")
    with pytest.raises(ValueError):
        DriveQuery(kind="permissions")


def test_build_request_page_size():
    svc = MagicMock()
    collection, _ = build_request(DriveQuery(page_size=5), svc)
    assert(collection is svc.files.return_value)
    svc.files.return_value.list.assert_called_once_with(fields="nextPageToken,files", pageSize=5)


def test_quoting():
    assert(quote("abc") == "'abc'")
    assert(quote("it's") == "'it\\'s'")
    assert(quote("a\\b") == "'a\\\\b'")
    assert(parents_query("root") == "'root' in parents and trashed=false")
    assert(parents_query("f1", trashed=True) == "'f1' in parents and trashed=true")
