from unittest.mock import MagicMock

import pytest

from gapps.access import session


@pytest.fixture(autouse=True)
def _reset_session():
    # autouse so it is set up before (and torn down after) monkeypatch
    yield
    session.reset()


class FakeBatch():
    """
    Stands in for googleapiclient.http.BatchHttpRequest, answering each queued
    request from the responses map (an exception in the map is a failure).
    """
    def __init__(self, responses: dict):
        self.responses = responses
        self.added = []
        self.executed = False

    def add(self, request, callback=None, request_id=None):
        self.added.append((request, callback, request_id))

    def execute(self):
        self.executed = True
        for request, callback, request_id in self.added:
            r = self.responses[request]
            if isinstance(r, Exception):
                callback(request_id, None, r)
            else:
                callback(request_id, r, None)


def page(name: str, response: dict):
    """A list request mock whose execute() returns response."""
    request = MagicMock(name=name)
    request.execute.return_value = response
    return request


@pytest.fixture
def drive_service():
    """
    A Drive service double.  Tests register pages with list_next_map so
    list_next() follows request -> next request, None ending the paging.
    """
    svc = MagicMock(name="drive")
    svc.batches = []
    svc.batch_responses = {}
    svc.list_next_map = {}

    def new_batch():
        b = FakeBatch(svc.batch_responses)
        svc.batches.append(b)
        return b

    svc.new_batch_http_request.side_effect = new_batch
    svc.files.return_value.list_next.side_effect = lambda req, resp: svc.list_next_map.get(req)
    svc.permissions.return_value.list_next.side_effect = lambda req, resp: svc.list_next_map.get(req)
    return svc


@pytest.fixture
def sheets_service():
    return MagicMock(name="sheets")
