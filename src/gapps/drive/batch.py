"""
Running list queries to completion, one at a time or many per HTTP batch.
See https://developers.google.com/drive/api/guides/performance#batch-requests
"""
from typing import Iterable
import logging

from ..access import service
from ..errors import BatchRequestError
from .queries import DriveQuery, build_request

logger = logging.getLogger(__name__)

# Drive accepts at most 100 calls in one batch
BATCH_LIMIT = 100


@service("drive", "v3")
def execute(query: DriveQuery, *, service=None) -> list[dict]:
    """
    Run the query following the page tokens until exhausted, returning all
    of the items.
    """
    collection, request = build_request(query, service)
    results = []
    while request is not None:
        response = request.execute()
        results.extend(response.get(query.items_key, []))
        request = collection.list_next(request, response)
    return results


@service("drive", "v3")
def execute_batch(queries: Iterable[DriveQuery], *, service=None) -> list[list[dict]]:
    """
    Execute the given queries in a batch, returning a list of the items of
    their responses in the same order as the queries. If any queries in a batch
    yield paginated responses, another batch will be executed for all such
    queries, iteratively until all pages have been received.
    """
    requests = []
    for query in queries:
        collection, request = build_request(query, service)
        requests.append((collection, request, query.items_key))
    return execute_batch_requests(requests, service=service)


@service("drive", "v3")
def execute_batch_requests(requests: list[tuple], *, service=None) -> list[list[dict]]:
    """
    The batch loop over already built (collection, request, items_key)
    triples.  Each round queues every outstanding request, split over as
    many batches as the limit requires, and collects the follow-up page
    requests for the next round.
    Any failures in a round are raised together as a BatchRequestError once
    the round is done.
    """
    results = [[] for _ in requests]
    pending = list(enumerate(requests))
    rounds = 0
    while pending:
        rounds += 1
        next_pending = []
        errors = {}
        for start in range(0, len(pending), BATCH_LIMIT):
            chunk = pending[start:start + BATCH_LIMIT]
            batch = service.new_batch_http_request()
            for i, triple in chunk:
                batch.add(triple[1], callback=_callback(i, triple, results, next_pending, errors),
                          request_id=str(i))
            logger.debug("batch round %d: executing %d request(s)", rounds, len(chunk))
            batch.execute()
        if errors:
            raise BatchRequestError(errors, results)
        # keep input order stable regardless of callback order
        pending = sorted(next_pending, key=lambda p: p[0])
    return results


def _callback(index: int, triple: tuple, results: list[list], next_pending: list, errors: dict):
    collection, request, items_key = triple

    def callback(request_id, response, exception):
        if exception is not None:
            logger.warning("batch request %s failed: %s", request_id, exception)
            errors[index] = exception
            return
        results[index].extend(response.get(items_key, []))
        next_request = collection.list_next(request, response)
        if next_request is not None:
            next_pending.append((index, (collection, next_request, items_key)))
    return callback
