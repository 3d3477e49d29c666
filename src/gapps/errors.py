"""
Exceptions raised by gapps itself.  Errors coming back from Google are
left as googleapiclient.errors.HttpError and passed straight through.
"""


class GoogleAppsError(Exception):
    """Base for everything gapps raises on its own."""


class NotAuthenticatedError(GoogleAppsError):
    """No credentials could be established for a service."""


class CredentialError(GoogleAppsError):
    """A credential description could not be turned into credentials."""


class BatchRequestError(GoogleAppsError):
    """
    One or more requests in a batch failed.
    errors maps the index of the failed request (in the order given to the
    batch) to the exception the client reported for it.  results holds the
    items collected so far for every request, failed ones included.
    """

    def __init__(self, errors: dict[int, Exception], results: list[list]) -> None:
        self.errors = errors
        self.results = results
        failed = ", ".join(f"{i}: {e}" for i, e in sorted(errors.items()))
        super().__init__(f"{len(errors)} batch request(s) failed ({failed})")
