"""
A thin convenience layer over the Google Drive and Sheets Python client.
The goal is to take the typing out of the common operations: authentication,
request construction, paging and batching, and reshaping the responses into
dataclasses and plain lists.

Authentication lives in one session (gapps.access.session), the Drive and
Sheets wrappers pick their service up from it.
"""

from .access import session, service
from .errors import GoogleAppsError, NotAuthenticatedError, CredentialError, BatchRequestError
