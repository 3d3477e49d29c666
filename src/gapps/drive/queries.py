"""
Describing list requests as data so they can be run alone or batched.
"""
from dataclasses import dataclass, field
from typing import List

from ..resources import GoogleResourceBase


@dataclass
class DriveQuery(GoogleResourceBase):
    """
    A files or permissions list request.
    fields selects the attributes of each returned item, empty meaning all
    the default ones.  q is the files search query
    (https://developers.google.com/drive/api/guides/search-files) and file_id
    the file whose permissions to list.
    """
    kind: str = field(default="files")
    fields: List[str] = field(default_factory=list)
    q: str|None = field(default=None)
    file_id: str|None = field(default=None)
    page_size: int|None = field(default=None)

    # default page size of each kind
    KINDS = {"files": 1000, "permissions": 100}

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        if self.kind not in self.KINDS:
            raise ValueError(f"Invalid query kind: {self.kind}")
        if self.kind == "permissions" and not self.file_id:
            raise ValueError("A permissions query requires a file_id")
        self.fields = [str(f) for f in self.fields]

    @property
    def items_key(self) -> str:
        # the key the items come back under is the same as the kind
        return self.kind

    @property
    def fields_selector(self) -> str:
        """Partial response selector, always asking for the page token."""
        items = f"{self.kind}({','.join(self.fields)})" if self.fields else self.kind
        return f"nextPageToken,{items}"


def build_request(query: DriveQuery, service):
    """
    Build the list request for the query.
    Returns the collection the request came from along with the request, the
    collection is needed to ask for the next page.
    """
    page_size = query.page_size or DriveQuery.KINDS[query.kind]
    if query.kind == "files":
        collection = service.files()
        args = {"fields": query.fields_selector, "pageSize": page_size}
        if query.q:
            args["q"] = query.q
        return collection, collection.list(**args)
    collection = service.permissions()
    return collection, collection.list(fileId=query.file_id,
                                       fields=query.fields_selector,
                                       pageSize=page_size)


def quote(value: str) -> str:
    """Quote a string literal for a search query."""
    escaped = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def parents_query(folder_id: str, trashed: bool = False) -> str:
    """Search query for the children of a folder."""
    return f"{quote(folder_id)} in parents and trashed={str(bool(trashed)).lower()}"
