"""
Dataclass representations of the Drive v3 resources we hand back.
The client will trim out any attribute with a value of None when sending
so None is the empty/default throughout.
"""
from dataclasses import dataclass, field
from typing import List

from ..resources import GoogleResourceBase
from . import mime_types


@dataclass
class DriveFile(GoogleResourceBase):
    """
    https://developers.google.com/drive/api/reference/rest/v3/files#File
    """
    kind: str|None = field(default=None)
    id: str|None = field(default=None)
    name: str|None = field(default=None)
    mimeType: str|None = field(default=None)
    description: str|None = field(default=None)
    parents: List[str]|None = field(default=None)
    trashed: bool|None = field(default=None)
    properties: dict|None = field(default=None)
    appProperties: dict|None = field(default=None)
    exportLinks: dict|None = field(default=None)
    webViewLink: str|None = field(default=None)
    createdTime: str|None = field(default=None)
    modifiedTime: str|None = field(default=None)
    size: str|None = field(default=None)
    owners: List[dict]|None = field(default=None)

    def __bool__(self) -> bool:
        return bool(self.id)

    def __str__(self) -> str:
        if self:
            return f"{self.name}<{self.id}>"
        return "<empty>"

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    def is_folder(self) -> bool:
        return self.mimeType == mime_types.folder


def is_folder(file: DriveFile|dict) -> bool:
    """Returns True if the file is a folder, for dataclasses or raw dicts."""
    if isinstance(file, DriveFile):
        return file.is_folder()
    return dict(file).get("mimeType") == mime_types.folder


@dataclass
class Permission(GoogleResourceBase):
    """
    https://developers.google.com/drive/api/reference/rest/v3/permissions#Permission
    """
    kind: str|None = field(default=None)
    id: str|None = field(default=None)
    type: str|None = field(default=None)
    role: str|None = field(default=None)
    emailAddress: str|None = field(default=None)
    domain: str|None = field(default=None)
    displayName: str|None = field(default=None)
    allowFileDiscovery: bool|None = field(default=None)
    deleted: bool|None = field(default=None)

    # owner is left out, ownership transfer is not supported
    valid_roles = ("reader", "commenter", "writer", "fileOrganizer", "organizer")
    valid_types = ("user", "group", "domain", "anyone")

    def __bool__(self) -> bool:
        return bool(self.id)

    @property
    def principal(self) -> str|None:
        """Who the permission is for: an email address, a domain, or 'anyone'."""
        if self.emailAddress:
            return self.emailAddress
        if self.domain:
            return self.domain
        return self.type if self.type == "anyone" else None


@dataclass
class Property(GoogleResourceBase):
    """
    A custom file property.  PUBLIC properties are visible to all apps and
    live in File.properties, PRIVATE ones are restricted to the creating app
    and live in File.appProperties.
    """
    key: str = field(default="")
    value: str|None = field(default=None)
    visibility: str = field(default="PUBLIC")

    VISIBILITY_FIELDS = {"PUBLIC": "properties", "PRIVATE": "appProperties"}

    def fixup(self) -> None:
        v = str(self.visibility).upper()
        if v not in self.VISIBILITY_FIELDS:
            raise ValueError(f"Invalid property visibility: {self.visibility}")
        self.visibility = v

    def __post_init__(self) -> None:
        self.fixup()

    def __bool__(self) -> bool:
        return bool(self.key)
