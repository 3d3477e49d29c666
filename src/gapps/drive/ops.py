"""
Wrappers for the Drive v3 files, properties and permissions operations.
See https://developers.google.com/drive/api/reference/rest/v3
The service() decorator handles building the service, pass service= to
use a specific one.
"""
from pathlib import Path
from typing import Iterator
import io
import logging

from googleapiclient.http import MediaFileUpload, MediaIoBaseDownload, MediaIoBaseUpload

from ..access import service
from . import mime_types
from .batch import execute
from .queries import DriveQuery, parents_query
from .resources import DriveFile, Permission, Property

logger = logging.getLogger(__name__)

__all__ = ["FILE_FIELDS", "PERMISSION_FIELDS", "get_file_ids", "query_files", "list_files",
           "get_files", "get_root_files", "folder_seq", "get_file", "upload_file", "create_folder",
           "create_blank_file", "download_file", "delete_file", "update_file_title",
           "update_file_description", "get_properties", "update_property", "delete_property",
           "get_permissions", "principal_type", "assign", "revoke", "update_permission",
           "remove_permission"]

FILE_FIELDS = ["kind", "id", "name", "mimeType", "description", "parents", "trashed",
               "webViewLink", "createdTime", "modifiedTime", "size"]
# get() only returns a handful of attributes unless asked
FILE_FIELDS_SELECTOR = ",".join(FILE_FIELDS + ["properties", "appProperties", "exportLinks", "owners"])
PERMISSION_FIELDS = ["kind", "id", "type", "role", "emailAddress", "domain",
                     "displayName", "allowFileDiscovery", "deleted"]
PERMISSION_FIELDS_SELECTOR = ",".join(PERMISSION_FIELDS)

###############################################################################
# File Management
###############################################################################

@service("drive", "v3")
def get_file_ids(*, service=None) -> dict[str, str]:
    """
    Every file visible to the user as {file id: file name}
    """
    items = execute(DriveQuery(fields=["id", "name"]), service=service)
    return {f["id"]: f.get("name") for f in items}


@service("drive", "v3")
def query_files(q: str, fields: list[str]|None = None, *, service=None) -> list[DriveFile]:
    """
    All files matching the search query, every page of them.
    https://developers.google.com/drive/api/guides/search-files
    """
    items = execute(DriveQuery(fields=fields or FILE_FIELDS, q=q), service=service)
    return [DriveFile.from_base(f) for f in items]


@service("drive", "v3")
def list_files(folder_id: str, *, service=None) -> list[DriveFile]:
    """The non-trashed files in the given folder."""
    return query_files(parents_query(folder_id), service=service)


@service("drive", "v3")
def get_files(folder: DriveFile|dict, *, service=None) -> list[DriveFile]:
    """The non-trashed files in the given folder."""
    return list_files(DriveFile.from_base(folder).id, service=service)


@service("drive", "v3")
def get_root_files(*, service=None) -> list[DriveFile]:
    """The non-trashed files in the user's root folder."""
    return list_files("root", service=service)


@service("drive", "v3")
def folder_seq(folder: DriveFile|dict, *, service=None) -> Iterator[DriveFile]:
    """
    All files in the given folder, including itself, via a depth-first
    traversal.  Lazy, each folder is listed when the traversal reaches it.
    """
    folder = DriveFile.from_base(folder)
    yield folder
    if folder.is_folder():
        for child in list_files(folder.id, service=service):
            yield from folder_seq(child, service=service)


@service("drive", "v3")
def get_file(file_id: str, *, service=None) -> DriveFile:
    response = service.files().get(fileId=file_id, fields=FILE_FIELDS_SELECTOR).execute()
    return DriveFile.from_base(response)


def _media(content, mime_type: str|None):
    if content is None:
        return None
    if isinstance(content, (bytes, bytearray)):
        return MediaIoBaseUpload(io.BytesIO(bytes(content)),
                                 mimetype=mime_type or "application/octet-stream")
    if isinstance(content, (str, Path)):
        return MediaFileUpload(str(content), mimetype=mime_type)
    if hasattr(content, "read"):
        return MediaIoBaseUpload(content, mimetype=mime_type or "application/octet-stream")
    raise ValueError(f"Cannot upload content of type {type(content).__name__}")


@service("drive", "v3")
def upload_file(parent_id: str, content, title: str,
                description: str|None = None,
                mime_type: str|None = None,
                convert: bool = True,
                *, service=None) -> DriveFile:
    """
    Upload content into the parent folder, the new file picking up the
    permissions of the folder.  The owner is whoever owns the session's
    credentials.
    content is bytes, a path (str or Path) to a local file, a readable
    binary file object, or None to create the file from metadata alone.
    With convert the file becomes the equivalent Google type where there is
    one, text/plain to a Google document for instance.
    """
    body = {"name": title, "parents": [parent_id]}
    if description is not None:
        body["description"] = description
    target = (mime_types.conversion_for(mime_type) if convert else None) or mime_type
    if target:
        body["mimeType"] = target
    args = {"body": body, "fields": FILE_FIELDS_SELECTOR}
    media = _media(content, mime_type)
    if media is not None:
        args["media_body"] = media
    logger.debug("creating %s in %s as %s", title, parent_id, target)
    return DriveFile.from_base(service.files().create(**args).execute())


@service("drive", "v3")
def create_folder(parent_id: str, title: str, *, service=None) -> DriveFile:
    return upload_file(parent_id, None, title, mime_type=mime_types.folder, service=service)


@service("drive", "v3")
def create_blank_file(parent_id: str, title: str,
                      description: str|None = None,
                      mime_type: str = mime_types.document,
                      *, service=None) -> DriveFile:
    """
    An empty file in the parent folder, converted into a Google type when
    mime_type has one.
    """
    return upload_file(parent_id, None, title, description, mime_type, service=service)


@service("drive", "v3")
def download_file(file_id: str, mime_type: str|None = None,
                  encoding: str|None = None,
                  *, service=None) -> bytes|str:
    """
    Download the file contents.  Google types have no content of their own and
    are exported as mime_type, anything else is downloaded as stored.
    Returns bytes, or text decoded with encoding when one is given.
    """
    files = service.files()
    stored = files.get(fileId=file_id, fields="mimeType").execute().get("mimeType")
    if mime_types.is_google_type(stored):
        if not mime_type:
            raise ValueError(f"{stored} must be exported, a target mime_type is required")
        request = files.export_media(fileId=file_id, mimeType=mime_type)
    else:
        request = files.get_media(fileId=file_id)
    buf = io.BytesIO()
    downloader = MediaIoBaseDownload(buf, request)
    done = False
    while not done:
        _, done = downloader.next_chunk()
    data = buf.getvalue()
    return data.decode(encoding) if encoding else data


@service("drive", "v3")
def delete_file(file_id: str, permanent: bool = False, *, service=None) -> DriveFile|None:
    """
    Move the file to the trash, or with permanent delete it outright
    (skipping the trash, nothing is returned then).
    """
    if permanent:
        service.files().delete(fileId=file_id).execute()
        return None
    return _update_file(file_id, {"trashed": True}, service=service)

###############################################################################
# File Edits
###############################################################################

@service("drive", "v3")
def _update_file(file_id: str, body: dict, *, service=None) -> DriveFile:
    response = service.files().update(fileId=file_id, body=body,
                                      fields=FILE_FIELDS_SELECTOR).execute()
    return DriveFile.from_base(response)


@service("drive", "v3")
def update_file_title(file_id: str, title: str, *, service=None) -> DriveFile:
    return _update_file(file_id, {"name": title}, service=service)


@service("drive", "v3")
def update_file_description(file_id: str, description: str, *, service=None) -> DriveFile:
    return _update_file(file_id, {"description": description}, service=service)

###############################################################################
# File Properties
###############################################################################

@service("drive", "v3")
def get_properties(file_id: str, *, service=None) -> list[Property]:
    """All properties on the file, public then private."""
    response = service.files().get(fileId=file_id, fields="properties,appProperties").execute()
    props = []
    for visibility, key in Property.VISIBILITY_FIELDS.items():
        for k, v in (response.get(key) or {}).items():
            props.append(Property(k, v, visibility))
    return props


@service("drive", "v3")
def update_property(file_id: str, key: str, value: str,
                    visibility: str = "PUBLIC", *, service=None) -> Property:
    """
    Set the property on this file, creating it if a property with the key
    doesn't already exist.
    """
    prop = Property(key, value, visibility)
    attr = Property.VISIBILITY_FIELDS[prop.visibility]
    response = service.files().update(fileId=file_id, body={attr: {prop.key: prop.value}},
                                      fields=attr).execute()
    return Property(prop.key, (response.get(attr) or {}).get(prop.key), prop.visibility)


@service("drive", "v3")
def delete_property(file_id: str, key: str, visibility: str = "PUBLIC", *, service=None) -> None:
    # a null value removes the key
    attr = Property.VISIBILITY_FIELDS[Property(key, None, visibility).visibility]
    service.files().update(fileId=file_id, body={attr: {key: None}}, fields=attr).execute()

###############################################################################
# File Permissions
###############################################################################

@service("drive", "v3")
def get_permissions(file_id: str, *, service=None) -> list[Permission]:
    query = DriveQuery(kind="permissions", file_id=file_id, fields=PERMISSION_FIELDS)
    return [Permission.from_base(p) for p in execute(query, service=service)]


def principal_type(principal: str) -> str:
    """
    The permission type a principal implies when none is given: an email
    address is a user, 'anyone' is anyone, anything else a domain.
    Groups have email addresses too so they have to be asked for.
    """
    if principal == "anyone":
        return "anyone"
    return "user" if "@" in principal else "domain"


def _validate_role(role: str) -> str:
    r = str(role)
    if r == "owner":
        raise ValueError("Transferring ownership is not supported")
    if r not in Permission.valid_roles:
        raise ValueError(f"Invalid permission role: {r}")
    return r


def _matching(permissions: list[Permission], principal: str) -> list[Permission]:
    if principal == "anyone":
        return [p for p in permissions if p.type == "anyone"]
    p_lower = principal.lower()
    return [p for p in permissions if p.principal and p.principal.lower() == p_lower]


@service("drive", "v3")
def assign(file_id: str, principal: str, role: str,
           type: str|None = None,
           searchable: bool = False,
           notify: bool = False,
           *, service=None) -> Permission:
    """
    Give principal (an email address, a domain, or 'anyone') the role on the
    file, updating its existing permission if it has one.
    searchable lets domain and anyone permissions find the file in search,
    notify sends users and groups the sharing email.
    """
    r = _validate_role(role)
    ptype = type or principal_type(principal)
    if ptype not in Permission.valid_types:
        raise ValueError(f"Invalid permission type: {ptype}")
    permissions = service.permissions()
    existing = _matching(get_permissions(file_id, service=service), principal)
    if existing:
        current = existing[0]
        if current.role == r:
            return current
        response = permissions.update(fileId=file_id, permissionId=current.id, body={"role": r},
                                      fields=PERMISSION_FIELDS_SELECTOR).execute()
        return Permission.from_base(response)

    body = {"role": r, "type": ptype}
    args = {}
    if ptype in ("user", "group"):
        body["emailAddress"] = principal
        args["sendNotificationEmail"] = bool(notify)
    elif ptype == "domain":
        body["domain"] = principal
    if ptype in ("domain", "anyone"):
        body["allowFileDiscovery"] = bool(searchable)
    response = permissions.create(fileId=file_id, body=body, fields=PERMISSION_FIELDS_SELECTOR,
                                  **args).execute()
    return Permission.from_base(response)


@service("drive", "v3")
def revoke(file_id: str, principal: str, *, service=None) -> list[Permission]:
    """Remove every permission principal has on the file, returning those removed."""
    removed = _matching(get_permissions(file_id, service=service), principal)
    permissions = service.permissions()
    for p in removed:
        permissions.delete(fileId=file_id, permissionId=p.id).execute()
        logger.debug("revoked %s (%s) on %s", p.principal, p.role, file_id)
    return removed


@service("drive", "v3")
def update_permission(file_id: str, email: str, new_role: str, *, service=None) -> Permission:
    """
    Add or edit the permissions for the user on the given file.
    """
    return assign(file_id, email, new_role, type="user", service=service)


@service("drive", "v3")
def remove_permission(file_id: str, email: str, *, service=None) -> list[Permission]|None:
    """
    Remove the user from the permissions of the given file, None if they
    had none.
    """
    return revoke(file_id, email, service=service) or None
