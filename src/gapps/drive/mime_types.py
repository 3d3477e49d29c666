"""
The custom Google Drive mime-types.
See https://developers.google.com/drive/api/guides/mime-types
"""

audio = "application/vnd.google-apps.audio"
document = "application/vnd.google-apps.document"
drawing = "application/vnd.google-apps.drawing"
file = "application/vnd.google-apps.file"
folder = "application/vnd.google-apps.folder"
form = "application/vnd.google-apps.form"
fusion_table = "application/vnd.google-apps.fusiontable"
map_custom = "application/vnd.google-apps.map"
photo = "application/vnd.google-apps.photo"
presentation = "application/vnd.google-apps.presentation"
apps_script = "application/vnd.google-apps.script"
sites = "application/vnd.google-apps.sites"
spreadsheet = "application/vnd.google-apps.spreadsheet"
unknown = "application/vnd.google-apps.unknown"
video = "application/vnd.google-apps.video"

GOOGLE_APPS_PREFIX = "application/vnd.google-apps."

# uploads of these types can be converted to the native Google type
# https://developers.google.com/drive/api/guides/manage-uploads#import-docs
CONVERSIONS = {
    "text/plain": document,
    "text/html": document,
    "application/rtf": document,
    "application/vnd.oasis.opendocument.text": document,
    "application/msword": document,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": document,
    "text/csv": spreadsheet,
    "text/tab-separated-values": spreadsheet,
    "application/vnd.oasis.opendocument.spreadsheet": spreadsheet,
    "application/vnd.ms-excel": spreadsheet,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": spreadsheet,
    "application/vnd.oasis.opendocument.presentation": presentation,
    "application/vnd.ms-powerpoint": presentation,
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": presentation,
}


def is_google_type(mime_type: str|None) -> bool:
    return bool(mime_type) and mime_type.startswith(GOOGLE_APPS_PREFIX)


def conversion_for(mime_type: str|None) -> str|None:
    """The Google type an upload of mime_type converts to, None if it doesn't."""
    if is_google_type(mime_type):
        return mime_type
    return CONVERSIONS.get(mime_type or "")
