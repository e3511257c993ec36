"""Build Google Drive search queries for the list and search commands."""
import logging
from typing import Dict, List

logger = logging.getLogger(__name__)

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
DOCUMENT_MIME_TYPE = "application/vnd.google-apps.document"
SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"
PRESENTATION_MIME_TYPE = "application/vnd.google-apps.presentation"
PDF_MIME_TYPE = "application/pdf"

NOT_TRASHED = "trashed = false"

# Object types accepted by "list [object_type]"
LIST_QUERIES = {
    "all": NOT_TRASHED,
    "starred": f"starred = true and {NOT_TRASHED}",
    "documents": f"mimeType = '{DOCUMENT_MIME_TYPE}' and {NOT_TRASHED}",
    "spreadsheets": f"mimeType = '{SPREADSHEET_MIME_TYPE}' and {NOT_TRASHED}",
    "presentations": f"mimeType = '{PRESENTATION_MIME_TYPE}' and {NOT_TRASHED}",
    "pdfs": f"mimeType = '{PDF_MIME_TYPE}' and {NOT_TRASHED}",
    "folders": f"mimeType = '{FOLDER_MIME_TYPE}' and {NOT_TRASHED}",
    "trashed": "trashed = true",
}

# Advanced search parameters that compare a Drive field with the value
FIELD_PARAMS = {
    "opened-min": "viewedByMeTime >= '{}'",
    "opened-max": "viewedByMeTime <= '{}'",
    "edited-min": "modifiedTime >= '{}'",
    "edited-max": "modifiedTime <= '{}'",
    "owner": "'{}' in owners",
    "writer": "'{}' in writers",
    "reader": "'{}' in readers",
}

# Parameters that only modify how other parameters are applied
FLAG_PARAMS = {"title-exact", "showfolders", "showdeleted"}


def escape(value: str) -> str:
    """Escape backslashes and single quotes for a single-quoted Drive query value."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _is_true(value: str) -> bool:
    return value.strip().lower() == "true"


def build_list_query(object_type: str = "all") -> str:
    """
    Get the Drive query for a "list" object type.

    Args:
        object_type: One of LIST_QUERIES keys

    Returns:
        Drive query string

    Raises:
        ValueError: If object_type is not supported
    """
    try:
        return LIST_QUERIES[object_type]
    except KeyError:
        raise ValueError(
            f"Unknown object type '{object_type}'. "
            f"Supported: {', '.join(LIST_QUERIES)}"
        )


def build_folder_query(folder_id: str) -> str:
    """Get the Drive query listing the contents of a folder."""
    return f"'{escape(folder_id)}' in parents and {NOT_TRASHED}"


def build_search_query(params: Dict[str, str]) -> str:
    """
    Translate search parameters into a Drive query.

    Args:
        params: Mapping of parameter name to value, e.g.
            {'q': 'budget'} for a full text search or
            {'title': 'Budget', 'title-exact': 'true', 'owner': 'me@example.com'}

    Returns:
        Drive query string. Folders and trashed files are excluded unless
        showfolders=true / showdeleted=true is given.

    Unknown parameters are logged and ignored.
    """
    clauses: List[str] = []

    for key, value in params.items():
        if key == "q":
            clauses.append(f"fullText contains '{escape(value)}'")
        elif key == "title":
            operator = "=" if _is_true(params.get("title-exact", "")) else "contains"
            clauses.append(f"name {operator} '{escape(value)}'")
        elif key in FIELD_PARAMS:
            clauses.append(FIELD_PARAMS[key].format(escape(value)))
        elif key in FLAG_PARAMS:
            continue
        else:
            logger.warning(f"Unknown search parameter ignored: {key}")

    if not _is_true(params.get("showfolders", "")):
        clauses.append(f"mimeType != '{FOLDER_MIME_TYPE}'")

    if not _is_true(params.get("showdeleted", "")):
        clauses.append(NOT_TRASHED)

    return " and ".join(clauses)
