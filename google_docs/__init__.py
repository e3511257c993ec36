"""Google Drive access: authentication, listing, search, revisions and downloads."""

from .client import EXPORT_FORMATS, GoogleDocsClient
from .queries import LIST_QUERIES, build_folder_query, build_list_query, build_search_query

__all__ = [
    "GoogleDocsClient",
    "EXPORT_FORMATS",
    "LIST_QUERIES",
    "build_list_query",
    "build_folder_query",
    "build_search_query",
]
