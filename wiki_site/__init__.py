"""MediaWiki target: page access and link helpers."""

from .client import MediaWikiClient
from .links import contains_link, list_item_link, page_link, sanitize_title

__all__ = [
    "MediaWikiClient",
    "contains_link",
    "list_item_link",
    "page_link",
    "sanitize_title",
]
