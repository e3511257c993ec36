"""Wiki link and page title helpers."""
import re

# Characters MediaWiki does not allow in page titles
INVALID_TITLE_CHARS = r"[#<>\[\]|{}]"

# MediaWiki limit on the UTF-8 encoded length of a page title
MAX_TITLE_BYTES = 255


def sanitize_title(title: str) -> str:
    """
    Turn a document or folder name into a valid wiki page title.

    Invalid characters become '-', whitespace is collapsed, leading colons
    are dropped and the result is cut to MAX_TITLE_BYTES without splitting
    a character.

    Example:
        >>> sanitize_title('Q3 [draft] | Finance')
        'Q3 -draft- - Finance'
        >>> sanitize_title(':Notes')
        'Notes'
    """
    sanitized = re.sub(INVALID_TITLE_CHARS, "-", title or "")
    sanitized = re.sub(r"\s+", " ", sanitized)
    sanitized = re.sub(r"^[\s:]+", "", sanitized).strip()

    encoded = sanitized.encode("utf-8")
    if len(encoded) > MAX_TITLE_BYTES:
        sanitized = encoded[:MAX_TITLE_BYTES].decode("utf-8", errors="ignore").rstrip()

    return sanitized


def page_link(title: str) -> str:
    """Internal link markup for a page."""
    return f"[[{title}]]"


def list_item_link(title: str) -> str:
    """A bullet list line linking to a page, prefixed with a newline."""
    return f"\n*{page_link(title)}"


def contains_link(text: str, title: str) -> bool:
    """Check whether wiki text already links to a page."""
    return page_link(title) in (text or "")
