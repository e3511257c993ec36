"""Migration of Google Docs into MediaWiki pages."""

from .converter import HTMLToWikiConverter
from .migrator import MigrationOrchestrator, resolve_category

__all__ = [
    "HTMLToWikiConverter",
    "MigrationOrchestrator",
    "resolve_category",
]
