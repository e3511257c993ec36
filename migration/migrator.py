"""Orchestrator for Google Docs to MediaWiki migration."""
import logging
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from errors import DownloadError
from wiki_site.links import contains_link, list_item_link, sanitize_title

logger = logging.getLogger(__name__)


def resolve_category(
    metadata: Dict[str, Any],
    explicit_category: Optional[str] = None,
    default_category: str = "Default",
) -> str:
    """
    Pick the wiki category for a document.

    Precedence: explicit category > first parent folder > default category.
    A blank explicit category counts as not given.

    Example:
        >>> resolve_category({'title': 'Report', 'parents': [{'title': 'Finance'}]})
        'Finance'
        >>> resolve_category({'title': 'Report', 'parents': [{'title': 'Finance'}]}, 'HR')
        'HR'
    """
    if explicit_category and explicit_category.strip():
        return explicit_category.strip()

    parents = metadata.get("parents") or []
    if parents and parents[0].get("title"):
        return parents[0]["title"]

    return default_category


class MigrationOrchestrator:
    """Migrate one document: download, convert, then update the wiki pages."""

    def __init__(
        self,
        documents,
        wiki,
        converter,
        root_page: str = "CloudHealth",
        default_category: str = "Default",
        staging_dir: Optional[str] = None,
        edit_summary: str = "Migrated from Google Docs",
    ):
        """
        Initialize migration orchestrator.

        Args:
            documents: Document service (GoogleDocsClient or compatible), needs
                download(id, path, format) and get_metadata(id)
            wiki: Wiki service (MediaWikiClient or compatible), needs
                get_page(title) and save_page(title, text, summary)
            converter: Markup converter (HTMLToWikiConverter or compatible),
                needs convert_file(path)
            root_page: Title of the index page listing every category
            default_category: Category used when the document has no folder
            staging_dir: Directory for downloaded HTML (default: system temp dir)
            edit_summary: Summary attached to every wiki edit
        """
        self.documents = documents
        self.wiki = wiki
        self.converter = converter
        self.root_page = root_page
        self.default_category = default_category
        self.staging_dir = Path(staging_dir or tempfile.gettempdir())
        self.edit_summary = edit_summary

        logger.info(
            f"Migration orchestrator initialized (root page: {root_page}, "
            f"default category: {default_category}, staging: {self.staging_dir})"
        )

    def migrate(self, document_id: str, category: Optional[str] = None) -> Dict[str, Any]:
        """
        Migrate a document to the wiki.

        Args:
            document_id: Drive file ID or document URL
            category: Category to file the document under (optional)

        Returns:
            Migration result:
                {
                    'document_id': str,
                    'title': str (wiki page title of the document),
                    'category': str (wiki page title of the category),
                    'staging_path': str,
                    'root_updated': bool (False if the root already listed the category)
                }

        Process:
            1. Download the document as HTML to the staging directory
            2. Convert the HTML to wiki markup
            3. Resolve the title and category from the document metadata
            4. Add the category to the root page unless already listed
            5. Append a link to the document on the category page
            6. Append the converted content to the document page

        The first failure is raised as is. Pages saved before the failure stay
        saved. Running the same migration twice appends the document link and
        content twice.
        """
        logger.info(f"Migrating document: {document_id}")

        staging_path = self.stage_document(document_id)
        content = self.converter.convert_file(staging_path)

        metadata = self.documents.get_metadata(document_id)
        title = sanitize_title(metadata.get("title", ""))
        if not title:
            title = sanitize_title(metadata.get("id") or document_id)
        category = sanitize_title(
            resolve_category(metadata, category, self.default_category)
        )
        if not category:
            category = self.default_category
        logger.info(f"Document '{title}' goes under category '{category}'")

        root_updated = self.add_category_to_root(category)
        self._append_to_page(category, list_item_link(title))
        self._append_to_page(title, content)

        logger.info(f"✅ Migrated '{title}' under '{category}'")
        return {
            "document_id": document_id,
            "title": title,
            "category": category,
            "staging_path": staging_path,
            "root_updated": root_updated,
        }

    def stage_document(self, document_id: str) -> str:
        """
        Download the document as HTML into the staging directory.

        Raises:
            DownloadError: If the download fails
        """
        staging_name = re.sub(r"[^a-zA-Z0-9_-]", "_", (document_id or "").strip())
        if not staging_name:
            raise DownloadError(f"Invalid document id: {document_id!r}")

        destination = self.staging_dir / f"{staging_name}.html"
        logger.info(f"Staging {document_id} at {destination}")
        return self.documents.download(document_id, str(destination), "html")

    def add_category_to_root(self, category: str) -> bool:
        """
        List the category on the root page unless it is already there.

        Returns:
            True if the root page was saved, False if it already linked the category
        """
        root = self.wiki.get_page(self.root_page)
        if contains_link(root["text"], category):
            logger.info(f"Root page already lists '{category}'")
            return False

        self.wiki.save_page(
            self.root_page, root["text"] + list_item_link(category), self.edit_summary
        )
        return True

    def _append_to_page(self, title: str, text: str) -> None:
        page = self.wiki.get_page(title)
        self.wiki.save_page(title, page["text"] + text, self.edit_summary)
