"""Shared fixtures for the migration test suite.

All tests run without network access. The document service, the wiki and
the converter are replaced by in-memory fakes, external libraries are mocked.
"""

import sys
from pathlib import Path

import pytest

# Ensure the project root is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from errors import DownloadError  # noqa: E402


class FakeDocuments:
    """In-memory document service."""

    def __init__(self, documents=None):
        self.documents = documents or {}
        self.downloads = []
        self.searches = []
        self.listed = []

    def download(self, document_id, destination, export_format="html"):
        if document_id not in self.documents:
            raise DownloadError(f"Could not download {document_id}: not found (404)")
        self.downloads.append((document_id, destination, export_format))
        path = Path(destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.documents[document_id].get("html", ""), encoding="utf-8")
        return str(path)

    def get_metadata(self, document_id):
        doc = self.documents[document_id]
        return {
            "id": document_id,
            "title": doc["title"],
            "mime_type": "application/vnd.google-apps.document",
            "modified_time": "",
            "parents": [{"id": f"folder-{p}", "title": p} for p in doc.get("parents", [])],
        }

    def list_documents(self, object_type="all"):
        from google_docs.queries import build_list_query

        build_list_query(object_type)
        self.listed.append(object_type)
        return [self.get_metadata(doc_id) for doc_id in self.documents]

    def list_folder(self, folder_id):
        self.listed.append(("folder", folder_id))
        return [
            self.get_metadata(doc_id)
            for doc_id, doc in self.documents.items()
            if folder_id in doc.get("parents", [])
        ]

    def search(self, params):
        self.searches.append(params)
        return [self.get_metadata(doc_id) for doc_id in self.documents]

    def list_revisions(self, document_id):
        return [
            {
                "id": "1",
                "title": "Revision 1",
                "modified_time": "2024-05-01T10:00:00.000Z",
                "editor_name": "Ada",
                "editor_email": "ada@example.com",
                "link": f"https://drive.google.com/file/d/{document_id}/view",
            }
        ]


class FakeWiki:
    """In-memory wiki keeping every saved page."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.saves = []
        self.fail_on_save = None

    def get_page(self, title):
        return {
            "title": title,
            "text": self.pages.get(title, ""),
            "exists": title in self.pages,
        }

    def save_page(self, title, text, summary=""):
        if title == self.fail_on_save:
            from errors import WikiError

            raise WikiError(f"Could not save wiki page '{title}': protected")
        self.pages[title] = text
        self.saves.append((title, summary))
        return {"result": "Success"}


class FakeConverter:
    """Converter that wraps the staged HTML in a marker."""

    def convert_file(self, path):
        return f"CONVERTED({Path(path).read_text(encoding='utf-8')})"


@pytest.fixture
def documents():
    return FakeDocuments({
        "abc123": {"title": "Report", "parents": ["Finance"], "html": "<p>Q3</p>"},
        "orphan": {"title": "Notes", "parents": [], "html": "<p>misc</p>"},
    })


@pytest.fixture
def wiki():
    return FakeWiki()


@pytest.fixture
def converter():
    return FakeConverter()


@pytest.fixture
def migrator(documents, wiki, converter, tmp_path):
    from migration.migrator import MigrationOrchestrator

    return MigrationOrchestrator(
        documents=documents,
        wiki=wiki,
        converter=converter,
        root_page="CloudHealth",
        default_category="Default",
        staging_dir=str(tmp_path / "staging"),
        edit_summary="test migration",
    )
