"""Tests for the MigrationOrchestrator and category resolution."""

from pathlib import Path

import pytest

from errors import ConversionError, DownloadError, WikiError
from migration.migrator import resolve_category


# ---------------------------------------------------------------------------
# resolve_category
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "explicit, parents, expected",
    [
        ("HR", ["Finance"], "HR"),
        ("HR", [], "HR"),
        (None, ["Finance"], "Finance"),
        (None, [], "Default"),
        (None, ["Finance", "Archive"], "Finance"),
        ("   ", ["Finance"], "Finance"),
        ("", [], "Default"),
    ],
)
def test_category_precedence(explicit, parents, expected):
    metadata = {"title": "Report", "parents": [{"title": p} for p in parents]}

    assert resolve_category(metadata, explicit, "Default") == expected


def test_category_without_parents_key():
    assert resolve_category({"title": "Report"}, None, "General") == "General"


# ---------------------------------------------------------------------------
# migrate
# ---------------------------------------------------------------------------

class TestMigrate:

    def test_category_from_parent_folder(self, migrator):
        result = migrator.migrate("abc123")

        assert result["title"] == "Report"
        assert result["category"] == "Finance"

    def test_explicit_category_wins(self, migrator):
        result = migrator.migrate("abc123", "HR")

        assert result["category"] == "HR"

    def test_default_category_without_folder(self, migrator, wiki):
        result = migrator.migrate("orphan")

        assert result["category"] == "Default"
        assert "*[[Notes]]" in wiki.pages["Default"]

    def test_pages_written(self, migrator, wiki):
        migrator.migrate("abc123")

        assert "*[[Finance]]" in wiki.pages["CloudHealth"]
        assert "*[[Report]]" in wiki.pages["Finance"]
        assert wiki.pages["Report"] == "CONVERTED(<p>Q3</p>)"
        assert [title for title, _ in wiki.saves] == ["CloudHealth", "Finance", "Report"]
        assert all(summary == "test migration" for _, summary in wiki.saves)

    def test_staged_as_html(self, migrator, documents, tmp_path):
        result = migrator.migrate("abc123")

        document_id, destination, export_format = documents.downloads[0]
        assert document_id == "abc123"
        assert export_format == "html"
        assert Path(destination) == tmp_path / "staging" / "abc123.html"
        assert result["staging_path"] == destination

    def test_root_index_not_duplicated(self, migrator, wiki):
        first = migrator.migrate("abc123")
        second = migrator.migrate("abc123")

        assert first["root_updated"] is True
        assert second["root_updated"] is False
        assert wiki.pages["CloudHealth"].count("[[Finance]]") == 1

    def test_existing_root_link_left_alone(self, migrator, wiki):
        wiki.pages["CloudHealth"] = "Index\n*[[Finance]]"

        result = migrator.migrate("abc123")

        assert result["root_updated"] is False
        assert wiki.pages["CloudHealth"] == "Index\n*[[Finance]]"

    def test_repeated_migration_duplicates_category_and_page(self, migrator, wiki):
        """Category and document pages are appended to on every run."""
        migrator.migrate("abc123")
        migrator.migrate("abc123")

        assert wiki.pages["Finance"].count("*[[Report]]") == 2
        assert wiki.pages["Report"].count("CONVERTED(<p>Q3</p>)") == 2

    def test_appends_to_existing_pages(self, migrator, wiki):
        wiki.pages["Finance"] = "Finance documents"
        wiki.pages["Report"] = "Old content\n"

        migrator.migrate("abc123")

        assert wiki.pages["Finance"] == "Finance documents\n*[[Report]]"
        assert wiki.pages["Report"] == "Old content\nCONVERTED(<p>Q3</p>)"

    def test_titles_sanitized(self, migrator, documents, wiki):
        documents.documents["weird"] = {
            "title": "Plan [v2] | draft", "parents": ["Ops{1}"], "html": "<p>x</p>",
        }

        result = migrator.migrate("weird")

        assert result["title"] == "Plan -v2- - draft"
        assert result["category"] == "Ops-1-"
        assert "*[[Plan -v2- - draft]]" in wiki.pages["Ops-1-"]

    def test_long_title_links_to_saved_page(self, migrator, documents, wiki):
        documents.documents["long"] = {
            "title": ":" + "Quarterly " * 40, "parents": ["Finance"], "html": "<p>x</p>",
        }

        result = migrator.migrate("long")

        title = result["title"]
        assert len(title.encode("utf-8")) <= 255
        assert not title.startswith(":")
        assert f"*[[{title}]]" in wiki.pages["Finance"]
        assert title in wiki.pages

    def test_unusable_folder_name_uses_default_category(self, migrator, documents, wiki):
        documents.documents["colon"] = {"title": "Plan", "parents": [":"], "html": "<p>x</p>"}

        result = migrator.migrate("colon")

        assert result["category"] == "Default"
        assert "*[[Plan]]" in wiki.pages["Default"]

    def test_download_failure_writes_nothing(self, migrator, wiki):
        with pytest.raises(DownloadError):
            migrator.migrate("missing")

        assert wiki.saves == []

    def test_blank_id_rejected(self, migrator, wiki):
        with pytest.raises(DownloadError):
            migrator.migrate("   ")

        assert wiki.saves == []

    def test_conversion_failure_writes_nothing(self, migrator, wiki):
        def broken(path):
            raise ConversionError("pandoc failed")

        migrator.converter.convert_file = broken

        with pytest.raises(ConversionError):
            migrator.migrate("abc123")

        assert wiki.saves == []

    def test_partial_failure_keeps_earlier_pages(self, migrator, wiki):
        wiki.fail_on_save = "Report"

        with pytest.raises(WikiError):
            migrator.migrate("abc123")

        assert "*[[Finance]]" in wiki.pages["CloudHealth"]
        assert "*[[Report]]" in wiki.pages["Finance"]
        assert "Report" not in wiki.pages
