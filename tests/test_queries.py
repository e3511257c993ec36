"""Tests for Drive query building."""

import logging

import pytest

from google_docs.queries import (
    FOLDER_MIME_TYPE,
    build_folder_query,
    build_list_query,
    build_search_query,
    escape,
)


class TestListQuery:

    def test_all(self):
        assert build_list_query() == "trashed = false"

    def test_documents(self):
        assert build_list_query("documents") == (
            "mimeType = 'application/vnd.google-apps.document' and trashed = false"
        )

    def test_trashed(self):
        assert build_list_query("trashed") == "trashed = true"

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown object type 'widgets'"):
            build_list_query("widgets")


def test_folder_query():
    assert build_folder_query("0Bfolder") == "'0Bfolder' in parents and trashed = false"


def test_escape():
    assert escape("Bob's \\notes") == "Bob\\'s \\\\notes"


class TestSearchQuery:

    def test_full_text(self):
        assert build_search_query({"q": "budget"}) == (
            f"fullText contains 'budget' and mimeType != '{FOLDER_MIME_TYPE}' "
            "and trashed = false"
        )

    def test_title_contains(self):
        assert build_search_query({"title": "Q3"}).startswith("name contains 'Q3'")

    def test_title_exact(self):
        query = build_search_query({"title": "Q3", "title-exact": "true"})

        assert query.startswith("name = 'Q3'")
        assert "title-exact" not in query

    def test_people_and_dates(self):
        query = build_search_query({
            "owner": "ada@example.com",
            "opened-min": "2024-01-01T00:00:00",
            "edited-max": "2024-12-31T00:00:00",
        })

        assert "'ada@example.com' in owners" in query
        assert "viewedByMeTime >= '2024-01-01T00:00:00'" in query
        assert "modifiedTime <= '2024-12-31T00:00:00'" in query

    def test_show_folders_and_deleted(self):
        query = build_search_query({"q": "x", "showfolders": "true", "showdeleted": "TRUE"})

        assert query == "fullText contains 'x'"

    def test_values_escaped(self):
        assert build_search_query({"q": "it's"}).startswith("fullText contains 'it\\'s'")

    def test_unknown_param_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            query = build_search_query({"color": "blue"})

        assert "blue" not in query
        assert "Unknown search parameter ignored: color" in caplog.text
