"""Tests for wiki title sanitizing and link text."""

import pytest

from wiki_site.links import (
    MAX_TITLE_BYTES,
    contains_link,
    list_item_link,
    sanitize_title,
)


class TestSanitizeTitle:

    @pytest.mark.parametrize("title, expected", [
        ("Q3 [draft] | Finance", "Q3 -draft- - Finance"),
        ("  Budget \n 2024 ", "Budget 2024"),
        (":Notes", "Notes"),
        (": :Category:Finance", "Category:Finance"),
        ("Meeting: Monday", "Meeting: Monday"),
        (":::", ""),
        ("", ""),
        (None, ""),
    ])
    def test_normalized(self, title, expected):
        assert sanitize_title(title) == expected

    def test_long_ascii_title_truncated(self):
        assert sanitize_title("a" * 300) == "a" * MAX_TITLE_BYTES

    def test_multibyte_title_not_split(self):
        sanitized = sanitize_title("é" * 200)

        assert sanitized == "é" * 127
        assert len(sanitized.encode("utf-8")) <= MAX_TITLE_BYTES

    def test_short_title_untouched(self):
        title = "x" * MAX_TITLE_BYTES

        assert sanitize_title(title) == title


def test_list_item_link():
    assert list_item_link("Finance") == "\n*[[Finance]]"


def test_contains_link():
    assert contains_link("Index\n*[[Finance]]", "Finance")
    assert not contains_link("Index\n*[[Finance 2]]", "Finance")
    assert not contains_link(None, "Finance")
