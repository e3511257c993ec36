"""Tests for command tokenization and query parameter parsing."""

import io
import logging

import pytest

from cli_utils import CommonCLI


class TestParseCommand:

    def test_blank(self):
        assert CommonCLI.parse_command("   \n") == []

    def test_plain_split(self):
        assert CommonCLI.parse_command("list folder  0Bxyz\n") == ["list", "folder", "0Bxyz"]

    def test_search_keeps_text(self):
        assert CommonCLI.parse_command("search  annual budget ") == ["search", "annual budget"]

    def test_migrate_keeps_category(self):
        assert CommonCLI.parse_command("migrate abc123 Human Resources") == [
            "migrate", "abc123", "Human Resources",
        ]

    def test_migrate_without_category(self):
        assert CommonCLI.parse_command("migrate abc123") == ["migrate", "abc123"]

    def test_asearch_split_per_param(self):
        assert CommonCLI.parse_command("asearch title=Budget owner=me@example.com") == [
            "asearch", "title=Budget", "owner=me@example.com",
        ]


class TestParseQueryParams:

    def test_pairs(self):
        assert CommonCLI.parse_query_params(["title=Budget", "showfolders=true"]) == {
            "title": "Budget",
            "showfolders": "true",
        }

    def test_value_may_contain_equals(self):
        assert CommonCLI.parse_query_params(["q=a=b"]) == {"q": "a=b"}

    def test_empty_value_allowed(self):
        assert CommonCLI.parse_query_params(["title="]) == {"title": ""}

    @pytest.mark.parametrize("arg", ["title", "=Budget"])
    def test_malformed(self, arg):
        with pytest.raises(ValueError):
            CommonCLI.parse_query_params([arg])


def test_print_message():
    out = io.StringIO()

    CommonCLI.print_message(["one", "two"], out)

    assert out.getvalue() == "one\ntwo\n"


def test_enable_request_logging():
    CommonCLI.enable_request_logging()

    assert logging.getLogger("googleapiclient.http").level == logging.DEBUG
    assert logging.getLogger("mwclient").level == logging.DEBUG
