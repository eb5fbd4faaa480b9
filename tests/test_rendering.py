"""Tests for EntryRenderer -- resource and confirmation text."""

from __future__ import annotations

import pytest

from todo_catalog_mcp.catalog import Completion
from todo_catalog_mcp.mcp.rendering import MIME_TYPE, EntryRenderer
from todo_catalog_mcp.messages import Messages
from todo_catalog_mcp.models import TodoEntry

PENDING = TodoEntry(id="3", title="Test", completed=False)
DONE = TodoEntry(id="1", title="Write spec", completed=True)


@pytest.fixture()
def en() -> EntryRenderer:
    return EntryRenderer(Messages("en"))


@pytest.fixture()
def ja() -> EntryRenderer:
    return EntryRenderer(Messages("ja"), uri_scheme="task")


def test_mime_type():
    assert MIME_TYPE == "text/plain"


class TestUris:
    def test_uri(self, en, ja):
        assert en.uri("3") == "todo://3"
        assert ja.uri("3") == "task://3"

    def test_uri_template(self, en):
        assert en.uri_template == "todo://{todo_id}"


class TestResourceText:
    def test_name_uses_glyph(self, en):
        assert en.resource_name(PENDING) == "□ Test"
        assert en.resource_name(DONE) == "✓ Write spec"

    def test_description(self, en, ja):
        assert en.resource_description(PENDING) == "Status: pending"
        assert en.resource_description(DONE) == "Status: completed"
        assert ja.resource_description(PENDING) == "状態: 未完了"

    def test_text(self, en, ja):
        assert en.resource_text(PENDING) == "ID: 3\nTitle: Test\nStatus: pending"
        assert ja.resource_text(DONE) == "ID: 1\nタイトル: Write spec\n状態: 完了"


class TestConfirmations:
    def test_added(self, en, ja):
        entry = TodoEntry(id="4", title="Ship it")
        assert en.added(entry) == "Added todo - ID: 4, Title: Ship it"
        assert ja.added(entry) == "TODOを追加しました - ID: 4, タイトル: Ship it"

    def test_completed_fresh(self, en):
        outcome = Completion(entry=DONE, already_completed=False)
        assert en.completed(outcome) == 'Completed todo 1: "Write spec"'

    def test_completed_already(self, en, ja):
        outcome = Completion(entry=DONE, already_completed=True)
        assert en.completed(outcome) == "Todo 1 is already completed"
        assert ja.completed(outcome) == "ID 1 のTODOはすでに完了しています"
