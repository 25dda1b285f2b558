"""Tests for structured logging helpers."""

import re

import structlog

from sheetdb.core.logging import (
    add_correlation_id,
    bind_correlation_id,
    clear_context,
    new_correlation_id,
    rename_message_field,
)


def test_new_correlation_id_format():
    assert re.fullmatch(r"cid_[0-9a-f]{12}", new_correlation_id())


def test_bound_correlation_id_is_kept():
    event = add_correlation_id(None, "info", {"event": "x", "correlation_id": "cid_abc"})
    assert event["correlation_id"] == "cid_abc"


def test_missing_correlation_id_is_generated():
    event = add_correlation_id(None, "info", {"event": "x"})
    assert event["correlation_id"].startswith("cid_")


def test_rename_message_field():
    event = rename_message_field(None, "info", {"event": "hello"})
    assert event == {"message": "hello"}


def test_bind_and_clear_context():
    bind_correlation_id("cid_request")
    assert structlog.contextvars.get_contextvars()["correlation_id"] == "cid_request"

    clear_context()
    assert "correlation_id" not in structlog.contextvars.get_contextvars()
