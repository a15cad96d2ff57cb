"""Tests for the in-memory conversation history."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from transcript_advisor.history import (
    MAX_MESSAGES,
    add_message,
    clear_history,
    get_history,
    get_message_count,
    get_messages_for_api,
    has_history,
)

if TYPE_CHECKING:
    import sqlite3


def test_add_and_read_back(history_db: sqlite3.Connection) -> None:
    add_message(history_db, "user", "  Hello  ")
    add_message(history_db, "assistant", "Hi there")
    history = get_history(history_db)
    assert [(m.role, m.content) for m in history] == [("user", "Hello"), ("assistant", "Hi there")]
    assert history[0].timestamp <= history[1].timestamp


def test_oldest_turns_dropped_beyond_limit(history_db: sqlite3.Connection) -> None:
    """Only the newest MAX_MESSAGES turns are kept."""
    for i in range(MAX_MESSAGES + 3):
        add_message(history_db, "user" if i % 2 == 0 else "assistant", f"turn {i}")
    assert get_message_count(history_db) == MAX_MESSAGES
    contents = [m.content for m in get_history(history_db)]
    assert contents == [f"turn {i}" for i in range(3, MAX_MESSAGES + 3)]


def test_custom_limit(history_db: sqlite3.Connection) -> None:
    for i in range(4):
        add_message(history_db, "user", f"q{i}", limit=2)
    assert [m.content for m in get_history(history_db)] == ["q2", "q3"]


def test_messages_for_api(history_db: sqlite3.Connection) -> None:
    add_message(history_db, "user", "a")
    add_message(history_db, "assistant", "b")
    add_message(history_db, "user", "c")
    assert get_messages_for_api(history_db, 2) == [
        {"role": "assistant", "content": "b"},
        {"role": "user", "content": "c"},
    ]
    assert get_messages_for_api(history_db, 0) == []


def test_clear_history(history_db: sqlite3.Connection) -> None:
    add_message(history_db, "user", "a")
    assert has_history(history_db)
    clear_history(history_db)
    assert not has_history(history_db)
    assert get_history(history_db) == []


@pytest.mark.parametrize(
    ("role", "content"),
    [("system", "x"), ("", "x"), ("user", ""), ("user", "   ")],
)
def test_invalid_messages_rejected(history_db: sqlite3.Connection, role: str, content: str) -> None:
    with pytest.raises(ValueError, match="[Rr]ole"):
        add_message(history_db, role, content)
    assert get_message_count(history_db) == 0
