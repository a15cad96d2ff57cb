"""Session conversation history: an in-memory SQLite store bounded to the newest turns.

Nothing is written to disk; the history lives as long as the connection.
"""

from __future__ import annotations

import sqlite3
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from transcript_advisor.groq import ChatMessage

MAX_MESSAGES = 5
ROLES = ("user", "assistant")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS messages (
    message_id INTEGER PRIMARY KEY AUTOINCREMENT,
    role TEXT NOT NULL CHECK (role IN ('user', 'assistant')),
    content TEXT NOT NULL,
    timestamp REAL NOT NULL
);
"""


@dataclass
class Message:
    """A stored conversation turn."""

    role: str
    content: str
    timestamp: float

    def for_api(self) -> ChatMessage:
        """Return the role/content pair sent to the completion API."""
        return {"role": self.role, "content": self.content}


def open_history_db() -> sqlite3.Connection:
    """Open a fresh in-memory history database."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.executescript(_SCHEMA)
    return conn


def add_message(
    conn: sqlite3.Connection,
    role: str,
    content: str,
    *,
    limit: int = MAX_MESSAGES,
) -> None:
    """Append a turn and drop the oldest turns beyond `limit`.

    Raises ValueError for an unknown role or empty content.
    """
    if not role or not content or not content.strip():
        msg = "Role and content are required"
        raise ValueError(msg)
    if role not in ROLES:
        msg = f'Role must be "user" or "assistant", got {role!r}'
        raise ValueError(msg)

    with conn:
        conn.execute(
            "INSERT INTO messages (role, content, timestamp) VALUES (?, ?, ?)",
            (role, content.strip(), time.time()),
        )
        conn.execute(
            "DELETE FROM messages WHERE message_id NOT IN "
            "(SELECT message_id FROM messages ORDER BY message_id DESC LIMIT ?)",
            (limit,),
        )


def get_history(conn: sqlite3.Connection) -> list[Message]:
    """Return stored turns, oldest first."""
    rows = conn.execute(
        "SELECT role, content, timestamp FROM messages ORDER BY message_id"
    ).fetchall()
    return [Message(role=r["role"], content=r["content"], timestamp=r["timestamp"]) for r in rows]


def get_messages_for_api(conn: sqlite3.Connection, count: int = MAX_MESSAGES) -> list[ChatMessage]:
    """Return the newest `count` turns as API messages, oldest first."""
    if count <= 0:
        return []
    history = get_history(conn)
    return [m.for_api() for m in history[-count:]]


def clear_history(conn: sqlite3.Connection) -> None:
    """Forget every stored turn."""
    with conn:
        conn.execute("DELETE FROM messages")


def get_message_count(conn: sqlite3.Connection) -> int:
    return conn.execute("SELECT count(*) FROM messages").fetchone()[0]


def has_history(conn: sqlite3.Connection) -> bool:
    return get_message_count(conn) > 0
