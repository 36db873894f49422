"""Repository for persisted widget state (last committed query and friends)."""

import sqlite3


def get_state(conn: sqlite3.Connection, key: str) -> str | None:
    """Get a stored value, or None when the key was never written."""
    row = conn.execute(
        "SELECT value FROM system_state WHERE key = ?", (key,)
    ).fetchone()
    if row is None:
        return None
    return row[0]


def set_state(conn: sqlite3.Connection, key: str, value: str) -> None:
    """Insert or overwrite a stored value."""
    conn.execute(
        "INSERT INTO system_state (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
        (key, value),
    )
    conn.commit()


def delete_state(conn: sqlite3.Connection, key: str) -> None:
    conn.execute("DELETE FROM system_state WHERE key = ?", (key,))
    conn.commit()


class SqliteStateStore:
    """Key-value view over the system_state table, as used by the orchestrator."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get(self, key: str) -> str | None:
        return get_state(self.conn, key)

    def set(self, key: str, value: str) -> None:
        set_state(self.conn, key, value)
