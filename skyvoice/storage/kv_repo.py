"""Repository for the string-keyed value store."""

import sqlite3


def get_value(conn: sqlite3.Connection, key: str) -> str | None:
    row = conn.execute(
        "SELECT value FROM kv_store WHERE key = ?", (key,)
    ).fetchone()
    if row is None:
        return None
    return row[0]


def set_value(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute(
        "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
        (key, value),
    )
    conn.commit()


def delete_values(conn: sqlite3.Connection, *keys: str) -> int:
    """Delete keys; returns the number of rows removed."""
    if not keys:
        return 0
    placeholders = ", ".join("?" for _ in keys)
    cursor = conn.execute(
        f"DELETE FROM kv_store WHERE key IN ({placeholders})", keys
    )
    conn.commit()
    return cursor.rowcount


def all_values(conn: sqlite3.Connection) -> dict[str, str]:
    rows = conn.execute("SELECT key, value FROM kv_store ORDER BY key").fetchall()
    return {r[0]: r[1] for r in rows}
