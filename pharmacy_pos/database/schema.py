from pathlib import Path
import sqlite3

from ..constants import KV_TABLE

SQL = f"""
/* -------- local key/value settings & caches -------- */
CREATE TABLE IF NOT EXISTS {KV_TABLE} (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    updated_at  TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""


def init_schema(db_path: Path | str) -> None:
    """Create tables if missing. Safe to call on every start."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    con = sqlite3.connect(str(db_path))
    try:
        apply_schema(con)
    finally:
        con.close()


def apply_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(SQL)
    conn.commit()
