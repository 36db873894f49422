"""SQLite file holding the widget's remembered state."""

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

SYSTEM_STATE_DDL = """
CREATE TABLE IF NOT EXISTS system_state (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
)
"""


def open_state_db(db_path: str | Path) -> sqlite3.Connection:
    """Open (creating if needed) the state database at ``db_path``.

    Safe to call on an existing file: the ``system_state`` table is only
    created when absent, and rows already stored are left untouched.
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(SYSTEM_STATE_DDL)
    conn.commit()
    logger.debug("Opened state database %s", db_path)
    return conn
