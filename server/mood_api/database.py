"""Read-only SQLite access to the mood entry database."""
import sqlite3
from contextlib import contextmanager
from typing import Generator
import logging

from .config import get_settings

log = logging.getLogger(__name__)

MOOD_TABLE = "mood_entries"


class DatabaseManager:
    """
    Read-only manager for the mood entry database.

    Entries are written by the tracking application; this API only reads
    them, so every connection is opened with mode=ro.
    """

    def __init__(self, settings=None):
        self.settings = settings or get_settings()

    @contextmanager
    def get_mood_conn(self) -> Generator[sqlite3.Connection, None, None]:
        """Read-only connection with dict-like rows."""
        uri = f"file:{self.settings.mood_db_path}?mode=ro"
        log.debug(f"[ENTRIES] Opening read-only connection to {self.settings.mood_db_path}")
        conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def is_available(self) -> bool:
        """True when the database opens and has the entries table."""
        try:
            with self.get_mood_conn() as conn:
                row = conn.execute(
                    "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
                    (MOOD_TABLE,),
                ).fetchone()
        except sqlite3.Error as e:
            log.warning(f"[ENTRIES] Mood database check failed: {e}")
            return False
        return row is not None


# Singleton instance
db_manager = DatabaseManager()
