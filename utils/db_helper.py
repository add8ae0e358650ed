import sqlite3, os
import logging
from typing import Dict, Optional

from app.config import DB_PATH, SUPPORTED_MODES
from app.errors import StorageError

log = logging.getLogger(__name__)


def _ensure_schema(conn):
    conn.execute("""
    CREATE TABLE IF NOT EXISTS personal_bests(
        mode INTEGER PRIMARY KEY,
        wpm INTEGER NOT NULL,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
    );
    """)
    conn.execute("""
    CREATE TABLE IF NOT EXISTS results(
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        mode INTEGER,
        wpm INTEGER,
        accuracy INTEGER,
        total_chars INTEGER,
        errors INTEGER,
        elapsed INTEGER,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    );
    """)


def get_conn(path: str = DB_PATH):
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    conn = sqlite3.connect(path)
    _ensure_schema(conn)
    return conn


class PersonalBestsStore:
    """Best WPM per mode. A stored best only ever goes up."""

    def __init__(self, path: str = DB_PATH):
        self.path = path

    def _connect(self):
        try:
            return get_conn(self.path)
        except (sqlite3.Error, OSError) as e:
            raise StorageError(str(e)) from e

    def load(self) -> Dict[int, Optional[int]]:
        bests: Dict[int, Optional[int]] = {m: None for m in SUPPORTED_MODES}
        conn = self._connect()
        try:
            for mode, wpm in conn.execute("SELECT mode, wpm FROM personal_bests"):
                if mode in bests:
                    bests[mode] = wpm
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        finally:
            conn.close()
        return bests

    def get(self, mode: int) -> Optional[int]:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT wpm FROM personal_bests WHERE mode=?", (mode,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        finally:
            conn.close()
        return row[0] if row else None

    def record_if_better(self, mode: int, wpm: int) -> bool:
        conn = self._connect()
        try:
            cur = conn.cursor()
            row = cur.execute(
                "SELECT wpm FROM personal_bests WHERE mode=?", (mode,)
            ).fetchone()
            if row is not None and wpm <= row[0]:
                return False
            cur.execute(
                "INSERT OR REPLACE INTO personal_bests(mode, wpm, updated_at) "
                "VALUES (?,?,CURRENT_TIMESTAMP)",
                (mode, wpm),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        finally:
            conn.close()
        log.info("New personal best for %ds: %d wpm", mode, wpm)
        return True

    def insert_result(self, result):
        conn = self._connect()
        try:
            conn.execute(
                "INSERT INTO results(mode, wpm, accuracy, total_chars, errors, elapsed) "
                "VALUES (?,?,?,?,?,?)",
                (result.mode, result.wpm, result.accuracy, result.total_chars,
                 result.errors, result.elapsed_seconds),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        finally:
            conn.close()
