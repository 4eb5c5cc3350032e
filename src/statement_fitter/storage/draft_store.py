"""SQLite store for in-progress drafting sessions (TTL 7 days)."""

from __future__ import annotations

import sqlite3
import time
from pathlib import Path

from statement_fitter.models.statement import DraftSession

DEFAULT_DB_PATH = Path.home() / ".statement-fitter" / "drafts.db"
DEFAULT_TTL_DAYS = 7


class DraftStore:
    """Save, load and clear drafting sessions by session key."""

    def __init__(
        self,
        db_path: str | Path = DEFAULT_DB_PATH,
        ttl_days: int = DEFAULT_TTL_DAYS,
    ):
        self.db_path = Path(db_path)
        self.ttl_seconds = ttl_days * 86400
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS draft_sessions (
                    session_key TEXT PRIMARY KEY,
                    session_json TEXT NOT NULL,
                    saved_at REAL NOT NULL
                )
            """)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    @staticmethod
    def _key(session_key: str) -> str:
        return session_key.strip()

    def load(self, session_key: str) -> DraftSession | None:
        """Return the saved session, or None if missing or expired."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT session_json, saved_at FROM draft_sessions WHERE session_key = ?",
                (self._key(session_key),),
            ).fetchone()

        if row is None:
            return None

        session_json, saved_at = row
        if time.time() - saved_at > self.ttl_seconds:
            self.clear(session_key)
            return None

        return DraftSession.model_validate_json(session_json)

    def save(self, session_key: str, session: DraftSession) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO draft_sessions
                   (session_key, session_json, saved_at)
                   VALUES (?, ?, ?)""",
                (self._key(session_key), session.model_dump_json(), time.time()),
            )

    def clear(self, session_key: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "DELETE FROM draft_sessions WHERE session_key = ?", (self._key(session_key),)
            )

    def clear_all(self) -> int:
        """Delete every session. Returns count of deleted rows."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM draft_sessions")
            return cursor.rowcount

    def keys(self) -> list[str]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT session_key FROM draft_sessions ORDER BY saved_at DESC"
            ).fetchall()
        return [r[0] for r in rows]

    def stats(self) -> dict:
        with self._connect() as conn:
            total = conn.execute("SELECT COUNT(*) FROM draft_sessions").fetchone()[0]
            expired = conn.execute(
                "SELECT COUNT(*) FROM draft_sessions WHERE ? - saved_at > ?",
                (time.time(), self.ttl_seconds),
            ).fetchone()[0]
        return {"total": total, "expired": expired, "active": total - expired}
