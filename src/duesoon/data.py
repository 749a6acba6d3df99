import json
import logging
import os
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from duesoon.models import ReminderDraft


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


class DraftStore:
    """Entwürfe ({params, metadata, last_step, last_path}) unter einer opaken ID."""

    def __init__(self, db_path: str = None):
        try:
            self.db_path = db_path or os.path.join(os.path.expanduser("~"), ".duesoon", "duesoon.db")
            if self.db_path != ':memory:':
                os.makedirs(os.path.dirname(os.path.abspath(self.db_path)), exist_ok=True)
            self.conn = sqlite3.connect(self.db_path)
            self.conn.row_factory = sqlite3.Row
            self._ensure_tables()
        except sqlite3.Error as e:
            logging.error(f"[DueSoon] Database connection error: {e}")
            raise

    def _ensure_tables(self):
        cur = self.conn.cursor()
        cur.execute("""
        CREATE TABLE IF NOT EXISTS reminder_drafts (
          id TEXT PRIMARY KEY,
          params TEXT NOT NULL,
          metadata TEXT NOT NULL,
          last_step TEXT,
          last_path TEXT,
          created_at TEXT NOT NULL,
          updated_at TEXT NOT NULL
        )""")
        self.conn.commit()

    @staticmethod
    def _row_to_draft(row) -> ReminderDraft:
        return ReminderDraft(
            id=row['id'],
            params=json.loads(row['params']),
            metadata=json.loads(row['metadata']),
            last_step=row['last_step'],
            last_path=row['last_path'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    def create_draft(
        self,
        params: Optional[Dict[str, str]] = None,
        metadata: Optional[dict] = None,
        last_step: Optional[str] = None,
        last_path: Optional[str] = None,
    ) -> ReminderDraft:
        draft_id = uuid.uuid4().hex
        now = _now_iso()
        cur = self.conn.cursor()
        cur.execute(
            "INSERT INTO reminder_drafts (id, params, metadata, last_step, last_path, created_at, updated_at) "
            "VALUES (?,?,?,?,?,?,?)",
            (draft_id, json.dumps(params or {}), json.dumps(metadata or {}), last_step, last_path, now, now)
        )
        self.conn.commit()
        logging.info(f"[DueSoon] Entwurf {draft_id} angelegt")
        return self.load_draft(draft_id)

    def update_draft(
        self,
        draft_id: str,
        params: Optional[Dict[str, str]] = None,
        metadata: Optional[dict] = None,
        last_step: Optional[str] = None,
        last_path: Optional[str] = None,
    ) -> ReminderDraft:
        cur = self.conn.cursor()
        cur.execute(
            "UPDATE reminder_drafts SET params=?, metadata=?, last_step=?, last_path=?, updated_at=? WHERE id=?",
            (json.dumps(params or {}), json.dumps(metadata or {}), last_step, last_path, _now_iso(), draft_id)
        )
        if cur.rowcount == 0:
            self.conn.rollback()
            raise KeyError(f"Unknown reminder draft: {draft_id}")
        self.conn.commit()
        logging.info(f"[DueSoon] Entwurf {draft_id} aktualisiert")
        return self.load_draft(draft_id)

    def load_draft(self, draft_id: str) -> Optional[ReminderDraft]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM reminder_drafts WHERE id=?", (draft_id,))
        row = cur.fetchone()
        return self._row_to_draft(row) if row else None

    def load_drafts(self) -> List[ReminderDraft]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM reminder_drafts ORDER BY updated_at DESC, rowid DESC")
        return [self._row_to_draft(row) for row in cur.fetchall()]

    def delete_draft(self, draft_id: str):
        cur = self.conn.cursor()
        cur.execute("DELETE FROM reminder_drafts WHERE id=?", (draft_id,))
        self.conn.commit()

    def close(self):
        """Schließe die Datenbankverbindung sauber"""
        if self.conn:
            self.conn.close()
            self.conn = None
