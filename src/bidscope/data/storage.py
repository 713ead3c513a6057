import json
import sqlite3
from datetime import datetime, UTC
from pathlib import Path
from typing import Iterable

from bidscope.domain.models import Bid, Tender


class Database:
    """
    Thin wrapper over sqlite3 for bid/tender persistence.
    Keeps schema creation and batch upserts in one place.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self):
        return sqlite3.connect(self.db_path)

    def _ensure_schema(self):
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS imports (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    import_key TEXT UNIQUE,
                    source_file TEXT,
                    created_at TEXT
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS bids (
                    id TEXT PRIMARY KEY,
                    company_id TEXT NOT NULL,
                    tender_id TEXT,
                    amount REAL NOT NULL,
                    status TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    proposed_deadline TEXT
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tenders (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    description TEXT,
                    budget REAL NOT NULL,
                    deadline TEXT,
                    status TEXT,
                    created_at TEXT NOT NULL,
                    bid_ids_json TEXT NOT NULL,
                    lowest_bid REAL
                );
                """
            )
            cur.execute("CREATE INDEX IF NOT EXISTS idx_bids_company ON bids (company_id);")
            conn.commit()

    def upsert_import(self, import_key: str, source_file: Path) -> tuple[int, bool]:
        """
        Idempotent insert: returns (import_id, created_flag).
        """
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT id FROM imports WHERE import_key = ?", (import_key,))
            row = cur.fetchone()
            if row:
                return row[0], False
            cur.execute(
                "INSERT INTO imports (import_key, source_file, created_at) VALUES (?, ?, ?)",
                (import_key, str(source_file), datetime.now(UTC).isoformat()),
            )
            conn.commit()
            return cur.lastrowid, True

    def upsert_bids(self, bids: Iterable[Bid]) -> int:
        to_insert = [
            (b.id, b.company_id, b.tender_id, b.amount, b.status, b.created_at, b.proposed_deadline)
            for b in bids
        ]
        if not to_insert:
            return 0
        with self._connect() as conn:
            cur = conn.cursor()
            # ON CONFLICT keeps the rowid, so bids stay in first-seen order
            cur.executemany(
                """
                INSERT INTO bids (id, company_id, tender_id, amount, status, created_at, proposed_deadline)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    company_id = excluded.company_id,
                    tender_id = excluded.tender_id,
                    amount = excluded.amount,
                    status = excluded.status,
                    created_at = excluded.created_at,
                    proposed_deadline = excluded.proposed_deadline
                """,
                to_insert,
            )
            conn.commit()
            return len(to_insert)

    def upsert_tenders(self, tenders: Iterable[Tender]) -> int:
        to_insert = [
            (
                t.id,
                t.title,
                t.description,
                t.budget,
                t.deadline,
                t.status,
                t.created_at,
                json.dumps(t.bid_ids),
                t.lowest_bid,
            )
            for t in tenders
        ]
        if not to_insert:
            return 0
        with self._connect() as conn:
            cur = conn.cursor()
            cur.executemany(
                """
                INSERT INTO tenders
                    (id, title, description, budget, deadline, status, created_at, bid_ids_json, lowest_bid)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title = excluded.title,
                    description = excluded.description,
                    budget = excluded.budget,
                    deadline = excluded.deadline,
                    status = excluded.status,
                    created_at = excluded.created_at,
                    bid_ids_json = excluded.bid_ids_json,
                    lowest_bid = excluded.lowest_bid
                """,
                to_insert,
            )
            conn.commit()
            return len(to_insert)
