import json
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

import pandas as pd

from bidscope.data.storage import Database
from bidscope.domain.models import Bid, Tender


class RecordSource(Protocol):
    """
    Supplies materialized bid/tender snapshots to the analytics engine.

    `fetch_bids_by_ids` must return bids in the order of the ids given
    (unknown ids skipped); timeline analysis picks the first accepted bid
    in that order.
    """

    def fetch_bids_by_company(self, company_id: str) -> List[Bid]:
        ...

    def fetch_all_tenders(self) -> List[Tender]:
        ...

    def fetch_bids_by_ids(self, ids: Sequence[str]) -> List[Bid]:
        ...


class InMemoryRecordSource:
    """Record source over plain lists, in insertion order."""

    def __init__(self, bids: Optional[Iterable[Bid]] = None, tenders: Optional[Iterable[Tender]] = None):
        self.bids: List[Bid] = list(bids or [])
        self.tenders: List[Tender] = list(tenders or [])

    def fetch_bids_by_company(self, company_id: str) -> List[Bid]:
        return [b for b in self.bids if b.company_id == company_id]

    def fetch_all_tenders(self) -> List[Tender]:
        return list(self.tenders)

    def fetch_bids_by_ids(self, ids: Sequence[str]) -> List[Bid]:
        by_id: Dict[str, Bid] = {}
        for bid in self.bids:
            by_id.setdefault(bid.id, bid)
        return [by_id[i] for i in ids if i in by_id]


class SqliteRecordSource:
    """
    Record source backed by the local SQLite store.
    Rows come back in insertion (rowid) order.
    """

    def __init__(self, db: Database):
        self.db = db

    def _read(self, sql: str, params: Sequence = ()) -> pd.DataFrame:
        with self.db._connect() as conn:
            df = pd.read_sql_query(sql, conn, params=list(params))
        # NULL REAL columns come back as NaN; the models expect None
        return df.astype(object).where(pd.notna(df), None)

    @staticmethod
    def _to_bids(df: pd.DataFrame) -> List[Bid]:
        return [Bid.model_validate(row) for row in df.to_dict(orient="records")]

    def fetch_bids_by_company(self, company_id: str) -> List[Bid]:
        df = self._read("SELECT * FROM bids WHERE company_id = ? ORDER BY rowid", (company_id,))
        return self._to_bids(df)

    def fetch_all_tenders(self) -> List[Tender]:
        df = self._read("SELECT * FROM tenders ORDER BY rowid")
        tenders = []
        for row in df.to_dict(orient="records"):
            row["bid_ids"] = json.loads(row.pop("bid_ids_json") or "[]")
            tenders.append(Tender.model_validate(row))
        return tenders

    def fetch_bids_by_ids(self, ids: Sequence[str]) -> List[Bid]:
        ids = list(ids)
        if not ids:
            return []
        placeholders = ",".join("?" for _ in ids)
        df = self._read(f"SELECT * FROM bids WHERE id IN ({placeholders})", ids)
        by_id = {b.id: b for b in self._to_bids(df)}
        return [by_id[i] for i in ids if i in by_id]
