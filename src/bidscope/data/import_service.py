from hashlib import md5
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from pydantic import ValidationError

from bidscope.config import settings
from bidscope.data.dto import ImportReport
from bidscope.data.repositories import SqliteRecordSource
from bidscope.data.storage import Database
from bidscope.domain.models import Bid, Tender
from bidscope.exceptions import DataSourceError

logger = logging.getLogger(__name__)

_TABULAR_SUFFIXES = {".csv", ".xlsx", ".xls"}


class ImportService:
    """
    Loads bid/tender record files (JSON, CSV, XLSX) into the SQLite store.
    Idempotent per file hash: importing the same file twice is a no-op.
    """

    def __init__(self, db_path: Optional[Path] = None):
        db_path = db_path or settings.paths.db_path
        self.db = Database(db_path)

    def import_file(self, file_path: Path, kind: Optional[str] = None) -> ImportReport:
        file_path = Path(file_path)
        if not file_path.exists():
            raise DataSourceError(f"Input file not found: {file_path}")

        bid_rows, tender_rows = self._load(file_path, kind)
        bids = [self._validate(Bid, row, file_path) for row in bid_rows]
        tender_rows = [self._normalize_bid_ids(row) for row in tender_rows]
        amounts = self._bid_amounts(tender_rows, bids)
        tenders = [self._validate(Tender, self._with_lowest_bid(row, amounts), file_path) for row in tender_rows]

        import_key = f"records:{self._hash_file(file_path)}"
        _, is_new = self.db.upsert_import(import_key, file_path)
        if not is_new:
            logger.info("skipping already imported file", extra={"path": str(file_path)})
            return ImportReport(source_file=str(file_path), skipped=True)

        report = ImportReport(
            source_file=str(file_path),
            bids=self.db.upsert_bids(bids),
            tenders=self.db.upsert_tenders(tenders),
        )
        logger.info(
            "imported records",
            extra={"path": str(file_path), "bids": report.bids, "tenders": report.tenders},
        )
        return report

    def _load(self, file_path: Path, kind: Optional[str]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        suffix = file_path.suffix.lower()
        if suffix == ".json":
            try:
                payload = json.loads(file_path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as exc:
                raise DataSourceError(f"Invalid JSON in {file_path}: {exc}") from exc
            if isinstance(payload, dict):
                return list(payload.get("bids", [])), list(payload.get("tenders", []))
            if isinstance(payload, list):
                return self._split(payload, kind)
            raise DataSourceError(f"Unsupported JSON layout in {file_path}")

        if suffix in _TABULAR_SUFFIXES:
            try:
                df = pd.read_csv(file_path, dtype=str) if suffix == ".csv" else pd.read_excel(file_path, dtype=str)
            except Exception as e:
                raise DataSourceError(f"Cannot read {file_path}: {e}")
            rows = [
                {k: v for k, v in row.items() if v is not None and not (isinstance(v, float) and pd.isna(v))}
                for row in df.to_dict(orient="records")
            ]
            return self._split(rows, kind)

        raise DataSourceError(f"Unsupported file type: {file_path.suffix}")

    @staticmethod
    def _split(rows: List[Dict[str, Any]], kind: Optional[str]):
        if kind == "bids":
            return rows, []
        if kind == "tenders":
            return [], rows
        bids = [r for r in rows if "budget" not in r]
        tenders = [r for r in rows if "budget" in r]
        return bids, tenders

    @staticmethod
    def _normalize_bid_ids(row: Dict[str, Any]) -> Dict[str, Any]:
        row = dict(row)
        bid_ids = row.get("bidIds", row.get("bid_ids"))
        if isinstance(bid_ids, str):
            row.pop("bid_ids", None)
            row["bidIds"] = [part.strip() for part in bid_ids.replace(";", ",").split(",") if part.strip()]
        return row

    def _bid_amounts(self, tender_rows: List[Dict[str, Any]], bids: List[Bid]) -> Dict[str, float]:
        """
        Amounts of every bid the tenders reference. Bids in the same file win
        over ones already stored by earlier imports.
        """
        referenced = []
        for row in tender_rows:
            referenced.extend(row.get("bidIds", row.get("bid_ids")) or [])
        in_file = {b.id: b.amount for b in bids}
        missing = [bid_id for bid_id in dict.fromkeys(referenced) if bid_id not in in_file]
        amounts = {b.id: b.amount for b in SqliteRecordSource(self.db).fetch_bids_by_ids(missing)}
        amounts.update(in_file)
        return amounts

    @staticmethod
    def _with_lowest_bid(row: Dict[str, Any], amounts: Dict[str, float]) -> Dict[str, Any]:
        if row.get("lowestBid") is not None or row.get("lowest_bid") is not None:
            return row
        known = [amounts[bid_id] for bid_id in row.get("bidIds", row.get("bid_ids")) or [] if bid_id in amounts]
        if known:
            row = dict(row, lowestBid=min(known))
        return row

    @staticmethod
    def _validate(model, row: Dict[str, Any], file_path: Path):
        try:
            return model.model_validate(row)
        except ValidationError as exc:
            raise DataSourceError(f"Invalid {model.__name__.lower()} record in {file_path}: {exc}") from exc

    @staticmethod
    def _hash_file(file_path: Path) -> str:
        h = md5()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(8192), b""):
                h.update(chunk)
        return h.hexdigest()
