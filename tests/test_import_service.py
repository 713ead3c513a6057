import json

import pytest

from bidscope.data.import_service import ImportService
from bidscope.data.repositories import SqliteRecordSource
from bidscope.exceptions import DataSourceError


def _records():
    return {
        "bids": [
            {"id": "b1", "companyId": "acme", "tenderId": "t1", "amount": 9000, "status": "rejected",
             "createdAt": "2024-01-02T00:00:00"},
            {"id": "b2", "companyId": "acme", "tenderId": "t1", "amount": 7000, "status": "accepted",
             "createdAt": "2024-01-03T00:00:00", "proposedDeadline": "2024-03-01T00:00:00"},
        ],
        "tenders": [
            {"id": "t1", "title": "Road Works", "budget": 8000, "createdAt": "2024-01-01T00:00:00",
             "bidIds": ["b1", "b2"]},
        ],
    }


def test_json_import_and_idempotency(tmp_path):
    path = tmp_path / "records.json"
    path.write_text(json.dumps(_records()), encoding="utf-8")
    svc = ImportService(db_path=tmp_path / "bidscope.db")

    report = svc.import_file(path)
    assert (report.bids, report.tenders, report.skipped) == (2, 1, False)

    again = svc.import_file(path)
    assert again.skipped

    source = SqliteRecordSource(svc.db)
    assert [b.id for b in source.fetch_bids_by_company("acme")] == ["b1", "b2"]
    tender = source.fetch_all_tenders()[0]
    assert tender.bid_ids == ["b1", "b2"]
    assert tender.bids_count == 2
    assert tender.lowest_bid == 7000


def test_json_list_split_by_shape(tmp_path):
    records = _records()
    path = tmp_path / "mixed.json"
    path.write_text(json.dumps(records["bids"] + records["tenders"]), encoding="utf-8")

    report = ImportService(db_path=tmp_path / "bidscope.db").import_file(path)
    assert (report.bids, report.tenders) == (2, 1)


def test_csv_import(tmp_path):
    bids_csv = tmp_path / "bids.csv"
    bids_csv.write_text(
        "id,companyId,amount,status,createdAt,proposedDeadline\n"
        "b1,acme,1500,accepted,2024-02-01T00:00:00,2024-04-01T00:00:00\n"
        "b2,acme,2500,pending,2024-02-05T00:00:00,\n",
        encoding="utf-8",
    )
    tenders_csv = tmp_path / "tenders.csv"
    tenders_csv.write_text(
        "id,title,budget,createdAt,bidIds\n"
        "t1,Bridge,2000,2024-01-15T00:00:00,b1;b2\n",
        encoding="utf-8",
    )
    svc = ImportService(db_path=tmp_path / "bidscope.db")

    assert svc.import_file(bids_csv, kind="bids").bids == 2
    assert svc.import_file(tenders_csv).tenders == 1

    source = SqliteRecordSource(svc.db)
    bids = source.fetch_bids_by_company("acme")
    assert [b.amount for b in bids] == [1500.0, 2500.0]
    assert bids[1].proposed_deadline is None
    tender = source.fetch_all_tenders()[0]
    assert tender.bid_ids == ["b1", "b2"]
    assert tender.lowest_bid == 1500.0


def test_lowest_bid_uses_stored_and_file_bids(tmp_path):
    records = _records()
    bids_path = tmp_path / "bids.json"
    bids_path.write_text(json.dumps({"bids": records["bids"]}), encoding="utf-8")
    tenders_path = tmp_path / "tenders.json"
    tenders_path.write_text(json.dumps({
        "bids": [{"id": "b3", "companyId": "globex", "tenderId": "t2", "amount": 8000, "status": "pending",
                  "createdAt": "2024-01-04T00:00:00"}],
        "tenders": records["tenders"] + [
            {"id": "t2", "title": "Bridge", "budget": 9500, "createdAt": "2024-01-01T00:00:00",
             "bidIds": ["b1", "b3", "unknown"]},
        ],
    }), encoding="utf-8")
    svc = ImportService(db_path=tmp_path / "bidscope.db")

    svc.import_file(bids_path)
    svc.import_file(tenders_path)

    lowest = {t.id: t.lowest_bid for t in SqliteRecordSource(svc.db).fetch_all_tenders()}
    assert lowest == {"t1": 7000.0, "t2": 8000.0}


def test_missing_file(tmp_path):
    with pytest.raises(DataSourceError):
        ImportService(db_path=tmp_path / "bidscope.db").import_file(tmp_path / "nope.json")


def test_unsupported_file_type(tmp_path):
    path = tmp_path / "records.txt"
    path.write_text("hello", encoding="utf-8")
    with pytest.raises(DataSourceError):
        ImportService(db_path=tmp_path / "bidscope.db").import_file(path)


def test_invalid_record_rejected(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"bids": [{"id": "b1", "companyId": "acme", "amount": -5,
                                          "createdAt": "2024-01-01T00:00:00"}]}), encoding="utf-8")
    with pytest.raises(DataSourceError):
        ImportService(db_path=tmp_path / "bidscope.db").import_file(path)
