import sqlite3

from bidscope.data.repositories import SqliteRecordSource
from bidscope.data.storage import Database
from conftest import make_bid, make_tender


def test_bids_round_trip_in_insertion_order(tmp_path):
    db = Database(tmp_path / "bids.db")
    db.upsert_bids(
        [
            make_bid("z", "2024-01-02T00:00:00", "accepted", 10, tender_id="t1", proposed_deadline="2024-02-01T00:00:00"),
            make_bid("a", "2024-01-01T00:00:00", "pending", 20),
            make_bid("m", "2024-01-03T00:00:00", "rejected", 30, company_id="other"),
        ]
    )
    source = SqliteRecordSource(db)

    bids = source.fetch_bids_by_company("acme")
    assert [b.id for b in bids] == ["z", "a"]
    assert bids[0].tender_id == "t1"
    assert bids[0].proposed_deadline == "2024-02-01T00:00:00"
    assert bids[1].proposed_deadline is None
    assert source.fetch_bids_by_company("nobody") == []


def test_fetch_bids_by_ids_follows_requested_order(tmp_path):
    db = Database(tmp_path / "bids.db")
    db.upsert_bids([make_bid(i, "2024-01-01T00:00:00") for i in ("a", "b", "c")])
    source = SqliteRecordSource(db)

    assert [b.id for b in source.fetch_bids_by_ids(["c", "missing", "a"])] == ["c", "a"]
    assert source.fetch_bids_by_ids([]) == []


def test_upsert_keeps_first_seen_position(tmp_path):
    db = Database(tmp_path / "bids.db")
    db.upsert_bids([make_bid("a", "2024-01-01T00:00:00"), make_bid("b", "2024-01-01T00:00:00")])
    db.upsert_bids([make_bid("a", "2024-01-01T00:00:00", "accepted")])

    bids = SqliteRecordSource(db).fetch_bids_by_company("acme")
    assert [(b.id, b.status) for b in bids] == [("a", "accepted"), ("b", "pending")]


def test_tenders_round_trip(tmp_path):
    db = Database(tmp_path / "bids.db")
    db.upsert_tenders(
        [
            make_tender("t1", "Road", 1000, "2024-01-01T00:00:00", ["a", "b"]),
            make_tender("t2", "Bridge", 0, "2024-01-02T00:00:00"),
        ]
    )
    tenders = SqliteRecordSource(db).fetch_all_tenders()

    assert [t.id for t in tenders] == ["t1", "t2"]
    assert tenders[0].bid_ids == ["a", "b"]
    assert tenders[0].bids_count == 2
    assert tenders[0].lowest_bid is None
    assert tenders[1].bid_ids == []


def test_import_registry_is_idempotent(tmp_path):
    db = Database(tmp_path / "bids.db")
    first_id, created = db.upsert_import("records:abc", tmp_path / "a.json")
    again_id, created_again = db.upsert_import("records:abc", tmp_path / "a.json")

    assert created and not created_again
    assert first_id == again_id
    with sqlite3.connect(db.db_path) as conn:
        assert conn.execute("SELECT COUNT(*) FROM imports").fetchone()[0] == 1
