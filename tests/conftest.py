from datetime import datetime, UTC

import pytest

from bidscope.data.repositories import InMemoryRecordSource
from bidscope.domain.models import Bid, Tender
from bidscope.logic.clock import FixedClock
from bidscope.services import BidAnalyticsService

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


def make_bid(bid_id, created_at, status="pending", amount=1000.0, company_id="acme", **extra):
    return Bid(id=bid_id, company_id=company_id, amount=amount, status=status, created_at=created_at, **extra)


def make_tender(tender_id, title, budget, created_at, bid_ids=()):
    return Tender(id=tender_id, title=title, budget=budget, created_at=created_at, bid_ids=list(bid_ids))


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def company_bids():
    """
    Five bids for 'acme'; two of them (b1, b2) fall in the month before last
    relative to NOW.
    """
    return [
        make_bid("b1", "2024-04-20T09:00:00", "accepted", 1000),
        make_bid("b2", "2024-05-01T09:00:00", "pending", 3000),
        make_bid("b3", "2024-06-01T09:00:00", "accepted", 2000),
        make_bid("b4", "2024-06-10T09:00:00", "rejected", 6000),
        make_bid("b5", "2024-01-05T09:00:00", "pending", 8000),
    ]


@pytest.fixture
def project_records():
    bids = [
        make_bid("p1", "2024-01-05T00:00:00", "rejected", 95000, proposed_deadline="2024-04-01T00:00:00", company_id="builder"),
        make_bid("p2", "2024-01-06T00:00:00", "accepted", 90000, proposed_deadline="2024-03-01T00:00:00", company_id="builder"),
        make_bid("p3", "2024-02-02T00:00:00", "accepted", 60000, proposed_deadline="2024-02-11T12:00:00", company_id="builder"),
        make_bid("p4", "2024-02-03T00:00:00", "pending", 15000, company_id="builder"),
    ]
    tenders = [
        make_tender("t1", "Road Construction Phase 1", 100000, "2024-01-01T00:00:00", ["p1", "p2"]),
        make_tender("t2", "Bridge Repair", 50000, "2024-02-01T00:00:00", ["p3"]),
        make_tender("t3", "Road Maintenance", 20000, "2024-02-01T00:00:00", ["p4"]),
        make_tender("t4", "School Renovation", 75000, "2024-02-01T00:00:00"),
    ]
    return bids, tenders


@pytest.fixture
def source(company_bids, project_records):
    bids, tenders = project_records
    return InMemoryRecordSource(bids=company_bids + bids, tenders=tenders)


@pytest.fixture
def service(source, now):
    return BidAnalyticsService(source=source, clock=FixedClock(now))
