from datetime import datetime
from typing import List, Optional, Sequence

from bidscope.data.dto import Series
from bidscope.domain.models import Bid, BidStatus
from bidscope.logic.buckets import TimeWindowBucketer
from bidscope.logic.ratios import percent

DISTRIBUTION_LABELS = ("Won", "Lost", "Pending")
_DISTRIBUTION_STATUSES = (BidStatus.ACCEPTED.value, BidStatus.REJECTED.value, BidStatus.PENDING.value)


def success_rate(bids: Sequence[Bid]) -> float:
    """Share of accepted bids in percent; 0.0 for an empty collection."""
    accepted = sum(1 for b in bids if b.is_accepted)
    return percent(accepted, len(bids))


def success_rate_series(
    bids: Sequence[Bid],
    now: datetime,
    months: int,
    bucketer: Optional[TimeWindowBucketer] = None,
) -> Series:
    bucketer = bucketer or TimeWindowBucketer()
    buckets = bucketer.bucket(now, months, bids)
    return Series(
        labels=[b.label for b in buckets],
        data=[success_rate(b.items) for b in buckets],
    )


def volume_series(
    bids: Sequence[Bid],
    now: datetime,
    months: int,
    bucketer: Optional[TimeWindowBucketer] = None,
) -> Series:
    bucketer = bucketer or TimeWindowBucketer()
    buckets = bucketer.bucket(now, months, bids)
    return Series(
        labels=[b.label for b in buckets],
        data=[len(b.items) for b in buckets],
    )


def status_distribution(bids: Sequence[Bid]) -> Series:
    """
    Won / Lost / Pending counts over every bid given, regardless of date.
    Statuses outside those three are not counted anywhere.
    """
    counts: List[int] = [sum(1 for b in bids if b.status == status) for status in _DISTRIBUTION_STATUSES]
    return Series(labels=list(DISTRIBUTION_LABELS), data=counts)
