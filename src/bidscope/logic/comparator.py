from dataclasses import dataclass
from datetime import datetime
from typing import List, Sequence, Tuple

from bidscope.data.dto import HeadlineStatistics
from bidscope.domain.models import Bid
from bidscope.logic.rates import success_rate
from bidscope.logic.ratios import mean, percent_change, round_half_up
from bidscope.logic.timestamps import months_before, parse_timestamp, within


@dataclass
class PeriodFigures:
    success_rate: float
    average_bid: float
    total_bids: int
    active_bids: int

    @classmethod
    def of(cls, bids: Sequence[Bid]) -> "PeriodFigures":
        return cls(
            success_rate=success_rate(bids),
            average_bid=mean(b.amount for b in bids),
            total_bids=len(bids),
            active_bids=sum(1 for b in bids if b.is_pending),
        )


def comparison_periods(now: datetime) -> Tuple[Tuple[datetime, datetime], Tuple[datetime, datetime]]:
    """((current_start, current_end), (previous_start, previous_end)); both bounds exclusive."""
    one_month_ago = months_before(now, 1)
    two_months_ago = months_before(now, 2)
    return (one_month_ago, now), (two_months_ago, one_month_ago)


def bids_between(bids: Sequence[Bid], start: datetime, end: datetime) -> List[Bid]:
    return [
        b for b in bids
        if within(parse_timestamp(b.created_at, field="createdAt"), start, end, inclusive=False)
    ]


def headline_statistics(bids: Sequence[Bid], now: datetime) -> HeadlineStatistics:
    """
    Headline figures over every bid of the company, each with a change against
    the month before last.

    The headline figure is all-time while the baseline is the previous calendar
    window only. Dashboards depend on these exact numbers, so the mix is kept.
    Success rate change is a difference in points; the others are percent
    changes, reported as 0 when the baseline is 0.
    """
    current = PeriodFigures.of(bids)
    _, (prev_start, prev_end) = comparison_periods(now)
    previous = PeriodFigures.of(bids_between(bids, prev_start, prev_end))

    return HeadlineStatistics(
        success_rate=round_half_up(current.success_rate),
        success_rate_change=round_half_up(current.success_rate - previous.success_rate),
        average_bid=round_half_up(current.average_bid),
        average_bid_change=round_half_up(percent_change(current.average_bid, previous.average_bid)),
        total_bids=current.total_bids,
        total_bids_change=round_half_up(percent_change(current.total_bids, previous.total_bids)),
        active_bids=current.active_bids,
        active_bids_change=round_half_up(percent_change(current.active_bids, previous.active_bids)),
    )
