from datetime import datetime
from typing import Callable, Iterable, List, Sequence, TypeVar

from dateutil.relativedelta import relativedelta

from bidscope.data.dto import Bucket
from bidscope.domain.models import Timeframe
from bidscope.logic.timestamps import as_utc, parse_timestamp, within

T = TypeVar("T")

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Length of one period for each timeframe token.
STEPS = {
    Timeframe.DAY: relativedelta(days=1),
    Timeframe.WEEK: relativedelta(weeks=1),
    Timeframe.MONTH: relativedelta(months=1),
    Timeframe.QUARTER: relativedelta(months=3),
    Timeframe.YEAR: relativedelta(years=1),
}


def _created_at(record) -> datetime:
    return parse_timestamp(record.created_at, field="createdAt")


def window_start(now: datetime, periods: int, timeframe: Timeframe = Timeframe.MONTH) -> datetime:
    return as_utc(now) - STEPS[timeframe] * periods


def records_within(
    records: Iterable[T],
    start: datetime,
    end: datetime,
    timestamp_of: Callable[[T], datetime] = _created_at,
) -> List[T]:
    """Records whose timestamp lies in [start, end], both ends inclusive."""
    return [r for r in records if within(timestamp_of(r), start, end)]


class TimeWindowBucketer:
    """
    Builds a trailing run of calendar-month buckets anchored at `now`, oldest
    first, and sorts records into them.

    Buckets are keyed by (year, month) and only display the month
    abbreviation, so a window longer than a year never merges two Januaries
    into one bucket. `now` is moved to UTC first, the same zone record
    timestamps are parsed into.
    """

    @staticmethod
    def key(moment: datetime) -> tuple:
        return (moment.year, moment.month)

    @staticmethod
    def label(moment: datetime) -> str:
        return _MONTH_ABBR[moment.month - 1]

    def empty_buckets(self, now: datetime, months: int) -> List[Bucket]:
        if months < 1:
            raise ValueError(f"months must be >= 1, got {months}")
        now = as_utc(now)
        buckets = []
        for i in range(months):
            start = now - relativedelta(months=months - 1 - i)
            buckets.append(Bucket(key=self.key(start), label=self.label(start), start=start))
        return buckets

    def bucket(
        self,
        now: datetime,
        months: int,
        records: Sequence[T],
        timestamp_of: Callable[[T], datetime] = _created_at,
    ) -> List[Bucket]:
        now = as_utc(now)
        buckets = self.empty_buckets(now, months)
        by_key = {b.key: b for b in buckets}
        for record in records_within(records, window_start(now, months), now, timestamp_of):
            target = by_key.get(self.key(timestamp_of(record)))
            # the window start can sit in the month just before the oldest bucket
            if target is not None:
                target.items.append(record)
        return buckets
