from datetime import UTC, datetime
from typing import Any

from dateutil.relativedelta import relativedelta

from bidscope.exceptions import DataFormatError


def parse_timestamp(value: Any, field: str = "createdAt") -> datetime:
    """
    Parses an ISO-8601 value into an aware UTC datetime.
    Naive values are taken as UTC. Anything unparsable raises DataFormatError.
    """
    if isinstance(value, datetime):
        ts = value
    else:
        if value is None or not str(value).strip():
            raise DataFormatError(f"Missing timestamp for {field}", field=field, value=value)
        try:
            ts = datetime.fromisoformat(str(value).strip())
        except ValueError as exc:
            raise DataFormatError(f"Unparsable timestamp for {field}: {value!r}", field=field, value=value) from exc
    return as_utc(ts)


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def months_before(moment: datetime, months: int) -> datetime:
    # relativedelta clamps to month end (Mar 31 - 1 month -> Feb 28/29)
    return moment - relativedelta(months=months)


def within(ts: datetime, start: datetime, end: datetime, inclusive: bool = True) -> bool:
    if inclusive:
        return start <= ts <= end
    return start < ts < end


def whole_days_between(start: datetime, end: datetime) -> int:
    """Whole days from start to end, truncated toward zero (negative when end precedes start)."""
    return int((end - start).total_seconds() / 86400)
