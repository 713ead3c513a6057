import math
from typing import Iterable, Union

Number = Union[int, float]


def percent(part: Number, whole: Number) -> float:
    """100 * part / whole, or 0.0 when whole is zero."""
    if not whole:
        return 0.0
    return part / whole * 100


def percent_change(current: Number, baseline: Number) -> float:
    """Relative change against the baseline in percent; a zero baseline reports no change."""
    if baseline == 0:
        return 0.0
    return (current - baseline) / baseline * 100


def mean(values: Iterable[Number]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def round_half_up(value: Number) -> int:
    # Dashboard figures round .5 away from the floor, never to even.
    return int(math.floor(value + 0.5))
