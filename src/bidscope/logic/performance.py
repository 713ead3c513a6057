from dataclasses import dataclass
from typing import Sequence

from bidscope.data.dto import PerformanceMetrics
from bidscope.domain.models import Bid
from bidscope.logic.ratios import percent, round_half_up


@dataclass(frozen=True)
class PlaceholderMetrics:
    """
    Figures the current records cannot support yet (no publish times, no
    competitor or cost data). They are reported as configured, never derived.
    """
    average_response_time: float = 2.5
    competitive_index: float = 8.5
    average_markup: float = 15.0


def win_rate_by_value(bids: Sequence[Bid]) -> int:
    total_value = sum(b.amount for b in bids)
    won_value = sum(b.amount for b in bids if b.is_accepted)
    return round_half_up(percent(won_value, total_value))


def performance_metrics(bids: Sequence[Bid], placeholders: PlaceholderMetrics = PlaceholderMetrics()) -> PerformanceMetrics:
    return PerformanceMetrics(
        average_response_time=placeholders.average_response_time,
        win_rate_by_value=win_rate_by_value(bids),
        competitive_index=placeholders.competitive_index,
        average_markup=placeholders.average_markup,
    )
