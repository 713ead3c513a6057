import logging
from datetime import datetime
from typing import List, NamedTuple, Optional, Sequence

from bidscope.data.dto import TrendBreakdown
from bidscope.domain.models import Bid, Timeframe
from bidscope.logic.buckets import records_within, window_start
from bidscope.logic.rates import success_rate
from bidscope.logic.ratios import mean

logger = logging.getLogger(__name__)


class AmountCategory(NamedTuple):
    label: str
    lower: float  # inclusive
    upper: Optional[float]  # exclusive, None = unbounded

    def contains(self, amount: float) -> bool:
        return amount >= self.lower and (self.upper is None or amount < self.upper)


CATEGORIES = (
    AmountCategory("Small (< $10K)", 0.0, 10_000.0),
    AmountCategory("Medium ($10K - $50K)", 10_000.0, 50_000.0),
    AmountCategory("Large ($50K - $100K)", 50_000.0, 100_000.0),
    AmountCategory("Very Large (> $100K)", 100_000.0, None),
)

# Number of periods analysed for each timeframe token.
LOOKBACK = {
    Timeframe.DAY: 30,
    Timeframe.WEEK: 12,
    Timeframe.MONTH: 6,
    Timeframe.QUARTER: 4,
    Timeframe.YEAR: 3,
}


class TrendCategorizer:
    """
    Splits a company's recent bids into fixed amount ranges and reports count,
    success rate and average amount per range.
    """

    def __init__(self, categories: Sequence[AmountCategory] = CATEGORIES):
        self.categories = tuple(categories)

    @staticmethod
    def resolve_timeframe(timeframe: Optional[str]) -> Timeframe:
        resolved = Timeframe.parse(timeframe)
        if timeframe and resolved.value != str(timeframe).strip().lower():
            logger.debug("unknown timeframe, using month window", extra={"timeframe": timeframe})
        return resolved

    def window_start(self, now: datetime, timeframe: Timeframe) -> datetime:
        return window_start(now, LOOKBACK[timeframe], timeframe)

    def categorize(self, amount: float) -> int:
        for index, category in enumerate(self.categories):
            if category.contains(amount):
                return index
        # amounts below the first lower bound land in the smallest range
        return 0

    def analyze(self, bids: Sequence[Bid], now: datetime, timeframe: Optional[str] = None) -> TrendBreakdown:
        resolved = self.resolve_timeframe(timeframe)
        start = self.window_start(now, resolved)
        recent = records_within(bids, start, now)

        grouped: List[List[Bid]] = [[] for _ in self.categories]
        for bid in recent:
            grouped[self.categorize(bid.amount)].append(bid)

        return TrendBreakdown(
            categories=[c.label for c in self.categories],
            bid_counts=[len(g) for g in grouped],
            success_rates=[success_rate(g) for g in grouped],
            average_values=[mean(b.amount for b in g) for g in grouped],
        )
