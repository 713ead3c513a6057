from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Union

Number = Union[int, float]


@dataclass
class Bucket:
    """One period of a time series: display label plus the records that fell into it."""
    key: tuple
    label: str
    start: datetime
    items: List[Any] = field(default_factory=list)


@dataclass
class Series:
    """Labels with a parallel list of values, the shape every chart consumes."""
    labels: List[str]
    data: List[Number]

    def to_dict(self) -> Dict[str, Any]:
        return {"labels": list(self.labels), "data": list(self.data)}


@dataclass
class HeadlineStatistics:
    success_rate: int
    success_rate_change: int
    average_bid: int
    average_bid_change: int
    total_bids: int
    total_bids_change: int
    active_bids: int
    active_bids_change: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "successRate": self.success_rate,
            "successRateChange": self.success_rate_change,
            "averageBid": self.average_bid,
            "averageBidChange": self.average_bid_change,
            "totalBids": self.total_bids,
            "totalBidsChange": self.total_bids_change,
            "activeBids": self.active_bids,
            "activeBidsChange": self.active_bids_change,
        }


@dataclass
class PerformanceMetrics:
    average_response_time: float
    win_rate_by_value: int
    competitive_index: float
    average_markup: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "averageResponseTime": self.average_response_time,
            "winRateByValue": self.win_rate_by_value,
            "competitiveIndex": self.competitive_index,
            "averageMarkup": self.average_markup,
        }


@dataclass
class TrendBreakdown:
    """Per amount-category figures, all lists parallel to `categories`."""
    categories: List[str]
    bid_counts: List[int]
    success_rates: List[float]
    average_values: List[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categories": list(self.categories),
            "bidCounts": list(self.bid_counts),
            "successRates": list(self.success_rates),
            "averageValues": list(self.average_values),
        }


@dataclass
class TimelineSummary:
    average_duration: float
    average_budget_variance: float
    total_projects: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "averageDuration": self.average_duration,
            "averageBudgetVariance": self.average_budget_variance,
            "totalProjects": self.total_projects,
        }


@dataclass
class TimelineReport:
    project_names: List[str]
    durations: List[int]
    budgets: List[float]
    actual_costs: List[float]
    budget_variances: List[float]
    summary: TimelineSummary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectNames": list(self.project_names),
            "durations": list(self.durations),
            "budgets": list(self.budgets),
            "actualCosts": list(self.actual_costs),
            "budgetVariances": list(self.budget_variances),
            "summary": self.summary.to_dict(),
        }


@dataclass
class ImportReport:
    """Outcome of loading one records file."""
    source_file: str
    bids: int = 0
    tenders: int = 0
    skipped: bool = False
