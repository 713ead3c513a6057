from typing import Callable, List, Optional, Sequence

from bidscope.data.dto import TimelineReport, TimelineSummary
from bidscope.domain.models import Bid, Tender
from bidscope.exceptions import DataFormatError, DivisionByZeroError
from bidscope.logic.ratios import mean
from bidscope.logic.timestamps import parse_timestamp, whole_days_between

BidLookup = Callable[[Sequence[str]], Sequence[Bid]]


def matches_project_type(tender: Tender, project_type: Optional[str]) -> bool:
    """Case-insensitive title match; empty or 'all' matches everything."""
    if not project_type or project_type.strip().lower() == "all":
        return True
    return project_type.lower() in tender.title.lower()


def first_accepted_bid(bids: Sequence[Bid]) -> Optional[Bid]:
    # Record sources return bids in tender order; the first accepted one wins.
    return next((b for b in bids if b.is_accepted), None)


def budget_variance(tender: Tender, actual_cost: float) -> float:
    if tender.budget == 0:
        raise DivisionByZeroError(
            f"Tender {tender.id} has a zero budget; variance is undefined",
            tender_id=tender.id,
        )
    return (actual_cost - tender.budget) / tender.budget * 100


class TimelineAnalyzer:
    """
    Derives project duration (tender creation to the accepted bid's proposed
    deadline) and budget variance for every tender that has an accepted bid.
    """

    def __init__(self, bid_lookup: BidLookup):
        self.bid_lookup = bid_lookup

    def analyze(self, tenders: Sequence[Tender], project_type: Optional[str] = None) -> TimelineReport:
        names: List[str] = []
        durations: List[int] = []
        budgets: List[float] = []
        costs: List[float] = []
        variances: List[float] = []

        for tender in tenders:
            if not matches_project_type(tender, project_type):
                continue
            if not tender.bid_ids:
                continue
            accepted = first_accepted_bid(self.bid_lookup(tender.bid_ids))
            if accepted is None:
                continue
            if not accepted.proposed_deadline:
                raise DataFormatError(
                    f"Accepted bid {accepted.id} has no proposedDeadline",
                    field="proposedDeadline",
                    value=None,
                )

            created = parse_timestamp(tender.created_at, field="createdAt")
            deadline = parse_timestamp(accepted.proposed_deadline, field="proposedDeadline")

            names.append(tender.title)
            durations.append(whole_days_between(created, deadline))
            budgets.append(tender.budget)
            costs.append(accepted.amount)
            variances.append(budget_variance(tender, accepted.amount))

        return TimelineReport(
            project_names=names,
            durations=durations,
            budgets=budgets,
            actual_costs=costs,
            budget_variances=variances,
            summary=TimelineSummary(
                average_duration=mean(durations),
                average_budget_variance=mean(variances),
                total_projects=len(names),
            ),
        )
