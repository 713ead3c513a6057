import logging
from typing import Any, Dict, Optional

from bidscope.config import settings
from bidscope.data.dto import (
    HeadlineStatistics,
    PerformanceMetrics,
    Series,
    TimelineReport,
    TrendBreakdown,
)
from bidscope.data.repositories import RecordSource
from bidscope.logic.clock import Clock, SystemClock
from bidscope.logic.comparator import headline_statistics
from bidscope.logic.performance import PlaceholderMetrics, performance_metrics
from bidscope.logic.rates import status_distribution, success_rate_series, volume_series
from bidscope.logic.timelines import TimelineAnalyzer
from bidscope.logic.trends import TrendCategorizer

logger = logging.getLogger(__name__)


class BidAnalyticsService:
    """
    Entry point for dashboard aggregates.

    Each call pulls a fresh snapshot from the record source, samples the clock
    once, and hands both to a stateless calculator. Nothing is cached between
    calls and the snapshot is never written back.
    """

    def __init__(
        self,
        source: RecordSource,
        clock: Optional[Clock] = None,
        placeholders: Optional[PlaceholderMetrics] = None,
    ):
        self.source = source
        self.clock = clock or SystemClock()
        self.placeholders = placeholders or PlaceholderMetrics(
            average_response_time=settings.analytics.average_response_time,
            competitive_index=settings.analytics.competitive_index,
            average_markup=settings.analytics.average_markup,
        )
        self.trends = TrendCategorizer()

    def success_rate_series(self, company_id: str, months: Optional[int] = None) -> Series:
        months = settings.analytics.default_months if months is None else months
        bids = self.source.fetch_bids_by_company(company_id)
        logger.debug("success rate series", extra={"company_id": company_id, "months": months, "bids": len(bids)})
        return success_rate_series(bids, self.clock.now(), months)

    def volume_series(self, company_id: str, months: Optional[int] = None) -> Series:
        months = settings.analytics.default_months if months is None else months
        bids = self.source.fetch_bids_by_company(company_id)
        logger.debug("volume series", extra={"company_id": company_id, "months": months, "bids": len(bids)})
        return volume_series(bids, self.clock.now(), months)

    def status_distribution(self, company_id: str) -> Series:
        return status_distribution(self.source.fetch_bids_by_company(company_id))

    def headline_statistics(self, company_id: str) -> HeadlineStatistics:
        bids = self.source.fetch_bids_by_company(company_id)
        return headline_statistics(bids, self.clock.now())

    def performance_metrics(self, company_id: str) -> PerformanceMetrics:
        return performance_metrics(self.source.fetch_bids_by_company(company_id), self.placeholders)

    def trends_by_category(self, company_id: str, timeframe: Optional[str] = None) -> TrendBreakdown:
        timeframe = timeframe or settings.analytics.default_timeframe
        bids = self.source.fetch_bids_by_company(company_id)
        logger.debug("trends by category", extra={"company_id": company_id, "timeframe": timeframe})
        return self.trends.analyze(bids, self.clock.now(), timeframe)

    def project_timelines(self, project_type: Optional[str] = None) -> TimelineReport:
        tenders = self.source.fetch_all_tenders()
        report = TimelineAnalyzer(self.source.fetch_bids_by_ids).analyze(tenders, project_type)
        logger.info(
            "project timelines computed",
            extra={"project_type": project_type, "tenders": len(tenders), "projects": report.summary.total_projects},
        )
        return report

    def company_report(
        self,
        company_id: str,
        months: Optional[int] = None,
        timeframe: Optional[str] = None,
    ) -> Dict[str, Any]:
        """All company aggregates in one payload, keyed like the HTTP routes."""
        return {
            "companyId": company_id,
            "successRate": self.success_rate_series(company_id, months).to_dict(),
            "volume": self.volume_series(company_id, months).to_dict(),
            "distribution": self.status_distribution(company_id).to_dict(),
            "statistics": self.headline_statistics(company_id).to_dict(),
            "performance": self.performance_metrics(company_id).to_dict(),
            "trends": self.trends_by_category(company_id, timeframe).to_dict(),
        }
