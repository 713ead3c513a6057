from typing import Optional

from fastapi import APIRouter, Depends, Query

from bidscope.api.deps import get_analytics_service, require_query_auth
from bidscope.config import settings
from bidscope.services import BidAnalyticsService

router = APIRouter(prefix="/api/analytics/bids", tags=["analytics"], dependencies=[Depends(require_query_auth)])


@router.get("/success-rate/{company_id}")
def success_rate(
    company_id: str,
    months: int = Query(settings.analytics.default_months, ge=1, le=settings.analytics.max_months),
    svc: BidAnalyticsService = Depends(get_analytics_service),
):
    return svc.success_rate_series(company_id, months).to_dict()


@router.get("/volume/{company_id}")
def volume(
    company_id: str,
    months: int = Query(settings.analytics.default_months, ge=1, le=settings.analytics.max_months),
    svc: BidAnalyticsService = Depends(get_analytics_service),
):
    return svc.volume_series(company_id, months).to_dict()


@router.get("/distribution/{company_id}")
def distribution(company_id: str, svc: BidAnalyticsService = Depends(get_analytics_service)):
    return svc.status_distribution(company_id).to_dict()


@router.get("/statistics/{company_id}")
def statistics(company_id: str, svc: BidAnalyticsService = Depends(get_analytics_service)):
    return svc.headline_statistics(company_id).to_dict()


@router.get("/performance/{company_id}")
def performance(company_id: str, svc: BidAnalyticsService = Depends(get_analytics_service)):
    return svc.performance_metrics(company_id).to_dict()


@router.get("/trends/{company_id}")
def trends(
    company_id: str,
    timeframe: str = Query(settings.analytics.default_timeframe, description="day|week|month|quarter|year"),
    svc: BidAnalyticsService = Depends(get_analytics_service),
):
    return svc.trends_by_category(company_id, timeframe).to_dict()


@router.get("/projects/timelines")
def project_timelines(
    project_type: Optional[str] = Query(None, alias="type", description="Substring of the tender title; 'all' disables"),
    svc: BidAnalyticsService = Depends(get_analytics_service),
):
    return svc.project_timelines(project_type).to_dict()
