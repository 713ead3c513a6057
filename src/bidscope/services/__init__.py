from bidscope.services.analytics import BidAnalyticsService

__all__ = ["BidAnalyticsService"]
