from __future__ import annotations

from typing import Generator, Optional

from fastapi import Header, HTTPException

from bidscope.config import settings
from bidscope.data.repositories import SqliteRecordSource
from bidscope.data.storage import Database
from bidscope.logic.clock import SystemClock
from bidscope.services import BidAnalyticsService

# Global/Cached instances
_db_instance: Optional[Database] = None


def get_db() -> Database:
    global _db_instance
    if _db_instance is None:
        _db_instance = Database(settings.paths.db_path)
    return _db_instance


def get_analytics_service() -> Generator[BidAnalyticsService, None, None]:
    source = SqliteRecordSource(db=get_db())
    yield BidAnalyticsService(source=source, clock=SystemClock())


def require_auth(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
):
    token = settings.security.api_token
    if not token:
        return

    if authorization == f"Bearer {token}" or x_api_key == token:
        return

    raise HTTPException(status_code=401, detail="Unauthorized", headers={"WWW-Authenticate": "Bearer"})


def require_query_auth(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
):
    if settings.security.require_auth_on_queries:
        require_auth(authorization=authorization, x_api_key=x_api_key)
