from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class BidStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Timeframe(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Timeframe":
        """Unknown or empty tokens fall back to MONTH."""
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.MONTH


class _Record(BaseModel):
    # Records arrive camelCase from the dashboard/import files, snake_case from Python callers.
    model_config = ConfigDict(populate_by_name=True)

    @staticmethod
    def _iso(value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        return value


class Bid(_Record):
    """
    An offer by a company against a tender.
    Timestamps stay as the raw strings supplied by the record source; the engine parses them.
    """
    id: str
    company_id: str = Field(alias="companyId")
    tender_id: Optional[str] = Field(default=None, alias="tenderId")
    amount: float = Field(ge=0)
    status: str = BidStatus.PENDING.value
    created_at: str = Field(alias="createdAt")
    proposed_deadline: Optional[str] = Field(default=None, alias="proposedDeadline")

    @field_validator("created_at", "proposed_deadline", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Any:
        return cls._iso(value)

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        if isinstance(value, BidStatus):
            return value.value
        return value

    @property
    def is_accepted(self) -> bool:
        return self.status == BidStatus.ACCEPTED.value

    @property
    def is_pending(self) -> bool:
        return self.status == BidStatus.PENDING.value


class Tender(_Record):
    """A procurement request; `bid_ids` keeps the order the record source stored them in."""
    id: str
    title: str
    description: str = ""
    budget: float
    deadline: Optional[str] = None
    status: str = "open"
    created_at: str = Field(alias="createdAt")
    bid_ids: list[str] = Field(default_factory=list, alias="bidIds")
    bids_count: Optional[int] = Field(default=None, alias="bidsCount")
    lowest_bid: Optional[float] = Field(default=None, alias="lowestBid")

    @field_validator("created_at", "deadline", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Any:
        return cls._iso(value)

    @field_validator("bid_ids", mode="before")
    @classmethod
    def _coerce_bid_ids(cls, value: Any) -> Any:
        if value is None:
            return []
        return value

    @model_validator(mode="after")
    def _check_bids_count(self) -> "Tender":
        if self.bids_count is None:
            self.bids_count = len(self.bid_ids)
        elif self.bids_count != len(self.bid_ids):
            raise ValueError(
                f"bidsCount={self.bids_count} does not match {len(self.bid_ids)} associated bids"
            )
        return self
