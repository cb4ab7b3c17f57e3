# schemas/submission.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Optional, List

from pydantic import BaseModel, Field, field_validator

from core import config
from schemas.base import ORMBase, CamelInput
from schemas.enums import (
    ApprovalStatus,
    ReviewDecision,
    Marketplace,
    ReportingPeriod,
    Currency,
)

# money columns are numeric(14, 2)
MONEY_MAX = 999_999_999_999.99

# required money: a real number (no numeric strings, no bools), finite, >= 0
RequiredMoney = Annotated[float, Field(ge=0, le=MONEY_MAX, strict=True, allow_inf_nan=False)]
Money = Annotated[float, Field(ge=0, le=MONEY_MAX, allow_inf_nan=False)]
Count = Annotated[int, Field(ge=0)]
Percent = Annotated[float, Field(ge=0, le=100, allow_inf_nan=False)]


# =========================
# Create
# =========================
class SubmissionCreate(CamelInput):
    """
    POST /submissions body.

    - revenue / cost required, everything else optional
    - user_id, profit, status, approved_at are filled by the server
      (a client supplied status is ignored)
    """

    # financials (required)
    revenue: RequiredMoney
    cost: RequiredMoney

    # product / context
    product_name: Optional[str] = None
    product_category: Optional[str] = None
    product_brand: Optional[str] = None
    product_sku: Optional[str] = None
    marketplace: Marketplace = Marketplace(config.DEFAULT_MARKETPLACE)
    reporting_period: ReportingPeriod = ReportingPeriod(config.DEFAULT_REPORTING_PERIOD)
    currency: Currency = Currency(config.DEFAULT_CURRENCY)

    # extended financials
    cogs: Optional[Money] = None
    amazon_fees: Optional[Money] = None
    units_sold: Optional[Count] = None
    average_selling_price: Optional[Money] = None

    # ppc
    ppc_spend: Optional[Money] = None
    ppc_sales: Optional[Money] = None
    total_clicks: Optional[Count] = None
    total_impressions: Optional[Count] = None
    acos: Optional[Annotated[float, Field(ge=0, allow_inf_nan=False)]] = None
    tacos: Optional[Annotated[float, Field(ge=0, allow_inf_nan=False)]] = None

    # performance
    conversion_rate: Optional[Percent] = None
    sessions: Optional[Count] = None
    page_views: Optional[Count] = None
    bsr: Optional[Count] = None
    reviews_count: Count = 0
    average_rating: Optional[Annotated[float, Field(ge=0, le=5, allow_inf_nan=False)]] = None
    inventory_value: Optional[Money] = None
    return_rate: Optional[Percent] = None

    # workflow
    date: Optional[datetime] = None
    note: Optional[str] = None
    proof_url: Optional[str] = None

    @field_validator(
        "product_name", "product_category", "product_brand", "product_sku", "note", "proof_url",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("marketplace", "reporting_period", "currency", mode="before")
    @classmethod
    def _default_when_empty(cls, v, info):
        if v is None or (isinstance(v, str) and not v.strip()):
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("reviews_count", mode="before")
    @classmethod
    def _reviews_default(cls, v):
        return 0 if v is None else v

    @field_validator("date")
    @classmethod
    def _date_aware(cls, v: Optional[datetime]) -> Optional[datetime]:
        # naive timestamps are taken as UTC
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


# =========================
# Update (admin review)
# =========================
class SubmissionStatusUpdate(BaseModel):
    status: ReviewDecision


# =========================
# Response
# =========================
class ProfileBrief(ORMBase):
    name: str
    discord: str


class SubmissionResponse(ORMBase):
    id: str
    user_id: str

    revenue: float
    cost: float
    profit: float

    product_name: Optional[str] = None
    product_category: Optional[str] = None
    product_brand: Optional[str] = None
    product_sku: Optional[str] = None
    marketplace: str
    reporting_period: str
    currency: str

    cogs: Optional[float] = None
    amazon_fees: Optional[float] = None
    units_sold: Optional[int] = None
    average_selling_price: Optional[float] = None

    ppc_spend: Optional[float] = None
    ppc_sales: Optional[float] = None
    total_clicks: Optional[int] = None
    total_impressions: Optional[int] = None
    acos: Optional[float] = None
    tacos: Optional[float] = None
    profit_margin: Optional[float] = None

    conversion_rate: Optional[float] = None
    sessions: Optional[int] = None
    page_views: Optional[int] = None
    bsr: Optional[int] = None
    reviews_count: int = 0
    average_rating: Optional[float] = None
    inventory_value: Optional[float] = None
    return_rate: Optional[float] = None

    status: ApprovalStatus
    date: datetime
    note: Optional[str] = None
    proof_url: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class SubmissionWithProfile(SubmissionResponse):
    """admin review list: submission + owner's display name / handle"""
    profile: ProfileBrief


class SubmissionEnvelope(BaseModel):
    submission: SubmissionResponse


class SubmissionListResponse(BaseModel):
    submissions: List[SubmissionWithProfile]


class MessageResponse(BaseModel):
    message: str
