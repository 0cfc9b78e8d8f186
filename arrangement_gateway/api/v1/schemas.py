"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, model_validator
from datetime import date
from typing import Any, Dict, List, Optional

from arrangement_gateway.domain.models import PaymentFrequency, PlanType


class ScheduleEntrySchema(BaseModel):
    """Single projected or scheduled payment"""

    date: date
    amount_cents: int
    status: Optional[str] = None


class QuoteRequest(BaseModel):
    """Request body for POST /v1/quote - exactly one of term_months / custom_monthly_cents"""

    balance_cents: int = Field(..., ge=0, description="Current account balance in cents")
    term_months: Optional[int] = Field(None, gt=0, description="Standard term to spread the balance over")
    custom_monthly_cents: Optional[int] = Field(None, ge=0, description="Consumer-entered monthly amount")
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    start_date: Optional[date] = None
    count: Optional[int] = Field(None, ge=0, le=52)
    tenant_id: Optional[str] = None

    @model_validator(mode="after")
    def check_amount_source(self):
        if (self.term_months is None) == (self.custom_monthly_cents is None):
            raise ValueError("Provide exactly one of term_months or custom_monthly_cents")
        return self


class QuoteResponse(BaseModel):
    """Response for POST /v1/quote"""

    monthly_base_cents: int
    payment_cents: int
    frequency: PaymentFrequency
    term_months: Optional[int] = None
    floor_applied: bool
    minimum_monthly_cents: int
    schedule: List[ScheduleEntrySchema]


class ScheduleRequest(BaseModel):
    """Request body for POST /v1/schedule"""

    amount_cents: int = Field(..., ge=0)
    frequency: PaymentFrequency
    start_date: Optional[date] = None
    count: Optional[int] = Field(None, ge=0, le=52)


class ScheduleResponse(BaseModel):
    frequency: PaymentFrequency
    schedule: List[ScheduleEntrySchema]


class SummaryRequest(BaseModel):
    """Request body for POST /v1/summary - arrangement is a loose stored record"""

    arrangement: Dict[str, Any]
    current_balance_cents: int = Field(0, ge=0)


class SummaryResponse(BaseModel):
    plan_type: PlanType
    plan_type_label: str
    headline: str
    detail: Optional[str] = None


class TenantSettingsRequest(BaseModel):
    """Request body for PUT /v1/tenants/{tenant_id}/settings"""

    minimum_monthly_payment_cents: Optional[int] = Field(None, ge=0)
    show_payment_plans: bool = True


class TenantSettingsResponse(BaseModel):
    tenant_id: str
    minimum_monthly_payment_cents: int
    show_payment_plans: bool


class ArrangementOptionRequest(BaseModel):
    """Request body for POST /v1/tenants/{tenant_id}/arrangement-options"""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    plan_type: PlanType = PlanType.RANGE
    min_balance_cents: Optional[int] = Field(None, ge=0)
    max_balance_cents: Optional[int] = Field(None, ge=0)
    monthly_payment_min_cents: Optional[int] = Field(None, ge=0)
    monthly_payment_max_cents: Optional[int] = Field(None, ge=0)
    fixed_monthly_payment_cents: Optional[int] = Field(None, ge=0)
    pay_in_full_amount_cents: Optional[int] = Field(None, ge=0)
    payoff_percentage_basis_points: Optional[int] = Field(None, ge=0, le=10_000)
    one_time_payment_min_cents: Optional[int] = Field(None, ge=0)
    custom_terms_text: Optional[str] = None
    max_term_months: Optional[int] = Field(None, gt=0)
    is_active: bool = True


class ArrangementOptionResponse(ArrangementOptionRequest):
    id: str
    tenant_id: str


class ArrangementOfferResponse(BaseModel):
    """Arrangement option materialized for a specific balance"""

    option_id: str
    name: str
    plan_type: PlanType
    plan_type_label: str
    headline: str
    detail: Optional[str] = None
    calculated_monthly_payment_cents: Optional[int] = None
    calculated_term_months: Optional[int] = None
    calculated_total_amount_cents: Optional[int] = None
    calculated_payoff_amount_cents: Optional[int] = None
    calculated_payoff_percentage: Optional[float] = None
    custom_terms_text: Optional[str] = None


class AcceptArrangementRequest(BaseModel):
    """Request body for POST /v1/tenants/{tenant_id}/arrangements"""

    option_id: str
    account_id: str = Field(..., min_length=1)
    balance_cents: int = Field(..., ge=0)
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    start_date: Optional[date] = None


class ArrangementResponse(BaseModel):
    """Response for accepted arrangements"""

    arrangement_id: str
    tenant_id: str
    account_id: str
    option_id: Optional[str] = None
    plan_type: PlanType
    status: str
    balance_cents: int
    monthly_base_cents: int
    payment_cents: int
    frequency: PaymentFrequency
    term_months: Optional[int] = None
    payments: List[ScheduleEntrySchema]
    created_at: str


class ArrangementOffersResponse(BaseModel):
    """Response for GET /v1/tenants/{tenant_id}/arrangements"""

    assigned: Optional[ArrangementResponse] = None
    available: List[ArrangementOfferResponse]
