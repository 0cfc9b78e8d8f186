"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Union


class PlanType(str, Enum):
    """Billing strategy of an arrangement"""

    RANGE = "range"
    FIXED_MONTHLY = "fixed_monthly"
    PAY_IN_FULL = "pay_in_full"
    SETTLEMENT = "settlement"
    ONE_TIME_PAYMENT = "one_time_payment"
    CUSTOM_TERMS = "custom_terms"


class PaymentFrequency(str, Enum):
    """Cadence of recurring payments"""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


# Statuses under which an account counts as already on an arrangement
ACTIVE_ARRANGEMENT_STATUSES = frozenset({"active", "pending", "paused"})


@dataclass(frozen=True)
class PaymentScheduleEntry:
    """Single projected payment in a schedule preview"""

    date: date
    amount_cents: int


@dataclass(frozen=True)
class ArrangementSummary:
    """Human-readable headline/detail pair for an arrangement"""

    headline: str
    detail: Optional[str] = None


# Arrangement variants. Each carries only the fields meaningful for its plan type;
# every computed field is optional because records may be partially populated.


@dataclass(frozen=True)
class RangeArrangement:
    """Monthly plan with a tenant-configured payment range"""

    name: str = ""
    id: Optional[str] = None
    min_balance_cents: Optional[int] = None
    max_balance_cents: Optional[int] = None
    monthly_payment_min_cents: Optional[int] = None
    monthly_payment_max_cents: Optional[int] = None
    max_term_months: Optional[int] = None
    calculated_monthly_payment_cents: Optional[int] = None
    calculated_term_months: Optional[int] = None
    calculated_total_amount_cents: Optional[int] = None
    plan_type: PlanType = PlanType.RANGE


@dataclass(frozen=True)
class FixedMonthlyArrangement:
    """Monthly plan with a single fixed payment"""

    name: str = ""
    id: Optional[str] = None
    min_balance_cents: Optional[int] = None
    max_balance_cents: Optional[int] = None
    fixed_monthly_payment_cents: Optional[int] = None
    max_term_months: Optional[int] = None
    calculated_monthly_payment_cents: Optional[int] = None
    calculated_term_months: Optional[int] = None
    calculated_total_amount_cents: Optional[int] = None
    plan_type: PlanType = PlanType.FIXED_MONTHLY


@dataclass(frozen=True)
class PayInFullArrangement:
    """Single payoff of the balance (possibly discounted)"""

    name: str = ""
    id: Optional[str] = None
    min_balance_cents: Optional[int] = None
    max_balance_cents: Optional[int] = None
    calculated_payoff_amount_cents: Optional[int] = None
    calculated_payoff_percentage: Optional[float] = None
    plan_type: PlanType = PlanType.PAY_IN_FULL


@dataclass(frozen=True)
class SettlementArrangement:
    """Settle the account for a percentage of the balance"""

    name: str = ""
    id: Optional[str] = None
    min_balance_cents: Optional[int] = None
    max_balance_cents: Optional[int] = None
    calculated_payoff_amount_cents: Optional[int] = None
    calculated_payoff_percentage: Optional[float] = None
    plan_type: PlanType = PlanType.SETTLEMENT


@dataclass(frozen=True)
class OneTimePaymentArrangement:
    """Single payment of any amount above a floor, without a plan"""

    name: str = ""
    id: Optional[str] = None
    min_balance_cents: Optional[int] = None
    max_balance_cents: Optional[int] = None
    one_time_payment_min_cents: Optional[int] = None
    calculated_payoff_amount_cents: Optional[int] = None
    plan_type: PlanType = PlanType.ONE_TIME_PAYMENT


@dataclass(frozen=True)
class CustomTermsArrangement:
    """Free-text terms negotiated with the agency"""

    name: str = ""
    id: Optional[str] = None
    min_balance_cents: Optional[int] = None
    max_balance_cents: Optional[int] = None
    custom_terms_text: Optional[str] = None
    plan_type: PlanType = PlanType.CUSTOM_TERMS


Arrangement = Union[
    RangeArrangement,
    FixedMonthlyArrangement,
    PayInFullArrangement,
    SettlementArrangement,
    OneTimePaymentArrangement,
    CustomTermsArrangement,
]


@dataclass(frozen=True)
class ArrangementTemplate:
    """Tenant-configured arrangement option, matched against an account balance"""

    plan_type: PlanType
    name: str = ""
    id: Optional[str] = None
    min_balance_cents: Optional[int] = None
    max_balance_cents: Optional[int] = None
    monthly_payment_min_cents: Optional[int] = None
    monthly_payment_max_cents: Optional[int] = None
    fixed_monthly_payment_cents: Optional[int] = None
    pay_in_full_amount_cents: Optional[int] = None
    payoff_percentage_basis_points: Optional[int] = None
    one_time_payment_min_cents: Optional[int] = None
    custom_terms_text: Optional[str] = None
    max_term_months: Optional[int] = None
