"""Arrangement summaries - headline/detail text shown to consumers"""

from typing import Optional

from arrangement_gateway.domain.models import (
    Arrangement,
    ArrangementSummary,
    CustomTermsArrangement,
    FixedMonthlyArrangement,
    OneTimePaymentArrangement,
    PayInFullArrangement,
    PlanType,
    RangeArrangement,
    SettlementArrangement,
)
from arrangement_gateway.domain.money import format_currency_from_cents, format_percentage

PLAN_TYPE_LABELS = {
    PlanType.RANGE: "Range",
    PlanType.FIXED_MONTHLY: "Fixed monthly",
    PlanType.PAY_IN_FULL: "Pay in full",
    PlanType.SETTLEMENT: "Settlement",
    PlanType.ONE_TIME_PAYMENT: "One-time payment",
    PlanType.CUSTOM_TERMS: "Custom terms",
}

DETAIL_SEPARATOR = " • "


def plan_type_label(plan_type: Optional[str]) -> str:
    """Display label for a plan type; missing values read as range, unknown values pass through"""
    if plan_type is None:
        return PLAN_TYPE_LABELS[PlanType.RANGE]
    try:
        return PLAN_TYPE_LABELS[PlanType(plan_type)]
    except ValueError:
        return str(plan_type)


def summarize(arrangement: Arrangement, current_balance_cents: int) -> ArrangementSummary:
    """
    Produce the headline/detail pair for an arrangement.

    Uses the computed fields when they are present. A partially-populated
    record falls back to a generic summary instead of raising.
    """
    if isinstance(arrangement, (RangeArrangement, FixedMonthlyArrangement)):
        return _summarize_monthly(arrangement, current_balance_cents)
    if isinstance(arrangement, PayInFullArrangement):
        return _summarize_pay_in_full(arrangement, current_balance_cents)
    if isinstance(arrangement, SettlementArrangement):
        return _summarize_settlement(arrangement, current_balance_cents)
    if isinstance(arrangement, OneTimePaymentArrangement):
        return _summarize_one_time(arrangement, current_balance_cents)
    if isinstance(arrangement, CustomTermsArrangement):
        text = (arrangement.custom_terms_text or "").strip()
        return ArrangementSummary(headline=text or "Contact us to discuss terms")

    return generic_summary(arrangement, current_balance_cents)


def _summarize_monthly(arrangement, current_balance_cents: int) -> ArrangementSummary:
    monthly = arrangement.calculated_monthly_payment_cents
    if monthly is None:
        return generic_summary(arrangement, current_balance_cents)

    detail_parts = []
    if arrangement.calculated_term_months is not None:
        detail_parts.append(f"{arrangement.calculated_term_months} months")
    if arrangement.calculated_total_amount_cents is not None:
        detail_parts.append(f"Total: {format_currency_from_cents(arrangement.calculated_total_amount_cents)}")

    return ArrangementSummary(
        headline=f"{format_currency_from_cents(monthly)} per month",
        detail=DETAIL_SEPARATOR.join(detail_parts) or None,
    )


def _summarize_pay_in_full(arrangement: PayInFullArrangement, current_balance_cents: int) -> ArrangementSummary:
    payoff = arrangement.calculated_payoff_amount_cents
    if payoff is None:
        return generic_summary(arrangement, current_balance_cents)

    percentage = arrangement.calculated_payoff_percentage
    detail = f"{format_percentage(percentage)}% of balance" if percentage is not None else "Full payment"
    return ArrangementSummary(headline=f"Pay {format_currency_from_cents(payoff)} today", detail=detail)


def _summarize_settlement(arrangement: SettlementArrangement, current_balance_cents: int) -> ArrangementSummary:
    payoff = arrangement.calculated_payoff_amount_cents
    if payoff is None:
        return generic_summary(arrangement, current_balance_cents)

    percentage = arrangement.calculated_payoff_percentage
    if percentage is None:
        return ArrangementSummary(headline=f"Settle for {format_currency_from_cents(payoff)}")

    return ArrangementSummary(
        headline=f"Settle for {format_percentage(percentage)}% of balance",
        detail=f"Pay {format_currency_from_cents(payoff)} to settle",
    )


def _summarize_one_time(arrangement: OneTimePaymentArrangement, current_balance_cents: int) -> ArrangementSummary:
    payoff = arrangement.calculated_payoff_amount_cents
    if payoff is None:
        return generic_summary(arrangement, current_balance_cents)

    return ArrangementSummary(
        headline=f"Minimum payment: {format_currency_from_cents(payoff)}",
        detail="Make a single payment without setting up a plan",
    )


def generic_summary(arrangement: Arrangement, current_balance_cents: int) -> ArrangementSummary:
    """
    Less specific summary built from template fields only.

    Used when the computed fields are missing; always returns something displayable.
    """
    max_term = getattr(arrangement, "max_term_months", None)
    term_detail = f"Up to {max_term} months" if max_term and max_term > 0 else None

    if isinstance(arrangement, RangeArrangement):
        low = arrangement.monthly_payment_min_cents
        high = arrangement.monthly_payment_max_cents
        if low is not None and high is not None:
            headline = f"{format_currency_from_cents(low)} - {format_currency_from_cents(high)} per month"
        elif low is not None or high is not None:
            headline = f"{format_currency_from_cents(low if low is not None else high)} per month"
        else:
            headline = "Monthly payment plan"
        return ArrangementSummary(headline=headline, detail=term_detail)

    if isinstance(arrangement, FixedMonthlyArrangement):
        amount = arrangement.fixed_monthly_payment_cents
        headline = (
            f"{format_currency_from_cents(amount)} per month" if amount is not None else "Fixed monthly payment"
        )
        return ArrangementSummary(headline=headline, detail=term_detail or "Until paid in full")

    if isinstance(arrangement, PayInFullArrangement):
        if current_balance_cents > 0:
            headline = f"Pay {format_currency_from_cents(current_balance_cents)} today"
        else:
            headline = "Pay in full"
        return ArrangementSummary(headline=headline, detail="Full payment")

    if isinstance(arrangement, SettlementArrangement):
        return ArrangementSummary(headline="Settle your balance", detail="Contact us for settlement amount")

    if isinstance(arrangement, OneTimePaymentArrangement):
        minimum = arrangement.one_time_payment_min_cents
        detail = f"Minimum payment: {format_currency_from_cents(minimum)}" if minimum is not None else None
        return ArrangementSummary(headline="Make a one-time payment", detail=detail)

    return ArrangementSummary(headline="Payment arrangement available")
