"""Unit tests for arrangement summaries"""

import pytest
from arrangement_gateway.domain.models import (
    ArrangementSummary,
    CustomTermsArrangement,
    FixedMonthlyArrangement,
    OneTimePaymentArrangement,
    PayInFullArrangement,
    PlanType,
    RangeArrangement,
    SettlementArrangement,
)
from arrangement_gateway.domain.summary import plan_type_label, summarize


def test_settlement_with_percentage():
    arrangement = SettlementArrangement(calculated_payoff_amount_cents=50000, calculated_payoff_percentage=50)

    assert summarize(arrangement, 100000) == ArrangementSummary(
        headline="Settle for 50% of balance",
        detail="Pay $500.00 to settle",
    )


def test_settlement_without_percentage():
    arrangement = SettlementArrangement(calculated_payoff_amount_cents=45000)

    summary = summarize(arrangement, 100000)

    assert summary.headline == "Settle for $450.00"
    assert summary.detail is None


def test_settlement_missing_payoff_falls_back():
    summary = summarize(SettlementArrangement(), 100000)

    assert summary.headline == "Settle your balance"
    assert summary.detail == "Contact us for settlement amount"


def test_range_with_computed_fields():
    arrangement = RangeArrangement(
        calculated_monthly_payment_cents=33334,
        calculated_term_months=3,
        calculated_total_amount_cents=100000,
    )

    summary = summarize(arrangement, 100000)

    assert summary.headline == "$333.34 per month"
    assert summary.detail == "3 months • Total: $1,000.00"


def test_fixed_monthly_with_computed_fields():
    arrangement = FixedMonthlyArrangement(
        calculated_monthly_payment_cents=25000,
        calculated_term_months=8,
        calculated_total_amount_cents=200000,
    )

    summary = summarize(arrangement, 200000)

    assert summary.headline == "$250.00 per month"
    assert summary.detail == "8 months • Total: $2,000.00"


def test_monthly_with_partial_detail():
    summary = summarize(RangeArrangement(calculated_monthly_payment_cents=5000), 10000)

    assert summary.headline == "$50.00 per month"
    assert summary.detail is None


@pytest.mark.parametrize(
    "arrangement, headline, detail",
    [
        (
            RangeArrangement(monthly_payment_min_cents=5000, monthly_payment_max_cents=20000, max_term_months=12),
            "$50.00 - $200.00 per month",
            "Up to 12 months",
        ),
        (RangeArrangement(monthly_payment_min_cents=5000), "$50.00 per month", None),
        (RangeArrangement(), "Monthly payment plan", None),
        (FixedMonthlyArrangement(fixed_monthly_payment_cents=25000), "$250.00 per month", "Until paid in full"),
        (FixedMonthlyArrangement(max_term_months=6), "Fixed monthly payment", "Up to 6 months"),
    ],
)
def test_monthly_generic_fallback(arrangement, headline, detail):
    """Test missing computed monthly payment falls back to template fields"""
    summary = summarize(arrangement, 100000)

    assert summary.headline == headline
    assert summary.detail == detail


def test_pay_in_full_with_percentage():
    arrangement = PayInFullArrangement(calculated_payoff_amount_cents=80000, calculated_payoff_percentage=80)

    summary = summarize(arrangement, 100000)

    assert summary.headline == "Pay $800.00 today"
    assert summary.detail == "80% of balance"


def test_pay_in_full_without_percentage():
    summary = summarize(PayInFullArrangement(calculated_payoff_amount_cents=100000), 100000)

    assert summary.headline == "Pay $1,000.00 today"
    assert summary.detail == "Full payment"


def test_pay_in_full_fallback_uses_current_balance():
    assert summarize(PayInFullArrangement(), 123456).headline == "Pay $1,234.56 today"
    assert summarize(PayInFullArrangement(), 0).headline == "Pay in full"


def test_one_time_payment():
    summary = summarize(OneTimePaymentArrangement(calculated_payoff_amount_cents=2500), 100000)

    assert summary.headline == "Minimum payment: $25.00"
    assert summary.detail == "Make a single payment without setting up a plan"


def test_one_time_payment_fallback():
    summary = summarize(OneTimePaymentArrangement(one_time_payment_min_cents=1000), 100000)

    assert summary.headline == "Make a one-time payment"
    assert summary.detail == "Minimum payment: $10.00"


def test_custom_terms_verbatim():
    summary = summarize(CustomTermsArrangement(custom_terms_text="  $75 on the 1st and 15th  "), 100000)

    assert summary.headline == "$75 on the 1st and 15th"
    assert summary.detail is None


def test_custom_terms_missing_text():
    assert summarize(CustomTermsArrangement(), 100000).headline == "Contact us to discuss terms"
    assert summarize(CustomTermsArrangement(custom_terms_text="   "), 100000).headline == "Contact us to discuss terms"


def test_every_plan_type_summarizes_when_empty():
    """Test an empty record of each plan type still renders a headline"""
    for arrangement in (
        RangeArrangement(),
        FixedMonthlyArrangement(),
        PayInFullArrangement(),
        SettlementArrangement(),
        OneTimePaymentArrangement(),
        CustomTermsArrangement(),
    ):
        assert summarize(arrangement, 0).headline


def test_summarize_unknown_type_falls_back():
    assert summarize(object(), 0) == ArrangementSummary(headline="Payment arrangement available")


def test_plan_type_labels():
    assert plan_type_label(PlanType.FIXED_MONTHLY) == "Fixed monthly"
    assert plan_type_label("one_time_payment") == "One-time payment"
    assert plan_type_label(None) == "Range"
    assert plan_type_label("legacy_plan") == "legacy_plan"


def test_settlement_fractional_percentage():
    arrangement = SettlementArrangement(calculated_payoff_amount_cents=33500, calculated_payoff_percentage=33.5)

    assert summarize(arrangement, 100000).headline == "Settle for 33.5% of balance"
