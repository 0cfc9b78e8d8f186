"""Payment arrangement arithmetic: minimum floor, term payments, frequency proration"""

from typing import Dict

from arrangement_gateway.domain.models import PaymentFrequency
from arrangement_gateway.domain.money import DEFAULT_ROUNDING_POLICY, RoundingPolicy, divide

DEFAULT_MINIMUM_MONTHLY_CENTS = 5000  # $50
STANDARD_TERMS = (3, 6, 12)
MONTHS_PER_YEAR = 12

# Payment periods per year for each cadence
PERIODS_PER_YEAR: Dict[PaymentFrequency, int] = {
    PaymentFrequency.WEEKLY: 52,
    PaymentFrequency.BIWEEKLY: 26,
    PaymentFrequency.MONTHLY: 12,
}


def normalize(requested_monthly_cents: int, minimum_monthly_cents: int = DEFAULT_MINIMUM_MONTHLY_CENTS) -> int:
    """
    Enforce the tenant's minimum monthly payment.

    Example:
        normalize(3000, 5000) → 5000
        normalize(33334, 5000) → 33334
    """
    return max(requested_monthly_cents, minimum_monthly_cents)


def calculate_term_payment(
    balance_cents: int,
    term_months: int,
    minimum_monthly_cents: int = DEFAULT_MINIMUM_MONTHLY_CENTS,
    policy: RoundingPolicy = DEFAULT_ROUNDING_POLICY,
) -> int:
    """
    Steady monthly installment that retires the balance within the term.

    The division rounds up so that installment * term >= balance. The result is
    then raised to the minimum monthly payment if needed.

    Example:
        $1,000 over 3 months → ceil(100000 / 3) = 33334 ($333.34/month)
    """
    if term_months <= 0:
        raise ValueError("term_months must be positive")

    monthly = divide(balance_cents, term_months, policy)
    return normalize(monthly, minimum_monthly_cents)


def convert_to_frequency(
    monthly_cents: int,
    frequency: PaymentFrequency,
    policy: RoundingPolicy = DEFAULT_ROUNDING_POLICY,
) -> int:
    """
    Prorate a monthly amount to another cadence through its annual total.

    weekly = ceil(monthly * 12 / 52), biweekly = ceil(monthly * 12 / 26),
    monthly is returned unchanged. Always pass the stored monthly base, never
    an amount that was already converted.

    Example:
        convert_to_frequency(33334, BIWEEKLY) → ceil(400008 / 26) = 15385
    """
    frequency = PaymentFrequency(frequency)
    if frequency is PaymentFrequency.MONTHLY:
        return monthly_cents

    return divide(monthly_cents * MONTHS_PER_YEAR, PERIODS_PER_YEAR[frequency], policy)
