"""Consumer payment selection state and its transitions"""

from dataclasses import dataclass, replace
from typing import Optional

from arrangement_gateway.domain.calculator import (
    DEFAULT_MINIMUM_MONTHLY_CENTS,
    calculate_term_payment,
    convert_to_frequency,
    normalize,
)
from arrangement_gateway.domain.models import PaymentFrequency


@dataclass(frozen=True)
class PaymentSelection:
    """
    What the consumer has picked before submitting.

    monthly_base_cents is the only stored amount. The per-payment amount is
    always derived from it, so switching frequency back and forth never drifts.
    """

    monthly_base_cents: int = 0
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    selected_term: Optional[int] = None  # None means a custom amount was entered

    @property
    def payment_cents(self) -> int:
        return convert_to_frequency(self.monthly_base_cents, self.frequency)


@dataclass(frozen=True)
class SelectionResult:
    """New selection state plus whether the minimum payment floor raised the amount"""

    state: PaymentSelection
    floor_applied: bool = False


def select_term(
    state: PaymentSelection,
    balance_cents: int,
    term_months: int,
    minimum_monthly_cents: int = DEFAULT_MINIMUM_MONTHLY_CENTS,
) -> SelectionResult:
    """Pick a standard term; monthly base and term are replaced together"""
    monthly = calculate_term_payment(balance_cents, term_months, minimum_monthly_cents)
    raw = calculate_term_payment(balance_cents, term_months, 0)
    return SelectionResult(
        state=replace(state, monthly_base_cents=monthly, selected_term=term_months),
        floor_applied=monthly > raw,
    )


def enter_custom_amount(
    state: PaymentSelection,
    monthly_cents: int,
    minimum_monthly_cents: int = DEFAULT_MINIMUM_MONTHLY_CENTS,
) -> SelectionResult:
    """Consumer typed a monthly amount; clears any selected term"""
    monthly = normalize(monthly_cents, minimum_monthly_cents)
    return SelectionResult(
        state=replace(state, monthly_base_cents=monthly, selected_term=None),
        floor_applied=monthly > monthly_cents,
    )


def change_frequency(state: PaymentSelection, frequency: PaymentFrequency) -> SelectionResult:
    """Switch cadence; the monthly base is left untouched"""
    return SelectionResult(state=replace(state, frequency=PaymentFrequency(frequency)))
