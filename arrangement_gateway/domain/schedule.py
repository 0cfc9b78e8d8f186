"""Payment schedule preview for recurring arrangements"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterator, List, Optional

from arrangement_gateway.domain.exceptions import InvalidScheduleError
from arrangement_gateway.domain.models import PaymentFrequency, PaymentScheduleEntry
from arrangement_gateway.domain.money import divide
from arrangement_gateway.utils.date_utils import add_days, add_months

DEFAULT_PREVIEW_COUNT = 4

STEP_DAYS = {
    PaymentFrequency.WEEKLY: 7,
    PaymentFrequency.BIWEEKLY: 14,
    PaymentFrequency.MONTHLY: 30,
}


class MonthlyStep(str, Enum):
    """How monthly payments advance between entries"""

    FIXED_30_DAYS = "fixed_30_days"
    CALENDAR_MONTH = "calendar_month"


@dataclass(frozen=True)
class PaymentSchedule:
    """
    Lazy, finite, restartable preview of upcoming payments.

    Nothing is computed until iterated, and every iteration starts again from
    the first payment. This is a preview only; the billing schedule of record
    is the one persisted when an arrangement is accepted.
    """

    amount_cents: int
    frequency: PaymentFrequency
    start_date: date
    count: int = DEFAULT_PREVIEW_COUNT
    monthly_step: MonthlyStep = MonthlyStep.FIXED_30_DAYS

    def due_date(self, index: int) -> date:
        """Due date of the index-th payment (0-based)"""
        if self.frequency is PaymentFrequency.MONTHLY and self.monthly_step is MonthlyStep.CALENDAR_MONTH:
            return add_months(self.start_date, index)
        return add_days(self.start_date, index * STEP_DAYS[self.frequency])

    def __iter__(self) -> Iterator[PaymentScheduleEntry]:
        for i in range(self.count):
            yield PaymentScheduleEntry(date=self.due_date(i), amount_cents=self.amount_cents)

    def __len__(self) -> int:
        return self.count

    def to_list(self) -> List[PaymentScheduleEntry]:
        return list(self)


def generate_schedule(
    amount_cents: int,
    frequency: PaymentFrequency,
    start_date: Optional[date] = None,
    count: int = DEFAULT_PREVIEW_COUNT,
    monthly_step: MonthlyStep = MonthlyStep.FIXED_30_DAYS,
) -> PaymentSchedule:
    """
    Project the next `count` payments of a fixed amount.

    Requirements:
    - First payment falls on start_date (default: today)
    - Weekly +7 days, biweekly +14 days, monthly +30 days per payment
      (or true calendar months with MonthlyStep.CALENDAR_MONTH)
    - Every entry carries the same amount; no balance reduction is modeled

    Example:
        generate_schedule(15385, BIWEEKLY, date(2025, 1, 1))
        → 2025-01-01, 2025-01-15, 2025-01-29, 2025-02-12, each $153.85
    """
    if count < 0:
        raise InvalidScheduleError(f"Schedule count must be non-negative, got {count}")

    if start_date is None:
        start_date = date.today()

    return PaymentSchedule(
        amount_cents=amount_cents,
        frequency=PaymentFrequency(frequency),
        start_date=start_date,
        count=count,
        monthly_step=MonthlyStep(monthly_step),
    )


def build_payment_plan(
    balance_cents: int,
    payment_cents: int,
    frequency: PaymentFrequency,
    start_date: Optional[date] = None,
    monthly_step: MonthlyStep = MonthlyStep.FIXED_30_DAYS,
) -> List[PaymentScheduleEntry]:
    """
    Full schedule that retires the balance at a steady payment.

    Unlike the preview, the number of payments follows from the balance and
    the last payment is reduced to whatever remains.

    Example:
        $1,000.00 at $333.34 monthly → [33334, 33334, 33332]
    """
    if balance_cents <= 0 or payment_cents <= 0:
        return []

    count = divide(balance_cents, payment_cents)
    entries = generate_schedule(payment_cents, frequency, start_date, count, monthly_step).to_list()

    # Last payment covers only what remains
    remainder = balance_cents - payment_cents * (count - 1)
    entries[-1] = PaymentScheduleEntry(date=entries[-1].date, amount_cents=remainder)
    return entries
