"""Arrangement templates: balance matching, materialization and record parsing"""

import dataclasses
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

from arrangement_gateway.domain.calculator import (
    DEFAULT_MINIMUM_MONTHLY_CENTS,
    calculate_term_payment,
    convert_to_frequency,
    normalize,
)
from arrangement_gateway.domain.exceptions import ArrangementNotAcceptableError
from arrangement_gateway.domain.models import (
    Arrangement,
    ArrangementTemplate,
    CustomTermsArrangement,
    FixedMonthlyArrangement,
    OneTimePaymentArrangement,
    PayInFullArrangement,
    PaymentFrequency,
    PaymentScheduleEntry,
    PlanType,
    RangeArrangement,
    SettlementArrangement,
)
from arrangement_gateway.domain.money import divide
from arrangement_gateway.domain.schedule import MonthlyStep, build_payment_plan, generate_schedule

DEFAULT_TERM_MONTHS = 12
BASIS_POINTS = 10_000
MAX_PLAN_PAYMENTS = 520  # ten years of weekly payments

TEXT_FIELDS = ("name", "id", "custom_terms_text")
FRACTIONAL_FIELDS = ("calculated_payoff_percentage",)

ARRANGEMENT_TYPES = {
    PlanType.RANGE: RangeArrangement,
    PlanType.FIXED_MONTHLY: FixedMonthlyArrangement,
    PlanType.PAY_IN_FULL: PayInFullArrangement,
    PlanType.SETTLEMENT: SettlementArrangement,
    PlanType.ONE_TIME_PAYMENT: OneTimePaymentArrangement,
    PlanType.CUSTOM_TERMS: CustomTermsArrangement,
}


def is_applicable(template: ArrangementTemplate, balance_cents: int) -> bool:
    """Balance falls inside the template's range; a missing bound is open"""
    low = template.min_balance_cents if template.min_balance_cents is not None else 0
    if balance_cents < low:
        return False
    return template.max_balance_cents is None or balance_cents <= template.max_balance_cents


def applicable_templates(templates: Iterable[ArrangementTemplate], balance_cents: int) -> List[ArrangementTemplate]:
    return [t for t in templates if is_applicable(t, balance_cents)]


def materialize(
    template: ArrangementTemplate,
    balance_cents: int,
    minimum_monthly_cents: int = DEFAULT_MINIMUM_MONTHLY_CENTS,
) -> Arrangement:
    """
    Compute the concrete arrangement a template offers for a balance.

    - range: steady payment over max_term_months (default 12), kept inside the
      template's payment range and never below the tenant minimum
    - fixed_monthly: the fixed payment (floored), term derived from the balance
    - pay_in_full: explicit amount, else basis points of balance, else the balance
    - settlement: basis points of balance
    - one_time_payment: template minimum, else the tenant minimum
    - custom_terms: text only
    """
    common = dict(
        name=template.name,
        id=template.id,
        min_balance_cents=template.min_balance_cents,
        max_balance_cents=template.max_balance_cents,
    )
    plan_type = template.plan_type

    if plan_type is PlanType.RANGE:
        term = template.max_term_months or DEFAULT_TERM_MONTHS
        monthly = calculate_term_payment(balance_cents, term, minimum_monthly_cents)
        if template.monthly_payment_min_cents is not None:
            monthly = max(monthly, template.monthly_payment_min_cents)
        if template.monthly_payment_max_cents is not None:
            monthly = normalize(min(monthly, template.monthly_payment_max_cents), minimum_monthly_cents)
        return RangeArrangement(
            **common,
            monthly_payment_min_cents=template.monthly_payment_min_cents,
            monthly_payment_max_cents=template.monthly_payment_max_cents,
            max_term_months=template.max_term_months,
            calculated_monthly_payment_cents=monthly,
            calculated_term_months=_term_for(balance_cents, monthly),
            calculated_total_amount_cents=balance_cents,
        )

    if plan_type is PlanType.FIXED_MONTHLY:
        if template.fixed_monthly_payment_cents is not None:
            monthly = normalize(template.fixed_monthly_payment_cents, minimum_monthly_cents)
        else:
            term = template.max_term_months or DEFAULT_TERM_MONTHS
            monthly = calculate_term_payment(balance_cents, term, minimum_monthly_cents)
        return FixedMonthlyArrangement(
            **common,
            fixed_monthly_payment_cents=template.fixed_monthly_payment_cents,
            max_term_months=template.max_term_months,
            calculated_monthly_payment_cents=monthly,
            calculated_term_months=_term_for(balance_cents, monthly),
            calculated_total_amount_cents=balance_cents,
        )

    if plan_type is PlanType.PAY_IN_FULL:
        bps = template.payoff_percentage_basis_points
        if template.pay_in_full_amount_cents is not None:
            payoff = template.pay_in_full_amount_cents
        elif bps is not None:
            payoff = divide(balance_cents * bps, BASIS_POINTS)
        else:
            payoff = balance_cents
        return PayInFullArrangement(
            **common,
            calculated_payoff_amount_cents=payoff,
            calculated_payoff_percentage=_percentage_of(payoff, balance_cents, bps),
        )

    if plan_type is PlanType.SETTLEMENT:
        bps = template.payoff_percentage_basis_points
        if bps is None:
            return SettlementArrangement(**common)
        return SettlementArrangement(
            **common,
            calculated_payoff_amount_cents=divide(balance_cents * bps, BASIS_POINTS),
            calculated_payoff_percentage=bps / 100,
        )

    if plan_type is PlanType.ONE_TIME_PAYMENT:
        minimum = template.one_time_payment_min_cents
        return OneTimePaymentArrangement(
            **common,
            one_time_payment_min_cents=minimum,
            calculated_payoff_amount_cents=minimum if minimum is not None else minimum_monthly_cents,
        )

    return CustomTermsArrangement(**common, custom_terms_text=template.custom_terms_text)


def _term_for(balance_cents: int, monthly_cents: int) -> int:
    """Months needed to retire the balance at the given payment (at least one)"""
    if monthly_cents <= 0:
        return 1
    return max(1, divide(balance_cents, monthly_cents))


def _percentage_of(payoff_cents: int, balance_cents: int, basis_points: Optional[int]) -> Optional[float]:
    if basis_points is not None:
        return basis_points / 100
    if balance_cents <= 0:
        return None
    return round(payoff_cents * 100 / balance_cents, 2)


# Record parsing


def parse_plan_type(value: Any) -> PlanType:
    """Missing or unrecognized plan types are read as range"""
    try:
        return PlanType(value)
    except ValueError:
        return PlanType.RANGE


def parse_arrangement(record: Mapping[str, Any]) -> Arrangement:
    """
    Build an arrangement variant from a loose API/database record.

    Accepts snake_case field names (with or without the _cents suffix) and
    camelCase names (calculatedMonthlyPayment, minBalance, ...). Fields that are
    missing or not numeric are left unset rather than rejected.
    """
    plan_type = parse_plan_type(_lookup(record, "plan_type"))
    cls = ARRANGEMENT_TYPES[plan_type]

    values = {}
    for field in dataclasses.fields(cls):
        if field.name == "plan_type":
            continue
        raw = _lookup(record, field.name)
        if raw is None:
            continue
        if field.name in TEXT_FIELDS:
            values[field.name] = str(raw)
            continue
        number = _to_number(raw) if field.name in FRACTIONAL_FIELDS else _to_int(raw)
        if number is not None:
            values[field.name] = number

    return cls(**values)


def _lookup(record: Mapping[str, Any], field_name: str) -> Any:
    base = field_name[: -len("_cents")] if field_name.endswith("_cents") else field_name
    for key in (field_name, base, _camel(base), _camel(field_name)):
        if record.get(key) is not None:
            return record[key]
    return None


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _to_number(value: Any) -> Optional[float]:
    """Finite, non-negative number from a JSON value; anything else is unset"""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                return None
    if not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value < 0:
        return None
    return value


def _to_int(value: Any) -> Optional[int]:
    number = _to_number(value)
    if number is None:
        return None
    return round(number)


# Acceptance


@dataclass(frozen=True)
class AcceptedPlan:
    """Amounts and persisted schedule for an arrangement the consumer accepted"""

    monthly_base_cents: int
    payment_cents: int
    frequency: PaymentFrequency
    term_months: Optional[int]
    payments: List[PaymentScheduleEntry]


def plan_acceptance(
    arrangement: Arrangement,
    balance_cents: int,
    frequency: PaymentFrequency,
    start_date: Optional[date] = None,
    monthly_step: MonthlyStep = MonthlyStep.FIXED_30_DAYS,
    max_payments: int = MAX_PLAN_PAYMENTS,
) -> AcceptedPlan:
    """
    Turn a materialized arrangement into the schedule of record.

    Monthly plans convert the stored monthly base to the chosen frequency and
    run until the balance is retired. Payoff plans are a single payment on the
    start date.

    Raises:
        ArrangementNotAcceptableError: custom terms, no computed payment, or a
            plan needing more than max_payments payments
    """
    if isinstance(arrangement, CustomTermsArrangement):
        raise ArrangementNotAcceptableError("Custom terms must be arranged with the agency")

    if isinstance(arrangement, (RangeArrangement, FixedMonthlyArrangement)):
        monthly = arrangement.calculated_monthly_payment_cents
        if monthly is None:
            raise ArrangementNotAcceptableError("Arrangement has no monthly payment for this balance")
        payment = convert_to_frequency(monthly, frequency)
        if payment > 0 and divide(balance_cents, payment) > max_payments:
            raise ArrangementNotAcceptableError(
                f"Plan would need more than {max_payments} payments; balance is too large for this option"
            )
        return AcceptedPlan(
            monthly_base_cents=monthly,
            payment_cents=payment,
            frequency=PaymentFrequency(frequency),
            term_months=arrangement.calculated_term_months,
            payments=build_payment_plan(balance_cents, payment, frequency, start_date, monthly_step),
        )

    payoff = arrangement.calculated_payoff_amount_cents
    if payoff is None:
        raise ArrangementNotAcceptableError("Arrangement has no payoff amount for this balance")

    payments = generate_schedule(payoff, PaymentFrequency.MONTHLY, start_date, count=1).to_list()
    return AcceptedPlan(
        monthly_base_cents=payoff,
        payment_cents=payoff,
        frequency=PaymentFrequency.MONTHLY,
        term_months=None,
        payments=payments,
    )
