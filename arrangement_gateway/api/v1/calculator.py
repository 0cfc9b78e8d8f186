"""POST /v1/quote, /v1/schedule, /v1/summary - stateless arrangement calculations"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from arrangement_gateway.api.v1.schemas import (
    QuoteRequest,
    QuoteResponse,
    ScheduleEntrySchema,
    ScheduleRequest,
    ScheduleResponse,
    SummaryRequest,
    SummaryResponse,
)
from arrangement_gateway.api.dependencies import get_request_id
from arrangement_gateway.config import settings
from arrangement_gateway.infrastructure.database.session import get_db
from arrangement_gateway.infrastructure.database.repositories import TenantSettingsRepository
from arrangement_gateway.domain.arrangements import parse_arrangement
from arrangement_gateway.domain.exceptions import InvalidTermError
from arrangement_gateway.domain.schedule import PaymentSchedule, generate_schedule
from arrangement_gateway.domain.selection import (
    PaymentSelection,
    change_frequency,
    enter_custom_amount,
    select_term,
)
from arrangement_gateway.domain.summary import plan_type_label, summarize
from arrangement_gateway.infrastructure.observability.logging import log_quote
from arrangement_gateway.infrastructure.observability.metrics import record_quote, record_summary

router = APIRouter()


def schedule_entries(schedule: PaymentSchedule) -> list[ScheduleEntrySchema]:
    return [ScheduleEntrySchema(date=entry.date, amount_cents=entry.amount_cents) for entry in schedule]


@router.post("/quote", response_model=QuoteResponse)
def create_quote(
    request_body: QuoteRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Quote a recurring payment for a balance.

    Flow:
    1. Resolve the tenant's minimum monthly payment (or the service default)
    2. Derive the monthly base from the chosen term or the custom amount
    3. Convert the monthly base to the requested frequency
    4. Preview the upcoming payments
    """
    request_id = get_request_id(request)
    minimum = TenantSettingsRepository(db).minimum_monthly_payment(
        request_body.tenant_id, settings.minimum_monthly_payment_cents
    )

    try:
        if request_body.term_months is not None:
            if request_body.term_months not in settings.standard_terms:
                raise InvalidTermError(
                    f"Term must be one of {list(settings.standard_terms)} months, got {request_body.term_months}"
                )
            result = select_term(PaymentSelection(), request_body.balance_cents, request_body.term_months, minimum)
        else:
            result = enter_custom_amount(PaymentSelection(), request_body.custom_monthly_cents, minimum)
    except InvalidTermError as e:
        raise HTTPException(status_code=422, detail=str(e))

    selection = change_frequency(result.state, request_body.frequency).state
    schedule = generate_schedule(
        selection.payment_cents,
        selection.frequency,
        start_date=request_body.start_date,
        count=request_body.count if request_body.count is not None else settings.schedule_preview_count,
        monthly_step=settings.monthly_step,
    )

    record_quote(selection.frequency.value, result.floor_applied)
    log_quote(request_id, selection.frequency.value, selection.monthly_base_cents, selection.payment_cents, result.floor_applied)

    return QuoteResponse(
        monthly_base_cents=selection.monthly_base_cents,
        payment_cents=selection.payment_cents,
        frequency=selection.frequency,
        term_months=selection.selected_term,
        floor_applied=result.floor_applied,
        minimum_monthly_cents=minimum,
        schedule=schedule_entries(schedule),
    )


@router.post("/schedule", response_model=ScheduleResponse)
def preview_schedule(request_body: ScheduleRequest):
    """Preview upcoming payments of a fixed amount"""
    schedule = generate_schedule(
        request_body.amount_cents,
        request_body.frequency,
        start_date=request_body.start_date,
        count=request_body.count if request_body.count is not None else settings.schedule_preview_count,
        monthly_step=settings.monthly_step,
    )
    return ScheduleResponse(frequency=request_body.frequency, schedule=schedule_entries(schedule))


@router.post("/summary", response_model=SummaryResponse)
def summarize_arrangement(request_body: SummaryRequest):
    """
    Render headline/detail for a stored arrangement record.

    Partially-populated records still get a (generic) summary.
    """
    arrangement = parse_arrangement(request_body.arrangement)
    summary = summarize(arrangement, request_body.current_balance_cents)
    record_summary(arrangement.plan_type.value)

    return SummaryResponse(
        plan_type=arrangement.plan_type,
        plan_type_label=plan_type_label(arrangement.plan_type),
        headline=summary.headline,
        detail=summary.detail,
    )
