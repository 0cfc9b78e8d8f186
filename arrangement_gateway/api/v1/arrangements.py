"""Consumer arrangements: offers for a balance, acceptance, and retrieval"""

import logging
import time
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from arrangement_gateway.api.v1.schemas import (
    AcceptArrangementRequest,
    ArrangementOfferResponse,
    ArrangementOffersResponse,
    ArrangementResponse,
    ScheduleEntrySchema,
)
from arrangement_gateway.api.dependencies import get_payments_client, get_request_id, parse_uuid
from arrangement_gateway.config import settings
from arrangement_gateway.infrastructure.clients.payments import PaymentsClient
from arrangement_gateway.infrastructure.database.models import ConsumerArrangement
from arrangement_gateway.infrastructure.database.session import get_db
from arrangement_gateway.infrastructure.database.repositories import (
    ArrangementOptionRepository,
    ConsumerArrangementRepository,
    TenantSettingsRepository,
)
from arrangement_gateway.domain.arrangements import (
    applicable_templates,
    is_applicable,
    materialize,
    plan_acceptance,
)
from arrangement_gateway.domain.exceptions import (
    ActiveArrangementExistsError,
    ArrangementNotAcceptableError,
    ArrangementOptionNotFoundError,
)
from arrangement_gateway.domain.summary import plan_type_label, summarize
from arrangement_gateway.infrastructure.observability.logging import log_arrangement_accepted
from arrangement_gateway.infrastructure.observability.metrics import record_acceptance, record_summary

router = APIRouter()


def arrangement_response(arrangement: ConsumerArrangement) -> ArrangementResponse:
    return ArrangementResponse(
        arrangement_id=str(arrangement.id),
        tenant_id=arrangement.tenant_id,
        account_id=arrangement.account_id,
        option_id=str(arrangement.arrangement_option_id) if arrangement.arrangement_option_id else None,
        plan_type=arrangement.plan_type,
        status=arrangement.status,
        balance_cents=arrangement.balance_cents,
        monthly_base_cents=arrangement.monthly_base_cents,
        payment_cents=arrangement.payment_cents,
        frequency=arrangement.frequency,
        term_months=arrangement.term_months,
        payments=[
            ScheduleEntrySchema(date=p.due_date, amount_cents=p.amount_cents, status=p.status)
            for p in arrangement.payments
        ],
        created_at=arrangement.created_at.isoformat(),
    )


def offers_response(
    assigned: Optional[ConsumerArrangement], offers: List[ArrangementOfferResponse]
) -> ArrangementOffersResponse:
    return ArrangementOffersResponse(
        assigned=arrangement_response(assigned) if assigned is not None else None,
        available=offers,
    )


@router.get("/tenants/{tenant_id}/arrangements", response_model=ArrangementOffersResponse)
def list_arrangement_offers(
    tenant_id: str,
    balance_cents: int = Query(..., ge=0, description="Current account balance in cents"),
    account_id: Optional[str] = Query(None, description="Account whose current arrangement to report"),
    db: Session = Depends(get_db),
):
    """
    Arrangements a consumer can choose for a balance.

    Returns the tenant's active options whose balance range contains the
    balance, each computed for that balance and summarized. When account_id is
    given, the account's active arrangement is reported as assigned and its
    option is left out of the available list. Nothing is available when the
    tenant hides payment plans.
    """
    assigned = None
    if account_id:
        assigned = ConsumerArrangementRepository(db).get_active_arrangement(tenant_id, account_id)

    tenant_settings = TenantSettingsRepository(db).get(tenant_id)
    if tenant_settings is not None and not tenant_settings.show_payment_plans:
        return offers_response(assigned, [])

    minimum = TenantSettingsRepository(db).minimum_monthly_payment(tenant_id, settings.minimum_monthly_payment_cents)
    option_repo = ArrangementOptionRepository(db)
    templates = [option_repo.to_template(o) for o in option_repo.get_options_by_tenant(tenant_id, active_only=True)]

    offers = []
    for template in applicable_templates(templates, balance_cents):
        if assigned is not None and template.id == str(assigned.arrangement_option_id):
            continue
        arrangement = materialize(template, balance_cents, minimum)
        summary = summarize(arrangement, balance_cents)
        record_summary(arrangement.plan_type.value)
        offers.append(
            ArrangementOfferResponse(
                option_id=template.id,
                name=template.name,
                plan_type=arrangement.plan_type,
                plan_type_label=plan_type_label(arrangement.plan_type),
                headline=summary.headline,
                detail=summary.detail,
                calculated_monthly_payment_cents=getattr(arrangement, "calculated_monthly_payment_cents", None),
                calculated_term_months=getattr(arrangement, "calculated_term_months", None),
                calculated_total_amount_cents=getattr(arrangement, "calculated_total_amount_cents", None),
                calculated_payoff_amount_cents=getattr(arrangement, "calculated_payoff_amount_cents", None),
                calculated_payoff_percentage=getattr(arrangement, "calculated_payoff_percentage", None),
                custom_terms_text=getattr(arrangement, "custom_terms_text", None),
            )
        )
    return offers_response(assigned, offers)


@router.post("/tenants/{tenant_id}/arrangements", response_model=ArrangementResponse, status_code=201)
def accept_arrangement(
    tenant_id: str,
    request_body: AcceptArrangementRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    payments_client: PaymentsClient = Depends(get_payments_client),
):
    """
    Accept an arrangement option for an account.

    Flow:
    1. Reject the request if the account already has an active arrangement
    2. Load the tenant's active option and check it applies to the balance
    3. Compute the arrangement with the tenant's minimum monthly payment
    4. Derive the payment amount from the monthly base and build the schedule
    5. Persist arrangement + scheduled payments
    6. Send async webhook to the payments service
    """
    start_time = time.time()
    request_id = get_request_id(request)
    option_id = parse_uuid(request_body.option_id, "option")

    try:
        existing = ConsumerArrangementRepository(db).get_active_arrangement(tenant_id, request_body.account_id)
        if existing is not None:
            raise ActiveArrangementExistsError(
                f"Account {request_body.account_id} already has an {existing.status} arrangement ({existing.id})"
            )

        option = ArrangementOptionRepository(db).get_option(tenant_id, option_id)
        if option is None or not option.is_active:
            raise ArrangementOptionNotFoundError(f"Arrangement option {option_id} not found")

        template = ArrangementOptionRepository.to_template(option)
        if not is_applicable(template, request_body.balance_cents):
            raise ArrangementNotAcceptableError("Arrangement option does not apply to this balance")

        minimum = TenantSettingsRepository(db).minimum_monthly_payment(
            tenant_id, settings.minimum_monthly_payment_cents
        )
        arrangement = materialize(template, request_body.balance_cents, minimum)
        plan = plan_acceptance(
            arrangement,
            request_body.balance_cents,
            request_body.frequency,
            start_date=request_body.start_date,
            monthly_step=settings.monthly_step,
            max_payments=settings.max_plan_payments,
        )

        db_arrangement = ConsumerArrangementRepository(db).create_arrangement(
            tenant_id=tenant_id,
            account_id=request_body.account_id,
            option_id=option.id,
            plan_type=arrangement.plan_type.value,
            balance_cents=request_body.balance_cents,
            monthly_base_cents=plan.monthly_base_cents,
            payment_cents=plan.payment_cents,
            frequency=plan.frequency.value,
            term_months=plan.term_months,
            schedule=plan.payments,
        )
        db.commit()
        db.refresh(db_arrangement)

    except ArrangementOptionNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except ActiveArrangementExistsError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))

    except ArrangementNotAcceptableError as e:
        db.rollback()
        logging.warning(f"Arrangement not acceptable: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    background_tasks.add_task(
        payments_client.send_arrangement_event,
        {
            "event": "ARRANGEMENT_ACCEPTED",
            "arrangement_id": str(db_arrangement.id),
            "tenant_id": tenant_id,
            "account_id": request_body.account_id,
            "plan_type": arrangement.plan_type.value,
            "payment_cents": plan.payment_cents,
            "frequency": plan.frequency.value,
            "first_payment_date": plan.payments[0].date.isoformat() if plan.payments else None,
        },
    )

    duration_ms = (time.time() - start_time) * 1000
    record_acceptance(arrangement.plan_type.value, plan.monthly_base_cents)
    log_arrangement_accepted(
        request_id, tenant_id, request_body.account_id, arrangement.plan_type.value, plan.monthly_base_cents, duration_ms
    )

    return arrangement_response(db_arrangement)


@router.get("/arrangements/{arrangement_id}", response_model=ArrangementResponse)
def get_arrangement(arrangement_id: str, db: Session = Depends(get_db)):
    """Accepted arrangement with its scheduled payments"""
    arrangement = ConsumerArrangementRepository(db).get_arrangement_by_id(parse_uuid(arrangement_id, "arrangement"))

    if not arrangement:
        raise HTTPException(status_code=404, detail="Arrangement not found")

    return arrangement_response(arrangement)
