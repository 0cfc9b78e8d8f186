"""Tenant settings and arrangement option administration"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from arrangement_gateway.api.v1.schemas import (
    ArrangementOptionRequest,
    ArrangementOptionResponse,
    TenantSettingsRequest,
    TenantSettingsResponse,
)
from arrangement_gateway.api.dependencies import parse_uuid
from arrangement_gateway.config import settings
from arrangement_gateway.domain.exceptions import InvalidArrangementOptionError
from arrangement_gateway.infrastructure.database.models import ArrangementOption
from arrangement_gateway.infrastructure.database.session import get_db
from arrangement_gateway.infrastructure.database.repositories import (
    ArrangementOptionRepository,
    TenantSettingsRepository,
)

router = APIRouter()


def validate_option(option: ArrangementOptionRequest) -> None:
    """
    Reject options whose ranges are inverted.

    Raises:
        InvalidArrangementOptionError: min balance > max balance or min payment > max payment
    """
    if (
        option.min_balance_cents is not None
        and option.max_balance_cents is not None
        and option.min_balance_cents > option.max_balance_cents
    ):
        raise InvalidArrangementOptionError("Minimum balance cannot be greater than maximum balance")

    if (
        option.monthly_payment_min_cents is not None
        and option.monthly_payment_max_cents is not None
        and option.monthly_payment_min_cents > option.monthly_payment_max_cents
    ):
        raise InvalidArrangementOptionError("Minimum payment cannot be greater than maximum payment")


def option_response(option: ArrangementOption) -> ArrangementOptionResponse:
    return ArrangementOptionResponse(
        id=str(option.id),
        tenant_id=option.tenant_id,
        name=option.name,
        description=option.description,
        plan_type=option.plan_type,
        min_balance_cents=option.min_balance_cents,
        max_balance_cents=option.max_balance_cents,
        monthly_payment_min_cents=option.monthly_payment_min_cents,
        monthly_payment_max_cents=option.monthly_payment_max_cents,
        fixed_monthly_payment_cents=option.fixed_monthly_payment_cents,
        pay_in_full_amount_cents=option.pay_in_full_amount_cents,
        payoff_percentage_basis_points=option.payoff_percentage_basis_points,
        one_time_payment_min_cents=option.one_time_payment_min_cents,
        custom_terms_text=option.custom_terms_text,
        max_term_months=option.max_term_months,
        is_active=option.is_active,
    )


@router.get("/tenants/{tenant_id}/settings", response_model=TenantSettingsResponse)
def get_tenant_settings(tenant_id: str, db: Session = Depends(get_db)):
    """Tenant settings, with service defaults for anything unset"""
    row = TenantSettingsRepository(db).get(tenant_id)
    minimum = settings.minimum_monthly_payment_cents
    if row is not None and row.minimum_monthly_payment_cents is not None:
        minimum = row.minimum_monthly_payment_cents

    return TenantSettingsResponse(
        tenant_id=tenant_id,
        minimum_monthly_payment_cents=minimum,
        show_payment_plans=row.show_payment_plans if row is not None else True,
    )


@router.put("/tenants/{tenant_id}/settings", response_model=TenantSettingsResponse)
def update_tenant_settings(
    tenant_id: str,
    request_body: TenantSettingsRequest,
    db: Session = Depends(get_db),
):
    row = TenantSettingsRepository(db).upsert(
        tenant_id,
        minimum_monthly_payment_cents=request_body.minimum_monthly_payment_cents,
        show_payment_plans=request_body.show_payment_plans,
    )
    db.commit()

    return TenantSettingsResponse(
        tenant_id=tenant_id,
        minimum_monthly_payment_cents=(
            row.minimum_monthly_payment_cents
            if row.minimum_monthly_payment_cents is not None
            else settings.minimum_monthly_payment_cents
        ),
        show_payment_plans=row.show_payment_plans,
    )


@router.get("/tenants/{tenant_id}/arrangement-options", response_model=List[ArrangementOptionResponse])
def list_arrangement_options(tenant_id: str, db: Session = Depends(get_db)):
    """All arrangement options configured by a tenant, active or not"""
    options = ArrangementOptionRepository(db).get_options_by_tenant(tenant_id)
    return [option_response(option) for option in options]


@router.post(
    "/tenants/{tenant_id}/arrangement-options",
    response_model=ArrangementOptionResponse,
    status_code=201,
)
def create_arrangement_option(
    tenant_id: str,
    request_body: ArrangementOptionRequest,
    db: Session = Depends(get_db),
):
    try:
        validate_option(request_body)
    except InvalidArrangementOptionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    fields = request_body.model_dump()
    fields["plan_type"] = request_body.plan_type.value
    option = ArrangementOptionRepository(db).create_option(tenant_id, **fields)
    db.commit()

    return option_response(option)


def get_tenant_option(tenant_id: str, option_id: str, db: Session) -> ArrangementOption:
    option = ArrangementOptionRepository(db).get_option(tenant_id, parse_uuid(option_id, "option"))
    if option is None:
        raise HTTPException(status_code=404, detail="Arrangement option not found")
    return option


@router.get("/tenants/{tenant_id}/arrangement-options/{option_id}", response_model=ArrangementOptionResponse)
def get_arrangement_option(tenant_id: str, option_id: str, db: Session = Depends(get_db)):
    """Single option, active or not; options of other tenants are not found"""
    return option_response(get_tenant_option(tenant_id, option_id, db))


@router.delete("/tenants/{tenant_id}/arrangement-options/{option_id}", status_code=204)
def delete_arrangement_option(tenant_id: str, option_id: str, db: Session = Depends(get_db)):
    """
    Remove an option from the tenant.

    Arrangements already accepted under the option stay in place with their
    terms; only their link to the option is cleared.
    """
    option = get_tenant_option(tenant_id, option_id, db)
    ArrangementOptionRepository(db).delete_option(option)
    db.commit()
    return Response(status_code=204)
