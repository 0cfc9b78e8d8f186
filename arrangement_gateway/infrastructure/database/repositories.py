"""Data access layer for arrangement entities"""

import uuid
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session
from arrangement_gateway.infrastructure.database.models import (
    ArrangementOption,
    ArrangementPayment,
    ConsumerArrangement,
    TenantSettings,
)
from arrangement_gateway.domain.arrangements import parse_plan_type
from arrangement_gateway.domain.models import ACTIVE_ARRANGEMENT_STATUSES, ArrangementTemplate, PaymentScheduleEntry


class TenantSettingsRepository:
    """Repository for per-tenant settings"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, tenant_id: str) -> Optional[TenantSettings]:
        return self.db.get(TenantSettings, tenant_id)

    def upsert(
        self,
        tenant_id: str,
        minimum_monthly_payment_cents: Optional[int],
        show_payment_plans: bool,
    ) -> TenantSettings:
        """Create or replace a tenant's settings"""
        row = self.get(tenant_id)
        if row is None:
            row = TenantSettings(tenant_id=tenant_id)
            self.db.add(row)

        row.minimum_monthly_payment_cents = minimum_monthly_payment_cents
        row.show_payment_plans = show_payment_plans
        self.db.flush()
        return row

    def minimum_monthly_payment(self, tenant_id: Optional[str], default_cents: int) -> int:
        """Tenant's configured floor, or the service default when unset"""
        if not tenant_id:
            return default_cents
        row = self.get(tenant_id)
        if row is None or row.minimum_monthly_payment_cents is None:
            return default_cents
        return row.minimum_monthly_payment_cents


class ArrangementOptionRepository:
    """Repository for tenant arrangement templates"""

    def __init__(self, db: Session):
        self.db = db

    def create_option(self, tenant_id: str, **fields) -> ArrangementOption:
        db_option = ArrangementOption(tenant_id=tenant_id, **fields)
        self.db.add(db_option)
        self.db.flush()  # Get ID without committing
        return db_option

    def get_options_by_tenant(self, tenant_id: str, active_only: bool = False) -> List[ArrangementOption]:
        query = self.db.query(ArrangementOption).filter(ArrangementOption.tenant_id == tenant_id)
        if active_only:
            query = query.filter(ArrangementOption.is_active.is_(True))
        return query.order_by(ArrangementOption.created_at).all()

    def get_option(self, tenant_id: str, option_id: uuid.UUID) -> Optional[ArrangementOption]:
        return (
            self.db.query(ArrangementOption)
            .filter(ArrangementOption.id == option_id, ArrangementOption.tenant_id == tenant_id)
            .first()
        )

    def delete_option(self, option: ArrangementOption) -> None:
        """Delete an option; accepted arrangements keep their terms but lose the link"""
        self.db.query(ConsumerArrangement).filter(
            ConsumerArrangement.arrangement_option_id == option.id
        ).update({ConsumerArrangement.arrangement_option_id: None}, synchronize_session=False)
        self.db.delete(option)
        self.db.flush()

    @staticmethod
    def to_template(option: ArrangementOption) -> ArrangementTemplate:
        """Convert ORM row to domain template"""
        return ArrangementTemplate(
            plan_type=parse_plan_type(option.plan_type),
            name=option.name,
            id=str(option.id),
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
        )


class ConsumerArrangementRepository:
    """Repository for accepted arrangements"""

    def __init__(self, db: Session):
        self.db = db

    def create_arrangement(
        self,
        tenant_id: str,
        account_id: str,
        option_id: Optional[uuid.UUID],
        plan_type: str,
        balance_cents: int,
        monthly_base_cents: int,
        payment_cents: int,
        frequency: str,
        term_months: Optional[int],
        schedule: Iterable[PaymentScheduleEntry],
    ) -> ConsumerArrangement:
        """Create accepted arrangement with its scheduled payments"""
        db_arrangement = ConsumerArrangement(
            tenant_id=tenant_id,
            account_id=account_id,
            arrangement_option_id=option_id,
            plan_type=plan_type,
            balance_cents=balance_cents,
            monthly_base_cents=monthly_base_cents,
            payment_cents=payment_cents,
            frequency=frequency,
            term_months=term_months,
        )
        self.db.add(db_arrangement)
        self.db.flush()

        # Create scheduled payments
        for entry in schedule:
            db_payment = ArrangementPayment(
                arrangement_id=db_arrangement.id,
                due_date=entry.date,
                amount_cents=entry.amount_cents,
            )
            self.db.add(db_payment)

        return db_arrangement

    def get_arrangement_by_id(self, arrangement_id: uuid.UUID) -> Optional[ConsumerArrangement]:
        """Fetch arrangement with payments"""
        return (
            self.db.query(ConsumerArrangement)
            .filter(ConsumerArrangement.id == arrangement_id)
            .first()
        )

    def get_active_arrangement(self, tenant_id: str, account_id: str) -> Optional[ConsumerArrangement]:
        """Account's current arrangement, if one is active, pending or paused"""
        return (
            self.db.query(ConsumerArrangement)
            .filter(
                ConsumerArrangement.tenant_id == tenant_id,
                ConsumerArrangement.account_id == account_id,
                ConsumerArrangement.status.in_(ACTIVE_ARRANGEMENT_STATUSES),
            )
            .order_by(ConsumerArrangement.created_at.desc())
            .first()
        )
