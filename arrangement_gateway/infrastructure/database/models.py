"""SQLAlchemy ORM models for tenant settings, arrangement options and accepted arrangements"""

import uuid
from sqlalchemy import Column, BigInteger, Boolean, DateTime, Date, Integer, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class TenantSettings(Base):
    """Per-tenant arrangement settings"""

    __tablename__ = "tenant_settings"

    tenant_id = Column(Text, primary_key=True)
    minimum_monthly_payment_cents = Column(BigInteger, nullable=True)
    show_payment_plans = Column(Boolean, nullable=False, default=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class ArrangementOption(Base):
    """Tenant-configured arrangement template, matched against account balances"""

    __tablename__ = "arrangement_options"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    plan_type = Column(Text, nullable=False, default="range")
    min_balance_cents = Column(BigInteger, nullable=True)
    max_balance_cents = Column(BigInteger, nullable=True)
    monthly_payment_min_cents = Column(BigInteger, nullable=True)
    monthly_payment_max_cents = Column(BigInteger, nullable=True)
    fixed_monthly_payment_cents = Column(BigInteger, nullable=True)
    pay_in_full_amount_cents = Column(BigInteger, nullable=True)
    payoff_percentage_basis_points = Column(Integer, nullable=True)
    one_time_payment_min_cents = Column(BigInteger, nullable=True)
    custom_terms_text = Column(Text, nullable=True)
    max_term_months = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ConsumerArrangement(Base):
    """Arrangement accepted by a consumer for one account"""

    __tablename__ = "consumer_arrangements"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Text, nullable=False, index=True)
    account_id = Column(Text, nullable=False, index=True)
    arrangement_option_id = Column(
        UUID(as_uuid=True), ForeignKey("arrangement_options.id", ondelete="SET NULL"), nullable=True
    )
    plan_type = Column(Text, nullable=False)
    balance_cents = Column(BigInteger, nullable=False)
    monthly_base_cents = Column(BigInteger, nullable=False)
    payment_cents = Column(BigInteger, nullable=False)
    frequency = Column(Text, nullable=False)
    term_months = Column(Integer, nullable=True)
    status = Column(Text, nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    payments = relationship(
        "ArrangementPayment",
        back_populates="arrangement",
        cascade="all, delete-orphan",
        order_by="ArrangementPayment.due_date",
    )


class ArrangementPayment(Base):
    """Scheduled payment projected when the arrangement was accepted"""

    __tablename__ = "arrangement_payments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    arrangement_id = Column(
        UUID(as_uuid=True), ForeignKey("consumer_arrangements.id", ondelete="CASCADE"), nullable=False
    )
    due_date = Column(Date, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    status = Column(Text, nullable=False, default="scheduled")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    arrangement = relationship("ConsumerArrangement", back_populates="payments")
