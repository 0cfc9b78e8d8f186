"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from arrangement_gateway.api.main import create_app
from arrangement_gateway.infrastructure.database.models import Base
from arrangement_gateway.infrastructure.database.session import get_db
from arrangement_gateway.infrastructure.database.repositories import ArrangementOptionRepository
from arrangement_gateway.domain.models import ArrangementTemplate, PlanType


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def tenant_options(db: Session) -> dict:
    """One active option of each plan type for tenant "acme", keyed by plan type"""
    repo = ArrangementOptionRepository(db)
    options = {
        "range": repo.create_option(
            "acme",
            name="Monthly plan",
            plan_type="range",
            min_balance_cents=10_000,  # $100
            max_balance_cents=500_000,  # $5000
            monthly_payment_min_cents=5_000,
            monthly_payment_max_cents=50_000,
            max_term_months=12,
        ),
        "fixed_monthly": repo.create_option(
            "acme",
            name="Fixed $250",
            plan_type="fixed_monthly",
            fixed_monthly_payment_cents=25_000,
        ),
        "pay_in_full": repo.create_option("acme", name="Pay today", plan_type="pay_in_full"),
        "settlement": repo.create_option(
            "acme",
            name="Settle at 60%",
            plan_type="settlement",
            min_balance_cents=100_000,
            payoff_percentage_basis_points=6_000,
        ),
        "one_time_payment": repo.create_option(
            "acme",
            name="One-time payment",
            plan_type="one_time_payment",
            one_time_payment_min_cents=2_500,
        ),
        "custom_terms": repo.create_option(
            "acme",
            name="Talk to us",
            plan_type="custom_terms",
            custom_terms_text="Call 555-0100 to set up terms",
        ),
    }
    db.commit()
    return options


@pytest.fixture
def range_template() -> ArrangementTemplate:
    """$100-$5000 balance range, $50-$500 monthly, 12 months max"""
    return ArrangementTemplate(
        plan_type=PlanType.RANGE,
        name="Monthly plan",
        id="opt-range",
        min_balance_cents=10_000,
        max_balance_cents=500_000,
        monthly_payment_min_cents=5_000,
        monthly_payment_max_cents=50_000,
        max_term_months=12,
    )
