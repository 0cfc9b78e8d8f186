"""Integration tests for API endpoints"""

import inspect
import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from arrangement_gateway.api.v1 import arrangements, calculator, tenants

PAYMENTS_EVENT = "arrangement_gateway.infrastructure.clients.payments.PaymentsClient.send_arrangement_event"


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers


def test_request_id_is_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/quote", json={"balance_cents": 100000, "term_months": 3})

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "arrangement_quote_total" in response.text


def test_quote_term_biweekly(client: TestClient):
    """Test POST /v1/quote for $1,000 over 3 months paid bi-weekly"""
    response = client.post(
        "/v1/quote",
        json={"balance_cents": 100000, "term_months": 3, "frequency": "biweekly", "start_date": "2025-01-01"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["monthly_base_cents"] == 33334
    assert data["payment_cents"] == 15385
    assert data["term_months"] == 3
    assert data["floor_applied"] is False
    assert data["minimum_monthly_cents"] == 5000
    assert [e["date"] for e in data["schedule"]] == ["2025-01-01", "2025-01-15", "2025-01-29", "2025-02-12"]
    assert all(e["amount_cents"] == 15385 for e in data["schedule"])


def test_quote_custom_amount_below_floor(client: TestClient):
    response = client.post("/v1/quote", json={"balance_cents": 100000, "custom_monthly_cents": 3000})

    assert response.status_code == 200
    data = response.json()
    assert data["monthly_base_cents"] == 5000
    assert data["floor_applied"] is True
    assert data["term_months"] is None
    assert len(data["schedule"]) == 4


def test_quote_rejects_non_standard_term(client: TestClient):
    response = client.post("/v1/quote", json={"balance_cents": 100000, "term_months": 5})
    assert response.status_code == 422


def test_quote_requires_exactly_one_amount_source(client: TestClient):
    both = client.post("/v1/quote", json={"balance_cents": 100000, "term_months": 3, "custom_monthly_cents": 9000})
    neither = client.post("/v1/quote", json={"balance_cents": 100000})

    assert both.status_code == 422
    assert neither.status_code == 422


def test_quote_rejects_non_numeric_custom_amount(client: TestClient):
    response = client.post("/v1/quote", json={"balance_cents": 100000, "custom_monthly_cents": "lots"})
    assert response.status_code == 422


def test_quote_uses_tenant_minimum(client: TestClient):
    client.put("/v1/tenants/acme/settings", json={"minimum_monthly_payment_cents": 10000})

    response = client.post("/v1/quote", json={"balance_cents": 100000, "term_months": 12, "tenant_id": "acme"})

    data = response.json()
    assert data["minimum_monthly_cents"] == 10000
    assert data["monthly_base_cents"] == 10000
    assert data["floor_applied"] is True


def test_schedule_endpoint(client: TestClient):
    response = client.post(
        "/v1/schedule",
        json={"amount_cents": 7693, "frequency": "weekly", "start_date": "2025-03-03", "count": 2},
    )

    assert response.status_code == 200
    assert response.json()["schedule"] == [
        {"date": "2025-03-03", "amount_cents": 7693, "status": None},
        {"date": "2025-03-10", "amount_cents": 7693, "status": None},
    ]


def test_summary_endpoint_settlement(client: TestClient):
    response = client.post(
        "/v1/summary",
        json={
            "arrangement": {"planType": "settlement", "calculatedPayoffAmount": 50000, "calculatedPayoffPercentage": 50},
            "current_balance_cents": 100000,
        },
    )

    assert response.status_code == 200
    assert response.json() == {
        "plan_type": "settlement",
        "plan_type_label": "Settlement",
        "headline": "Settle for 50% of balance",
        "detail": "Pay $500.00 to settle",
    }


def test_summary_endpoint_partial_record(client: TestClient):
    """Test a record missing computed fields still renders"""
    response = client.post("/v1/summary", json={"arrangement": {"planType": "one_time_payment"}})

    assert response.status_code == 200
    assert response.json()["headline"] == "Make a one-time payment"


def test_tenant_settings_defaults(client: TestClient):
    response = client.get("/v1/tenants/new-tenant/settings")

    assert response.json() == {
        "tenant_id": "new-tenant",
        "minimum_monthly_payment_cents": 5000,
        "show_payment_plans": True,
    }


def test_create_and_list_arrangement_options(client: TestClient):
    response = client.post(
        "/v1/tenants/acme/arrangement-options",
        json={"name": "Standard", "plan_type": "range", "min_balance_cents": 0, "max_balance_cents": 100000},
    )
    assert response.status_code == 201
    option_id = response.json()["id"]

    listing = client.get("/v1/tenants/acme/arrangement-options").json()
    assert [o["id"] for o in listing] == [option_id]
    assert client.get("/v1/tenants/other/arrangement-options").json() == []


@pytest.mark.parametrize(
    "body",
    [
        {"name": "Bad", "min_balance_cents": 5000, "max_balance_cents": 100},
        {"name": "Bad", "monthly_payment_min_cents": 9000, "monthly_payment_max_cents": 100},
    ],
)
def test_create_arrangement_option_rejects_inverted_ranges(client: TestClient, body: dict):
    response = client.post("/v1/tenants/acme/arrangement-options", json=body)
    assert response.status_code == 400


def test_list_offers_for_balance(client: TestClient, tenant_options: dict):
    """Test GET /v1/tenants/{tenant_id}/arrangements computes each applicable option"""
    response = client.get("/v1/tenants/acme/arrangements", params={"balance_cents": 200000})

    assert response.status_code == 200
    body = response.json()
    assert body["assigned"] is None
    offers = {o["plan_type"]: o for o in body["available"]}
    assert set(offers) == {"range", "fixed_monthly", "pay_in_full", "settlement", "one_time_payment", "custom_terms"}

    assert offers["range"]["calculated_monthly_payment_cents"] == 16667
    assert offers["range"]["headline"] == "$166.67 per month"
    assert offers["range"]["detail"] == "12 months • Total: $2,000.00"
    assert offers["settlement"]["headline"] == "Settle for 60% of balance"
    assert offers["settlement"]["detail"] == "Pay $1,200.00 to settle"
    assert offers["pay_in_full"]["headline"] == "Pay $2,000.00 today"
    assert offers["one_time_payment"]["headline"] == "Minimum payment: $25.00"
    assert offers["custom_terms"]["headline"] == "Call 555-0100 to set up terms"


def test_list_offers_excludes_out_of_range(client: TestClient, tenant_options: dict):
    response = client.get("/v1/tenants/acme/arrangements", params={"balance_cents": 50000})

    plan_types = {o["plan_type"] for o in response.json()["available"]}
    assert "settlement" not in plan_types
    assert "range" in plan_types


def test_list_offers_hidden_by_tenant(client: TestClient, tenant_options: dict):
    client.put("/v1/tenants/acme/settings", json={"show_payment_plans": False})

    response = client.get("/v1/tenants/acme/arrangements", params={"balance_cents": 200000})

    assert response.status_code == 200
    assert response.json() == {"assigned": None, "available": []}


@patch(PAYMENTS_EVENT)
def test_accept_and_get_arrangement(mock_payments: AsyncMock, client: TestClient, tenant_options: dict):
    """Test POST /v1/tenants/{tenant_id}/arrangements then GET /v1/arrangements/{id}"""
    mock_payments.return_value = None
    option_id = str(tenant_options["range"].id)

    response = client.post(
        "/v1/tenants/acme/arrangements",
        json={
            "option_id": option_id,
            "account_id": "acct-1",
            "balance_cents": 100000,
            "frequency": "biweekly",
            "start_date": "2025-01-01",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["option_id"] == option_id
    assert data["monthly_base_cents"] == 8334
    assert data["payment_cents"] == 3847
    assert data["frequency"] == "biweekly"
    assert len(data["payments"]) == 26
    assert sum(p["amount_cents"] for p in data["payments"]) == 100000
    assert data["payments"][0] == {"date": "2025-01-01", "amount_cents": 3847, "status": "scheduled"}

    mock_payments.assert_called_once()
    event = mock_payments.call_args.args[0]
    assert event["event"] == "ARRANGEMENT_ACCEPTED"
    assert event["arrangement_id"] == data["arrangement_id"]

    fetched = client.get(f"/v1/arrangements/{data['arrangement_id']}")
    assert fetched.status_code == 200
    assert fetched.json()["payments"] == data["payments"]


@patch(PAYMENTS_EVENT)
def test_accept_settlement_single_payment(mock_payments: AsyncMock, client: TestClient, tenant_options: dict):
    mock_payments.return_value = None

    response = client.post(
        "/v1/tenants/acme/arrangements",
        json={
            "option_id": str(tenant_options["settlement"].id),
            "account_id": "acct-2",
            "balance_cents": 200000,
            "start_date": "2025-02-01",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["payments"] == [{"date": "2025-02-01", "amount_cents": 120000, "status": "scheduled"}]
    assert data["term_months"] is None


@patch(PAYMENTS_EVENT)
def test_accept_custom_terms_rejected(mock_payments: AsyncMock, client: TestClient, tenant_options: dict):
    response = client.post(
        "/v1/tenants/acme/arrangements",
        json={"option_id": str(tenant_options["custom_terms"].id), "account_id": "acct-3", "balance_cents": 100000},
    )

    assert response.status_code == 422
    mock_payments.assert_not_called()


@patch(PAYMENTS_EVENT)
def test_accept_outside_balance_range_rejected(mock_payments: AsyncMock, client: TestClient, tenant_options: dict):
    response = client.post(
        "/v1/tenants/acme/arrangements",
        json={"option_id": str(tenant_options["settlement"].id), "account_id": "acct-4", "balance_cents": 50000},
    )

    assert response.status_code == 422


def test_accept_unknown_option(client: TestClient, tenant_options: dict):
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    response = client.post(
        "/v1/tenants/acme/arrangements",
        json={"option_id": fake_uuid, "account_id": "acct-5", "balance_cents": 100000},
    )
    assert response.status_code == 404


def test_accept_option_of_other_tenant(client: TestClient, tenant_options: dict):
    response = client.post(
        "/v1/tenants/other/arrangements",
        json={"option_id": str(tenant_options["range"].id), "account_id": "acct-6", "balance_cents": 100000},
    )
    assert response.status_code == 404


def test_accept_invalid_option_id(client: TestClient):
    response = client.post(
        "/v1/tenants/acme/arrangements",
        json={"option_id": "not-a-uuid", "account_id": "acct-7", "balance_cents": 100000},
    )
    assert response.status_code == 400


def test_get_arrangement_not_found(client: TestClient):
    """Test GET /v1/arrangements/{arrangement_id} with unknown ID"""
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    response = client.get(f"/v1/arrangements/{fake_uuid}")
    assert response.status_code == 404


def test_summary_endpoint_non_finite_amount(client: TestClient):
    """Test a stored record with NaN/Infinity amounts still renders"""
    body = (
        '{"arrangement": {"planType": "settlement", "calculatedPayoffAmount": NaN,'
        ' "calculatedPayoffPercentage": Infinity}, "current_balance_cents": 100000}'
    )
    response = client.post("/v1/summary", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 200
    assert response.json()["headline"] == "Settle your balance"


def test_summary_endpoint_negative_amount(client: TestClient):
    response = client.post(
        "/v1/summary",
        json={"arrangement": {"planType": "range", "calculatedMonthlyPayment": -5000}},
    )

    assert response.status_code == 200
    assert response.json()["headline"] == "Monthly payment plan"


def test_get_arrangement_option(client: TestClient, tenant_options: dict):
    option_id = str(tenant_options["settlement"].id)

    response = client.get(f"/v1/tenants/acme/arrangement-options/{option_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == option_id
    assert data["payoff_percentage_basis_points"] == 6_000


def test_get_arrangement_option_of_other_tenant(client: TestClient, tenant_options: dict):
    option_id = str(tenant_options["settlement"].id)

    assert client.get(f"/v1/tenants/other/arrangement-options/{option_id}").status_code == 404
    assert client.get("/v1/tenants/acme/arrangement-options/not-a-uuid").status_code == 400


def test_delete_arrangement_option(client: TestClient, tenant_options: dict):
    option_id = str(tenant_options["one_time_payment"].id)

    response = client.delete(f"/v1/tenants/acme/arrangement-options/{option_id}")

    assert response.status_code == 204
    assert client.get(f"/v1/tenants/acme/arrangement-options/{option_id}").status_code == 404
    listed = [o["id"] for o in client.get("/v1/tenants/acme/arrangement-options").json()]
    assert option_id not in listed
    assert client.delete(f"/v1/tenants/acme/arrangement-options/{option_id}").status_code == 404


@patch(PAYMENTS_EVENT)
def test_delete_option_keeps_accepted_arrangement(mock_payments: AsyncMock, client: TestClient, tenant_options: dict):
    mock_payments.return_value = None
    option_id = str(tenant_options["range"].id)
    accepted = client.post(
        "/v1/tenants/acme/arrangements",
        json={"option_id": option_id, "account_id": "acct-8", "balance_cents": 100000},
    ).json()

    assert client.delete(f"/v1/tenants/acme/arrangement-options/{option_id}").status_code == 204

    fetched = client.get(f"/v1/arrangements/{accepted['arrangement_id']}")
    assert fetched.status_code == 200
    assert fetched.json()["option_id"] is None
    assert fetched.json()["payments"] == accepted["payments"]


@patch(PAYMENTS_EVENT)
def test_accept_rejects_second_active_arrangement(mock_payments: AsyncMock, client: TestClient, tenant_options: dict):
    """Test an account with an active arrangement cannot accept another"""
    mock_payments.return_value = None
    body = {"option_id": str(tenant_options["range"].id), "account_id": "acct-1", "balance_cents": 100000}

    first = client.post("/v1/tenants/acme/arrangements", json=body)
    second = client.post("/v1/tenants/acme/arrangements", json=body)

    assert first.status_code == 201
    assert second.status_code == 409
    mock_payments.assert_called_once()


@patch(PAYMENTS_EVENT)
def test_offers_report_assigned_arrangement(mock_payments: AsyncMock, client: TestClient, tenant_options: dict):
    mock_payments.return_value = None
    range_id = str(tenant_options["range"].id)
    accepted = client.post(
        "/v1/tenants/acme/arrangements",
        json={"option_id": range_id, "account_id": "acct-9", "balance_cents": 200000},
    ).json()

    body = client.get("/v1/tenants/acme/arrangements", params={"balance_cents": 200000, "account_id": "acct-9"}).json()

    assert body["assigned"]["arrangement_id"] == accepted["arrangement_id"]
    assert range_id not in {o["option_id"] for o in body["available"]}
    assert len(body["available"]) == 5

    other = client.get("/v1/tenants/acme/arrangements", params={"balance_cents": 200000, "account_id": "acct-10"})
    assert other.json()["assigned"] is None
    assert len(other.json()["available"]) == 6


@patch(PAYMENTS_EVENT)
def test_accept_rejects_overlong_plan(mock_payments: AsyncMock, client: TestClient, tenant_options: dict):
    """Test a huge balance on an unbounded fixed option is not turned into thousands of payments"""
    response = client.post(
        "/v1/tenants/acme/arrangements",
        json={
            "option_id": str(tenant_options["fixed_monthly"].id),
            "account_id": "acct-11",
            "balance_cents": 100_000_000,
            "frequency": "weekly",
        },
    )

    assert response.status_code == 422
    mock_payments.assert_not_called()


@pytest.mark.parametrize("module", [arrangements, calculator, tenants])
def test_database_routes_run_in_threadpool(module):
    """Test route handlers are plain functions so blocking database work stays off the event loop"""
    handlers = [route.endpoint for route in module.router.routes]

    assert handlers
    assert not any(inspect.iscoroutinefunction(handler) for handler in handlers)
