from decimal import Decimal

import pytest

from invoicedesk.api.deps import get_store
from invoicedesk.config import get_settings
from invoicedesk.errors import StoreError
from invoicedesk.main import app


@pytest.fixture
def seeded(add_customer, add_invoice, add_revenue):
    add_customer("c1", "Acme Co", "billing@acme.com")
    add_customer("c2", "Lee Robinson", "lee@robinson.com")
    add_invoice("i1", "c2", 20348, "paid", "2023-01-14")
    add_revenue("Jan", 2000)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_invoice_scenario_over_http(client, seeded):
    resp = client.post(
        "/invoices", data={"customerId": "c1", "amount": "49.99", "status": "pending"}
    )
    assert resp.status_code == 303
    assert resp.headers["location"] == "/dashboard/invoices"

    listing = client.get("/invoices", params={"query": "acme"}).json()
    assert listing["total_pages"] == 1
    assert len(listing["items"]) == 1
    created = listing["items"][0]
    assert created["status"] == "pending"
    assert created["amount"] == "$49.99"
    invoice_id = created["id"]

    resp = client.put(
        f"/invoices/{invoice_id}",
        data={"customerId": "c1", "amount": "49.99", "status": "paid"},
    )
    assert resp.status_code == 303

    resp = client.get(f"/invoices/{invoice_id}")
    assert resp.status_code == 200
    assert resp.headers["cache-control"] == "no-store"
    data = resp.json()
    assert data["status"] == "paid"
    assert Decimal(str(data["amount"])) == Decimal("49.99")

    resp = client.delete(f"/invoices/{invoice_id}")
    assert resp.status_code == 204
    assert client.get(f"/invoices/{invoice_id}").status_code == 404


def test_invalid_invoice_form_returns_errors(client, seeded):
    resp = client.post("/invoices", data={"customerId": "c1", "amount": "0", "status": "pending"})
    assert resp.status_code == 422
    assert resp.json() == {
        "errors": {"amount": ["Please enter an amount greater than $0."]},
        "message": "Missing fields. Failed to create invoice.",
    }


@pytest.mark.parametrize("amount", ["0.004", "1e30"])
def test_unstorable_amount_is_a_field_error(client, seeded, amount):
    resp = client.post("/invoices", data={"customerId": "c1", "amount": amount, "status": "paid"})
    assert resp.status_code == 422
    assert resp.json()["errors"] == {"amount": ["Please enter an amount greater than $0."]}


def test_database_error_on_create_returns_message(client, seeded):
    resp = client.post(
        "/invoices", data={"customerId": "ghost", "amount": "10", "status": "paid"}
    )
    assert resp.status_code == 500
    assert resp.json()["message"] == "Database Error: Failed to create invoice."


def test_invoice_reads_see_writes_made_elsewhere(client, seeded, add_invoice, view_cache):
    first = client.get("/invoices")
    assert first.headers["cache-control"] == "no-store"
    assert "etag" not in first.headers
    assert client.get("/invoices/latest").headers["cache-control"] == "no-store"

    # written straight to the database, so this process never revalidates
    add_invoice("i2", "c1", 500, "pending", "2023-02-01")
    assert view_cache.version("/dashboard/invoices") == 0

    fresh = client.get("/invoices", headers={"If-None-Match": "W/\"stale\""})
    assert fresh.status_code == 200
    assert len(fresh.json()["items"]) == 2
    assert [row["id"] for row in client.get("/invoices/latest").json()] == ["i2", "i1"]


def test_mutation_revalidates_invoice_view(client, seeded, view_cache):
    client.post("/invoices", data={"customerId": "c1", "amount": "5", "status": "paid"})
    assert view_cache.version("/dashboard/invoices") == 1


def test_invoice_pages_and_latest(client, seeded):
    assert client.get("/invoices/pages").json() == {"total_pages": 1}
    latest = client.get("/invoices/latest").json()
    assert latest[0]["name"] == "Lee Robinson"
    assert latest[0]["amount"] == "$203.48"


def test_page_must_be_positive(client, seeded):
    assert client.get("/invoices", params={"page": 0}).status_code == 422


def test_customer_endpoints(client, seeded):
    assert client.get("/customers").json() == [
        {"id": "c1", "name": "Acme Co"},
        {"id": "c2", "name": "Lee Robinson"},
    ]
    assert client.get("/customers/names").json() == ["Acme Co", "Lee Robinson"]

    table = client.get("/customers/table", params={"query": "LEE"}).json()
    assert table["page"] == 1
    assert table["total_pages"] == 1
    assert table["items"][0]["total_paid"] == "$203.48"
    assert table["items"][0]["total_invoices"] == 1

    assert client.get("/customers/pages", params={"query": "zzz"}).json() == {"total_pages": 0}


def test_dashboard_endpoints(client, seeded):
    cards = client.get("/dashboard/cards").json()
    assert cards == {
        "number_of_invoices": 1,
        "number_of_customers": 2,
        "total_paid_invoices": "$203.48",
        "total_pending_invoices": "$0.00",
    }
    assert client.get("/dashboard/revenue").json() == [{"month": "Jan", "revenue": 2000.0}]


def test_data_access_error_is_reported(client):
    class BrokenStore:
        def filtered_invoices(self, query, limit, offset):
            raise StoreError("connection refused")

    app.dependency_overrides[get_store] = lambda: BrokenStore()
    resp = client.get("/invoices")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Failed to fetch invoices"}


def test_login_sets_session_cookie(client, identity_provider):
    resp = client.post(
        "/auth/login", data={"email": "user@nextmail.com", "password": "123456"}
    )
    assert resp.status_code == 303
    assert resp.headers["location"] == "/dashboard"
    assert get_settings().session_cookie in resp.headers["set-cookie"]
    assert "token-123" in resp.headers["set-cookie"]


def test_login_with_bad_credentials(client):
    resp = client.post(
        "/auth/login", data={"email": "user@nextmail.com", "password": "wrong"}
    )
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid credentials. Failed to login."


def test_login_with_incomplete_form(client):
    resp = client.post("/auth/login", data={"email": ""})
    assert resp.status_code == 422
    assert resp.json()["errors"]["password"] == ["Password is required."]


def test_logout_clears_cookie(client, identity_provider):
    client.cookies.set(get_settings().session_cookie, "token-123")
    resp = client.post("/auth/logout")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/"
    assert identity_provider.sign_outs == ["token-123"]


def test_require_login_guards_dashboard_routes(client, seeded, monkeypatch):
    monkeypatch.setattr(get_settings(), "require_login", True)

    assert client.get("/customers").status_code == 401

    client.cookies.set(get_settings().session_cookie, "token-123")
    assert client.get("/customers").status_code == 200
