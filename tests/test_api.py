from datetime import date, timedelta
from decimal import Decimal

import httpx
import pytest

from components.core.init_db import get_db
from restapi.router import create_app


@pytest.fixture
async def client(database):
    app = create_app()

    async def override_get_db():
        async with database.get_db() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def register(client, login):
    response = await client.post("/auth/register", json={"login": login, "password": "secret123", "name": login})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def auth(client):
    return await register(client, "alice")


@pytest.fixture
async def ledger(client, auth):
    """An account holding 1000.00 and one category."""
    account = await client.post(
        "/accounts/", json={"name": "Checking", "type": "checking", "opening_balance": "1000.00"}, headers=auth
    )
    category = await client.post("/categories/", json={"name": "Groceries"}, headers=auth)
    assert account.status_code == 201
    assert category.status_code == 201
    return {"account_id": account.json()["id"], "category_id": category.json()["id"]}


def transaction_body(ledger, amount, type="expense", **extra):
    body = {
        "title": "Shopping",
        "amount": amount,
        "type": type,
        "category_id": ledger["category_id"],
        "account_id": ledger["account_id"],
        "date": "2024-05-10",
    }
    body.update(extra)
    return body


async def balance(client, auth, account_id):
    response = await client.get(f"/accounts/{account_id}", headers=auth)
    assert response.status_code == 200
    return Decimal(response.json()["balance"])


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health_check/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_register_and_login(client):
    await register(client, "bob")

    response = await client.post("/auth/login", data={"username": "bob", "password": "secret123"})
    assert response.status_code == 200
    headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

    me = await client.get("/users/me", headers=headers)
    assert me.json()["login"] == "bob"

    wrong = await client.post("/auth/login", data={"username": "bob", "password": "nope-nope"})
    assert wrong.status_code == 401


@pytest.mark.asyncio
async def test_requests_need_a_token(client):
    response = await client.get("/accounts/")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_transaction_updates_balance(client, auth, ledger):
    created = await client.post("/transactions/", json=transaction_body(ledger, "200.00"), headers=auth)
    assert created.status_code == 201
    transaction_id = created.json()["id"]
    assert await balance(client, auth, ledger["account_id"]) == Decimal("800.00")

    updated = await client.put(
        f"/transactions/{transaction_id}", json=transaction_body(ledger, "300.00"), headers=auth
    )
    assert updated.status_code == 200
    assert await balance(client, auth, ledger["account_id"]) == Decimal("700.00")

    statement = await client.get(f"/accounts/{ledger['account_id']}/statement", headers=auth)
    assert [t["id"] for t in statement.json()] == [transaction_id]

    deleted = await client.delete(f"/transactions/{transaction_id}", headers=auth)
    assert deleted.status_code == 204
    assert await balance(client, auth, ledger["account_id"]) == Decimal("1000.00")


@pytest.mark.asyncio
async def test_insufficient_funds_response(client, auth, ledger):
    response = await client.post("/transactions/", json=transaction_body(ledger, "1000.01"), headers=auth)

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "insufficient_funds"
    assert body["account_id"] == ledger["account_id"]
    assert await balance(client, auth, ledger["account_id"]) == Decimal("1000.00")


@pytest.mark.asyncio
async def test_non_positive_amount_is_unprocessable(client, auth, ledger):
    response = await client.post("/transactions/", json=transaction_body(ledger, "0"), headers=auth)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_other_users_data_is_not_found(client, auth, ledger):
    intruder = await register(client, "mallory")

    account = await client.get(f"/accounts/{ledger['account_id']}", headers=intruder)
    assert account.status_code == 404
    assert account.json()["code"] == "not_found"

    response = await client.post("/transactions/", json=transaction_body(ledger, "10.00"), headers=intruder)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_transfer_endpoint(client, auth, ledger):
    savings = await client.post("/accounts/", json={"name": "Savings", "type": "savings"}, headers=auth)
    savings_id = savings.json()["id"]
    body = {
        "source_account_id": ledger["account_id"],
        "destination_account_id": savings_id,
        "amount": "400.00",
        "date": "2024-05-10",
    }

    created = await client.post("/transfers/", json=body, headers=auth)
    assert created.status_code == 201
    assert await balance(client, auth, ledger["account_id"]) == Decimal("600.00")
    assert await balance(client, auth, savings_id) == Decimal("400.00")

    refused = await client.post("/transfers/", json=dict(body, amount="600.01"), headers=auth)
    assert refused.status_code == 400
    assert refused.json()["code"] == "insufficient_funds"

    same = await client.post("/transfers/", json=dict(body, destination_account_id=ledger["account_id"]), headers=auth)
    assert same.status_code == 400
    assert same.json()["code"] == "validation_error"

    listed = await client.get("/transfers/", params={"account_id": savings_id}, headers=auth)
    assert [t["id"] for t in listed.json()] == [created.json()["id"]]


@pytest.mark.asyncio
async def test_account_with_history_cannot_be_deleted(client, auth, ledger):
    await client.post("/transactions/", json=transaction_body(ledger, "10.00"), headers=auth)

    response = await client.delete(f"/accounts/{ledger['account_id']}", headers=auth)

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


@pytest.mark.asyncio
async def test_drift_endpoints(client, auth, ledger):
    drift = await client.get("/accounts/drift", headers=auth)
    assert drift.status_code == 200
    assert drift.json() == []

    reconciled = await client.post(f"/accounts/{ledger['account_id']}/reconcile", headers=auth)
    assert reconciled.status_code == 200
    assert reconciled.json()["repaired"] is False


@pytest.mark.asyncio
async def test_budget_and_goal_progress(client, auth, ledger):
    today = date.today().isoformat()
    await client.post("/transactions/", json=transaction_body(ledger, "80.00", date=today), headers=auth)
    budget = await client.post(
        "/budgets/",
        json={"category_id": ledger["category_id"], "amount": "100.00", "period": "monthly"},
        headers=auth,
    )
    assert budget.status_code == 201

    progress = await client.get(f"/budgets/{budget.json()['id']}/progress", headers=auth)
    assert progress.status_code == 200
    assert progress.json()["pct"] == 80
    assert progress.json()["status"] == "warning"

    goal = await client.post(
        "/goals/",
        json={
            "title": "Trip",
            "target_amount": "500.00",
            "current_amount": "250.00",
            "target_date": (date.today() + timedelta(days=30)).isoformat(),
        },
        headers=auth,
    )
    goal_progress = await client.get(f"/goals/{goal.json()['id']}/progress", headers=auth)
    assert goal_progress.json()["pct"] == 50
    assert goal_progress.json()["status"] == "countdown"


@pytest.mark.asyncio
async def test_reports(client, auth, ledger):
    await client.post("/transactions/", json=transaction_body(ledger, "40.00"), headers=auth)
    await client.post("/transactions/", json=transaction_body(ledger, "100.00", type="income"), headers=auth)

    summary = await client.get("/reports/year-summary", params={"year": 2024}, headers=auth)
    assert summary.status_code == 200
    assert Decimal(summary.json()["net"]) == Decimal("60.00")
    assert len(summary.json()["monthly_summaries"]) == 12

    categories = await client.get("/reports/categories", headers=auth)
    assert categories.json()[0]["share_percentage"] == 100
