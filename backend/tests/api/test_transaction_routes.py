"""
Transaction Routes Tests

Credits, debits, batches and history through the HTTP API, acting as the
demo user or as a token holder.
"""

import re

import pytest

from kosh.core.settings import settings


async def test_credit_auto_saves(client):
    response = await client.post(
        "/api/transactions/credit",
        json={"amount": 1000, "description": "Order #42"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["message"] == "Payment credited"
    assert body["saved"] == 35
    assert body["treasuryBalance"] == 35
    assert body["transaction"]["type"] == "credit"
    assert body["transaction"]["amount"] == 1000
    assert body["transaction"]["description"] == "Order #42"


async def test_credit_below_threshold(client):
    response = await client.post("/api/transactions/credit", json={"amount": 99})

    assert response.status_code == 200
    assert response.json()["saved"] == 0
    assert response.json()["treasuryBalance"] == 0


@pytest.mark.parametrize("payload", [{}, {"amount": 0}, {"amount": -20}])
async def test_credit_rejects_non_positive_amounts(client, payload):
    response = await client.post("/api/transactions/credit", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "amount must be a positive number"
    assert body["errorCode"] == "VALIDATION_ERROR"


@pytest.mark.parametrize("path", ["/api/transactions/credit", "/api/transactions/debit"])
@pytest.mark.parametrize("amount", ["lots", 0.004, True, [10]])
async def test_payment_rejects_invalid_amounts(client, path, amount):
    response = await client.post(path, json={"amount": amount})

    assert response.status_code == 400
    assert response.json()["error"] == "amount must be a positive number"


async def test_payment_amounts_are_rounded_to_paise(client):
    credit = await client.post("/api/transactions/credit", json={"amount": 10.005})
    debit = await client.post("/api/transactions/debit", json={"amount": "4.994"})

    assert credit.status_code == debit.status_code == 200
    assert credit.json()["transaction"]["amount"] == 10.01
    assert debit.json()["transaction"]["amount"] == 4.99
    history = (await client.get("/api/transactions")).json()
    assert [item["amount"] for item in history] == [4.99, 10.01]


async def test_debit_records_only(client):
    response = await client.post("/api/transactions/debit", json={"amount": 250})

    assert response.status_code == 200
    assert response.json()["transaction"]["type"] == "debit"

    treasury = await client.get("/api/treasury")
    assert treasury.json()["balance"] == 0


async def test_batch_credit(client):
    response = await client.post(
        "/api/transactions/batch",
        json={"amounts": [1000, "x", 500, -1]}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["processed"] == 2
    assert body["skipped"] == 2
    assert body["saved"] == 53
    assert body["treasuryBalance"] == 53


@pytest.mark.parametrize("payload", [{"amounts": []}, {"amounts": 5}, {}])
async def test_batch_credit_requires_list(client, payload):
    response = await client.post("/api/transactions/batch", json=payload)

    assert response.status_code == 400
    assert response.json()["error"] == "amounts must be a non-empty array of numbers"


async def test_list_transactions(client):
    await client.post("/api/transactions/credit", json={"amount": 100})
    await client.post("/api/transactions/debit", json={"amount": 40, "description": "Rent"})

    response = await client.get("/api/transactions")

    assert response.status_code == 200
    items = response.json()
    assert [item["type"] for item in items] == ["debit", "credit"]
    assert items[0]["description"] == "Rent"
    assert items[0]["transactionId"].isdigit()
    assert re.fullmatch(r"\d{2}/\d{2}/\d{4}, \d{2}:\d{2}:\d{2}", items[0]["date"])
    assert "occurredAt" in items[0]


async def test_token_user_is_isolated_from_demo_user(client, auth_headers):
    await client.post("/api/transactions/credit", json={"amount": 1000}, headers=auth_headers)

    mine = await client.get("/api/transactions", headers=auth_headers)
    demo = await client.get("/api/transactions")

    assert len(mine.json()) == 1
    assert demo.json() == []


async def test_anonymous_access_disabled(client, monkeypatch):
    monkeypatch.setattr(settings.demo, "ANONYMOUS_ACCESS", False)

    response = await client.get("/api/transactions")

    assert response.status_code == 401
    assert response.json()["message"] == "Missing Authorization header"


async def test_missing_demo_user(client, monkeypatch):
    monkeypatch.setattr(settings.demo, "EMAIL", "nobody@local")

    response = await client.get("/api/transactions")

    assert response.status_code == 404
    assert response.json()["error"] == "Demo user not found"
