"""
Account Routes Tests

Settings, bank linking, dashboard, analytics and health endpoints.
"""

import pytest


async def test_read_settings(client):
    response = await client.get("/api/settings")

    assert response.status_code == 200
    body = response.json()
    assert body["autoSaveRate"] == 3.5
    assert body["weeklyTopUp"] == 500
    assert body["minThreshold"] == 100
    assert body["roundUpsEnabled"] is True


@pytest.mark.parametrize("method", ["post", "put"])
async def test_update_settings_clamps_and_ignores(client, method):
    response = await getattr(client, method)(
        "/api/settings",
        json={"autoSaveRate": 120, "weeklyTopUp": -5, "minThreshold": 50}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["settings"]["autoSaveRate"] == 100
    assert body["settings"]["weeklyTopUp"] == 500
    assert body["settings"]["minThreshold"] == 50


async def test_new_settings_apply_to_credits(client):
    await client.put("/api/settings", json={"autoSaveRate": 10, "minThreshold": 0})

    response = await client.post("/api/transactions/credit", json={"amount": 55})

    assert response.json()["saved"] == 6


async def test_bank_not_linked(client):
    response = await client.get("/api/bank")

    assert response.status_code == 200
    assert response.json() == {"linked": False}


async def test_link_bank(client):
    response = await client.post("/api/bank/link", json={"accountNumber": "  12345678  "})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["bank"]["linked"] is True
    assert body["bank"]["accountNumber"] == "12345678"

    status = (await client.get("/api/bank")).json()
    assert status["linked"] is True
    assert status["accountNumber"] == "12345678"
    assert "linkedAt" in status


@pytest.mark.parametrize("account_number", ["12345", "   12  ", None, 123])
async def test_link_bank_rejects_short_numbers(client, account_number):
    response = await client.post("/api/bank/link", json={"accountNumber": account_number})

    assert response.status_code == 400
    assert response.json()["error"] == "accountNumber must be at least 6 digits"


async def test_dashboard(client):
    # Arrange
    await client.post("/api/transactions/credit", json={"amount": 2000})
    await client.post("/api/treasury/top-up", json={"amount": 500})
    await client.post("/api/investments", json={"amount": 300, "risk": "high"})
    await client.post("/api/investments/grow", json={"risk": "high", "ratePct": 10})

    # Act
    response = await client.get("/api/dashboard")

    # Assert
    assert response.status_code == 200
    body = response.json()
    assert body["treasuryBalance"] == 270
    assert body["investedAmount"] == 300
    assert body["currentValue"] == 330
    assert body["savingsThisMonth"] == 70
    assert [item["type"] for item in body["recentActivity"]] == ["invest", "topup", "save"]
    assert body["recentActivity"][0]["description"] == "Invested ₹300 to High Risk"


async def test_dashboard_summary(client, registered_user):
    response = await client.get("/api/dashboard/summary")

    assert response.json() == {"users": 2}


async def test_analytics(client):
    await client.post("/api/transactions/credit", json={"amount": 1000})
    await client.post("/api/transactions/debit", json={"amount": 200})

    response = await client.get("/api/analytics", params={"range": "week"})

    assert response.status_code == 200
    body = response.json()
    assert body["totalCredited"] == 1000
    assert body["totalSaved"] == 35
    assert body["totalInvested"] == 0
    assert len(body["monthlySavings"]) == 12
    assert len(body["savingsTrend"]) == 7
    assert body["savingsTrend"][-1]["amount"] == 800
    assert body["investmentDistribution"] == []
    assert len(body["recentTransactions"]) == 2


async def test_analytics_rejects_unknown_range(client):
    response = await client.get("/api/analytics", params={"range": "decade"})

    assert response.status_code == 422


async def test_health_endpoints(client):
    root = await client.get("/api")
    health = await client.get("/api/health")
    healthz = await client.get("/healthz")

    assert root.json() == {"status": "ok", "service": "kosh-server"}
    assert health.json()["status"] == "ok"
    assert "time" in health.json()
    assert healthz.status_code in (200, 503)


async def test_correlation_id_is_echoed(client):
    response = await client.get("/api", headers={"X-Correlation-ID": "abc-123"})

    assert response.headers["X-Correlation-ID"] == "abc-123"
