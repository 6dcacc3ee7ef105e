"""
Investment Routes Tests

Treasury top-ups feeding investments, liquidation and NAV growth.
"""

import pytest


async def fund_treasury(client, amount=1000):
    response = await client.post("/api/treasury/top-up", json={"amount": amount})
    assert response.status_code == 200
    return response.json()["treasuryBalance"]


async def test_top_up_defaults_to_weekly_amount(client):
    response = await client.post("/api/treasury/top-up")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "treasuryBalance": 500}

    treasury = (await client.get("/api/treasury")).json()
    assert treasury["balance"] == 500
    assert treasury["entries"][0]["kind"] == "topup"


async def test_top_up_rejects_non_positive(client):
    response = await client.post("/api/treasury/top-up", json={"amount": 0})

    assert response.status_code == 400


async def test_invest_and_list_positions(client):
    # Arrange
    await fund_treasury(client)

    # Act
    response = await client.post("/api/investments", json={"amount": 400, "risk": "high"})

    # Assert
    assert response.status_code == 200
    assert response.json() == {"ok": True, "investedAmount": 400, "treasuryBalance": 600}

    positions = (await client.get("/api/investments")).json()
    assert len(positions) == 1
    position = positions[0]
    assert position["fundName"] == "High Risk Fund"
    assert position["risk"] == "high"
    assert position["units"] == 4
    assert position["investmentAmount"] == 400
    assert position["nav"] == 100
    assert position["navAtInvest"] == 100
    assert position["currentValue"] == 400


async def test_invest_defaults_to_low_risk(client):
    await fund_treasury(client)

    await client.post("/api/investments", json={"amount": 100})

    positions = (await client.get("/api/investments")).json()
    assert positions[0]["fundName"] == "Low Risk Fund"


async def test_invest_rejects_unknown_risk(client):
    await fund_treasury(client)

    response = await client.post("/api/investments", json={"amount": 100, "risk": "medium"})

    assert response.status_code == 422


async def test_invest_insufficient_treasury(client):
    await fund_treasury(client, 100)

    response = await client.post("/api/investments", json={"amount": 150})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Insufficient treasury balance"
    assert body["errorCode"] == "INSUFFICIENT_FUNDS"


async def test_liquidate(client):
    await fund_treasury(client)
    await client.post("/api/investments", json={"amount": 300})
    await client.post("/api/investments", json={"amount": 200})

    response = await client.post("/api/investments/liquidate", json={"amount": 250})

    assert response.status_code == 200
    assert response.json() == {"ok": True, "investedAmount": 250, "treasuryBalance": 750}


async def test_liquidate_more_than_invested(client):
    await fund_treasury(client)
    await client.post("/api/investments", json={"amount": 100})

    response = await client.post("/api/investments/liquidate", json={"amount": 101})

    assert response.status_code == 400
    assert response.json()["error"] == "Insufficient invested amount"
    positions = (await client.get("/api/investments")).json()
    assert positions[0]["investmentAmount"] == 100


async def test_grow_updates_nav_and_valuation(client):
    await fund_treasury(client)
    await client.post("/api/investments", json={"amount": 200, "risk": "high"})

    response = await client.post("/api/investments/grow", json={"risk": "high", "ratePct": 12.5})

    assert response.status_code == 200
    navs = {nav["risk"]: nav["currentNav"] for nav in response.json()["navs"]}
    assert navs == {"high": 112.5, "low": 100}
    position = (await client.get("/api/investments")).json()[0]
    assert position["currentValue"] == 225


@pytest.mark.parametrize("payload", [{}, {"ratePct": -100}])
async def test_grow_rejects_invalid_rate(client, payload):
    response = await client.post("/api/investments/grow", json=payload)

    assert response.status_code == 400


async def test_list_navs(client):
    response = await client.get("/api/investments/navs")

    assert response.status_code == 200
    assert response.json() == [
        {"risk": "high", "currentNav": 100},
        {"risk": "low", "currentNav": 100},
    ]


@pytest.mark.parametrize("path", ["/api/investments", "/api/investments/liquidate", "/api/treasury/top-up"])
@pytest.mark.parametrize("amount", ["abc", 0.004])
async def test_amount_must_be_a_positive_number(client, path, amount):
    await fund_treasury(client)

    response = await client.post(path, json={"amount": amount})

    assert response.status_code == 400
    assert response.json()["error"] == "amount must be a positive number"


async def test_grow_rejects_non_numeric_rate(client):
    response = await client.post("/api/investments/grow", json={"ratePct": "abc"})

    assert response.status_code == 400
    assert response.json()["error"] == "ratePct must be a number"


async def test_invest_rounds_amount_to_paise(client):
    await fund_treasury(client, 10)

    response = await client.post("/api/investments", json={"amount": 0.005})

    assert response.status_code == 200
    assert response.json() == {"ok": True, "investedAmount": 0.01, "treasuryBalance": 9.99}
    position = (await client.get("/api/investments")).json()[0]
    assert position["investmentAmount"] == 0.01
