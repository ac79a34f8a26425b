"""
E2E tests for user personas exercising the full request path against a seeded database.

User personas:
- user_debt_heavy: Card, car loan and student loan; avalanche should win
- user_debt_free: No debts; prompt to add some
- user_salaried: Single salary; baseline diversification score
- user_gig: Many irregular income streams; high diversification
- user_investor: Mixed portfolio; composition-based risk metrics
"""

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient


@pytest.fixture
def personas(seed_debt, seed_income, seed_investment):
    """Seed every persona's records"""
    seed_debt("user_debt_heavy", "Credit Card", 6500, 22.9, 195)
    seed_debt("user_debt_heavy", "Car Loan", 14000, 6.9, 320)
    seed_debt("user_debt_heavy", "Student Loan", 27000, 4.5, 280)

    seed_income("user_salaried", "Acme Corp", 4200, recurrence="monthly", category="Salary")

    seed_income("user_gig", "Rideshare", 450, recurrence="weekly", category="Gig Work")
    seed_income("user_gig", "Design clients", 1800, recurrence="monthly", category="Freelance")
    seed_income("user_gig", "Online shop", 3600, recurrence="quarterly", category="Business")
    seed_income("user_gig", "Dividends", 2400, recurrence="annual", category="Investment Income")
    seed_income("user_gig", "Tax refund", 1200, recurrence="none", category="Windfall")

    today = date.today()
    seed_investment("user_investor", "Total Market ETF", 10000, 13500, today - timedelta(days=1095), type="ETF")
    seed_investment("user_investor", "Growth Stock", 4000, 5200, today - timedelta(days=400), type="Stocks")
    seed_investment("user_investor", "Treasury Bonds", 8000, 8300, today - timedelta(days=700), type="Bonds")
    seed_investment("user_investor", "High-Yield Savings", 5000, 5150, today - timedelta(days=365), type="Cash")
    seed_investment("user_investor", "Rental Property", 20000, 23000, today - timedelta(days=1500), type="real_estate")


@pytest.mark.integration
def test_user_debt_heavy_avalanche_wins(client: TestClient, personas):
    """
    user_debt_heavy: High-rate card alongside large low-rate loans
    Expected: Card paid first under avalanche, avalanche cheapest overall
    """
    response = client.get(
        "/v1/debts/strategies",
        params={"extra_monthly_payment": 300},
        headers={"X-User-ID": "user_debt_heavy"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["best_strategy"] == "avalanche"

    results = {r["strategy"]: r for r in data["results"]}
    assert results["avalanche"]["payoff_order"] == ["Credit Card", "Car Loan", "Student Loan"]
    assert results["snowball"]["payoff_order"][0] == "Credit Card"
    for result in data["results"]:
        assert result["months_to_payoff"] < 360, "Should be debt-free before the cap"
        assert len(result["payoff_order"]) == 3


@pytest.mark.integration
def test_user_debt_free_prompt(client: TestClient, personas):
    """
    user_debt_free: Nothing owed
    Expected: No schedules, prompt to add debts
    """
    response = client.get("/v1/debts/strategies", headers={"X-User-ID": "user_debt_free"})

    assert response.status_code == 200
    data = response.json()
    assert data["results"] == []
    assert data["message"] is not None


@pytest.mark.integration
def test_user_salaried_baseline_score(client: TestClient, personas):
    """
    user_salaried: One employer
    Expected: Baseline score of 25 with advice to diversify
    """
    response = client.get("/v1/income/diversification", headers={"X-User-ID": "user_salaried"})

    assert response.status_code == 200
    data = response.json()
    assert data["overall_score"] == 25
    assert data["rating"] == "Needs Improvement"
    assert data["primary_dependency"] == 100.0
    titles = [r["title"] for r in data["recommendations"]]
    assert "Add more income sources" in titles
    assert "Reduce reliance on primary income" in titles


@pytest.mark.integration
def test_user_gig_well_diversified(client: TestClient, personas):
    """
    user_gig: Five streams across five categories
    Expected: High score, no dependency warning
    """
    response = client.get("/v1/income/diversification", headers={"X-User-ID": "user_gig"})

    assert response.status_code == 200
    data = response.json()
    assert data["source_count"] == 5
    assert data["overall_score"] >= 80
    assert data["rating"] == "Excellent"
    assert data["primary_dependency"] < 70
    assert len(data["breakdown"]) == 5
    titles = [r["title"] for r in data["recommendations"]]
    assert "Reduce reliance on primary income" not in titles
    assert "Add passive income streams" not in titles


@pytest.mark.integration
def test_user_investor_portfolio(client: TestClient, personas):
    """
    user_investor: Stocks, bonds, cash and property
    Expected: Positive returns, moderate risk proxies
    """
    response = client.get("/v1/investments/performance", headers={"X-User-ID": "user_investor"})

    assert response.status_code == 200
    data = response.json()
    assert data["total_invested"] == 47000.0
    assert data["total_value"] == 55150.0
    assert data["total_return"] > 0
    assert 0 < data["annualized_return"] < 1000
    assert len(data["investments"]) == 5

    risk = data["risk_metrics"]
    # 2 stock, 1 bond, 1 cash, 1 alternative holding
    assert risk["beta"] == 0.96
    assert risk["volatility"] == pytest.approx(15.2 * 0.85, abs=0.01)
    assert risk["volatility_label"] == "Medium"
