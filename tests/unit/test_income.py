"""Unit tests for income normalization and diversification scoring"""

import pytest
from finsight_gateway.domain import income as income_module
from finsight_gateway.domain.models import IncomeRecord, NamedAmount, Recurrence
from finsight_gateway.domain.income import (
    diversification_recommendations,
    herfindahl_index,
    income_monthly_amount,
    monthly_equivalent,
    score_diversification,
    score_rating,
    total_monthly_income,
)
from finsight_gateway.domain.exceptions import InvalidInputError


@pytest.mark.parametrize(
    "amount,recurrence,expected",
    [
        (1200, Recurrence.WEEKLY, 5200),
        (1200, Recurrence.BI_WEEKLY, 2600),
        (1000, Recurrence.MONTHLY, 1000),
        (3000, Recurrence.QUARTERLY, 1000),
        (6000, Recurrence.SEMI_ANNUAL, 1000),
        (12000, Recurrence.ANNUAL, 1000),
        (12000, Recurrence.NONE, 1000),
    ],
)
def test_monthly_equivalent(amount, recurrence, expected):
    """Test recurrence multipliers (one-time income spread over a year)"""
    assert monthly_equivalent(amount, recurrence) == pytest.approx(expected)


def test_monthly_equivalent_accepts_strings():
    assert monthly_equivalent(1200, "bi_weekly") == pytest.approx(2600)


def test_monthly_equivalent_one_time_months():
    """Test amortization window for one-time income is configurable"""
    assert monthly_equivalent(5000, Recurrence.NONE, one_time_months=1) == 5000
    assert monthly_equivalent(5000, Recurrence.NONE, one_time_months=0) == 5000


def test_monthly_equivalent_rejects_unknown_recurrence():
    with pytest.raises(InvalidInputError):
        monthly_equivalent(1000, "fortnightly")


def test_monthly_equivalent_rejects_non_finite_amount():
    with pytest.raises(InvalidInputError):
        monthly_equivalent(float("inf"), Recurrence.MONTHLY)


def test_income_adjusted_for_deductions_and_side_hustles():
    """Test deductions are subtracted and side hustles added before normalizing"""
    salary = IncomeRecord(
        amount=5000,
        recurrence=Recurrence.MONTHLY,
        category="Salary",
        source_name="Acme Corp",
        deductions=[NamedAmount("401k", 400), NamedAmount("Health Insurance", 100)],
        side_hustles=[NamedAmount("Tutoring", 300)],
    )

    assert salary.adjusted_amount == 4800
    assert income_monthly_amount(salary) == 4800


def test_total_monthly_income():
    incomes = [
        IncomeRecord(amount=2000, recurrence=Recurrence.BI_WEEKLY, category="Salary"),
        IncomeRecord(amount=6000, recurrence=Recurrence.ANNUAL, category="Dividends"),
    ]

    assert total_monthly_income(incomes) == pytest.approx(2000 * 26 / 12 + 500)


def test_herfindahl_index():
    assert herfindahl_index([1, 1]) == pytest.approx(0.5)
    assert herfindahl_index([80, 20]) == pytest.approx(0.68)
    assert herfindahl_index([0, 0]) == 0.0


def test_score_no_incomes():
    """Test empty income list scores zero across the board"""
    score = score_diversification([])

    assert score.overall_score == 0
    assert score.source_count == 0
    assert score.breakdown == []
    assert score.fallback is False


def test_score_single_income_baseline():
    """Test a single income gets the fixed baseline of 25"""
    score = score_diversification([IncomeRecord(amount=4000, category="Salary")])

    assert score.overall_score == 25
    assert score.source_count == 1
    assert score.primary_dependency == 100.0
    assert score.breakdown[0].source_name == "Salary"
    assert score.breakdown[0].percentage == 100.0


def test_score_single_zero_income_still_baseline():
    score = score_diversification([IncomeRecord(amount=0, category="Salary")])

    assert score.overall_score == 25


def test_score_zero_total_with_many_incomes():
    """Test non-positive total skips the concentration index"""
    incomes = [IncomeRecord(amount=0, category="Salary"), IncomeRecord(amount=0, category="Freelance")]

    assert score_diversification(incomes).overall_score == 0


def test_score_single_category_uses_80_20_split():
    """Test uncategorized incomes are scored as an 80/20 split"""
    incomes = [IncomeRecord(amount=3000), IncomeRecord(amount=1000)]

    score = score_diversification(incomes)

    # HHI 0.68 -> normalized 0.36 -> raw 64; 64 * 0.75 + 2 * 5 = 58
    assert score.overall_score == 58
    assert [item.source_name for item in score.breakdown] == ["Other Income"]
    assert score.primary_dependency == 100.0


def test_score_two_even_categories():
    incomes = [
        IncomeRecord(amount=3000, category="Salary"),
        IncomeRecord(amount=3000, category="Freelance"),
    ]

    assert score_diversification(incomes).overall_score == 85


def test_score_three_categories():
    """Test worked example: 60/20/20 split across three categories"""
    incomes = [
        IncomeRecord(amount=6000, category="Salary", source_name="Employer"),
        IncomeRecord(amount=2000, category="Freelance", source_name="Design work"),
        IncomeRecord(amount=12000, recurrence=Recurrence.SEMI_ANNUAL, category="Investment Income"),
    ]

    score = score_diversification(incomes)

    # HHI 0.44 -> normalized 0.16 -> raw 84; 84 * 0.75 + 15 = 78
    assert score.overall_score == 78
    assert score.primary_dependency == 60.0
    assert score.stability_score == 60
    assert score.growth_potential == 46
    assert sum(item.percentage for item in score.breakdown) == pytest.approx(100.0)
    assert sum(item.score_contribution for item in score.breakdown) == pytest.approx(78, abs=0.05)


def test_score_source_bonus_is_capped():
    """Test perfectly even income across many categories tops out at 100"""
    incomes = [IncomeRecord(amount=1000, category=f"Stream {i}") for i in range(10)]

    assert score_diversification(incomes).overall_score == 100


def test_score_is_bounded():
    incomes = [IncomeRecord(amount=a, category=c) for a, c in [(10000, "Salary"), (1, "Gig"), (1, "Rent")]]

    score = score_diversification(incomes)

    assert 0 <= score.overall_score <= 100


def test_score_falls_back_to_neutral_on_error():
    """Test corrupted records produce a neutral score instead of an error"""
    incomes = [
        IncomeRecord(amount=1000, recurrence="fortnightly", category="Salary"),
        IncomeRecord(amount=500, category="Freelance"),
    ]

    score = score_diversification(incomes)

    assert score.overall_score == 50
    assert score.fallback is True
    assert score.source_count == 2


def test_score_fallback_on_unexpected_failure(monkeypatch):
    def boom(*args, **kwargs):
        raise ZeroDivisionError("boom")

    monkeypatch.setattr(income_module, "_score_diversification", boom)

    assert score_diversification([IncomeRecord(amount=1)]).overall_score == 50


@pytest.mark.parametrize(
    "value,rating",
    [(100, "Excellent"), (80, "Excellent"), (79, "Good"), (60, "Good"), (40, "Fair"), (39, "Needs Improvement")],
)
def test_score_rating(value, rating):
    assert score_rating(value) == rating


def test_recommendations_without_incomes():
    recommendations = diversification_recommendations(score_diversification([]))

    assert [r.title for r in recommendations] == ["Add your income sources"]


def test_recommendations_single_income():
    """Test a lone salary triggers source, dependency and passive-income advice"""
    score = score_diversification([IncomeRecord(amount=5000, category="Salary")])

    titles = [r.title for r in diversification_recommendations(score)]

    assert titles == [
        "Add more income sources",
        "Reduce reliance on primary income",
        "Add passive income streams",
    ]


def test_recommendations_well_diversified():
    """Test a balanced portfolio with investment income gets no advice"""
    incomes = [
        IncomeRecord(amount=3000, category="Salary"),
        IncomeRecord(amount=3000, category="Freelance"),
        IncomeRecord(amount=3000, category="Investment Income"),
    ]

    assert diversification_recommendations(score_diversification(incomes)) == []
