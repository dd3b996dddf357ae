"""Unit tests for the wealth aggregations and FIRE calculations."""

import math
from datetime import date

import pytest

from lifeos_backend.modules.real_estate.models import Loan, Unit
from lifeos_backend.modules.wealth.calculations import (
    compute_asset_allocation,
    compute_fire_progress,
    compute_monthly_cashflow,
    summarize_investments,
    summarize_loans,
    to_monthly_amount,
    years_to_target,
)
from lifeos_backend.modules.wealth.models import (
    DailySnapshot,
    Position,
    RecurringTransaction,
    UserPreferences,
)

TODAY = date(2026, 10, 16)


def _transaction(amount, type_, frequency="monthly"):
    return RecurringTransaction(
        name="tx", amount=amount, type=type_, frequency=frequency, is_active=True
    )


class TestMonthlyAmount:
    @pytest.mark.parametrize(
        "frequency, expected",
        [
            ("weekly", 433.0),
            ("monthly", 100.0),
            ("quarterly", 100 / 3),
            ("yearly", 100 / 12),
            (None, 100.0),
        ],
    )
    def test_frequencies(self, frequency, expected):
        assert to_monthly_amount(100.0, frequency) == pytest.approx(expected)


class TestMonthlyCashflow:
    def test_income_expenses_rent_and_loans(self):
        transactions = [
            _transaction(5000.0, "income"),
            _transaction(-1200.0, "expense", "quarterly"),
            _transaction(-50.0, "expense", "weekly"),
        ]
        units = [
            Unit(name="WE 01", status="vermietet", monthly_rent_cold=700.0,
                 monthly_utilities_advance=150.0),
            Unit(name="WE 02", status="leer", monthly_rent_cold=600.0),
        ]
        loans = [Loan(monthly_payment=900.0)]

        cashflow = compute_monthly_cashflow(transactions, units, loans)

        assert cashflow.rental_income == 850.0
        assert cashflow.loan_payments == 900.0
        assert cashflow.monthly_income == pytest.approx(5850.0)
        assert cashflow.monthly_expenses == pytest.approx(400.0 + 216.5 + 900.0)
        assert cashflow.net_cashflow == pytest.approx(5850.0 - 1516.5)
        assert cashflow.recurring_count == 3

    def test_positive_amount_counts_as_income(self):
        cashflow = compute_monthly_cashflow([_transaction(300.0, "expense")], [], [])

        assert cashflow.monthly_income == 300.0
        assert cashflow.monthly_expenses == 0.0


class TestLoansSummary:
    def test_weighted_rate_and_expiring(self):
        loans = [
            Loan(current_balance=100000.0, interest_rate_nominal=2.0,
                 monthly_payment=500.0, interest_fixed_until=date(2027, 3, 1)),
            Loan(current_balance=300000.0, interest_rate_nominal=4.0,
                 monthly_payment=1500.0, interest_fixed_until=date(2031, 1, 1)),
            Loan(current_balance=50000.0, interest_rate_nominal=1.0,
                 monthly_payment=100.0, interest_fixed_until=date(2026, 1, 1)),
        ]

        summary = summarize_loans(loans, TODAY)

        assert summary.total_balance == 450000.0
        assert summary.total_monthly_payment == 2100.0
        assert summary.weighted_average_rate == pytest.approx(
            (200000 + 1200000 + 50000) / 450000
        )
        assert summary.expiring_soon_count == 1

    def test_no_loans(self):
        summary = summarize_loans([], TODAY)

        assert summary.weighted_average_rate == 0.0
        assert summary.count == 0


def test_investments_summary_groups_by_asset_type():
    positions = [
        Position(name="MSCI World", asset_type="etf", current_value=12000.0,
                 total_invested=10000.0, unrealized_gain_loss=2000.0),
        Position(name="Bitcoin", asset_type="crypto", current_value=3000.0,
                 total_invested=5000.0, unrealized_gain_loss=-2000.0),
        Position(name="Gold", asset_type=None, current_value=1000.0,
                 total_invested=1000.0, unrealized_gain_loss=0.0),
    ]

    summary = summarize_investments(positions)

    assert summary.total_value == 16000.0
    assert summary.total_gain_loss == 0.0
    assert summary.gain_loss_percent == 0.0
    assert summary.by_asset_type == {"etf": 12000.0, "crypto": 3000.0, "sonstige": 1000.0}


class TestFire:
    def test_years_to_target(self):
        assert years_to_target(1_000_000, 1_000_000) == 0.0
        assert years_to_target(0, 1_000_000) is None
        assert years_to_target(500_000, 1_000_000) == pytest.approx(
            math.log(2) / math.log(1.07)
        )

    def test_progress_is_capped(self):
        snapshot = DailySnapshot(date=TODAY, net_worth=1_500_000.0)
        preferences = UserPreferences(
            fire_target_amount=1_000_000.0,
            fire_withdrawal_rate=4.0,
            fire_monthly_expenses=4000.0,
        )

        fire = compute_fire_progress(snapshot, preferences)

        assert fire.progress == 100.0
        assert fire.is_achieved is True
        assert fire.monthly_passive_income == pytest.approx(5000.0)
        assert fire.expenses_covered == pytest.approx(125.0)
        assert fire.years_to_fire == 0.0

    def test_without_data(self):
        fire = compute_fire_progress(None, None)

        assert fire.progress == 0.0
        assert fire.withdrawal_rate == 4.0
        assert fire.is_achieved is False


def test_asset_allocation_shares():
    snapshot = DailySnapshot(
        date=TODAY,
        net_worth=300000.0,
        total_assets=400000.0,
        total_liabilities=100000.0,
        cash_value=40000.0,
        investment_value=60000.0,
        property_value=300000.0,
        company_value=0.0,
    )

    allocation = compute_asset_allocation(snapshot)

    assert allocation.cash.percent == pytest.approx(10.0)
    assert allocation.investments.percent == pytest.approx(15.0)
    assert allocation.properties.percent == pytest.approx(75.0)
    assert allocation.companies.value == 0.0
    assert allocation.net_worth == 300000.0
