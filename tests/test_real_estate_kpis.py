"""Unit tests for the real estate KPI, alert and chart calculations."""

import uuid
from datetime import date, datetime, timezone

import pytest

from lifeos_backend.modules.real_estate.alerts import (
    build_alerts,
    build_risk_board,
    risk_score,
)
from lifeos_backend.modules.real_estate.charts import (
    build_benchmark,
    build_maturity_wall,
    build_trend,
    build_waterfall,
    trend_start,
)
from lifeos_backend.modules.real_estate.kpis import (
    NO_DEBT_DSCR,
    calculate_dscr,
    compute_portfolio_kpis,
    compute_property_kpis,
    compute_property_stats,
    worst_status,
)
from lifeos_backend.modules.real_estate.models import (
    Loan,
    Property,
    PropertyOperatingData,
    PropertyTechnicalStatus,
    TrafficLight,
    Unit,
)
from lifeos_backend.modules.real_estate.schemas import AlertThresholdsValues

TODAY = date(2026, 10, 16)
NOW = datetime(2026, 10, 16, 8, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers to build unsaved rows
# ---------------------------------------------------------------------------

def _property(**overrides):
    values = {
        "id": uuid.uuid4(),
        "name": "Musterstraße 1",
        "address": "Musterstraße 1, Leipzig",
        "country": "Deutschland",
        "property_type": "mehrfamilienhaus",
        "purchase_price": 400000.0,
        "current_value": 500000.0,
        "conservative_market_value": None,
        "total_sqm": 300.0,
        "unit_count": 3,
        "status": "aktiv",
    }
    values.update(overrides)
    return Property(**values)


def _units(property_id):
    return [
        Unit(property_id=property_id, name="WE 01", status="vermietet",
             size_sqm=100.0, monthly_rent_cold=750.0, market_rent_cold=800.0,
             monthly_utilities_advance=150.0),
        Unit(property_id=property_id, name="WE 02", status="vermietet",
             size_sqm=100.0, monthly_rent_cold=750.0, market_rent_cold=800.0,
             monthly_utilities_advance=150.0),
        Unit(property_id=property_id, name="WE 03", status="leer",
             size_sqm=100.0, monthly_rent_cold=None, market_rent_cold=700.0,
             monthly_utilities_advance=None),
    ]


def _loan(property_id=None, **overrides):
    values = {
        "id": uuid.uuid4(),
        "property_id": property_id,
        "loan_type": "annuität",
        "original_amount": 300000.0,
        "current_balance": 250000.0,
        "interest_rate_nominal": 3.0,
        "monthly_payment": 1200.0,
        "special_repayment_allowed": False,
    }
    values.update(overrides)
    return Loan(**values)


def _kpis(prop=None, loans=None, operating_data=None, technical_status=None):
    prop = prop or _property()
    loans = [_loan(prop.id)] if loans is None else loans
    return compute_property_kpis(
        prop, _units(prop.id), loans, operating_data, technical_status, None, TODAY
    )


# ---------------------------------------------------------------------------
# Property KPIs
# ---------------------------------------------------------------------------

class TestPropertyKpis:
    def test_rent_from_units_without_operating_data(self):
        kpi = _kpis()

        assert kpi.actual_cold_rent == 1500.0
        assert kpi.target_cold_rent == 2300.0
        assert kpi.occupied_units == 2
        assert kpi.vacant_units == 1
        assert kpi.vacancy_rate == pytest.approx(100 / 3)

    def test_debt_figures(self):
        kpi = _kpis()

        assert kpi.loan_balance == 250000.0
        assert kpi.monthly_debt_service == 1200.0
        assert kpi.monthly_interest == pytest.approx(625.0)
        assert kpi.monthly_principal == pytest.approx(575.0)
        assert kpi.interest_rate == pytest.approx(3.0)
        assert kpi.dscr == pytest.approx(1.25)
        assert kpi.ltv == pytest.approx(50.0)
        assert kpi.equity == 250000.0

    def test_operating_data_overrides_unit_rent(self):
        prop = _property()
        op = PropertyOperatingData(
            property_id=prop.id,
            month=date(2026, 10, 1),
            actual_cold_rent=2000.0,
            target_cold_rent=2400.0,
            non_allocable_costs=200.0,
            capex_actual=500.0,
            capex_planned=1000.0,
            rent_arrears=1000.0,
            vacancy_days=12,
        )

        kpi = _kpis(prop=prop, operating_data=op)

        assert kpi.actual_cold_rent == 2000.0
        assert kpi.noi == 1800.0
        assert kpi.net_cashflow == 600.0
        assert kpi.net_cashflow_with_capex == 100.0
        assert kpi.capex_budget_used == pytest.approx(50.0)
        assert kpi.arrears_rate == pytest.approx(50.0)
        assert kpi.arrears_months == pytest.approx(0.5)
        assert kpi.vacancy_days == 12

    def test_yields_use_current_value(self):
        kpi = _kpis()

        assert kpi.gross_yield == pytest.approx(1500 * 12 / 500000 * 100)
        assert kpi.rent_per_sqm == pytest.approx(5.0)

    def test_ltv_prefers_conservative_value(self):
        kpi = _kpis(prop=_property(conservative_market_value=400000.0))

        assert kpi.ltv == pytest.approx(62.5)
        assert kpi.current_market_value == 500000.0

    def test_without_loans_dscr_is_sentinel(self):
        kpi = _kpis(loans=[])

        assert kpi.dscr == NO_DEBT_DSCR
        assert kpi.ltv == 0.0

    def test_earliest_interest_expiry(self):
        prop = _property()
        loans = [
            _loan(prop.id, interest_fixed_until=date(2028, 10, 16)),
            _loan(prop.id, interest_fixed_until=date(2027, 4, 16)),
        ]

        kpi = _kpis(prop=prop, loans=loans)

        assert kpi.interest_fixed_until == date(2027, 4, 16)
        assert kpi.months_until_interest_expiry == 6

    def test_worst_technical_status(self):
        prop = _property()
        status = PropertyTechnicalStatus(
            property_id=prop.id,
            heating_status="green",
            roof_status="yellow",
            moisture_status="green",
            electrical_status="green",
            plumbing_status="green",
            facade_status="green",
            windows_status="green",
        )

        kpi = _kpis(prop=prop, technical_status=status)

        assert kpi.roof_status == TrafficLight.YELLOW
        assert kpi.worst_technical_status == TrafficLight.YELLOW


def test_worst_status_order():
    assert worst_status(["green", "yellow", "red"]) == TrafficLight.RED
    assert worst_status(["green", "yellow"]) == TrafficLight.YELLOW
    assert worst_status([]) == TrafficLight.GREEN


def test_calculate_dscr():
    assert calculate_dscr(1500, 1000) == 1.5
    assert calculate_dscr(1500, 0) == NO_DEBT_DSCR


# ---------------------------------------------------------------------------
# Portfolio KPIs
# ---------------------------------------------------------------------------

class TestPortfolioKpis:
    def test_empty_portfolio(self):
        assert compute_portfolio_kpis([], 0) is None

    def test_totals_and_ratios(self):
        first = _kpis()
        second = _kpis(loans=[])

        portfolio = compute_portfolio_kpis([first, second], total_purchase_price=800000.0)

        assert portfolio.total_property_value == 1000000.0
        assert portfolio.total_loan_balance == 250000.0
        assert portfolio.portfolio_ltv == pytest.approx(25.0)
        assert portfolio.total_units == 6
        assert portfolio.vacant_units == 2
        assert portfolio.total_noi == 3000.0
        assert portfolio.net_cashflow == 1800.0
        assert portfolio.dscr == pytest.approx(2.5)
        assert portfolio.total_equity_invested == 550000.0
        assert portfolio.cash_on_cash == pytest.approx(1800 * 12 / 550000 * 100)

    def test_refinancing_window_counts(self):
        prop = _property()
        soon = _kpis(prop=prop, loans=[_loan(prop.id, interest_fixed_until=date(2027, 6, 1))])
        later = _kpis(loans=[_loan(interest_fixed_until=date(2028, 6, 1))])

        portfolio = compute_portfolio_kpis([soon, later], 800000.0)

        assert portfolio.loans_expiring_within_12_months == 1
        assert portfolio.loans_expiring_within_24_months == 2
        assert portfolio.refinancing_risk_amount == 500000.0


# ---------------------------------------------------------------------------
# Property stats
# ---------------------------------------------------------------------------

class TestPropertyStats:
    def test_rent_roll_and_cashflow(self):
        prop = _property()
        stats = compute_property_stats(prop, _units(prop.id), [_loan(prop.id)], TODAY)

        assert stats.monthly_rent_total == 1500.0
        assert stats.monthly_utilities_total == 300.0
        assert stats.monthly_loan_payments == 1200.0
        assert stats.net_monthly_cashflow == 600.0
        assert stats.ltv_ratio == pytest.approx(50.0)

    def test_tax_free_after_ten_years(self):
        prop = _property(purchase_date=date(2010, 1, 1))
        stats = compute_property_stats(prop, [], [], TODAY)

        assert stats.is_tax_free is True
        assert stats.tax_free_date == date(2020, 1, 1)
        assert stats.days_until_tax_free is None

    def test_days_until_tax_free(self):
        prop = _property(purchase_date=date(2020, 3, 1))
        stats = compute_property_stats(prop, [], [], TODAY)

        assert stats.is_tax_free is False
        assert stats.days_until_tax_free == (date(2030, 3, 1) - TODAY).days


# ---------------------------------------------------------------------------
# Alerts and risk board
# ---------------------------------------------------------------------------

class TestAlerts:
    thresholds = AlertThresholdsValues()

    def _types(self, kpi):
        return {(a.type, a.severity) for a in build_alerts([kpi], self.thresholds, NOW)}

    def test_healthy_property_has_no_alerts(self):
        kpi = _kpis().model_copy(update={"dscr": 1.5})
        assert self._types(kpi) == set()

    def test_dscr_levels(self):
        kpi = _kpis()
        assert ("dscr_low", "critical") in self._types(kpi.model_copy(update={"dscr": 0.9}))
        assert ("dscr_low", "warning") in self._types(kpi.model_copy(update={"dscr": 1.1}))

    def test_refinancing_risk_needs_high_ltv(self):
        kpi = _kpis().model_copy(update={"dscr": 1.5, "months_until_interest_expiry": 6})

        assert self._types(kpi.model_copy(update={"ltv": 85.0})) == {
            ("high_ltv_refinancing", "critical")
        }
        assert self._types(kpi.model_copy(update={"ltv": 50.0})) == {
            ("interest_expiring", "warning")
        }

    def test_arrears_vacancy_and_capex(self):
        kpi = _kpis().model_copy(
            update={
                "dscr": 1.5,
                "actual_cold_rent": 1000.0,
                "rent_arrears": 2500.0,
                "vacancy_days": 45,
                "capex_planned": 1000.0,
                "capex_budget_used": 120.0,
            }
        )

        assert self._types(kpi) == {
            ("rent_arrears", "critical"),
            ("vacancy_long", "warning"),
            ("capex_budget_high", "critical"),
        }

    def test_sorted_by_severity(self):
        kpi = _kpis().model_copy(
            update={"dscr": 1.1, "worst_technical_status": TrafficLight.RED}
        )
        alerts = build_alerts([kpi], self.thresholds, NOW)

        assert [a.severity for a in alerts] == ["critical", "warning"]
        assert alerts[0].type == "technical_issue"
        assert alerts[0].action_url == f"/wealth/properties/{kpi.property_id}"

    def test_risk_score_adds_up_and_caps(self):
        kpi = _kpis().model_copy(
            update={
                "dscr": 0.9,
                "months_until_interest_expiry": 6,
                "ltv": 85.0,
                "actual_cold_rent": 1000.0,
                "rent_arrears": 2000.0,
                "worst_technical_status": TrafficLight.RED,
            }
        )
        assert risk_score(kpi) == 96

    def test_risk_board_highest_first(self):
        calm = _kpis().model_copy(update={"dscr": 2.0, "ltv": 10.0})
        risky = _kpis().model_copy(update={"dscr": 0.9})
        alerts = build_alerts([calm, risky], self.thresholds, NOW)

        board = build_risk_board([calm, risky], alerts, limit=1)

        assert len(board) == 1
        assert board[0].property_id == risky.property_id
        assert all(a.property_id == risky.property_id for a in board[0].alerts)


# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------

class TestCharts:
    def test_trend_window_has_every_month(self):
        prop_id = uuid.uuid4()
        data = [
            PropertyOperatingData(property_id=prop_id, month=date(2026, 9, 1),
                                  actual_cold_rent=2000.0, non_allocable_costs=200.0,
                                  vacancy_days=5),
            PropertyOperatingData(property_id=prop_id, month=date(2026, 5, 1),
                                  actual_cold_rent=9999.0),
        ]

        trend = build_trend(data, 3, TODAY)

        assert [p.month for p in trend] == ["2026-08", "2026-09", "2026-10"]
        assert [p.month_label for p in trend] == ["Aug 26", "Sep 26", "Okt 26"]
        assert trend[0].noi == 0.0
        assert trend[1].noi == 1800.0
        assert trend[1].net_cashflow == 1800.0
        assert trend[1].vacancy_days == 5

    def test_trend_start(self):
        assert trend_start(TODAY, 12) == date(2025, 11, 1)

    def test_waterfall_bridges_to_net_cashflow(self):
        portfolio = compute_portfolio_kpis([_kpis()], 400000.0)

        steps = build_waterfall(portfolio)

        assert [s.name for s in steps][0] == "Soll-Miete"
        assert steps[0].value == 2300.0
        assert steps[1].value == -800.0
        assert steps[-1].name == "Netto-CF"
        assert steps[-1].value == portfolio.net_cashflow
        assert steps[-1].fill == "#10B981"

    def test_waterfall_empty_portfolio(self):
        assert build_waterfall(None) == []

    def test_maturity_wall_groups_by_year(self):
        prop_id = uuid.uuid4()
        loans = [
            _loan(prop_id, current_balance=100000.0, interest_fixed_until=date(2027, 5, 1)),
            _loan(prop_id, current_balance=60000.0, interest_fixed_until=date(2027, 11, 1)),
            _loan(None, current_balance=50000.0, interest_fixed_until=date(2029, 1, 1)),
            _loan(prop_id, current_balance=10000.0, interest_fixed_until=None),
        ]

        wall = build_maturity_wall(loans, {prop_id: 200000.0})

        assert [p.year for p in wall] == [2027, 2029]
        assert wall[0].expiring_amount == 160000.0
        assert wall[0].loan_count == 2
        assert wall[0].avg_ltv == pytest.approx(40.0)
        assert wall[1].avg_ltv == 0.0

    def test_benchmark_per_square_metre(self):
        prop = _property(name="Gohlis")
        op = PropertyOperatingData(
            property_id=prop.id,
            month=date(2026, 10, 1),
            actual_cold_rent=2400.0,
            target_cold_rent=2700.0,
            non_allocable_costs=300.0,
            capex_actual=600.0,
        )

        points = build_benchmark([_kpis(prop, operating_data=op), _kpis()])

        assert len(points) == 2
        point = points[0]
        assert point.property_id == prop.id
        assert point.property_name == "Gohlis"
        assert point.actual_rent_per_sqm == pytest.approx(8.0)
        assert point.target_rent_per_sqm == pytest.approx(9.0)
        assert point.costs_per_sqm == pytest.approx(1.0)
        assert point.capex_per_sqm == pytest.approx(2.0)
        assert point.noi_per_sqm == pytest.approx(7.0)

    def test_benchmark_empty_portfolio(self):
        assert build_benchmark([]) == []
