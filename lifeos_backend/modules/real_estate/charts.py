"""Chart series for the real estate dashboard."""

from collections.abc import Sequence
from datetime import date
from uuid import UUID

from dateutil.relativedelta import relativedelta

from ...core.utils import month_key, safe_div
from .models import Loan, PropertyOperatingData
from .schemas import (
    BenchmarkPoint,
    MaturityWallPoint,
    PortfolioKPIs,
    PropertyKPIs,
    TrendDataPoint,
    WaterfallStep,
)

GERMAN_MONTHS = (
    "Jan", "Feb", "Mär", "Apr", "Mai", "Jun",
    "Jul", "Aug", "Sep", "Okt", "Nov", "Dez",
)  # fmt: skip

BLUE = "#3B82F6"
RED = "#EF4444"
ORANGE = "#F97316"
GREEN = "#10B981"
INDIGO = "#6366F1"


def trend_start(today: date, months: int) -> date:
    """First day of the oldest month in a ``months`` long window ending today."""
    return (today - relativedelta(months=months - 1)).replace(day=1)


def build_trend(
    operating_data: Sequence[PropertyOperatingData], months: int, today: date
) -> list[TrendDataPoint]:
    """Monthly totals for the last ``months`` months, oldest first.

    Every month of the window is present even without data. Net cashflow
    equals NOI here because loans carry no monthly history.
    """
    points: dict[str, TrendDataPoint] = {}
    for offset in range(months - 1, -1, -1):
        day = today - relativedelta(months=offset)
        key = month_key(day)
        points[key] = TrendDataPoint(
            month=key,
            month_label=f"{GERMAN_MONTHS[day.month - 1]} {day:%y}",
        )

    for op in operating_data:
        point = points.get(month_key(op.month))
        if point is None:
            continue
        noi = (op.actual_cold_rent or 0) - (op.non_allocable_costs or 0)
        point.noi += noi
        point.net_cashflow += noi
        point.vacancy_days += op.vacancy_days or 0
        point.rent_arrears += op.rent_arrears or 0
        point.capex += op.capex_actual or 0

    return list(points.values())


def build_waterfall(portfolio: PortfolioKPIs | None) -> list[WaterfallStep]:
    """Bridge from target rent to net cashflow."""
    if portfolio is None:
        return []

    target_rent = portfolio.total_target_rent
    vacancy = portfolio.total_target_rent - portfolio.total_actual_rent
    arrears = portfolio.total_actual_rent * (portfolio.arrears_rate / 100)
    actual_rent = portfolio.total_actual_rent
    allocable = portfolio.total_allocable_costs
    non_allocable = portfolio.total_non_allocable_costs
    noi = portfolio.total_noi
    debt_service = portfolio.total_debt_service
    net_cashflow = portfolio.net_cashflow

    return [
        WaterfallStep(
            name="Soll-Miete",
            value=target_rent,
            cumulative=target_rent,
            type="start",
            fill=BLUE,
        ),
        WaterfallStep(
            name="Leerstand",
            value=-vacancy,
            cumulative=target_rent - vacancy,
            type="decrease",
            fill=RED,
        ),
        WaterfallStep(
            name="Rückstände",
            value=-arrears,
            cumulative=target_rent - vacancy - arrears,
            type="decrease",
            fill=ORANGE,
        ),
        WaterfallStep(
            name="Ist-Miete",
            value=actual_rent,
            cumulative=actual_rent,
            type="subtotal",
            fill=GREEN,
        ),
        WaterfallStep(
            name="NK (umlagef.)",
            value=allocable,
            cumulative=actual_rent + allocable,
            type="increase",
            fill=INDIGO,
        ),
        WaterfallStep(
            name="NK (n.umlagef.)",
            value=-non_allocable,
            cumulative=actual_rent + allocable - non_allocable,
            type="decrease",
            fill=RED,
        ),
        WaterfallStep(
            name="NOI", value=noi, cumulative=noi, type="subtotal", fill=GREEN
        ),
        WaterfallStep(
            name="Schuldendienst",
            value=-debt_service,
            cumulative=noi - debt_service,
            type="decrease",
            fill=RED,
        ),
        WaterfallStep(
            name="Netto-CF",
            value=net_cashflow,
            cumulative=net_cashflow,
            type="total",
            fill=GREEN if net_cashflow >= 0 else RED,
        ),
    ]


def build_maturity_wall(
    loans: Sequence[Loan], property_values: dict[UUID, float]
) -> list[MaturityWallPoint]:
    """Loan balances grouped by the year their fixed interest period ends.

    ``property_values`` maps property id to the value used for LTV
    (conservative market value, else current value).
    """
    years: dict[int, dict[str, float]] = {}
    for loan in loans:
        if not loan.interest_fixed_until:
            continue
        bucket = years.setdefault(
            loan.interest_fixed_until.year, {"amount": 0.0, "count": 0, "ltv": 0.0}
        )
        balance = loan.current_balance or 0
        value = property_values.get(loan.property_id, 0) if loan.property_id else 0
        bucket["amount"] += balance
        bucket["count"] += 1
        bucket["ltv"] += safe_div(balance, value) * 100

    return [
        MaturityWallPoint(
            year=year,
            expiring_amount=data["amount"],
            loan_count=int(data["count"]),
            avg_ltv=safe_div(data["ltv"], data["count"]),
        )
        for year, data in sorted(years.items())
    ]


def build_benchmark(kpis: Sequence[PropertyKPIs]) -> list[BenchmarkPoint]:
    """Per square metre comparison across properties."""
    return [
        BenchmarkPoint(
            property_id=kpi.property_id,
            property_name=kpi.property_name,
            actual_rent_per_sqm=kpi.rent_per_sqm,
            target_rent_per_sqm=kpi.target_rent_per_sqm,
            costs_per_sqm=kpi.costs_per_sqm,
            capex_per_sqm=kpi.capex_per_sqm,
            noi_per_sqm=safe_div(kpi.noi, kpi.total_sqm),
        )
        for kpi in kpis
    ]
