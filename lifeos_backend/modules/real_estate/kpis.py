"""Real estate KPI calculations.

Pure functions over already loaded rows. Nothing here touches the database,
so callers decide which month, which properties and which "today" apply.
"""

from collections.abc import Iterable, Sequence
from datetime import date

from dateutil.relativedelta import relativedelta

from ...core.utils import months_between, safe_div
from .models import (
    Loan,
    Property,
    PropertyOperatingData,
    PropertyTechnicalStatus,
    TrafficLight,
    Unit,
    UnitStatus,
)
from .schemas import PortfolioKPIs, PropertyKPIs, PropertyResponse, PropertyStats

# DSCR reported when a property carries no debt service.
NO_DEBT_DSCR = 999.0

TECHNICAL_COMPONENTS = (
    "heating_status",
    "roof_status",
    "moisture_status",
    "electrical_status",
    "plumbing_status",
    "facade_status",
    "windows_status",
)

# Private sales become tax free after this holding period (Spekulationsfrist).
SPECULATION_PERIOD_YEARS = 10


def worst_status(statuses: Iterable[TrafficLight | str]) -> TrafficLight:
    """Red beats yellow beats green."""
    values = {TrafficLight(s) for s in statuses}
    if TrafficLight.RED in values:
        return TrafficLight.RED
    if TrafficLight.YELLOW in values:
        return TrafficLight.YELLOW
    return TrafficLight.GREEN


def calculate_dscr(noi: float, debt_service: float) -> float:
    """Debt service coverage ratio."""
    if debt_service <= 0:
        return NO_DEBT_DSCR
    return noi / debt_service


def _sum(values: Iterable[float | None]) -> float:
    return float(sum(v or 0 for v in values))


def _occupied(units: Sequence[Unit]) -> list[Unit]:
    return [u for u in units if u.status == UnitStatus.OCCUPIED]


def compute_property_kpis(
    prop: Property,
    units: Sequence[Unit],
    loans: Sequence[Loan],
    operating_data: PropertyOperatingData | None,
    technical_status: PropertyTechnicalStatus | None,
    last_tenant_change: date | None,
    today: date,
) -> PropertyKPIs:
    """Compute the KPIs of one property for the month of ``operating_data``."""
    op = operating_data

    occupied = _occupied(units)
    unit_count = len(units) or prop.unit_count or 1
    vacant_units = sum(1 for u in units if u.status == UnitStatus.VACANT)
    total_sqm = float(prop.total_sqm or _sum(u.size_sqm for u in units))

    actual_cold_rent = float(
        (op and op.actual_cold_rent) or _sum(u.monthly_rent_cold for u in occupied)
    )
    target_cold_rent = float(
        (op and op.target_cold_rent)
        or _sum(u.market_rent_cold or u.monthly_rent_cold for u in units)
    )

    allocable_costs = float((op and op.allocable_costs) or 0)
    non_allocable_costs = float((op and op.non_allocable_costs) or 0)
    maintenance_actual = float((op and op.maintenance_actual) or 0)
    maintenance_planned = float((op and op.maintenance_planned) or 0)
    capex_actual = float((op and op.capex_actual) or 0)
    capex_planned = float((op and op.capex_planned) or 0)
    vacancy_days = int((op and op.vacancy_days) or 0)
    rent_arrears = float((op and op.rent_arrears) or 0)

    loan_balance = _sum(loan.current_balance for loan in loans)
    monthly_debt_service = _sum(loan.monthly_payment for loan in loans)
    monthly_interest = _sum(
        (loan.current_balance or 0) * (loan.interest_rate_nominal or 0) / 100 / 12
        for loan in loans
    )
    avg_interest_rate = safe_div(
        _sum(
            (loan.current_balance or 0) * (loan.interest_rate_nominal or 0)
            for loan in loans
        ),
        loan_balance,
    )
    special_repayment_allowed = _sum(
        (loan.special_repayment_percent or 0) / 100 * (loan.original_amount or 0)
        - (loan.special_repayment_used_this_year or 0)
        for loan in loans
        if loan.special_repayment_allowed
    )

    expiries = [
        loan.interest_fixed_until for loan in loans if loan.interest_fixed_until
    ]
    earliest_expiry = min(expiries) if expiries else None
    months_until_expiry = (
        months_between(today, earliest_expiry) if earliest_expiry else None
    )

    statuses = {
        name: TrafficLight(
            (technical_status and getattr(technical_status, name)) or "green"
        )
        for name in TECHNICAL_COMPONENTS
    }

    current_market_value = float(prop.current_value or prop.purchase_price or 0)
    conservative_market_value = float(
        prop.conservative_market_value or current_market_value
    )
    equity = conservative_market_value - loan_balance
    ltv = safe_div(loan_balance, conservative_market_value) * 100

    noi = actual_cold_rent - non_allocable_costs
    net_cashflow = noi - monthly_debt_service

    return PropertyKPIs(
        property_id=prop.id,
        property_name=prop.name,
        property_address=prop.address,
        actual_cold_rent=actual_cold_rent,
        target_cold_rent=target_cold_rent,
        vacancy_days=vacancy_days,
        rent_arrears=rent_arrears,
        allocable_costs=allocable_costs,
        non_allocable_costs=non_allocable_costs,
        maintenance_actual=maintenance_actual,
        maintenance_planned=maintenance_planned,
        capex_actual=capex_actual,
        capex_planned=capex_planned,
        loan_balance=loan_balance,
        monthly_debt_service=monthly_debt_service,
        monthly_interest=monthly_interest,
        monthly_principal=monthly_debt_service - monthly_interest,
        interest_rate=avg_interest_rate,
        interest_fixed_until=earliest_expiry,
        months_until_interest_expiry=months_until_expiry,
        special_repayment_allowed=special_repayment_allowed,
        total_sqm=total_sqm,
        unit_count=unit_count,
        occupied_units=len(occupied),
        vacant_units=vacant_units,
        last_tenant_change=last_tenant_change,
        **statuses,
        worst_technical_status=worst_status(statuses.values()),
        current_market_value=current_market_value,
        conservative_market_value=conservative_market_value,
        equity=equity,
        ltv=ltv,
        noi=noi,
        net_cashflow=net_cashflow,
        net_cashflow_with_capex=net_cashflow - capex_actual,
        dscr=calculate_dscr(noi, monthly_debt_service),
        gross_yield=safe_div(actual_cold_rent * 12, current_market_value) * 100,
        net_yield=safe_div(noi * 12, current_market_value) * 100,
        rent_per_sqm=safe_div(actual_cold_rent, total_sqm),
        target_rent_per_sqm=safe_div(target_cold_rent, total_sqm),
        costs_per_sqm=safe_div(non_allocable_costs, total_sqm),
        capex_per_sqm=safe_div(capex_actual, total_sqm),
        vacancy_rate=safe_div(vacant_units, unit_count) * 100,
        arrears_rate=safe_div(rent_arrears, actual_cold_rent) * 100,
        capex_budget_used=safe_div(capex_actual, capex_planned) * 100,
    )


def compute_portfolio_kpis(
    kpis: Sequence[PropertyKPIs], total_purchase_price: float
) -> PortfolioKPIs | None:
    """Aggregate property KPIs; ``None`` for an empty portfolio.

    ``total_purchase_price`` is the sum over all properties and approximates
    the capital invested for cash-on-cash.
    """
    if not kpis:
        return None

    def total(attr: str) -> float:
        return float(sum(getattr(k, attr) for k in kpis))

    total_conservative_value = total("conservative_market_value")
    total_loan_balance = total("loan_balance")
    total_actual_rent = total("actual_cold_rent")
    total_target_rent = total("target_cold_rent")
    total_debt_service = total("monthly_debt_service")
    total_noi = total("noi")
    net_cashflow = total("net_cashflow")
    total_capex_actual = total("capex_actual")
    total_capex_planned = total("capex_planned")

    total_units = int(total("unit_count"))
    vacant_units = int(total("vacant_units"))
    total_sqm = total("total_sqm")
    occupied_sqm = float(
        sum(k.total_sqm * (k.occupied_units / max(k.unit_count, 1)) for k in kpis)
    )

    total_equity_invested = total_purchase_price - total_loan_balance
    annual_net_cashflow = net_cashflow * 12

    expiring_12 = [
        k
        for k in kpis
        if k.months_until_interest_expiry is not None
        and k.months_until_interest_expiry <= 12
    ]
    expiring_24 = [
        k
        for k in kpis
        if k.months_until_interest_expiry is not None
        and k.months_until_interest_expiry <= 24
    ]

    return PortfolioKPIs(
        total_property_value=total("current_market_value"),
        total_conservative_value=total_conservative_value,
        total_loan_balance=total_loan_balance,
        total_equity=total("equity"),
        portfolio_ltv=safe_div(total_loan_balance, total_conservative_value) * 100,
        total_actual_rent=total_actual_rent,
        total_target_rent=total_target_rent,
        total_allocable_costs=total("allocable_costs"),
        total_non_allocable_costs=total("non_allocable_costs"),
        total_debt_service=total_debt_service,
        total_noi=total_noi,
        net_cashflow=net_cashflow,
        net_cashflow_with_capex=net_cashflow - total_capex_actual,
        dscr=calculate_dscr(total_noi, total_debt_service),
        vacancy_rate_units=safe_div(vacant_units, total_units) * 100,
        vacancy_rate_sqm=safe_div(total_sqm - occupied_sqm, total_sqm) * 100,
        arrears_rate=safe_div(total("rent_arrears"), total_actual_rent) * 100,
        rent_loss_rate=safe_div(total_target_rent - total_actual_rent, total_target_rent)
        * 100,
        total_units=total_units,
        occupied_units=int(total("occupied_units")),
        vacant_units=vacant_units,
        total_sqm=total_sqm,
        occupied_sqm=occupied_sqm,
        total_capex_actual=total_capex_actual,
        total_capex_planned=total_capex_planned,
        capex_per_sqm_annual=safe_div(total_capex_actual * 12, total_sqm),
        capex_budget_used_percent=safe_div(total_capex_actual, total_capex_planned)
        * 100,
        total_equity_invested=total_equity_invested,
        annual_net_cashflow=annual_net_cashflow,
        cash_on_cash=safe_div(annual_net_cashflow, total_equity_invested) * 100,
        loans_expiring_within_12_months=len(expiring_12),
        loans_expiring_within_24_months=len(expiring_24),
        refinancing_risk_amount=float(sum(k.loan_balance for k in expiring_24)),
        avg_weighted_interest_rate=safe_div(
            sum(k.loan_balance * k.interest_rate for k in kpis), total_loan_balance
        ),
        properties_with_technical_issues=sum(
            1
            for k in kpis
            if k.worst_technical_status in (TrafficLight.RED, TrafficLight.YELLOW)
        ),
    )


def compute_property_stats(
    prop: Property,
    units: Sequence[Unit],
    loans: Sequence[Loan],
    today: date,
) -> PropertyStats:
    """Figures for the property list: rent roll, cashflow, yields and tax status."""
    occupied = _occupied(units)
    vacant_units = sum(1 for u in units if u.status == UnitStatus.VACANT)
    total_units = len(units) or prop.unit_count or 1

    monthly_rent_total = _sum(u.monthly_rent_cold for u in occupied)
    monthly_utilities_total = _sum(u.monthly_utilities_advance for u in occupied)
    monthly_loan_payments = _sum(loan.monthly_payment for loan in loans)
    total_loan_balance = _sum(loan.current_balance for loan in loans)

    current_value = float(prop.current_value or prop.purchase_price or 0)
    annual_net_income = (monthly_rent_total - monthly_loan_payments) * 12

    tax_free_date = None
    is_tax_free = False
    days_until_tax_free = None
    if prop.purchase_date:
        tax_free_date = prop.purchase_date + relativedelta(
            years=SPECULATION_PERIOD_YEARS
        )
        is_tax_free = today >= tax_free_date
        if not is_tax_free:
            days_until_tax_free = (tax_free_date - today).days

    return PropertyStats(
        property=PropertyResponse.model_validate(prop),
        occupied_units=len(occupied),
        vacant_units=vacant_units,
        vacancy_rate=safe_div(vacant_units, total_units) * 100,
        monthly_rent_total=monthly_rent_total,
        monthly_utilities_total=monthly_utilities_total,
        monthly_loan_payments=monthly_loan_payments,
        net_monthly_cashflow=monthly_rent_total
        + monthly_utilities_total
        - monthly_loan_payments,
        gross_yield=safe_div(monthly_rent_total * 12, current_value) * 100,
        net_yield=safe_div(annual_net_income, current_value) * 100,
        total_loan_balance=total_loan_balance,
        equity=current_value - total_loan_balance,
        ltv_ratio=safe_div(total_loan_balance, current_value) * 100,
        is_tax_free=is_tax_free,
        tax_free_date=tax_free_date,
        days_until_tax_free=days_until_tax_free,
    )
