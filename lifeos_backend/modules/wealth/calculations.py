"""Wealth aggregations.

Pure functions over loaded rows so the service layer only has to fetch data.
"""

import math
from collections.abc import Iterable, Sequence
from datetime import date

from dateutil.relativedelta import relativedelta

from ..real_estate.models import Loan, Property, Unit, UnitStatus
from .models import (
    Account,
    AccountType,
    AssetType,
    Company,
    DailySnapshot,
    Position,
    RecurringTransaction,
    TransactionFrequency,
    TransactionType,
    UserPreferences,
)
from .schemas import (
    AccountResponse,
    AccountsSummary,
    AllocationSlice,
    AssetAllocation,
    CompaniesSummary,
    CompanySummaryItem,
    FireProgress,
    InvestmentsSummary,
    LoansSummary,
    MonthlyCashflow,
    PropertiesSummary,
    PropertySummaryItem,
)

WEEKS_PER_MONTH = 4.33
DEFAULT_WITHDRAWAL_RATE = 4.0
FIRE_GROWTH_RATE = 0.07
LOAN_EXPIRY_WINDOW_MONTHS = 12

_MONTHLY_FACTORS = {
    TransactionFrequency.WEEKLY.value: WEEKS_PER_MONTH,
    TransactionFrequency.MONTHLY.value: 1.0,
    TransactionFrequency.QUARTERLY.value: 1 / 3,
    TransactionFrequency.YEARLY.value: 1 / 12,
}


def _total(values: Iterable[float | None]) -> float:
    return float(sum(v or 0 for v in values))


def _percent(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def to_monthly_amount(amount: float, frequency: str | None) -> float:
    """Normalise a recurring amount to one month; unknown frequencies count as monthly."""
    return amount * _MONTHLY_FACTORS.get(frequency or "monthly", 1.0)


def summarize_accounts(accounts: Sequence[Account]) -> AccountsSummary:
    by_type: dict[str, float] = {}
    for account in accounts:
        key = account.account_type or AccountType.OTHER.value
        by_type[key] = by_type.get(key, 0.0) + (account.current_balance or 0)

    return AccountsSummary(
        accounts=[AccountResponse.model_validate(a) for a in accounts],
        total_balance=_total(a.current_balance for a in accounts),
        by_type=by_type,
        count=len(accounts),
    )


def summarize_loans(loans: Sequence[Loan], today: date) -> LoansSummary:
    """Totals, balance-weighted rate and loans whose fixed rate ends within a year."""
    total_balance = _total(loan.current_balance for loan in loans)
    weighted_rate = (
        sum(
            (loan.current_balance or 0) * (loan.interest_rate_nominal or 0)
            for loan in loans
        )
        / total_balance
        if total_balance > 0
        else 0.0
    )

    window_end = today + relativedelta(months=LOAN_EXPIRY_WINDOW_MONTHS)
    expiring = [
        loan
        for loan in loans
        if loan.interest_fixed_until
        and today <= loan.interest_fixed_until <= window_end
    ]

    return LoansSummary(
        total_balance=total_balance,
        total_monthly_payment=_total(loan.monthly_payment for loan in loans),
        weighted_average_rate=weighted_rate,
        count=len(loans),
        expiring_soon_count=len(expiring),
    )


def summarize_properties(properties: Sequence[Property]) -> PropertiesSummary:
    return PropertiesSummary(
        properties=[PropertySummaryItem.model_validate(p) for p in properties],
        total_value=_total(p.current_value for p in properties),
        total_units=int(_total(p.unit_count for p in properties)),
        count=len(properties),
    )


def summarize_investments(positions: Sequence[Position]) -> InvestmentsSummary:
    by_asset_type: dict[str, float] = {}
    for position in positions:
        key = position.asset_type or AssetType.OTHER.value
        by_asset_type[key] = by_asset_type.get(key, 0.0) + (position.current_value or 0)

    total_invested = _total(p.total_invested for p in positions)
    total_gain_loss = _total(p.unrealized_gain_loss for p in positions)

    return InvestmentsSummary(
        total_value=_total(p.current_value for p in positions),
        total_invested=total_invested,
        total_gain_loss=total_gain_loss,
        gain_loss_percent=_percent(total_gain_loss, total_invested),
        by_asset_type=by_asset_type,
        count=len(positions),
    )


def summarize_companies(companies: Sequence[Company]) -> CompaniesSummary:
    return CompaniesSummary(
        companies=[CompanySummaryItem.model_validate(c) for c in companies],
        total_value=_total(c.your_share_value for c in companies),
        count=len(companies),
    )


def compute_monthly_cashflow(
    transactions: Sequence[RecurringTransaction],
    units: Sequence[Unit],
    loans: Sequence[Loan],
) -> MonthlyCashflow:
    """Monthly income and expenses from recurring bookings, rents and loan rates.

    A transaction is income when typed ``income`` or when its amount is
    positive; everything else is an expense. Rent and utility advances of
    let units count as income, loan payments as expenses.
    """
    income = 0.0
    expenses = 0.0
    for transaction in transactions:
        amount = transaction.amount or 0
        monthly = abs(to_monthly_amount(amount, transaction.frequency))
        if transaction.type == TransactionType.INCOME.value or amount > 0:
            income += monthly
        else:
            expenses += monthly

    rental_income = _total(
        (u.monthly_rent_cold or 0) + (u.monthly_utilities_advance or 0)
        for u in units
        if u.status == UnitStatus.OCCUPIED.value
    )
    loan_payments = _total(loan.monthly_payment for loan in loans)

    return MonthlyCashflow(
        monthly_income=income + rental_income,
        monthly_expenses=expenses + loan_payments,
        rental_income=rental_income,
        loan_payments=loan_payments,
        net_cashflow=income + rental_income - expenses - loan_payments,
        recurring_count=len(transactions),
    )


def years_to_target(net_worth: float, target: float) -> float | None:
    """Years of compound growth until ``net_worth`` reaches ``target``.

    Zero once reached; None when there is nothing to grow from.
    """
    if target - net_worth <= 0:
        return 0.0
    if net_worth <= 0:
        return None
    return math.log(target / net_worth) / math.log(1 + FIRE_GROWTH_RATE)


def compute_fire_progress(
    snapshot: DailySnapshot | None, preferences: UserPreferences | None
) -> FireProgress:
    net_worth = (snapshot.net_worth if snapshot else None) or 0.0
    target = (preferences.fire_target_amount if preferences else None) or 0.0
    withdrawal_rate = (
        preferences.fire_withdrawal_rate if preferences else None
    ) or DEFAULT_WITHDRAWAL_RATE
    monthly_expenses = (preferences.fire_monthly_expenses if preferences else None) or 0.0

    progress = _percent(net_worth, target)
    monthly_passive_income = net_worth * withdrawal_rate / 100 / 12

    return FireProgress(
        net_worth=net_worth,
        target_amount=target,
        progress=min(100.0, progress),
        withdrawal_rate=withdrawal_rate,
        monthly_expenses=monthly_expenses,
        monthly_passive_income=monthly_passive_income,
        expenses_covered=_percent(monthly_passive_income, monthly_expenses),
        years_to_fire=years_to_target(net_worth, target),
        is_achieved=progress >= 100,
    )


def compute_asset_allocation(snapshot: DailySnapshot | None) -> AssetAllocation:
    """Share of each asset class in total assets of the latest snapshot."""

    def value(attr: str) -> float:
        return float((getattr(snapshot, attr) if snapshot else None) or 0)

    total_assets = value("total_assets")

    def slice_of(attr: str) -> AllocationSlice:
        part = value(attr)
        return AllocationSlice(value=part, percent=_percent(part, total_assets))

    return AssetAllocation(
        cash=slice_of("cash_value"),
        investments=slice_of("investment_value"),
        properties=slice_of("property_value"),
        companies=slice_of("company_value"),
        total_assets=total_assets,
        total_liabilities=value("total_liabilities"),
        net_worth=value("net_worth"),
    )
