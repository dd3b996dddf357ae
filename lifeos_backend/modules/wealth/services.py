"""Wealth business logic services."""

from datetime import date, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError
from ..real_estate import crud as real_estate_crud
from ..real_estate.models import UnitStatus
from . import calculations, crud
from .models import Account, DailySnapshot, RecurringTransaction, UserPreferences
from .schemas import (
    AccountCreate,
    AccountsSummary,
    AccountUpdate,
    AssetAllocation,
    CompaniesSummary,
    FirePreferences,
    FireProgress,
    InvestmentsSummary,
    LoansSummary,
    MonthlyCashflow,
    PropertiesSummary,
    RecurringTransactionCreate,
    RecurringTransactionUpdate,
    SnapshotResponse,
    WealthOverview,
)


# ----- Net Worth -----


async def get_latest_snapshot(db: AsyncSession, user_id: UUID) -> DailySnapshot | None:
    return await crud.get_latest_snapshot(db, user_id)


async def get_net_worth_history(
    db: AsyncSession, user_id: UUID, today: date, days: int = 30
) -> list[DailySnapshot]:
    return await crud.get_snapshots_since(db, user_id, today - timedelta(days=days))


# ----- Accounts -----


async def get_account(db: AsyncSession, user_id: UUID, account_id: UUID) -> Account:
    account = await crud.accounts.get(db, user_id, account_id)
    if not account:
        raise NotFoundError(f"Account with ID {account_id} not found")
    return account


async def create_account(db: AsyncSession, user_id: UUID, data: AccountCreate) -> Account:
    if data.property_id is not None:
        await _ensure_property(db, user_id, data.property_id)
    return await crud.accounts.create(db, data.model_dump(), user_id)


async def update_account(
    db: AsyncSession, user_id: UUID, account_id: UUID, data: AccountUpdate
) -> Account:
    account = await get_account(db, user_id, account_id)
    updates = data.model_dump(exclude_unset=True)
    if updates.get("property_id") is not None:
        await _ensure_property(db, user_id, updates["property_id"])
    return await crud.accounts.update(db, account, updates)


async def delete_account(db: AsyncSession, user_id: UUID, account_id: UUID) -> None:
    account = await get_account(db, user_id, account_id)
    await crud.accounts.delete(db, account)


async def _ensure_property(db: AsyncSession, user_id: UUID, property_id: UUID) -> None:
    if not await real_estate_crud.properties.get(db, user_id, property_id):
        raise NotFoundError(f"Property with ID {property_id} not found")


async def get_accounts_summary(db: AsyncSession, user_id: UUID) -> AccountsSummary:
    accounts = await crud.accounts.get_all(db, user_id, is_active=True)
    return calculations.summarize_accounts(accounts)


# ----- Recurring Transactions -----


async def get_recurring_transaction(
    db: AsyncSession, user_id: UUID, transaction_id: UUID
) -> RecurringTransaction:
    transaction = await crud.recurring_transactions.get(db, user_id, transaction_id)
    if not transaction:
        raise NotFoundError(f"Recurring transaction with ID {transaction_id} not found")
    return transaction


async def create_recurring_transaction(
    db: AsyncSession, user_id: UUID, data: RecurringTransactionCreate
) -> RecurringTransaction:
    return await crud.recurring_transactions.create(db, data.model_dump(), user_id)


async def update_recurring_transaction(
    db: AsyncSession,
    user_id: UUID,
    transaction_id: UUID,
    data: RecurringTransactionUpdate,
) -> RecurringTransaction:
    transaction = await get_recurring_transaction(db, user_id, transaction_id)
    return await crud.recurring_transactions.update(
        db, transaction, data.model_dump(exclude_unset=True)
    )


async def delete_recurring_transaction(
    db: AsyncSession, user_id: UUID, transaction_id: UUID
) -> None:
    transaction = await get_recurring_transaction(db, user_id, transaction_id)
    await crud.recurring_transactions.delete(db, transaction)


# ----- Summaries -----


async def get_loans_summary(db: AsyncSession, user_id: UUID, today: date) -> LoansSummary:
    loans = await real_estate_crud.loans.get_all(db, user_id)
    return calculations.summarize_loans(loans, today)


async def get_properties_summary(db: AsyncSession, user_id: UUID) -> PropertiesSummary:
    properties = await real_estate_crud.properties.get_all(db, user_id)
    return calculations.summarize_properties(properties)


async def get_investments_summary(
    db: AsyncSession, user_id: UUID
) -> InvestmentsSummary:
    positions = await crud.positions.get_all(db, user_id)
    return calculations.summarize_investments(positions)


async def get_companies_summary(db: AsyncSession, user_id: UUID) -> CompaniesSummary:
    companies = await crud.companies.get_all(db, user_id)
    return calculations.summarize_companies(companies)


async def get_monthly_cashflow(db: AsyncSession, user_id: UUID) -> MonthlyCashflow:
    transactions = await crud.recurring_transactions.get_all(
        db, user_id, is_active=True
    )
    occupied_units = await real_estate_crud.units.get_all(
        db, user_id, filters={"status": UnitStatus.OCCUPIED.value}
    )
    loans = await real_estate_crud.loans.get_all(db, user_id)
    return calculations.compute_monthly_cashflow(transactions, occupied_units, loans)


# ----- FIRE -----


async def get_fire_preferences(db: AsyncSession, user_id: UUID) -> FirePreferences:
    preferences = await crud.get_preferences(db, user_id)
    if preferences is None:
        return FirePreferences()
    return FirePreferences.model_validate(preferences)


async def update_fire_preferences(
    db: AsyncSession, user_id: UUID, data: FirePreferences
) -> FirePreferences:
    values = data.model_dump(exclude_unset=True)
    preferences = await crud.get_preferences(db, user_id)
    if preferences:
        for field, value in values.items():
            setattr(preferences, field, value)
    else:
        preferences = UserPreferences(user_id=user_id, **values)
        db.add(preferences)

    await db.commit()
    await db.refresh(preferences)
    return FirePreferences.model_validate(preferences)


async def get_fire_progress(db: AsyncSession, user_id: UUID) -> FireProgress:
    snapshot = await crud.get_latest_snapshot(db, user_id)
    preferences = await crud.get_preferences(db, user_id)
    return calculations.compute_fire_progress(snapshot, preferences)


async def get_asset_allocation(db: AsyncSession, user_id: UUID) -> AssetAllocation:
    snapshot = await crud.get_latest_snapshot(db, user_id)
    return calculations.compute_asset_allocation(snapshot)


async def get_overview(db: AsyncSession, user_id: UUID, today: date) -> WealthOverview:
    snapshot = await crud.get_latest_snapshot(db, user_id)
    preferences = await crud.get_preferences(db, user_id)

    return WealthOverview(
        latest_snapshot=SnapshotResponse.model_validate(snapshot) if snapshot else None,
        accounts=await get_accounts_summary(db, user_id),
        loans=await get_loans_summary(db, user_id, today),
        properties=await get_properties_summary(db, user_id),
        investments=await get_investments_summary(db, user_id),
        companies=await get_companies_summary(db, user_id),
        cashflow=await get_monthly_cashflow(db, user_id),
        fire=calculations.compute_fire_progress(snapshot, preferences),
        allocation=calculations.compute_asset_allocation(snapshot),
    )
