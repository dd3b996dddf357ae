"""CRUD operations for the wealth module."""

from datetime import date
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from .models import (
    Account,
    Company,
    DailySnapshot,
    Position,
    RecurringTransaction,
    UserPreferences,
)


class AccountCRUD(BaseCRUD[Account, dict, dict]):
    search_fields = ["name", "bank_name", "iban"]
    default_order_by = "current_balance"


class PositionCRUD(BaseCRUD[Position, dict, dict]):
    search_fields = ["name", "isin"]
    default_order_by = "current_value"


class CompanyCRUD(BaseCRUD[Company, dict, dict]):
    default_order_by = "name"
    default_order_desc = False


class RecurringTransactionCRUD(BaseCRUD[RecurringTransaction, dict, dict]):
    search_fields = ["name", "category"]
    default_order_by = "day_of_month"
    default_order_desc = False


accounts = AccountCRUD(Account)
positions = PositionCRUD(Position)
companies = CompanyCRUD(Company)
recurring_transactions = RecurringTransactionCRUD(RecurringTransaction)


async def get_latest_snapshot(
    db: AsyncSession, user_id: UUID
) -> DailySnapshot | None:
    result = await db.execute(
        select(DailySnapshot)
        .where(DailySnapshot.user_id == user_id)
        .order_by(DailySnapshot.date.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_snapshots_since(
    db: AsyncSession, user_id: UUID, start_date: date
) -> list[DailySnapshot]:
    """Snapshots from ``start_date`` on, oldest first."""
    result = await db.execute(
        select(DailySnapshot)
        .where(
            and_(
                DailySnapshot.user_id == user_id,
                DailySnapshot.date >= start_date,
            )
        )
        .order_by(DailySnapshot.date)
    )
    return list(result.scalars().all())


async def get_preferences(db: AsyncSession, user_id: UUID) -> UserPreferences | None:
    result = await db.execute(
        select(UserPreferences).where(UserPreferences.user_id == user_id)
    )
    return result.scalar_one_or_none()
