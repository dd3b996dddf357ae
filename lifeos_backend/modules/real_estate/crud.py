"""CRUD operations for the real estate module."""

from datetime import date
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from .models import (
    AlertThresholds,
    Loan,
    Property,
    PropertyOperatingData,
    PropertyTechnicalStatus,
    Tenant,
    TenantChange,
    Unit,
)


class PropertyCRUD(BaseCRUD[Property, dict, dict]):
    search_fields = ["name", "address", "city"]
    default_order_by = "name"
    default_order_desc = False


class UnitCRUD(BaseCRUD[Unit, dict, dict]):
    default_order_by = "name"
    default_order_desc = False


class TenantCRUD(BaseCRUD[Tenant, dict, dict]):
    search_fields = ["first_name", "last_name", "email"]
    default_order_by = "last_name"
    default_order_desc = False


class LoanCRUD(BaseCRUD[Loan, dict, dict]):
    search_fields = ["name", "bank_name", "contract_number"]
    default_order_by = "interest_fixed_until"
    default_order_desc = False


properties = PropertyCRUD(Property)
units = UnitCRUD(Unit)
tenants = TenantCRUD(Tenant)
loans = LoanCRUD(Loan)


# ----- Properties -----


async def get_property_cities(db: AsyncSession, user_id: UUID) -> list[str]:
    """Distinct non-empty cities, sorted."""
    result = await db.execute(
        select(Property.city)
        .where(and_(Property.user_id == user_id, Property.city.is_not(None)))
        .distinct()
        .order_by(Property.city)
    )
    return [city for city in result.scalars().all() if city]


async def get_total_purchase_price(db: AsyncSession, user_id: UUID) -> float:
    result = await db.execute(
        select(func.coalesce(func.sum(Property.purchase_price), 0)).where(
            Property.user_id == user_id
        )
    )
    return float(result.scalar() or 0)


# ----- Operating Data -----


async def get_operating_data_for_month(
    db: AsyncSession, user_id: UUID, property_id: UUID, month: date
) -> PropertyOperatingData | None:
    result = await db.execute(
        select(PropertyOperatingData).where(
            and_(
                PropertyOperatingData.user_id == user_id,
                PropertyOperatingData.property_id == property_id,
                PropertyOperatingData.month == month,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_operating_data_since(
    db: AsyncSession,
    user_id: UUID,
    start_month: date,
    property_id: UUID | None = None,
    newest_first: bool = True,
) -> list[PropertyOperatingData]:
    """Operating data rows from ``start_month`` on, optionally for one property."""
    filters = [
        PropertyOperatingData.user_id == user_id,
        PropertyOperatingData.month >= start_month,
    ]
    if property_id is not None:
        filters.append(PropertyOperatingData.property_id == property_id)
    order = (
        PropertyOperatingData.month.desc()
        if newest_first
        else PropertyOperatingData.month
    )
    result = await db.execute(
        select(PropertyOperatingData).where(and_(*filters)).order_by(order)
    )
    return list(result.scalars().all())


async def get_operating_data_by_month(
    db: AsyncSession, user_id: UUID, month: date
) -> list[PropertyOperatingData]:
    result = await db.execute(
        select(PropertyOperatingData).where(
            and_(
                PropertyOperatingData.user_id == user_id,
                PropertyOperatingData.month == month,
            )
        )
    )
    return list(result.scalars().all())


# ----- Technical Status -----


async def get_technical_status(
    db: AsyncSession, user_id: UUID, property_id: UUID
) -> PropertyTechnicalStatus | None:
    result = await db.execute(
        select(PropertyTechnicalStatus).where(
            and_(
                PropertyTechnicalStatus.user_id == user_id,
                PropertyTechnicalStatus.property_id == property_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_all_technical_status(
    db: AsyncSession, user_id: UUID
) -> list[PropertyTechnicalStatus]:
    result = await db.execute(
        select(PropertyTechnicalStatus).where(
            PropertyTechnicalStatus.user_id == user_id
        )
    )
    return list(result.scalars().all())


# ----- Tenant Changes -----


async def get_tenant_changes(
    db: AsyncSession, user_id: UUID, property_id: UUID | None = None
) -> list[TenantChange]:
    """Tenant changes, newest first."""
    query = select(TenantChange).where(TenantChange.user_id == user_id)
    if property_id is not None:
        query = query.where(TenantChange.property_id == property_id)
    result = await db.execute(
        query.order_by(TenantChange.change_date.desc(), TenantChange.created_at.desc())
    )
    return list(result.scalars().all())


# ----- Alert Thresholds -----


async def get_alert_thresholds(
    db: AsyncSession, user_id: UUID
) -> AlertThresholds | None:
    result = await db.execute(
        select(AlertThresholds).where(AlertThresholds.user_id == user_id)
    )
    return result.scalar_one_or_none()
