"""Real estate business logic services."""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError, ValidationError
from ...core.logging import get_logger
from ...core.utils import month_start
from . import crud
from .alerts import build_alerts, build_risk_board
from .charts import (
    build_benchmark,
    build_maturity_wall,
    build_trend,
    build_waterfall,
    trend_start,
)
from .kpis import compute_portfolio_kpis, compute_property_kpis, compute_property_stats
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
from .schemas import (
    AlertThresholdsUpdate,
    AlertThresholdsValues,
    BenchmarkPoint,
    LoanCreate,
    LoanUpdate,
    MaturityWallPoint,
    OperatingDataUpsert,
    PortfolioKPIs,
    PropertyCreate,
    PropertyKPIs,
    PropertyStats,
    PropertyUpdate,
    RealEstateAlert,
    RealEstateDashboard,
    RiskBoardEntry,
    TechnicalStatusUpsert,
    TenantChangeCreate,
    TenantCreate,
    TenantUpdate,
    TrendDataPoint,
    UnitCreate,
    UnitUpdate,
    WaterfallStep,
)

logger = get_logger(__name__)


# ----- Properties -----


async def get_property(db: AsyncSession, user_id: UUID, property_id: UUID) -> Property:
    property_obj = await crud.properties.get(db, user_id, property_id)
    if not property_obj:
        raise NotFoundError(f"Property with ID {property_id} not found")
    return property_obj


async def create_property(
    db: AsyncSession, user_id: UUID, data: PropertyCreate
) -> Property:
    return await crud.properties.create(db, data.model_dump(), user_id)


async def update_property(
    db: AsyncSession, user_id: UUID, property_id: UUID, data: PropertyUpdate
) -> Property:
    property_obj = await get_property(db, user_id, property_id)
    return await crud.properties.update(
        db, property_obj, data.model_dump(exclude_unset=True)
    )


async def delete_property(db: AsyncSession, user_id: UUID, property_id: UUID) -> None:
    property_obj = await get_property(db, user_id, property_id)
    await crud.properties.delete(db, property_obj)
    logger.info(f"Deleted property {property_id}")


async def list_properties_with_stats(
    db: AsyncSession, user_id: UUID, today: date, city: str | None = None
) -> list[PropertyStats]:
    """Every property with its rent roll, cashflow, yield and tax figures."""
    properties = await crud.properties.get_all(db, user_id, filters={"city": city})
    all_units = await crud.units.get_all(db, user_id)
    all_loans = await crud.loans.get_all(db, user_id)

    return [
        compute_property_stats(
            prop,
            [u for u in all_units if u.property_id == prop.id],
            [loan for loan in all_loans if loan.property_id == prop.id],
            today,
        )
        for prop in properties
    ]


# ----- Units -----


async def get_unit(db: AsyncSession, user_id: UUID, unit_id: UUID) -> Unit:
    unit = await crud.units.get(db, user_id, unit_id)
    if not unit:
        raise NotFoundError(f"Unit with ID {unit_id} not found")
    return unit


async def create_unit(
    db: AsyncSession, user_id: UUID, property_id: UUID, data: UnitCreate
) -> Unit:
    await get_property(db, user_id, property_id)
    return await crud.units.create(
        db, data.model_dump(), user_id, property_id=property_id
    )


async def update_unit(
    db: AsyncSession, user_id: UUID, unit_id: UUID, data: UnitUpdate
) -> Unit:
    unit = await get_unit(db, user_id, unit_id)
    return await crud.units.update(
        db, unit, data.model_dump(exclude_unset=True)
    )


async def delete_unit(db: AsyncSession, user_id: UUID, unit_id: UUID) -> None:
    unit = await get_unit(db, user_id, unit_id)
    await crud.units.delete(db, unit)


# ----- Tenants -----


async def get_tenant(db: AsyncSession, user_id: UUID, tenant_id: UUID) -> Tenant:
    tenant = await crud.tenants.get(db, user_id, tenant_id)
    if not tenant:
        raise NotFoundError(f"Tenant with ID {tenant_id} not found")
    return tenant


async def create_tenant(db: AsyncSession, user_id: UUID, data: TenantCreate) -> Tenant:
    if data.unit_id is not None:
        await get_unit(db, user_id, data.unit_id)
    return await crud.tenants.create(db, data.model_dump(), user_id)


async def update_tenant(
    db: AsyncSession, user_id: UUID, tenant_id: UUID, data: TenantUpdate
) -> Tenant:
    tenant = await get_tenant(db, user_id, tenant_id)
    updates = data.model_dump(exclude_unset=True)
    if updates.get("unit_id") is not None:
        await get_unit(db, user_id, updates["unit_id"])

    lease_start = updates.get("lease_start", tenant.lease_start)
    lease_end = updates.get("lease_end", tenant.lease_end)
    if lease_start and lease_end and lease_end < lease_start:
        raise ValidationError("must not precede lease_start", field="lease_end")

    return await crud.tenants.update(db, tenant, updates)


async def delete_tenant(db: AsyncSession, user_id: UUID, tenant_id: UUID) -> None:
    tenant = await get_tenant(db, user_id, tenant_id)
    await crud.tenants.delete(db, tenant)


# ----- Loans -----


async def get_loan(db: AsyncSession, user_id: UUID, loan_id: UUID) -> Loan:
    loan = await crud.loans.get(db, user_id, loan_id)
    if not loan:
        raise NotFoundError(f"Loan with ID {loan_id} not found")
    return loan


async def create_loan(db: AsyncSession, user_id: UUID, data: LoanCreate) -> Loan:
    if data.property_id is not None:
        await get_property(db, user_id, data.property_id)
    return await crud.loans.create(db, data.model_dump(), user_id)


async def update_loan(
    db: AsyncSession, user_id: UUID, loan_id: UUID, data: LoanUpdate
) -> Loan:
    loan = await get_loan(db, user_id, loan_id)
    updates = data.model_dump(exclude_unset=True)
    if updates.get("property_id") is not None:
        await get_property(db, user_id, updates["property_id"])
    return await crud.loans.update(db, loan, updates)


async def delete_loan(db: AsyncSession, user_id: UUID, loan_id: UUID) -> None:
    loan = await get_loan(db, user_id, loan_id)
    await crud.loans.delete(db, loan)


# ----- Operating Data -----


async def upsert_operating_data(
    db: AsyncSession, user_id: UUID, property_id: UUID, data: OperatingDataUpsert
) -> PropertyOperatingData:
    """Update the row for (property, month) or insert it."""
    await get_property(db, user_id, property_id)
    values = data.model_dump(exclude_unset=True)
    values["month"] = data.month

    existing = await crud.get_operating_data_for_month(
        db, user_id, property_id, data.month
    )
    if existing:
        for field, value in values.items():
            setattr(existing, field, value)
        row = existing
    else:
        row = PropertyOperatingData(user_id=user_id, property_id=property_id, **values)
        db.add(row)

    await db.commit()
    await db.refresh(row)
    logger.info(f"Stored operating data for property {property_id} month {data.month}")
    return row


async def list_operating_data(
    db: AsyncSession, user_id: UUID, property_id: UUID, months: int, today: date
) -> list[PropertyOperatingData]:
    """Operating data of the last ``months`` months, newest first."""
    return await crud.get_operating_data_since(
        db, user_id, trend_start(today, months), property_id=property_id
    )


# ----- Technical Status -----


async def get_technical_status(
    db: AsyncSession, user_id: UUID, property_id: UUID
) -> PropertyTechnicalStatus | None:
    return await crud.get_technical_status(db, user_id, property_id)


async def upsert_technical_status(
    db: AsyncSession, user_id: UUID, property_id: UUID, data: TechnicalStatusUpsert
) -> PropertyTechnicalStatus:
    await get_property(db, user_id, property_id)
    values = data.model_dump(exclude_unset=True, exclude_none=True)

    existing = await crud.get_technical_status(db, user_id, property_id)
    if existing:
        for field, value in values.items():
            setattr(existing, field, value)
        row = existing
    else:
        row = PropertyTechnicalStatus(user_id=user_id, property_id=property_id, **values)
        db.add(row)

    await db.commit()
    await db.refresh(row)
    return row


# ----- Tenant Changes -----


async def list_tenant_changes(
    db: AsyncSession, user_id: UUID, property_id: UUID
) -> list[TenantChange]:
    return await crud.get_tenant_changes(db, user_id, property_id)


async def add_tenant_change(
    db: AsyncSession, user_id: UUID, property_id: UUID, data: TenantChangeCreate
) -> TenantChange:
    await get_property(db, user_id, property_id)
    change = TenantChange(user_id=user_id, property_id=property_id, **data.model_dump())
    db.add(change)
    await db.commit()
    await db.refresh(change)
    return change


# ----- Alert Thresholds -----


async def get_alert_thresholds(db: AsyncSession, user_id: UUID) -> AlertThresholdsValues:
    """Stored thresholds, with defaults for anything never configured."""
    row = await crud.get_alert_thresholds(db, user_id)
    return AlertThresholdsValues.from_row(row)


async def update_alert_thresholds(
    db: AsyncSession, user_id: UUID, data: AlertThresholdsUpdate
) -> AlertThresholdsValues:
    values = data.model_dump(exclude_unset=True)
    row = await crud.get_alert_thresholds(db, user_id)
    if row:
        for field, value in values.items():
            setattr(row, field, value)
    else:
        row = AlertThresholds(user_id=user_id, **values)
        db.add(row)

    await db.commit()
    await db.refresh(row)
    return AlertThresholdsValues.from_row(row)


# ----- KPIs and Dashboard -----


async def get_property_kpis(
    db: AsyncSession, user_id: UUID, today: date, property_id: UUID | None = None
) -> list[PropertyKPIs]:
    """KPIs of all properties (or one) for the current month."""
    if property_id is not None:
        properties = [await get_property(db, user_id, property_id)]
    else:
        properties = await crud.properties.get_all(db, user_id)

    all_units = await crud.units.get_all(db, user_id)
    all_loans = await crud.loans.get_all(db, user_id)
    operating = {
        op.property_id: op
        for op in await crud.get_operating_data_by_month(
            db, user_id, month_start(today)
        )
    }
    technical = {
        ts.property_id: ts for ts in await crud.get_all_technical_status(db, user_id)
    }
    last_changes: dict[UUID, date] = {}
    for change in await crud.get_tenant_changes(db, user_id):
        last_changes.setdefault(change.property_id, change.change_date)

    return [
        compute_property_kpis(
            prop,
            [u for u in all_units if u.property_id == prop.id],
            [loan for loan in all_loans if loan.property_id == prop.id],
            operating.get(prop.id),
            technical.get(prop.id),
            last_changes.get(prop.id),
            today,
        )
        for prop in properties
    ]


async def get_portfolio_kpis(
    db: AsyncSession, user_id: UUID, today: date
) -> PortfolioKPIs | None:
    kpis = await get_property_kpis(db, user_id, today)
    total_purchase_price = await crud.get_total_purchase_price(db, user_id)
    return compute_portfolio_kpis(kpis, total_purchase_price)


async def get_alerts(
    db: AsyncSession, user_id: UUID, today: date, now: datetime
) -> list[RealEstateAlert]:
    kpis = await get_property_kpis(db, user_id, today)
    thresholds = await get_alert_thresholds(db, user_id)
    return build_alerts(kpis, thresholds, now)


async def get_risk_board(
    db: AsyncSession, user_id: UUID, today: date, now: datetime, limit: int = 10
) -> list[RiskBoardEntry]:
    kpis = await get_property_kpis(db, user_id, today)
    thresholds = await get_alert_thresholds(db, user_id)
    return build_risk_board(kpis, build_alerts(kpis, thresholds, now), limit)


async def get_trend(
    db: AsyncSession, user_id: UUID, today: date, months: int = 12
) -> list[TrendDataPoint]:
    rows = await crud.get_operating_data_since(
        db, user_id, trend_start(today, months), newest_first=False
    )
    return build_trend(rows, months, today)


async def get_waterfall(
    db: AsyncSession, user_id: UUID, today: date
) -> list[WaterfallStep]:
    return build_waterfall(await get_portfolio_kpis(db, user_id, today))


async def get_maturity_wall(db: AsyncSession, user_id: UUID) -> list[MaturityWallPoint]:
    all_loans = await crud.loans.get_all(db, user_id)
    properties = await crud.properties.get_all(db, user_id)
    values = {
        p.id: float(p.conservative_market_value or p.current_value or 0)
        for p in properties
    }
    return build_maturity_wall(all_loans, values)


async def get_benchmark(
    db: AsyncSession, user_id: UUID, today: date
) -> list[BenchmarkPoint]:
    return build_benchmark(await get_property_kpis(db, user_id, today))


async def get_dashboard(
    db: AsyncSession, user_id: UUID, today: date, now: datetime, limit: int = 10
) -> RealEstateDashboard:
    """All dashboard panels from a single KPI pass."""
    kpis = await get_property_kpis(db, user_id, today)
    total_purchase_price = await crud.get_total_purchase_price(db, user_id)
    thresholds = await get_alert_thresholds(db, user_id)

    portfolio = compute_portfolio_kpis(kpis, total_purchase_price)
    alerts = build_alerts(kpis, thresholds, now)

    return RealEstateDashboard(
        portfolio=portfolio,
        properties=kpis,
        alerts=alerts,
        risk_board=build_risk_board(kpis, alerts, limit),
        waterfall=build_waterfall(portfolio),
        benchmark=build_benchmark(kpis),
    )
