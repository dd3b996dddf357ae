"""Real estate API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import local_today, utc_now
from ...database import get_db
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse, PaginatedResponse, PaginationParams
from . import crud, services
from .models import LoanType, PropertyType, TenantStatus, UnitStatus
from .schemas import (
    AlertThresholdsUpdate,
    AlertThresholdsValues,
    BenchmarkPoint,
    LoanCreate,
    LoanResponse,
    LoanUpdate,
    MaturityWallPoint,
    OperatingDataResponse,
    OperatingDataUpsert,
    PortfolioKPIs,
    PropertyCreate,
    PropertyKPIs,
    PropertyResponse,
    PropertyStats,
    PropertyUpdate,
    RealEstateAlert,
    RealEstateDashboard,
    RiskBoardEntry,
    TechnicalStatusResponse,
    TechnicalStatusUpsert,
    TenantChangeCreate,
    TenantChangeResponse,
    TenantCreate,
    TenantResponse,
    TenantUpdate,
    TrendDataPoint,
    UnitCreate,
    UnitResponse,
    UnitUpdate,
    WaterfallStep,
)

router = APIRouter(prefix="/properties", tags=["Properties"])
units_router = APIRouter(prefix="/units", tags=["Units"])
tenants_router = APIRouter(prefix="/tenants", tags=["Tenants"])
loans_router = APIRouter(prefix="/loans", tags=["Loans"])
analytics_router = APIRouter(prefix="/real-estate", tags=["Real Estate Analytics"])


# ----- Properties -----


@router.get("", response_model=BaseResponse[PaginatedResponse[PropertyResponse]])
async def list_properties(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    property_type: PropertyType | None = Query(None),
    city: str | None = Query(None),
    search: str | None = Query(None),
):
    """Get properties with pagination and filtering."""
    properties, total = await crud.properties.get_multi(
        db,
        current_user.id,
        pagination=PaginationParams(page=page, page_size=page_size),
        search_query=search,
        filters={
            "property_type": property_type.value if property_type else None,
            "city": city,
        },
    )

    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[PropertyResponse.model_validate(p) for p in properties],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )


@router.get("/stats", response_model=BaseResponse[list[PropertyStats]])
async def list_property_stats(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    city: str | None = Query(None),
):
    """Get every property with rent roll, cashflow, yield and tax figures."""
    stats = await services.list_properties_with_stats(
        db, current_user.id, local_today(), city=city
    )
    return BaseResponse(success=True, data=stats)


@router.get("/cities", response_model=BaseResponse[list[str]])
async def list_property_cities(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the distinct cities of the portfolio."""
    cities = await crud.get_property_cities(db, current_user.id)
    return BaseResponse(success=True, data=cities)


@router.get("/{property_id}", response_model=BaseResponse[PropertyResponse])
async def get_property(
    property_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get a property by ID."""
    property_obj = await services.get_property(db, current_user.id, property_id)
    return BaseResponse(success=True, data=PropertyResponse.model_validate(property_obj))


@router.post("", response_model=BaseResponse[PropertyResponse])
async def create_property(
    data: PropertyCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a new property."""
    property_obj = await services.create_property(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Property created successfully",
        data=PropertyResponse.model_validate(property_obj),
    )


@router.patch("/{property_id}", response_model=BaseResponse[PropertyResponse])
async def update_property(
    property_id: UUID,
    data: PropertyUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update a property."""
    property_obj = await services.update_property(
        db, current_user.id, property_id, data
    )
    return BaseResponse(
        success=True,
        message="Property updated successfully",
        data=PropertyResponse.model_validate(property_obj),
    )


@router.delete("/{property_id}", response_model=BaseResponse[None])
async def delete_property(
    property_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete a property together with its units and operating data."""
    await services.delete_property(db, current_user.id, property_id)
    return BaseResponse(success=True, message="Property deleted successfully")


@router.get("/{property_id}/units", response_model=BaseResponse[list[UnitResponse]])
async def list_property_units(
    property_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    status: UnitStatus | None = Query(None),
):
    """Get the units of a property."""
    await services.get_property(db, current_user.id, property_id)
    units = await crud.units.get_all(
        db,
        current_user.id,
        filters={
            "property_id": property_id,
            "status": status.value if status else None,
        },
    )
    return BaseResponse(
        success=True, data=[UnitResponse.model_validate(u) for u in units]
    )


@router.post("/{property_id}/units", response_model=BaseResponse[UnitResponse])
async def create_unit(
    property_id: UUID,
    data: UnitCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a unit within a property."""
    unit = await services.create_unit(db, current_user.id, property_id, data)
    return BaseResponse(
        success=True,
        message="Unit created successfully",
        data=UnitResponse.model_validate(unit),
    )


@router.get(
    "/{property_id}/operating-data",
    response_model=BaseResponse[list[OperatingDataResponse]],
)
async def list_operating_data(
    property_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    months: int = Query(12, ge=1, le=120),
):
    """Get the monthly operating data of a property, newest first."""
    await services.get_property(db, current_user.id, property_id)
    rows = await services.list_operating_data(
        db, current_user.id, property_id, months, local_today()
    )
    return BaseResponse(
        success=True, data=[OperatingDataResponse.model_validate(r) for r in rows]
    )


@router.put(
    "/{property_id}/operating-data",
    response_model=BaseResponse[OperatingDataResponse],
)
async def upsert_operating_data(
    property_id: UUID,
    data: OperatingDataUpsert,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create or replace the operating data of one month."""
    row = await services.upsert_operating_data(db, current_user.id, property_id, data)
    return BaseResponse(
        success=True,
        message="Operating data saved successfully",
        data=OperatingDataResponse.model_validate(row),
    )


@router.get(
    "/{property_id}/technical-status",
    response_model=BaseResponse[TechnicalStatusResponse | None],
)
async def get_technical_status(
    property_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the technical condition of a property."""
    await services.get_property(db, current_user.id, property_id)
    row = await services.get_technical_status(db, current_user.id, property_id)
    return BaseResponse(
        success=True,
        data=TechnicalStatusResponse.model_validate(row) if row else None,
    )


@router.put(
    "/{property_id}/technical-status",
    response_model=BaseResponse[TechnicalStatusResponse],
)
async def upsert_technical_status(
    property_id: UUID,
    data: TechnicalStatusUpsert,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create or update the technical condition of a property."""
    row = await services.upsert_technical_status(
        db, current_user.id, property_id, data
    )
    return BaseResponse(
        success=True,
        message="Technical status saved successfully",
        data=TechnicalStatusResponse.model_validate(row),
    )


@router.get(
    "/{property_id}/tenant-changes",
    response_model=BaseResponse[list[TenantChangeResponse]],
)
async def list_tenant_changes(
    property_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the tenant change history of a property, newest first."""
    await services.get_property(db, current_user.id, property_id)
    changes = await services.list_tenant_changes(db, current_user.id, property_id)
    return BaseResponse(
        success=True, data=[TenantChangeResponse.model_validate(c) for c in changes]
    )


@router.post(
    "/{property_id}/tenant-changes",
    response_model=BaseResponse[TenantChangeResponse],
)
async def add_tenant_change(
    property_id: UUID,
    data: TenantChangeCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Record a tenant change."""
    change = await services.add_tenant_change(db, current_user.id, property_id, data)
    return BaseResponse(
        success=True,
        message="Tenant change recorded successfully",
        data=TenantChangeResponse.model_validate(change),
    )


# ----- Units -----


@units_router.get("/{unit_id}", response_model=BaseResponse[UnitResponse])
async def get_unit(
    unit_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get a unit by ID."""
    unit = await services.get_unit(db, current_user.id, unit_id)
    return BaseResponse(success=True, data=UnitResponse.model_validate(unit))


@units_router.patch("/{unit_id}", response_model=BaseResponse[UnitResponse])
async def update_unit(
    unit_id: UUID,
    data: UnitUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update a unit."""
    unit = await services.update_unit(db, current_user.id, unit_id, data)
    return BaseResponse(
        success=True,
        message="Unit updated successfully",
        data=UnitResponse.model_validate(unit),
    )


@units_router.delete("/{unit_id}", response_model=BaseResponse[None])
async def delete_unit(
    unit_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete a unit."""
    await services.delete_unit(db, current_user.id, unit_id)
    return BaseResponse(success=True, message="Unit deleted successfully")


# ----- Tenants -----


@tenants_router.get(
    "", response_model=BaseResponse[PaginatedResponse[TenantResponse]]
)
async def list_tenants(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    unit_id: UUID | None = Query(None),
    status: TenantStatus | None = Query(None),
    search: str | None = Query(None),
):
    """Get tenants with pagination and filtering."""
    tenants, total = await crud.tenants.get_multi(
        db,
        current_user.id,
        pagination=PaginationParams(page=page, page_size=page_size),
        search_query=search,
        filters={"unit_id": unit_id, "status": status.value if status else None},
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[TenantResponse.model_validate(t) for t in tenants],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )


@tenants_router.get("/{tenant_id}", response_model=BaseResponse[TenantResponse])
async def get_tenant(
    tenant_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get a tenant by ID."""
    tenant = await services.get_tenant(db, current_user.id, tenant_id)
    return BaseResponse(success=True, data=TenantResponse.model_validate(tenant))


@tenants_router.post("", response_model=BaseResponse[TenantResponse])
async def create_tenant(
    data: TenantCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a new tenant."""
    tenant = await services.create_tenant(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Tenant created successfully",
        data=TenantResponse.model_validate(tenant),
    )


@tenants_router.patch("/{tenant_id}", response_model=BaseResponse[TenantResponse])
async def update_tenant(
    tenant_id: UUID,
    data: TenantUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update a tenant."""
    tenant = await services.update_tenant(db, current_user.id, tenant_id, data)
    return BaseResponse(
        success=True,
        message="Tenant updated successfully",
        data=TenantResponse.model_validate(tenant),
    )


@tenants_router.delete("/{tenant_id}", response_model=BaseResponse[None])
async def delete_tenant(
    tenant_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete a tenant."""
    await services.delete_tenant(db, current_user.id, tenant_id)
    return BaseResponse(success=True, message="Tenant deleted successfully")


# ----- Loans -----


@loans_router.get("", response_model=BaseResponse[list[LoanResponse]])
async def list_loans(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    property_id: UUID | None = Query(None),
    loan_type: LoanType | None = Query(None),
):
    """Get loans ordered by the end of their fixed-interest period."""
    loans = await crud.loans.get_all(
        db,
        current_user.id,
        filters={
            "property_id": property_id,
            "loan_type": loan_type.value if loan_type else None,
        },
    )
    return BaseResponse(
        success=True, data=[LoanResponse.model_validate(loan) for loan in loans]
    )


@loans_router.get("/{loan_id}", response_model=BaseResponse[LoanResponse])
async def get_loan(
    loan_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get a loan by ID."""
    loan = await services.get_loan(db, current_user.id, loan_id)
    return BaseResponse(success=True, data=LoanResponse.model_validate(loan))


@loans_router.post("", response_model=BaseResponse[LoanResponse])
async def create_loan(
    data: LoanCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a new loan."""
    loan = await services.create_loan(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Loan created successfully",
        data=LoanResponse.model_validate(loan),
    )


@loans_router.patch("/{loan_id}", response_model=BaseResponse[LoanResponse])
async def update_loan(
    loan_id: UUID,
    data: LoanUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update a loan."""
    loan = await services.update_loan(db, current_user.id, loan_id, data)
    return BaseResponse(
        success=True,
        message="Loan updated successfully",
        data=LoanResponse.model_validate(loan),
    )


@loans_router.delete("/{loan_id}", response_model=BaseResponse[None])
async def delete_loan(
    loan_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete a loan."""
    await services.delete_loan(db, current_user.id, loan_id)
    return BaseResponse(success=True, message="Loan deleted successfully")


# ----- Analytics -----


@analytics_router.get("/dashboard", response_model=BaseResponse[RealEstateDashboard])
async def get_dashboard(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    risk_limit: int = Query(10, ge=1, le=50),
):
    """Get every real estate dashboard panel in one response."""
    dashboard = await services.get_dashboard(
        db, current_user.id, local_today(), utc_now(), risk_limit
    )
    return BaseResponse(success=True, data=dashboard)


@analytics_router.get("/kpis", response_model=BaseResponse[list[PropertyKPIs]])
async def get_property_kpis(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    property_id: UUID | None = Query(None),
):
    """Get current-month KPIs per property."""
    kpis = await services.get_property_kpis(
        db, current_user.id, local_today(), property_id
    )
    return BaseResponse(success=True, data=kpis)


@analytics_router.get("/portfolio", response_model=BaseResponse[PortfolioKPIs | None])
async def get_portfolio_kpis(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the aggregated portfolio KPIs; empty portfolios return no data."""
    portfolio = await services.get_portfolio_kpis(db, current_user.id, local_today())
    return BaseResponse(success=True, data=portfolio)


@analytics_router.get("/alerts", response_model=BaseResponse[list[RealEstateAlert]])
async def get_alerts(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get threshold alerts ordered by severity."""
    alerts = await services.get_alerts(db, current_user.id, local_today(), utc_now())
    return BaseResponse(success=True, data=alerts)


@analytics_router.get("/risk-board", response_model=BaseResponse[list[RiskBoardEntry]])
async def get_risk_board(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(10, ge=1, le=50),
):
    """Get the riskiest properties first."""
    board = await services.get_risk_board(
        db, current_user.id, local_today(), utc_now(), limit
    )
    return BaseResponse(success=True, data=board)


@analytics_router.get("/trend", response_model=BaseResponse[list[TrendDataPoint]])
async def get_trend(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    months: int = Query(12, ge=1, le=60),
):
    """Get monthly portfolio totals, oldest month first."""
    trend = await services.get_trend(db, current_user.id, local_today(), months)
    return BaseResponse(success=True, data=trend)


@analytics_router.get("/waterfall", response_model=BaseResponse[list[WaterfallStep]])
async def get_waterfall(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the rent-to-cashflow waterfall of the portfolio."""
    steps = await services.get_waterfall(db, current_user.id, local_today())
    return BaseResponse(success=True, data=steps)


@analytics_router.get(
    "/maturity-wall", response_model=BaseResponse[list[MaturityWallPoint]]
)
async def get_maturity_wall(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get loan balances grouped by the year their fixed interest ends."""
    wall = await services.get_maturity_wall(db, current_user.id)
    return BaseResponse(success=True, data=wall)


@analytics_router.get("/benchmark", response_model=BaseResponse[list[BenchmarkPoint]])
async def get_benchmark(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get per-property benchmark figures."""
    points = await services.get_benchmark(db, current_user.id, local_today())
    return BaseResponse(success=True, data=points)


@analytics_router.get(
    "/thresholds", response_model=BaseResponse[AlertThresholdsValues]
)
async def get_alert_thresholds(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the alert thresholds, with defaults for unset values."""
    thresholds = await services.get_alert_thresholds(db, current_user.id)
    return BaseResponse(success=True, data=thresholds)


@analytics_router.put(
    "/thresholds", response_model=BaseResponse[AlertThresholdsValues]
)
async def update_alert_thresholds(
    data: AlertThresholdsUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Store alert thresholds."""
    thresholds = await services.update_alert_thresholds(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Alert thresholds saved successfully",
        data=thresholds,
    )
