"""Wealth API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import local_today
from ...database import get_db
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse
from . import crud, services
from .schemas import (
    AccountCreate,
    AccountResponse,
    AccountsSummary,
    AccountUpdate,
    AssetAllocation,
    CompaniesSummary,
    CompanyCreate,
    CompanyResponse,
    FirePreferences,
    FireProgress,
    InvestmentsSummary,
    LoansSummary,
    MonthlyCashflow,
    NetWorthPoint,
    PositionCreate,
    PositionResponse,
    PropertiesSummary,
    RecurringTransactionCreate,
    RecurringTransactionResponse,
    RecurringTransactionUpdate,
    SnapshotResponse,
    WealthOverview,
)

router = APIRouter(prefix="/wealth", tags=["Wealth"])


@router.get("/overview", response_model=BaseResponse[WealthOverview])
async def get_overview(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get every wealth summary in one response."""
    overview = await services.get_overview(db, current_user.id, local_today())
    return BaseResponse(success=True, data=overview)


# ----- Net Worth -----


@router.get("/snapshots/latest", response_model=BaseResponse[SnapshotResponse | None])
async def get_latest_snapshot(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the most recent net worth snapshot."""
    snapshot = await services.get_latest_snapshot(db, current_user.id)
    return BaseResponse(
        success=True,
        data=SnapshotResponse.model_validate(snapshot) if snapshot else None,
    )


@router.get("/net-worth-history", response_model=BaseResponse[list[NetWorthPoint]])
async def get_net_worth_history(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    days: int = Query(30, ge=1, le=3650),
):
    """Get net worth of the last ``days`` days, oldest first."""
    snapshots = await services.get_net_worth_history(
        db, current_user.id, local_today(), days
    )
    return BaseResponse(
        success=True, data=[NetWorthPoint.model_validate(s) for s in snapshots]
    )


@router.get("/allocation", response_model=BaseResponse[AssetAllocation])
async def get_asset_allocation(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the asset allocation of the latest snapshot."""
    allocation = await services.get_asset_allocation(db, current_user.id)
    return BaseResponse(success=True, data=allocation)


# ----- Accounts -----


@router.get("/accounts", response_model=BaseResponse[list[AccountResponse]])
async def list_accounts(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    is_active: bool | None = Query(True),
    search: str | None = Query(None),
):
    """Get accounts, highest balance first."""
    accounts, _ = await crud.accounts.get_multi(
        db, current_user.id, is_active=is_active, search_query=search
    )
    return BaseResponse(
        success=True, data=[AccountResponse.model_validate(a) for a in accounts]
    )


@router.get("/accounts/summary", response_model=BaseResponse[AccountsSummary])
async def get_accounts_summary(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the total balance of active accounts, grouped by account type."""
    summary = await services.get_accounts_summary(db, current_user.id)
    return BaseResponse(success=True, data=summary)


@router.post("/accounts", response_model=BaseResponse[AccountResponse])
async def create_account(
    data: AccountCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a new account."""
    account = await services.create_account(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Account created successfully",
        data=AccountResponse.model_validate(account),
    )


@router.patch("/accounts/{account_id}", response_model=BaseResponse[AccountResponse])
async def update_account(
    account_id: UUID,
    data: AccountUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update an account."""
    account = await services.update_account(db, current_user.id, account_id, data)
    return BaseResponse(
        success=True,
        message="Account updated successfully",
        data=AccountResponse.model_validate(account),
    )


@router.delete("/accounts/{account_id}", response_model=BaseResponse[None])
async def delete_account(
    account_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete an account."""
    await services.delete_account(db, current_user.id, account_id)
    return BaseResponse(success=True, message="Account deleted successfully")


# ----- Loans / Properties -----


@router.get("/loans/summary", response_model=BaseResponse[LoansSummary])
async def get_loans_summary(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get loan totals and the number of fixed rates ending within a year."""
    summary = await services.get_loans_summary(db, current_user.id, local_today())
    return BaseResponse(success=True, data=summary)


@router.get("/properties/summary", response_model=BaseResponse[PropertiesSummary])
async def get_properties_summary(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get property values and unit counts."""
    summary = await services.get_properties_summary(db, current_user.id)
    return BaseResponse(success=True, data=summary)


# ----- Investments / Companies -----


@router.get("/positions", response_model=BaseResponse[list[PositionResponse]])
async def list_positions(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    asset_type: str | None = Query(None),
):
    """Get investment positions, largest first."""
    positions = await crud.positions.get_all(
        db, current_user.id, filters={"asset_type": asset_type}
    )
    return BaseResponse(
        success=True, data=[PositionResponse.model_validate(p) for p in positions]
    )


@router.post("/positions", response_model=BaseResponse[PositionResponse])
async def create_position(
    data: PositionCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create an investment position."""
    position = await crud.positions.create(db, data.model_dump(), current_user.id)
    return BaseResponse(
        success=True,
        message="Position created successfully",
        data=PositionResponse.model_validate(position),
    )


@router.get("/investments/summary", response_model=BaseResponse[InvestmentsSummary])
async def get_investments_summary(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get portfolio value, gain/loss and value per asset type."""
    summary = await services.get_investments_summary(db, current_user.id)
    return BaseResponse(success=True, data=summary)


@router.post("/companies", response_model=BaseResponse[CompanyResponse])
async def create_company(
    data: CompanyCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a company holding."""
    company = await crud.companies.create(db, data.model_dump(), current_user.id)
    return BaseResponse(
        success=True,
        message="Company created successfully",
        data=CompanyResponse.model_validate(company),
    )


@router.get("/companies/summary", response_model=BaseResponse[CompaniesSummary])
async def get_companies_summary(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the value of all company shares."""
    summary = await services.get_companies_summary(db, current_user.id)
    return BaseResponse(success=True, data=summary)


# ----- Cashflow -----


@router.get("/cashflow", response_model=BaseResponse[MonthlyCashflow])
async def get_monthly_cashflow(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the expected monthly income, expenses and net cashflow."""
    cashflow = await services.get_monthly_cashflow(db, current_user.id)
    return BaseResponse(success=True, data=cashflow)


@router.get(
    "/recurring-transactions",
    response_model=BaseResponse[list[RecurringTransactionResponse]],
)
async def list_recurring_transactions(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    is_active: bool | None = Query(True),
):
    """Get recurring transactions ordered by booking day."""
    transactions = await crud.recurring_transactions.get_all(
        db, current_user.id, is_active=is_active
    )
    return BaseResponse(
        success=True,
        data=[RecurringTransactionResponse.model_validate(t) for t in transactions],
    )


@router.post(
    "/recurring-transactions",
    response_model=BaseResponse[RecurringTransactionResponse],
)
async def create_recurring_transaction(
    data: RecurringTransactionCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a recurring transaction."""
    transaction = await services.create_recurring_transaction(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Recurring transaction created successfully",
        data=RecurringTransactionResponse.model_validate(transaction),
    )


@router.patch(
    "/recurring-transactions/{transaction_id}",
    response_model=BaseResponse[RecurringTransactionResponse],
)
async def update_recurring_transaction(
    transaction_id: UUID,
    data: RecurringTransactionUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update a recurring transaction."""
    transaction = await services.update_recurring_transaction(
        db, current_user.id, transaction_id, data
    )
    return BaseResponse(
        success=True,
        message="Recurring transaction updated successfully",
        data=RecurringTransactionResponse.model_validate(transaction),
    )


@router.delete(
    "/recurring-transactions/{transaction_id}", response_model=BaseResponse[None]
)
async def delete_recurring_transaction(
    transaction_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete a recurring transaction."""
    await services.delete_recurring_transaction(db, current_user.id, transaction_id)
    return BaseResponse(
        success=True, message="Recurring transaction deleted successfully"
    )


# ----- FIRE -----


@router.get("/fire", response_model=BaseResponse[FireProgress])
async def get_fire_progress(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get progress towards financial independence."""
    progress = await services.get_fire_progress(db, current_user.id)
    return BaseResponse(success=True, data=progress)


@router.get("/fire/preferences", response_model=BaseResponse[FirePreferences])
async def get_fire_preferences(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the FIRE plan."""
    preferences = await services.get_fire_preferences(db, current_user.id)
    return BaseResponse(success=True, data=preferences)


@router.put("/fire/preferences", response_model=BaseResponse[FirePreferences])
async def update_fire_preferences(
    data: FirePreferences,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Store the FIRE plan."""
    preferences = await services.update_fire_preferences(db, current_user.id, data)
    return BaseResponse(
        success=True, message="FIRE preferences saved successfully", data=preferences
    )
