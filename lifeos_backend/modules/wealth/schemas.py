"""Wealth Pydantic schemas."""

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, Field

from .models import AccountType, AssetType, TransactionFrequency, TransactionType


# ----- Account Schemas -----


class AccountBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    bank_name: str | None = Field(None, max_length=255)
    iban: str | None = Field(None, max_length=34)
    account_type: AccountType | None = None
    current_balance: float | None = None
    property_id: UUID | None = None
    is_active: bool = True
    notes: str | None = None


class AccountCreate(AccountBase):
    pass


class AccountUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    bank_name: str | None = Field(None, max_length=255)
    iban: str | None = Field(None, max_length=34)
    account_type: AccountType | None = None
    current_balance: float | None = None
    property_id: UUID | None = None
    is_active: bool | None = None
    notes: str | None = None


class AccountResponse(AccountBase):
    id: UUID
    account_type: str | None = None

    class Config:
        from_attributes = True


# ----- Position / Company Schemas -----


class PositionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    isin: str | None = Field(None, max_length=12)
    asset_type: AssetType | None = None
    quantity: float | None = Field(None, ge=0)
    current_value: float | None = None
    total_invested: float | None = None
    unrealized_gain_loss: float | None = None


class PositionResponse(PositionCreate):
    id: UUID
    asset_type: str | None = None

    class Config:
        from_attributes = True


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    legal_form: str | None = Field(None, max_length=40)
    ownership_percent: float | None = Field(None, ge=0, le=100)
    your_share_value: float | None = None
    notes: str | None = None


class CompanyResponse(CompanyCreate):
    id: UUID

    class Config:
        from_attributes = True


# ----- Recurring Transactions -----


class RecurringTransactionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    amount: float
    type: TransactionType | None = None
    frequency: TransactionFrequency = TransactionFrequency.MONTHLY
    day_of_month: int | None = Field(None, ge=1, le=31)
    category: str | None = Field(None, max_length=120)
    is_active: bool = True


class RecurringTransactionUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    amount: float | None = None
    type: TransactionType | None = None
    frequency: TransactionFrequency | None = None
    day_of_month: int | None = Field(None, ge=1, le=31)
    category: str | None = Field(None, max_length=120)
    is_active: bool | None = None


class RecurringTransactionResponse(BaseModel):
    id: UUID
    name: str
    amount: float | None = None
    type: str | None = None
    frequency: str
    day_of_month: int | None = None
    category: str | None = None
    is_active: bool

    class Config:
        from_attributes = True


# ----- Preferences -----


class FirePreferences(BaseModel):
    fire_target_amount: float | None = Field(None, ge=0)
    fire_withdrawal_rate: float | None = Field(None, gt=0, le=100)
    fire_monthly_expenses: float | None = Field(None, ge=0)

    class Config:
        from_attributes = True


# ----- Snapshots -----


class SnapshotResponse(BaseModel):
    date: dt.date
    net_worth: float | None = None
    total_assets: float | None = None
    total_liabilities: float | None = None
    cash_value: float | None = None
    investment_value: float | None = None
    property_value: float | None = None
    company_value: float | None = None

    class Config:
        from_attributes = True


class NetWorthPoint(BaseModel):
    date: dt.date
    net_worth: float | None = None
    total_assets: float | None = None
    total_liabilities: float | None = None

    class Config:
        from_attributes = True


# ----- Summaries -----


class AccountsSummary(BaseModel):
    accounts: list[AccountResponse]
    total_balance: float
    by_type: dict[str, float]
    count: int


class LoansSummary(BaseModel):
    total_balance: float
    total_monthly_payment: float
    weighted_average_rate: float
    count: int
    expiring_soon_count: int


class PropertySummaryItem(BaseModel):
    id: UUID
    name: str
    current_value: float | None = None
    unit_count: int | None = None

    class Config:
        from_attributes = True


class PropertiesSummary(BaseModel):
    properties: list[PropertySummaryItem]
    total_value: float
    total_units: int
    count: int


class InvestmentsSummary(BaseModel):
    total_value: float
    total_invested: float
    total_gain_loss: float
    gain_loss_percent: float
    by_asset_type: dict[str, float]
    count: int


class CompanySummaryItem(BaseModel):
    id: UUID
    name: str
    your_share_value: float | None = None

    class Config:
        from_attributes = True


class CompaniesSummary(BaseModel):
    companies: list[CompanySummaryItem]
    total_value: float
    count: int


class MonthlyCashflow(BaseModel):
    monthly_income: float
    monthly_expenses: float
    rental_income: float
    loan_payments: float
    net_cashflow: float
    recurring_count: int


class FireProgress(BaseModel):
    net_worth: float
    target_amount: float
    progress: float
    withdrawal_rate: float
    monthly_expenses: float
    monthly_passive_income: float
    expenses_covered: float
    years_to_fire: float | None = None
    is_achieved: bool


class AllocationSlice(BaseModel):
    value: float
    percent: float


class AssetAllocation(BaseModel):
    cash: AllocationSlice
    investments: AllocationSlice
    properties: AllocationSlice
    companies: AllocationSlice
    total_assets: float
    total_liabilities: float
    net_worth: float


class WealthOverview(BaseModel):
    """Everything the wealth page renders, in one payload."""

    latest_snapshot: SnapshotResponse | None = None
    accounts: AccountsSummary
    loans: LoansSummary
    properties: PropertiesSummary
    investments: InvestmentsSummary
    companies: CompaniesSummary
    cashflow: MonthlyCashflow
    fire: FireProgress
    allocation: AssetAllocation
