"""Real estate schemas for Life OS."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from .models import LoanType, PropertyType, TenantStatus, TrafficLight, UnitStatus

# ----- Property Schemas -----


class PropertyBase(BaseModel):
    """Base property schema."""

    name: str = Field(..., min_length=1, max_length=255)
    address: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=120)
    postal_code: str | None = Field(None, max_length=20)
    country: str = Field(default="Deutschland", max_length=120)
    property_type: PropertyType = PropertyType.APARTMENT_BUILDING
    purchase_date: date | None = None
    purchase_price: float | None = Field(None, ge=0)
    current_value: float | None = Field(None, ge=0)
    conservative_market_value: float | None = Field(None, ge=0)
    total_sqm: float | None = Field(None, ge=0)
    unit_count: int | None = Field(None, ge=0)
    year_built: int | None = Field(None, ge=1800, le=2100)
    notes: str | None = None


class PropertyCreate(PropertyBase):
    """Schema for creating a property."""

    pass


class PropertyUpdate(BaseModel):
    """Schema for updating a property."""

    name: str | None = Field(None, min_length=1, max_length=255)
    address: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=120)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=120)
    property_type: PropertyType | None = None
    purchase_date: date | None = None
    purchase_price: float | None = Field(None, ge=0)
    current_value: float | None = Field(None, ge=0)
    conservative_market_value: float | None = Field(None, ge=0)
    total_sqm: float | None = Field(None, ge=0)
    unit_count: int | None = Field(None, ge=0)
    year_built: int | None = Field(None, ge=1800, le=2100)
    status: str | None = None
    notes: str | None = None


class PropertyResponse(PropertyBase):
    """Schema for property response."""

    id: UUID
    status: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


# ----- Unit Schemas -----


class UnitBase(BaseModel):
    """Base unit schema."""

    name: str = Field(..., min_length=1, max_length=120)
    floor: str | None = Field(None, max_length=20)
    status: UnitStatus = UnitStatus.VACANT
    size_sqm: float | None = Field(None, ge=0)
    rooms: float | None = Field(None, ge=0)
    monthly_rent_cold: float | None = Field(None, ge=0)
    market_rent_cold: float | None = Field(None, ge=0)
    monthly_utilities_advance: float | None = Field(None, ge=0)
    notes: str | None = None


class UnitCreate(UnitBase):
    """Schema for creating a unit."""

    pass


class UnitUpdate(BaseModel):
    """Schema for updating a unit."""

    name: str | None = Field(None, min_length=1, max_length=120)
    floor: str | None = Field(None, max_length=20)
    status: UnitStatus | None = None
    size_sqm: float | None = Field(None, ge=0)
    rooms: float | None = Field(None, ge=0)
    monthly_rent_cold: float | None = Field(None, ge=0)
    market_rent_cold: float | None = Field(None, ge=0)
    monthly_utilities_advance: float | None = Field(None, ge=0)
    notes: str | None = None


class UnitResponse(UnitBase):
    """Schema for unit response."""

    id: UUID
    property_id: UUID

    class Config:
        from_attributes = True


# ----- Tenant Schemas -----


class TenantBase(BaseModel):
    """Base tenant schema."""

    unit_id: UUID | None = None
    first_name: str = Field(..., min_length=1, max_length=120)
    last_name: str = Field(..., min_length=1, max_length=120)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    lease_start: date | None = None
    lease_end: date | None = None
    status: TenantStatus = TenantStatus.ACTIVE
    deposit_amount: float | None = Field(None, ge=0)
    notes: str | None = None

    @model_validator(mode="after")
    def check_lease_dates(self):
        if self.lease_start and self.lease_end and self.lease_end < self.lease_start:
            raise ValueError("lease_end must not precede lease_start")
        return self


class TenantCreate(TenantBase):
    """Schema for creating a tenant."""

    pass


class TenantUpdate(BaseModel):
    """Schema for updating a tenant."""

    unit_id: UUID | None = None
    first_name: str | None = Field(None, min_length=1, max_length=120)
    last_name: str | None = Field(None, min_length=1, max_length=120)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    lease_start: date | None = None
    lease_end: date | None = None
    status: TenantStatus | None = None
    deposit_amount: float | None = Field(None, ge=0)
    notes: str | None = None


class TenantResponse(TenantBase):
    """Schema for tenant response."""

    id: UUID

    class Config:
        from_attributes = True


# ----- Loan Schemas -----


class LoanBase(BaseModel):
    """Base loan schema."""

    property_id: UUID | None = None
    name: str | None = Field(None, max_length=255)
    bank_name: str | None = Field(None, max_length=255)
    contract_number: str | None = Field(None, max_length=120)
    loan_type: LoanType = LoanType.ANNUITY
    original_amount: float | None = Field(None, ge=0)
    current_balance: float | None = Field(None, ge=0)
    interest_rate_nominal: float | None = Field(None, ge=0, le=100)
    monthly_payment: float | None = Field(None, ge=0)
    start_date: date | None = None
    interest_fixed_until: date | None = None
    special_repayment_allowed: bool = False
    special_repayment_percent: float | None = Field(None, ge=0, le=100)
    special_repayment_used_this_year: float | None = Field(None, ge=0)
    notes: str | None = None


class LoanCreate(LoanBase):
    """Schema for creating a loan."""

    pass


class LoanUpdate(BaseModel):
    """Schema for updating a loan."""

    property_id: UUID | None = None
    name: str | None = Field(None, max_length=255)
    bank_name: str | None = Field(None, max_length=255)
    contract_number: str | None = Field(None, max_length=120)
    loan_type: LoanType | None = None
    original_amount: float | None = Field(None, ge=0)
    current_balance: float | None = Field(None, ge=0)
    interest_rate_nominal: float | None = Field(None, ge=0, le=100)
    monthly_payment: float | None = Field(None, ge=0)
    start_date: date | None = None
    interest_fixed_until: date | None = None
    special_repayment_allowed: bool | None = None
    special_repayment_percent: float | None = Field(None, ge=0, le=100)
    special_repayment_used_this_year: float | None = Field(None, ge=0)
    notes: str | None = None


class LoanResponse(LoanBase):
    """Schema for loan response."""

    id: UUID

    class Config:
        from_attributes = True


# ----- Operating Data / Technical Status / Tenant Changes -----


class OperatingDataUpsert(BaseModel):
    """Monthly operating figures; ``month`` is normalised to its first day."""

    month: date
    actual_cold_rent: float | None = Field(None, ge=0)
    target_cold_rent: float | None = Field(None, ge=0)
    allocable_costs: float | None = Field(None, ge=0)
    non_allocable_costs: float | None = Field(None, ge=0)
    maintenance_actual: float | None = Field(None, ge=0)
    maintenance_planned: float | None = Field(None, ge=0)
    capex_actual: float | None = Field(None, ge=0)
    capex_planned: float | None = Field(None, ge=0)
    vacancy_days: int | None = Field(None, ge=0)
    rent_arrears: float | None = Field(None, ge=0)
    notes: str | None = None

    @model_validator(mode="after")
    def normalise_month(self):
        self.month = self.month.replace(day=1)
        return self


class OperatingDataResponse(OperatingDataUpsert):
    id: UUID
    property_id: UUID

    class Config:
        from_attributes = True


class TechnicalStatusUpsert(BaseModel):
    """Traffic light condition per building component."""

    heating_status: TrafficLight | None = None
    roof_status: TrafficLight | None = None
    moisture_status: TrafficLight | None = None
    electrical_status: TrafficLight | None = None
    plumbing_status: TrafficLight | None = None
    facade_status: TrafficLight | None = None
    windows_status: TrafficLight | None = None
    last_inspection_date: date | None = None
    notes: str | None = None


class TechnicalStatusResponse(TechnicalStatusUpsert):
    id: UUID
    property_id: UUID

    class Config:
        from_attributes = True


class TenantChangeCreate(BaseModel):
    unit_id: UUID | None = None
    change_date: date
    change_type: str = Field(..., min_length=1, max_length=40)
    previous_rent: float | None = Field(None, ge=0)
    new_rent: float | None = Field(None, ge=0)
    notes: str | None = None


class TenantChangeResponse(TenantChangeCreate):
    id: UUID
    property_id: UUID

    class Config:
        from_attributes = True


# ----- Alert Thresholds -----


class AlertThresholdsValues(BaseModel):
    """Limits for the real estate alert rules.

    The defaults apply to users who never stored their own thresholds.
    """

    dscr_critical: float = 1.0
    dscr_warning: float = 1.2
    interest_expiry_critical_months: int = 12
    interest_expiry_warning_months: int = 24
    ltv_high_threshold: float = 80.0
    arrears_critical_months: float = 2.0
    arrears_warning_months: float = 1.0
    vacancy_critical_days: int = 90
    vacancy_warning_days: int = 30
    capex_critical_percent: float = 100.0
    capex_warning_percent: float = 80.0

    @classmethod
    def from_row(cls, row) -> "AlertThresholdsValues":
        """Build from a stored row, falling back to defaults for NULL columns."""
        if row is None:
            return cls()
        values = {
            name: getattr(row, name)
            for name in cls.model_fields
            if getattr(row, name, None) is not None
        }
        return cls(**values)


class AlertThresholdsUpdate(BaseModel):
    dscr_critical: float | None = Field(None, ge=0)
    dscr_warning: float | None = Field(None, ge=0)
    interest_expiry_critical_months: int | None = Field(None, ge=0)
    interest_expiry_warning_months: int | None = Field(None, ge=0)
    ltv_high_threshold: float | None = Field(None, ge=0)
    arrears_critical_months: float | None = Field(None, ge=0)
    arrears_warning_months: float | None = Field(None, ge=0)
    vacancy_critical_days: int | None = Field(None, ge=0)
    vacancy_warning_days: int | None = Field(None, ge=0)
    capex_critical_percent: float | None = Field(None, ge=0)
    capex_warning_percent: float | None = Field(None, ge=0)


# ----- Computed KPI Schemas -----


class PropertyKPIs(BaseModel):
    """Monthly KPIs of a single property."""

    property_id: UUID
    property_name: str
    property_address: str | None = None

    actual_cold_rent: float
    target_cold_rent: float
    vacancy_days: int
    rent_arrears: float
    allocable_costs: float
    non_allocable_costs: float
    maintenance_actual: float
    maintenance_planned: float
    capex_actual: float
    capex_planned: float

    loan_balance: float
    monthly_debt_service: float
    monthly_interest: float
    monthly_principal: float
    interest_rate: float
    interest_fixed_until: date | None = None
    months_until_interest_expiry: int | None = None
    special_repayment_allowed: float

    total_sqm: float
    unit_count: int
    occupied_units: int
    vacant_units: int
    last_tenant_change: date | None = None

    heating_status: TrafficLight
    roof_status: TrafficLight
    moisture_status: TrafficLight
    electrical_status: TrafficLight
    plumbing_status: TrafficLight
    facade_status: TrafficLight
    windows_status: TrafficLight
    worst_technical_status: TrafficLight

    current_market_value: float
    conservative_market_value: float
    equity: float
    ltv: float

    noi: float
    net_cashflow: float
    net_cashflow_with_capex: float
    dscr: float
    gross_yield: float
    net_yield: float
    rent_per_sqm: float
    target_rent_per_sqm: float
    costs_per_sqm: float
    capex_per_sqm: float
    vacancy_rate: float
    arrears_rate: float
    capex_budget_used: float

    @property
    def arrears_months(self) -> float:
        """Arrears expressed in months of actual cold rent."""
        if self.actual_cold_rent <= 0:
            return 0.0
        return self.rent_arrears / self.actual_cold_rent


class PortfolioKPIs(BaseModel):
    """Aggregated KPIs over all properties."""

    total_property_value: float
    total_conservative_value: float
    total_loan_balance: float
    total_equity: float
    portfolio_ltv: float
    total_actual_rent: float
    total_target_rent: float
    total_allocable_costs: float
    total_non_allocable_costs: float
    total_debt_service: float
    total_noi: float
    net_cashflow: float
    net_cashflow_with_capex: float
    dscr: float
    vacancy_rate_units: float
    vacancy_rate_sqm: float
    arrears_rate: float
    rent_loss_rate: float
    total_units: int
    occupied_units: int
    vacant_units: int
    total_sqm: float
    occupied_sqm: float
    total_capex_actual: float
    total_capex_planned: float
    capex_per_sqm_annual: float
    capex_budget_used_percent: float
    total_equity_invested: float
    annual_net_cashflow: float
    cash_on_cash: float
    loans_expiring_within_12_months: int
    loans_expiring_within_24_months: int
    refinancing_risk_amount: float
    avg_weighted_interest_rate: float
    properties_with_technical_issues: int


class RealEstateAlert(BaseModel):
    id: str
    type: str
    severity: str
    title: str
    message: str
    property_id: UUID
    property_name: str
    value: float | None = None
    threshold: float | None = None
    action_url: str
    created_at: datetime


class RiskBoardEntry(BaseModel):
    property_id: UUID
    property_name: str
    property_address: str | None = None
    risk_score: int
    interest_expiring_months: int | None = None
    dscr: float
    arrears: float
    arrears_months: float
    ltv: float
    technical_worst_status: TrafficLight
    alerts: list[RealEstateAlert] = []


class TrendDataPoint(BaseModel):
    month: str
    month_label: str
    noi: float = 0.0
    net_cashflow: float = 0.0
    vacancy_days: int = 0
    rent_arrears: float = 0.0
    capex: float = 0.0


class WaterfallStep(BaseModel):
    name: str
    value: float
    cumulative: float
    type: str
    fill: str


class MaturityWallPoint(BaseModel):
    year: int
    expiring_amount: float
    loan_count: int
    avg_ltv: float


class BenchmarkPoint(BaseModel):
    property_id: UUID
    property_name: str
    actual_rent_per_sqm: float
    target_rent_per_sqm: float
    costs_per_sqm: float
    capex_per_sqm: float
    noi_per_sqm: float


class PropertyStats(BaseModel):
    """List-view figures derived from units and loans of a property."""

    property: PropertyResponse
    occupied_units: int
    vacant_units: int
    vacancy_rate: float
    monthly_rent_total: float
    monthly_utilities_total: float
    monthly_loan_payments: float
    net_monthly_cashflow: float
    gross_yield: float
    net_yield: float
    total_loan_balance: float
    equity: float
    ltv_ratio: float
    is_tax_free: bool
    tax_free_date: date | None = None
    days_until_tax_free: int | None = None


class RealEstateDashboard(BaseModel):
    """Everything the real estate dashboard renders in one payload."""

    portfolio: PortfolioKPIs | None = None
    properties: list[PropertyKPIs] = []
    alerts: list[RealEstateAlert] = []
    risk_board: list[RiskBoardEntry] = []
    waterfall: list[WaterfallStep] = []
    benchmark: list[BenchmarkPoint] = []
