"""Real estate models for Life OS.

Properties with their units, tenants and loans, plus the monthly operating
figures, technical condition and alert thresholds that feed the KPI
dashboard.
"""

import enum
import uuid
from datetime import date

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...core.database_types import GUID
from ...database import Base, TimestampMixin, UserOwned

Money = Numeric(14, 2, asdecimal=False)


class PropertyType(str, enum.Enum):
    """Property types."""

    APARTMENT_BUILDING = "mehrfamilienhaus"
    SINGLE_FAMILY = "einfamilienhaus"
    CONDO = "eigentumswohnung"
    COMMERCIAL = "gewerbe"
    MIXED_USE = "gemischt"


class UnitStatus(str, enum.Enum):
    """Unit letting status."""

    OCCUPIED = "vermietet"
    VACANT = "leer"
    RENOVATION = "renovierung"
    SELF_OCCUPIED = "eigennutzung"


class TenantStatus(str, enum.Enum):
    """Tenancy status."""

    ACTIVE = "aktiv"
    TERMINATED = "gekündigt"
    MOVED_OUT = "ausgezogen"


class LoanType(str, enum.Enum):
    """Loan repayment types."""

    ANNUITY = "annuität"
    INTEREST_ONLY = "endfällig"
    VARIABLE = "variabel"
    KFW = "kfw"


class TrafficLight(str, enum.Enum):
    """Traffic light condition of a building component."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class Property(UserOwned, TimestampMixin, Base):
    """A building or apartment held in the portfolio."""

    __tablename__ = "properties"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    country: Mapped[str] = mapped_column(String(120), default="Deutschland")
    property_type: Mapped[str] = mapped_column(
        String(40), nullable=False, default=PropertyType.APARTMENT_BUILDING.value
    )
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    purchase_price: Mapped[float | None] = mapped_column(Money, nullable=True)
    current_value: Mapped[float | None] = mapped_column(Money, nullable=True)
    conservative_market_value: Mapped[float | None] = mapped_column(
        Money, nullable=True
    )
    total_sqm: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False))
    unit_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    year_built: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(String(40), default="aktiv")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name})>"


class Unit(UserOwned, TimestampMixin, Base):
    """A lettable unit inside a property."""

    __tablename__ = "units"

    property_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    floor: Mapped[str | None] = mapped_column(String(20), nullable=True)
    status: Mapped[str] = mapped_column(
        String(40), nullable=False, default=UnitStatus.VACANT.value
    )
    size_sqm: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False))
    rooms: Mapped[float | None] = mapped_column(Numeric(4, 1, asdecimal=False))
    monthly_rent_cold: Mapped[float | None] = mapped_column(Money, nullable=True)
    market_rent_cold: Mapped[float | None] = mapped_column(Money, nullable=True)
    monthly_utilities_advance: Mapped[float | None] = mapped_column(
        Money, nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("ix_units_property", "property_id"),)

    def __repr__(self) -> str:
        return f"<Unit(id={self.id}, name={self.name}, status={self.status})>"


class Tenant(UserOwned, TimestampMixin, Base):
    """A tenant renting a unit."""

    __tablename__ = "tenants"

    unit_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("units.id", ondelete="SET NULL"), nullable=True
    )
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    lease_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    lease_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(40), nullable=False, default=TenantStatus.ACTIVE.value
    )
    deposit_amount: Mapped[float | None] = mapped_column(Money, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name={self.first_name} {self.last_name})>"


class Loan(UserOwned, TimestampMixin, Base):
    """A mortgage or other loan, usually secured on a property."""

    __tablename__ = "loans"

    property_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("properties.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bank_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contract_number: Mapped[str | None] = mapped_column(String(120), nullable=True)
    loan_type: Mapped[str] = mapped_column(
        String(40), nullable=False, default=LoanType.ANNUITY.value
    )
    original_amount: Mapped[float | None] = mapped_column(Money, nullable=True)
    current_balance: Mapped[float | None] = mapped_column(Money, nullable=True)
    interest_rate_nominal: Mapped[float | None] = mapped_column(
        Numeric(6, 3, asdecimal=False), nullable=True
    )
    monthly_payment: Mapped[float | None] = mapped_column(Money, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    interest_fixed_until: Mapped[date | None] = mapped_column(Date, nullable=True)
    special_repayment_allowed: Mapped[bool] = mapped_column(Boolean, default=False)
    special_repayment_percent: Mapped[float | None] = mapped_column(
        Numeric(5, 2, asdecimal=False), nullable=True
    )
    special_repayment_used_this_year: Mapped[float | None] = mapped_column(
        Money, nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("ix_loans_property", "property_id"),)

    def __repr__(self) -> str:
        return f"<Loan(id={self.id}, bank={self.bank_name})>"


class PropertyOperatingData(UserOwned, TimestampMixin, Base):
    """Operating figures of one property for one month."""

    __tablename__ = "property_operating_data"

    property_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    month: Mapped[date] = mapped_column(Date, nullable=False)
    actual_cold_rent: Mapped[float | None] = mapped_column(Money, nullable=True)
    target_cold_rent: Mapped[float | None] = mapped_column(Money, nullable=True)
    allocable_costs: Mapped[float | None] = mapped_column(Money, nullable=True)
    non_allocable_costs: Mapped[float | None] = mapped_column(Money, nullable=True)
    maintenance_actual: Mapped[float | None] = mapped_column(Money, nullable=True)
    maintenance_planned: Mapped[float | None] = mapped_column(Money, nullable=True)
    capex_actual: Mapped[float | None] = mapped_column(Money, nullable=True)
    capex_planned: Mapped[float | None] = mapped_column(Money, nullable=True)
    vacancy_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rent_arrears: Mapped[float | None] = mapped_column(Money, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("property_id", "month", name="uq_operating_data_month"),
    )


class PropertyTechnicalStatus(UserOwned, TimestampMixin, Base):
    """Traffic light condition of a property's building components."""

    __tablename__ = "property_technical_status"

    property_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    heating_status: Mapped[str] = mapped_column(String(10), default="green")
    roof_status: Mapped[str] = mapped_column(String(10), default="green")
    moisture_status: Mapped[str] = mapped_column(String(10), default="green")
    electrical_status: Mapped[str] = mapped_column(String(10), default="green")
    plumbing_status: Mapped[str] = mapped_column(String(10), default="green")
    facade_status: Mapped[str] = mapped_column(String(10), default="green")
    windows_status: Mapped[str] = mapped_column(String(10), default="green")
    last_inspection_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class TenantChange(UserOwned, TimestampMixin, Base):
    """A move-in, move-out or other tenancy event."""

    __tablename__ = "tenant_changes"

    property_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    unit_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("units.id", ondelete="SET NULL"), nullable=True
    )
    change_date: Mapped[date] = mapped_column(Date, nullable=False)
    change_type: Mapped[str] = mapped_column(String(40), nullable=False)
    previous_rent: Mapped[float | None] = mapped_column(Money, nullable=True)
    new_rent: Mapped[float | None] = mapped_column(Money, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class AlertThresholds(UserOwned, TimestampMixin, Base):
    """Per-user limits that turn KPIs into alerts."""

    __tablename__ = "alert_thresholds"

    dscr_critical: Mapped[float | None] = mapped_column(Numeric(6, 2, asdecimal=False))
    dscr_warning: Mapped[float | None] = mapped_column(Numeric(6, 2, asdecimal=False))
    interest_expiry_critical_months: Mapped[int | None] = mapped_column(Integer)
    interest_expiry_warning_months: Mapped[int | None] = mapped_column(Integer)
    ltv_high_threshold: Mapped[float | None] = mapped_column(
        Numeric(6, 2, asdecimal=False)
    )
    arrears_critical_months: Mapped[float | None] = mapped_column(
        Numeric(6, 2, asdecimal=False)
    )
    arrears_warning_months: Mapped[float | None] = mapped_column(
        Numeric(6, 2, asdecimal=False)
    )
    vacancy_critical_days: Mapped[int | None] = mapped_column(Integer)
    vacancy_warning_days: Mapped[int | None] = mapped_column(Integer)
    capex_critical_percent: Mapped[float | None] = mapped_column(
        Numeric(6, 2, asdecimal=False)
    )
    capex_warning_percent: Mapped[float | None] = mapped_column(
        Numeric(6, 2, asdecimal=False)
    )

    __table_args__ = (UniqueConstraint("user_id", name="uq_alert_thresholds_user"),)
