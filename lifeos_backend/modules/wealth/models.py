"""Wealth models for Life OS.

Accounts, investment positions, company holdings, recurring cashflows and
the daily net worth snapshots written by the nightly n8n job.
"""

import enum
import uuid
import datetime

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
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


class AccountType(str, enum.Enum):
    """Bank account types."""

    CHECKING = "girokonto"
    SAVINGS = "sparkonto"
    DEPOSIT = "kautionskonto"
    LOAN = "kreditkonto"
    INVESTMENT = "depotkonto"
    CREDIT_CARD = "kreditkarte"
    OTHER = "sonstige"


class AssetType(str, enum.Enum):
    """Asset classes of investment positions."""

    STOCK = "aktie"
    ETF = "etf"
    FUND = "fonds"
    BOND = "anleihe"
    CRYPTO = "crypto"
    COMMODITY = "rohstoff"
    REIT = "reit"
    OTHER = "sonstige"


class TransactionFrequency(str, enum.Enum):
    """How often a recurring transaction is booked."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class TransactionType(str, enum.Enum):
    """Direction of a recurring transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class Account(UserOwned, TimestampMixin, Base):
    """A bank account, optionally attached to a property."""

    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    bank_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    iban: Mapped[str | None] = mapped_column(String(34), nullable=True)
    account_type: Mapped[str | None] = mapped_column(String(40), nullable=True)
    current_balance: Mapped[float | None] = mapped_column(Money, nullable=True)
    property_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("properties.id", ondelete="SET NULL"), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, name={self.name})>"


class DailySnapshot(UserOwned, TimestampMixin, Base):
    """Net worth and its breakdown on one day."""

    __tablename__ = "daily_snapshots"

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    net_worth: Mapped[float | None] = mapped_column(Money, nullable=True)
    total_assets: Mapped[float | None] = mapped_column(Money, nullable=True)
    total_liabilities: Mapped[float | None] = mapped_column(Money, nullable=True)
    cash_value: Mapped[float | None] = mapped_column(Money, nullable=True)
    investment_value: Mapped[float | None] = mapped_column(Money, nullable=True)
    property_value: Mapped[float | None] = mapped_column(Money, nullable=True)
    company_value: Mapped[float | None] = mapped_column(Money, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_snapshots_user_date"),
    )

    def __repr__(self) -> str:
        return f"<DailySnapshot(date={self.date}, net_worth={self.net_worth})>"


class Position(UserOwned, TimestampMixin, Base):
    """A holding in a securities portfolio."""

    __tablename__ = "positions"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    isin: Mapped[str | None] = mapped_column(String(12), nullable=True)
    asset_type: Mapped[str | None] = mapped_column(String(40), nullable=True)
    quantity: Mapped[float | None] = mapped_column(
        Numeric(18, 6, asdecimal=False), nullable=True
    )
    current_value: Mapped[float | None] = mapped_column(Money, nullable=True)
    total_invested: Mapped[float | None] = mapped_column(Money, nullable=True)
    unrealized_gain_loss: Mapped[float | None] = mapped_column(Money, nullable=True)

    def __repr__(self) -> str:
        return f"<Position(id={self.id}, name={self.name})>"


class Company(UserOwned, TimestampMixin, Base):
    """A company shareholding."""

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    legal_form: Mapped[str | None] = mapped_column(String(40), nullable=True)
    ownership_percent: Mapped[float | None] = mapped_column(
        Numeric(5, 2, asdecimal=False), nullable=True
    )
    your_share_value: Mapped[float | None] = mapped_column(Money, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name={self.name})>"


class RecurringTransaction(UserOwned, TimestampMixin, Base):
    """A standing order, salary or subscription."""

    __tablename__ = "recurring_transactions"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[float | None] = mapped_column(Money, nullable=True)
    type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    frequency: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TransactionFrequency.MONTHLY.value
    )
    day_of_month: Mapped[int | None] = mapped_column(Integer, nullable=True)
    category: Mapped[str | None] = mapped_column(String(120), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<RecurringTransaction(id={self.id}, name={self.name})>"


class UserPreferences(UserOwned, TimestampMixin, Base):
    """Per-user settings; currently the FIRE plan."""

    __tablename__ = "user_preferences"

    fire_target_amount: Mapped[float | None] = mapped_column(Money, nullable=True)
    fire_withdrawal_rate: Mapped[float | None] = mapped_column(
        Numeric(5, 2, asdecimal=False), nullable=True
    )
    fire_monthly_expenses: Mapped[float | None] = mapped_column(Money, nullable=True)

    __table_args__ = (UniqueConstraint("user_id", name="uq_user_preferences_user"),)
