"""Shared test infrastructure for the Life OS backend test suite.

Provides:
- db_session: async SQLite in-memory session with all tables created
- user_id: owner of the rows a test creates
- client: httpx client against the app, wired to db_session
- auth_headers: bearer token for ``user_id`` signed like Supabase does
- bearer: header factory for other users or broken tokens
- make_property / make_unit / make_loan: factories for real estate rows
"""

import os
import time
import uuid
from pathlib import Path

os.environ.setdefault("CONFIG", str(Path(__file__).parent / "test_config.yaml"))

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from lifeos_backend.database import Base, get_db

# Import all model modules so their tables are registered with Base.metadata
import lifeos_backend.modules.dashboard.models  # noqa: F401
import lifeos_backend.modules.fitness.models  # noqa: F401
import lifeos_backend.modules.health.models  # noqa: F401
import lifeos_backend.modules.productivity.models  # noqa: F401
import lifeos_backend.modules.real_estate.models  # noqa: F401
import lifeos_backend.modules.wealth.models  # noqa: F401

from lifeos_backend.main import app
from lifeos_backend.modules.real_estate.models import Loan, Property, Unit

JWT_SECRET = "test-jwt-secret-for-the-life-os-test-suite"


# ---------------------------------------------------------------------------
# Database session fixture
# ---------------------------------------------------------------------------

@pytest.fixture
async def db_session():
    """Async SQLite in-memory session with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def user_id():
    return uuid.uuid4()


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------

def make_token(
    user_id,
    secret=JWT_SECRET,
    expires_in=3600,
    audience="authenticated",
    role="authenticated",
):
    """Access token shaped like the ones Supabase Auth issues."""
    now = int(time.time())
    payload = {
        "sub": str(user_id),
        "email": "test@example.com",
        "role": role,
        "aud": audience,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def bearer():
    """Build an Authorization header; keyword arguments go to make_token."""

    def _headers(user_id, **token_args):
        return {"Authorization": f"Bearer {make_token(user_id, **token_args)}"}

    return _headers


@pytest.fixture
def auth_headers(user_id, bearer):
    return bearer(user_id)


@pytest.fixture
async def client(db_session):
    """httpx client against the app with get_db bound to db_session."""

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Real estate factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_property(db_session, user_id):
    """Factory that persists a Property owned by ``user_id``."""

    async def _factory(**overrides) -> Property:
        values = {
            "name": "Musterstraße 1",
            "address": "Musterstraße 1",
            "city": "Leipzig",
            "country": "Deutschland",
            "property_type": "mehrfamilienhaus",
            "purchase_price": 400000.0,
            "current_value": 500000.0,
            "total_sqm": 300.0,
            "status": "aktiv",
        }
        values.update(overrides)
        prop = Property(user_id=user_id, **values)
        db_session.add(prop)
        await db_session.commit()
        await db_session.refresh(prop)
        return prop

    return _factory


@pytest.fixture
def make_unit(db_session, user_id):
    async def _factory(property_id, **overrides) -> Unit:
        values = {
            "name": "WE 01",
            "status": "vermietet",
            "size_sqm": 75.0,
            "monthly_rent_cold": 750.0,
            "monthly_utilities_advance": 150.0,
        }
        values.update(overrides)
        unit = Unit(user_id=user_id, property_id=property_id, **values)
        db_session.add(unit)
        await db_session.commit()
        await db_session.refresh(unit)
        return unit

    return _factory


@pytest.fixture
def make_loan(db_session, user_id):
    async def _factory(property_id=None, **overrides) -> Loan:
        values = {
            "name": "Sparkasse Darlehen",
            "bank_name": "Sparkasse",
            "loan_type": "annuität",
            "original_amount": 300000.0,
            "current_balance": 250000.0,
            "interest_rate_nominal": 3.0,
            "monthly_payment": 1200.0,
            "special_repayment_allowed": False,
        }
        values.update(overrides)
        loan = Loan(user_id=user_id, property_id=property_id, **values)
        db_session.add(loan)
        await db_session.commit()
        await db_session.refresh(loan)
        return loan

    return _factory
