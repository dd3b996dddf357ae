"""Real estate module for Life OS.

Portfolio management plus KPI, alert and chart analytics.
"""

from .models import (
    AlertThresholds,
    Loan,
    LoanType,
    Property,
    PropertyOperatingData,
    PropertyTechnicalStatus,
    PropertyType,
    Tenant,
    TenantChange,
    TenantStatus,
    TrafficLight,
    Unit,
    UnitStatus,
)
from .routers import (
    analytics_router,
    loans_router,
    router,
    tenants_router,
    units_router,
)

__all__ = [
    # Models
    "Property",
    "Unit",
    "Tenant",
    "Loan",
    "PropertyOperatingData",
    "PropertyTechnicalStatus",
    "TenantChange",
    "AlertThresholds",
    # Enums
    "PropertyType",
    "UnitStatus",
    "TenantStatus",
    "LoanType",
    "TrafficLight",
    # Routers
    "router",
    "units_router",
    "tenants_router",
    "loans_router",
    "analytics_router",
]
