"""Health module for Life OS.

Habit tracking, Garmin statistics, readiness and the daily log.
"""

from .models import (
    DailyLog,
    DailyReadiness,
    GarminDailyStats,
    Habit,
    HabitCategory,
    HabitFrequency,
    HabitLog,
)
from .routers import router

__all__ = [
    # Models
    "Habit",
    "HabitLog",
    "GarminDailyStats",
    "DailyReadiness",
    "DailyLog",
    # Enums
    "HabitCategory",
    "HabitFrequency",
    # Router
    "router",
]
