"""Fitness module for Life OS.

Supplement protocol and substance log, strength training, fitness habits,
body tracking and the weekly coach update.
"""

from .models import (
    BodyTracking,
    DailySupplementTracking,
    FitnessHabit,
    FitnessHabitLog,
    FitnessHabitType,
    SubstanceType,
    SupplementPeptideLog,
    TrainingSession,
    TrainingSet,
)
from .routers import router

__all__ = [
    # Models
    "DailySupplementTracking",
    "SupplementPeptideLog",
    "TrainingSession",
    "TrainingSet",
    "FitnessHabit",
    "FitnessHabitLog",
    "BodyTracking",
    # Enums
    "SubstanceType",
    "FitnessHabitType",
    # Router
    "router",
]
