"""Dashboard module for Life OS.

Quick stats, AI insights and the aggregated today overview.
"""

from .models import AIInsight, InsightCategory, InsightPriority
from .routers import router

__all__ = ["AIInsight", "InsightCategory", "InsightPriority", "router"]
