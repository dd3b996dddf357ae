"""Dashboard models for Life OS."""

import enum
import uuid

from sqlalchemy import JSON, Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ...core.database_types import GUID
from ...database import Base, TimestampMixin, UserOwned


class InsightPriority(str, enum.Enum):
    INFO = "info"
    WARNING = "warning"
    ACTION_REQUIRED = "action_required"


class InsightCategory(str, enum.Enum):
    WEALTH = "wealth"
    HEALTH = "health"
    PRODUCTIVITY = "productivity"
    GOALS = "goals"


class AIInsight(UserOwned, TimestampMixin, Base):
    """An observation generated by the AI copilot workflows."""

    __tablename__ = "ai_insights"

    type: Mapped[str] = mapped_column(String(60), nullable=False)
    category: Mapped[str | None] = mapped_column(String(40), nullable=True)
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InsightPriority.INFO.value
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    suggested_actions: Mapped[list | None] = mapped_column(JSON, nullable=True)
    related_entity_type: Mapped[str | None] = mapped_column(String(60), nullable=True)
    related_entity_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_actioned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    action_taken: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("ix_ai_insights_priority", "priority", "is_actioned"),)

    def __repr__(self) -> str:
        return f"<AIInsight(id={self.id}, priority={self.priority}, title={self.title})>"
