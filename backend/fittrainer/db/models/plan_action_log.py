"""Plan action log ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, Index, Text, Uuid, func

from fittrainer.db.base import Base
from fittrainer.db.types import JSONDocument


class PlanActionLog(Base):
    __tablename__ = "plan_action_logs"
    __table_args__ = (Index("ix_plan_action_logs_created_at", "created_at"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    action_type = Column(Text, nullable=False)
    action_payload = Column(JSONDocument, nullable=False, default=dict)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
